"""Measurements, monitors, benchmarks and the driver that runs them."""