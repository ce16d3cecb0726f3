"""Filesystem, CSV, process, logging and annotation helpers."""