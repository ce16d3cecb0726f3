"""Ready-made monitors for CPU and memory utilization."""