"""Demo HTTP service whose routes emit structured logs to the console and Logstash."""

__version__ = "1.0.0"
