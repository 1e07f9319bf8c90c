"""Prometheus metrics from MongoDB server, replica set and database statistics."""

__version__ = "0.1.0"