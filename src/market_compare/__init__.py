"""Market compare package initializer.

This package contains the vendor comparison service: the matching engine,
its HTTP API, configuration, caching and observability components.
"""
