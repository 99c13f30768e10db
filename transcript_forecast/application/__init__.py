"""
Application Layer Package

This package contains the data transfer objects and the use cases that turn
transcript records into forecasts.
"""
