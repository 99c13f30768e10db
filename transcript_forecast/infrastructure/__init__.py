"""
Infrastructure Layer Package

This package contains the numeric implementations behind the domain ports:
the forecasting models, their least-squares solver and the resource ledger
that tracks the buffers they allocate.
"""
