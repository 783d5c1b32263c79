"""Six-line confluence analysis core: models, indicators, and setup evaluation.

This package contains pure business logic with no I/O dependencies
(no network access). The scanner package wires it to live market data.
"""
