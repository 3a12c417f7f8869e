"""
Schema package for the Market Forecast Chart app.

This package contains the typed contracts (dataclasses, enums, errors) shared
by the acquisition controller, the series classifier and the chart adapter.
"""
