"""Scar: include-graph analysis for C/C++ source trees."""

__version__ = "0.3.0"
