"""MulaBoard - anonymous 360-degree feedback service."""

__version__ = "0.1.0"
