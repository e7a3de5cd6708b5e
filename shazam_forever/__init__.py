"""Shazam Forever: continuous song recognition for smart-glasses audio."""
__version__ = "0.1.0"
