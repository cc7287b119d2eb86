"""EMSIG energy-model builder for battery and grid dispatch scheduling."""

__version__ = "0.1.0"
