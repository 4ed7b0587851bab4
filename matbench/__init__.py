"""Threaded integer matrix multiplication benchmark with result-file output."""

__version__ = "0.1.0"
__all__ = ["benchmark", "settings"]