"""Typed structured-logging fields, lazy array and error marshalers, and pooled byte buffers."""

__version__ = "0.1.0"
__all__ = ["field", "array", "error", "anyfield", "buffer"]