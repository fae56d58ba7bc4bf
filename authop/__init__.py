"""Operator conditions, config observers, template selection and server-argument helpers for an OAuth server."""

__version__ = "0.1.0"

__all__ = [
    "arguments",
    "conditions",
    "customroute",
    "listers",
    "observers",
    "templates",
    "unstructured",
]