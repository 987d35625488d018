"""Compile declarative chart descriptions into render plans."""

__version__ = "0.1.0"

__all__ = ["__version__"]
