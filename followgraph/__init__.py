"""Follow relationship service: follow graph facade with read-through caching."""

__version__ = "1.3.0"
