# followgraph/models/__init__.py
from .user import User
from .follow import Follow

# This ensures all models are registered
__all__ = [
    "User",
    "Follow",
]
