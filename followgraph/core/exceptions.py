# followgraph/core/exceptions.py
"""Error types for the follow service."""
import enum


class FollowWriteError(str, enum.Enum):
    """Reason the last relationship write returned False."""
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    STORE_FAILURE = "store_failure"


class InvalidFollowArgument(ValueError):
    """Raised when follow arguments cannot be resolved to valid ids/types."""
