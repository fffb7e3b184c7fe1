# followgraph/core/context.py
"""Explicit identity context threaded into every facade call."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RequestContext:
    """Who is asking, and whose profile is being viewed.

    `loggedin_user_id` is the caller; `displayed_user_id` is the subject of
    the current page/request. Either may be missing (anonymous caller, no
    profile in view).
    """
    loggedin_user_id: Optional[int] = None
    displayed_user_id: Optional[int] = None

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls()
