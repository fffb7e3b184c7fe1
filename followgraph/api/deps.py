"""API dependencies."""

from functools import lru_cache
from typing import Optional
import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from followgraph.core.context import RequestContext
from followgraph.core.hooks import HookRegistry
from followgraph.db.base import get_db
from followgraph.services.follow_cache import FollowCache, build_cache_store
from followgraph.services.follow_service import FollowService
from followgraph.services.notifications import NotificationFormatter
from followgraph.services.relationship_store import SQLAlchemyRelationshipStore
from followgraph.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)

# Re-export for convenience
__all__ = [
    "get_db",
    "get_hooks",
    "get_follow_cache",
    "get_request_context",
    "get_current_user_id",
    "get_follow_service",
    "get_notification_formatter",
]


@lru_cache()
def get_hooks() -> HookRegistry:
    """Process-wide hook registry."""
    return HookRegistry()


@lru_cache()
def get_follow_cache() -> FollowCache:
    """Process-wide follow cache."""
    return FollowCache(build_cache_store())


def get_request_context(
    x_user_id: Optional[int] = Header(None, alias="X-User-Id"),
    x_displayed_user_id: Optional[int] = Header(None, alias="X-Displayed-User-Id")
) -> RequestContext:
    """
    Identity of the caller and of the profile in view.
    Returns an anonymous context when no headers are sent.
    """
    return RequestContext(loggedin_user_id=x_user_id, displayed_user_id=x_displayed_user_id)


def get_current_user_id(ctx: RequestContext = Depends(get_request_context)) -> int:
    """Logged-in user id; required for follow/unfollow."""
    if ctx.loggedin_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return ctx.loggedin_user_id


def get_follow_service(
    db: Session = Depends(get_db),
    cache: FollowCache = Depends(get_follow_cache),
    hooks: HookRegistry = Depends(get_hooks)
) -> FollowService:
    return FollowService(SQLAlchemyRelationshipStore(db), cache, hooks)


def get_notification_formatter(
    db: Session = Depends(get_db),
    hooks: HookRegistry = Depends(get_hooks)
) -> NotificationFormatter:
    return NotificationFormatter(UserDirectory(db), hooks)
