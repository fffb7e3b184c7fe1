# followgraph/services/follow_args.py
"""Argument normalization shared by the follow facade."""
from dataclasses import dataclass, field
from typing import Optional

from followgraph.core.exceptions import InvalidFollowArgument
from followgraph.schemas.follow import FollowQuery, validate_follow_type


@dataclass(frozen=True)
class CommonArgs:
    """Normalized subject of a count/query operation.

    `object` names the cache namespace and the hook tag for the subject:
    'user' for user-to-user follows, 'user_<type>' for what a user follows
    of another type, '<type>' for followers of a non-user object.
    """
    object: str
    object_id: int
    follow_type: str = ""
    query: FollowQuery = field(default_factory=FollowQuery)


def resolve_object(follow_type: str, user_id: Optional[int], object_id: Optional[int]) -> str:
    if not follow_type:
        return "user"
    # A user id without an explicit object id means "what this user follows"
    if user_id and not object_id:
        return f"user_{follow_type}"
    return follow_type


def resolve_common_args(
    user_id: Optional[int] = None,
    object_id: Optional[int] = None,
    follow_type: Optional[str] = "",
    query: Optional[FollowQuery] = None
) -> CommonArgs:
    """
    Resolve the effective subject of a query.

    An explicit `object_id` takes precedence over `user_id`.
    """
    try:
        follow_type = validate_follow_type(follow_type)
    except ValueError as e:
        raise InvalidFollowArgument(str(e)) from e

    effective_id = object_id if object_id else user_id
    if effective_id is None:
        raise InvalidFollowArgument("A user_id or object_id is required")
    effective_id = int(effective_id)
    if effective_id < 0:
        raise InvalidFollowArgument(f"Invalid id: {effective_id}")

    return CommonArgs(
        object=resolve_object(follow_type, user_id, object_id),
        object_id=effective_id,
        follow_type=follow_type,
        query=query or FollowQuery()
    )
