# followgraph/services/follow_service.py
"""
Follow facade: start/stop following, existence checks, follower and
following lists, and counts.

Reads go through the follow cache when no extra query filters are given.
Writes invalidate the affected cache entries. Every result passes through
the hook registry so extensions can observe or replace it.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from followgraph.core.context import RequestContext
from followgraph.core.exceptions import FollowWriteError, InvalidFollowArgument
from followgraph.core.hooks import FollowEvent, FollowFilter, HookRegistry
from followgraph.schemas.follow import FollowQuery, validate_follow_type
from followgraph.services.follow_args import CommonArgs, resolve_common_args
from followgraph.services.follow_cache import CACHE_MISS, CacheKey, FollowCache, QueryKind
from followgraph.services.relationship_store import RelationshipStore

logger = logging.getLogger(__name__)

QueryFilters = Union[FollowQuery, Dict[str, Any], None]


@dataclass
class FollowRelationship:
    """Payload handed to start/stop listeners."""
    leader_id: int
    follower_id: int
    follow_type: str = ""
    date_recorded: Optional[datetime] = None
    id: Optional[int] = None


def _as_query(query: QueryFilters) -> FollowQuery:
    if query is None:
        return FollowQuery()
    if isinstance(query, FollowQuery):
        return query
    try:
        return FollowQuery(**query)
    except ValidationError as e:
        raise InvalidFollowArgument(f"Invalid query: {e}") from e


def _require_id(value: Optional[int], name: str) -> int:
    if value is None:
        raise InvalidFollowArgument(f"{name} is required")
    value = int(value)
    if value < 0:
        raise InvalidFollowArgument(f"Invalid {name}: {value}")
    return value


def _follow_type(value: Optional[str]) -> str:
    try:
        return validate_follow_type(value)
    except ValueError as e:
        raise InvalidFollowArgument(str(e)) from e


class FollowService:
    """Service for follow relationship operations."""

    def __init__(self, store: RelationshipStore, cache: FollowCache, hooks: HookRegistry):
        self.store = store
        self.cache = cache
        self.hooks = hooks
        # Why the most recent start/stop call returned False, if it did
        self.last_error: Optional[FollowWriteError] = None

    # Relationship mutation

    def start_following(
        self,
        ctx: RequestContext,
        leader_id: Optional[int] = None,
        follower_id: Optional[int] = None,
        follow_type: str = "",
        date_recorded: Optional[datetime] = None
    ) -> bool:
        """
        Start following an item.

        `leader_id` defaults to the displayed user and `follower_id` to the
        logged-in user. Returns False when the relationship already exists
        or could not be saved; `last_error` tells the two apart.
        """
        follow = FollowRelationship(
            leader_id=_require_id(leader_id if leader_id is not None else ctx.displayed_user_id, "leader_id"),
            follower_id=_require_id(follower_id if follower_id is not None else ctx.loggedin_user_id, "follower_id"),
            follow_type=_follow_type(follow_type),
            date_recorded=date_recorded or datetime.now(timezone.utc)
        )
        self.last_error = None

        # existing follow already exists
        if self.store.find(follow.leader_id, follow.follower_id, follow.follow_type):
            self.last_error = FollowWriteError.DUPLICATE
            logger.info(f"User {follow.follower_id} already follows {follow.leader_id} ({follow.follow_type or 'user'})")
            return False

        if not self.store.create(follow.leader_id, follow.follower_id, follow.follow_type, follow.date_recorded):
            # a concurrent request may have inserted the same row first
            if self.store.find(follow.leader_id, follow.follower_id, follow.follow_type):
                self.last_error = FollowWriteError.DUPLICATE
                logger.info(f"User {follow.follower_id} already follows {follow.leader_id} ({follow.follow_type or 'user'})")
                return False
            self.last_error = FollowWriteError.STORE_FAILURE
            logger.warning(f"Could not save follow {follow.leader_id}<-{follow.follower_id} ({follow.follow_type or 'user'})")
            return False

        follow.id = self.store.find(follow.leader_id, follow.follower_id, follow.follow_type)
        self.cache.invalidate_relationship(follow.leader_id, follow.follower_id, follow.follow_type)
        logger.info(f"User {follow.follower_id} started following {follow.leader_id} ({follow.follow_type or 'user'})")

        self.hooks.do_action(FollowEvent.START_FOLLOWING, follow, tag=follow.follow_type)
        return True

    def stop_following(
        self,
        ctx: RequestContext,
        leader_id: Optional[int] = None,
        follower_id: Optional[int] = None,
        follow_type: str = ""
    ) -> bool:
        """Stop following an item. Returns False if there was nothing to remove."""
        follow = FollowRelationship(
            leader_id=_require_id(leader_id if leader_id is not None else ctx.displayed_user_id, "leader_id"),
            follower_id=_require_id(follower_id if follower_id is not None else ctx.loggedin_user_id, "follower_id"),
            follow_type=_follow_type(follow_type)
        )
        self.last_error = None

        follow.id = self.store.find(follow.leader_id, follow.follower_id, follow.follow_type)
        if not follow.id:
            self.last_error = FollowWriteError.NOT_FOUND
            return False

        if not self.store.delete(follow.leader_id, follow.follower_id, follow.follow_type):
            self.last_error = FollowWriteError.STORE_FAILURE
            logger.warning(f"Could not delete follow {follow.leader_id}<-{follow.follower_id} ({follow.follow_type or 'user'})")
            return False

        self.cache.invalidate_relationship(follow.leader_id, follow.follower_id, follow.follow_type)
        logger.info(f"User {follow.follower_id} stopped following {follow.leader_id} ({follow.follow_type or 'user'})")

        self.hooks.do_action(FollowEvent.STOP_FOLLOWING, follow, tag=follow.follow_type)
        return True

    def is_following(
        self,
        ctx: RequestContext,
        leader_id: Optional[int] = None,
        follower_id: Optional[int] = None,
        follow_type: str = ""
    ) -> Any:
        """
        Relationship id when `follower_id` follows `leader_id`, else 0.

        Extensions may replace the value; callers should only rely on its
        truthiness.
        """
        follow = FollowRelationship(
            leader_id=_require_id(leader_id if leader_id is not None else ctx.displayed_user_id, "leader_id"),
            follower_id=_require_id(follower_id if follower_id is not None else ctx.loggedin_user_id, "follower_id"),
            follow_type=_follow_type(follow_type)
        )
        follow.id = self.store.find(follow.leader_id, follow.follower_id, follow.follow_type)

        return self.hooks.apply_filters(
            FollowFilter.IS_FOLLOWING, int(follow.id or 0), {"follow": follow}, tag=follow.follow_type
        )

    # Relationship queries

    def get_followers(
        self,
        ctx: RequestContext,
        user_id: Optional[int] = None,
        follow_type: str = "",
        query: QueryFilters = None
    ) -> List[int]:
        """Ids following `user_id` (defaults to the displayed user)."""
        return self._get_relationship_ids(
            QueryKind.FOLLOWERS, FollowFilter.GET_FOLLOWERS, self.store.list_followers,
            user_id if user_id is not None else ctx.displayed_user_id, follow_type, query
        )

    def get_following(
        self,
        ctx: RequestContext,
        user_id: Optional[int] = None,
        follow_type: str = "",
        query: QueryFilters = None
    ) -> List[int]:
        """Ids `user_id` (defaults to the displayed user) is following."""
        return self._get_relationship_ids(
            QueryKind.FOLLOWING, FollowFilter.GET_FOLLOWING, self.store.list_following,
            user_id if user_id is not None else ctx.displayed_user_id, follow_type, query
        )

    def _get_relationship_ids(self, kind, filter_point, fetch, user_id, follow_type, query) -> List[int]:
        user_id = _require_id(user_id, "user_id")
        follow_type = _follow_type(follow_type)
        query = _as_query(query)
        key = CacheKey(kind, user_id, follow_type)

        retval = CACHE_MISS
        # only default queries are cached
        if query.is_empty():
            retval = self.cache.get(key)

        if retval is CACHE_MISS:
            retval = fetch(user_id, follow_type, query)
            if query.is_empty():
                self.cache.set(key, retval)

        return self.hooks.apply_filters(
            filter_point, retval, {"user_id": user_id, "follow_type": follow_type, "query": query}, tag=follow_type
        )

    def get_follower_ids(self, ctx: RequestContext, user_id: Optional[int] = None, follow_type: str = "") -> Union[str, int]:
        """
        Comma-separated follower ids, or integer 0 when there are none.

        The 0 keeps "IN (...)" style consumers from receiving an empty list.
        """
        user_id = user_id if user_id is not None else ctx.displayed_user_id
        ids = ",".join(str(i) for i in self.get_followers(ctx, user_id=user_id, follow_type=follow_type))
        return self.hooks.apply_filters(
            FollowFilter.FOLLOWER_IDS, ids or 0, {"user_id": user_id, "follow_type": follow_type}, tag=follow_type
        )

    def get_following_ids(self, ctx: RequestContext, user_id: Optional[int] = None, follow_type: str = "") -> Union[str, int]:
        """Comma-separated ids being followed, or integer 0 when there are none."""
        user_id = user_id if user_id is not None else ctx.displayed_user_id
        ids = ",".join(str(i) for i in self.get_following(ctx, user_id=user_id, follow_type=follow_type))
        return self.hooks.apply_filters(
            FollowFilter.FOLLOWING_IDS, ids or 0, {"user_id": user_id, "follow_type": follow_type}, tag=follow_type
        )

    # Counts

    def get_the_following_count(
        self,
        ctx: RequestContext,
        user_id: Optional[int] = None,
        object_id: Optional[int] = None,
        follow_type: str = ""
    ) -> int:
        """Following count, by default for the logged-in user."""
        args = self.get_common_args(ctx, user_id=user_id, object_id=object_id, follow_type=follow_type)
        return self._get_count(args, QueryKind.FOLLOWING_COUNT, FollowFilter.FOLLOWING_COUNT, self.store.count_following)

    def get_the_followers_count(
        self,
        ctx: RequestContext,
        user_id: Optional[int] = None,
        object_id: Optional[int] = None,
        follow_type: str = ""
    ) -> int:
        """Followers count, by default for the logged-in user."""
        args = self.get_common_args(ctx, user_id=user_id, object_id=object_id, follow_type=follow_type)
        return self._get_count(args, QueryKind.FOLLOWERS_COUNT, FollowFilter.FOLLOWERS_COUNT, self.store.count_followers)

    def _get_count(self, args: CommonArgs, kind, filter_point, fetch) -> int:
        key = CacheKey(kind, args.object_id, args.follow_type, args.object)

        retval = self.cache.get(key)
        if retval is CACHE_MISS:
            retval = int(fetch(args.object_id, args.follow_type))
            self.cache.set(key, retval)

        return self.hooks.apply_filters(
            filter_point, retval, {"object_id": args.object_id, "follow_type": args.follow_type}, tag=args.object
        )

    def total_follow_counts(
        self,
        ctx: RequestContext,
        user_id: Optional[int] = None,
        follow_type: str = ""
    ) -> Dict[str, int]:
        """
        Following and followers counts for a user.

        For a non-empty follow type only 'following' is meaningful: a user
        follows a blog, a blog never follows back. 'followers' is then 0
        and is not queried.
        """
        user_id = user_id if user_id is not None else ctx.loggedin_user_id
        follow_type = _follow_type(follow_type)

        retval = {
            "following": self.get_the_following_count(ctx, user_id=user_id, follow_type=follow_type),
        }
        if follow_type:
            retval["followers"] = 0
        else:
            retval["followers"] = self.get_the_followers_count(ctx, user_id=user_id, follow_type=follow_type)

        return self.hooks.apply_filters(
            FollowFilter.TOTAL_FOLLOW_COUNTS, retval, {"user_id": user_id}, tag=follow_type
        )

    def get_common_args(
        self,
        ctx: RequestContext,
        user_id: Optional[int] = None,
        object_id: Optional[int] = None,
        follow_type: str = "",
        query: QueryFilters = None
    ) -> CommonArgs:
        """Common argument resolution; `user_id` defaults to the logged-in user."""
        if user_id is None:
            user_id = ctx.loggedin_user_id
        return resolve_common_args(user_id=user_id, object_id=object_id, follow_type=follow_type, query=_as_query(query))
