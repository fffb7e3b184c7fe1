"""Follow relationship endpoints."""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from followgraph.api.deps import (
    get_current_user_id,
    get_follow_service,
    get_notification_formatter,
    get_request_context,
)
from followgraph.core.context import RequestContext
from followgraph.core.exceptions import FollowWriteError
from followgraph.schemas.follow import (
    FollowCounts,
    FollowIdList,
    FollowQuery,
    FollowRequest,
    FollowResponse,
    NotificationContent,
    ObjectCount,
)
from followgraph.services.follow_service import FollowService
from followgraph.services.notifications import NotificationFormatter

router = APIRouter()


def _list_query(
    page: Optional[int] = Query(None, ge=1),
    per_page: Optional[int] = Query(None, ge=1, le=1000),
    order_by: Optional[Literal["id", "date_recorded"]] = None,
    order: Optional[Literal["ASC", "DESC"]] = None,
) -> FollowQuery:
    """Only parameters actually sent make the query non-default."""
    params = {"page": page, "per_page": per_page, "order_by": order_by, "order": order}
    return FollowQuery(**{k: v for k, v in params.items() if v is not None})


@router.get("/notifications/format", response_model=Optional[NotificationContent])
def format_notification(
    action: str,
    item_id: int,
    secondary_item_id: Optional[int] = None,
    total_items: int = Query(1, ge=1),
    ctx: RequestContext = Depends(get_request_context),
    formatter: NotificationFormatter = Depends(get_notification_formatter)
):
    """Render a notification as text and link; null when it should be suppressed."""
    return formatter.format_notification(
        ctx, action, item_id, secondary_item_id, total_items, format="array"
    )


@router.post("/{leader_id}", response_model=FollowResponse, status_code=201)
def start_following(
    leader_id: int,
    follow: FollowRequest = FollowRequest(),
    current_user_id: int = Depends(get_current_user_id),
    ctx: RequestContext = Depends(get_request_context),
    service: FollowService = Depends(get_follow_service)
):
    """Follow a user or another followable object."""

    # Can't follow yourself
    if not follow.follow_type and leader_id == current_user_id:
        raise HTTPException(status_code=400, detail="Cannot follow yourself")

    if not service.start_following(
        ctx,
        leader_id=leader_id,
        follower_id=current_user_id,
        follow_type=follow.follow_type,
        date_recorded=follow.date_recorded
    ):
        if service.last_error == FollowWriteError.DUPLICATE:
            raise HTTPException(status_code=409, detail="Already following")
        raise HTTPException(status_code=500, detail="Could not save follow")

    return FollowResponse(
        leader_id=leader_id,
        follower_id=current_user_id,
        follow_type=follow.follow_type,
        is_following=True
    )


@router.delete("/{leader_id}", response_model=FollowResponse)
def stop_following(
    leader_id: int,
    follow_type: str = "",
    current_user_id: int = Depends(get_current_user_id),
    ctx: RequestContext = Depends(get_request_context),
    service: FollowService = Depends(get_follow_service)
):
    """Stop following a user or another followable object."""

    if not service.stop_following(ctx, leader_id=leader_id, follower_id=current_user_id, follow_type=follow_type):
        if service.last_error == FollowWriteError.NOT_FOUND:
            raise HTTPException(status_code=404, detail="Not following")
        raise HTTPException(status_code=500, detail="Could not remove follow")

    return FollowResponse(
        leader_id=leader_id,
        follower_id=current_user_id,
        follow_type=follow_type,
        is_following=False
    )


@router.get("/{leader_id}/status", response_model=FollowResponse)
def follow_status(
    leader_id: int,
    follower_id: Optional[int] = None,
    follow_type: str = "",
    ctx: RequestContext = Depends(get_request_context),
    service: FollowService = Depends(get_follow_service)
):
    """Check if a user (default: the caller) follows `leader_id`."""
    follower_id = follower_id if follower_id is not None else ctx.loggedin_user_id
    if follower_id is None:
        raise HTTPException(status_code=400, detail="follower_id is required")

    is_following = service.is_following(ctx, leader_id=leader_id, follower_id=follower_id, follow_type=follow_type)
    return FollowResponse(
        leader_id=leader_id,
        follower_id=follower_id,
        follow_type=follow_type,
        is_following=bool(is_following)
    )


@router.get("/{user_id}/followers", response_model=FollowIdList)
def get_followers(
    user_id: int,
    follow_type: str = "",
    query: FollowQuery = Depends(_list_query),
    ctx: RequestContext = Depends(get_request_context),
    service: FollowService = Depends(get_follow_service)
):
    """Get ids following a user or object."""
    ids = service.get_followers(ctx, user_id=user_id, follow_type=follow_type, query=query)
    return FollowIdList(user_id=user_id, follow_type=follow_type, ids=ids)


@router.get("/{user_id}/following", response_model=FollowIdList)
def get_following(
    user_id: int,
    follow_type: str = "",
    query: FollowQuery = Depends(_list_query),
    ctx: RequestContext = Depends(get_request_context),
    service: FollowService = Depends(get_follow_service)
):
    """Get ids a user is following."""
    ids = service.get_following(ctx, user_id=user_id, follow_type=follow_type, query=query)
    return FollowIdList(user_id=user_id, follow_type=follow_type, ids=ids)


@router.get("/{user_id}/counts", response_model=FollowCounts)
def get_counts(
    user_id: int,
    follow_type: str = "",
    ctx: RequestContext = Depends(get_request_context),
    service: FollowService = Depends(get_follow_service)
):
    """Following and followers totals for a user."""
    return FollowCounts(**service.total_follow_counts(ctx, user_id=user_id, follow_type=follow_type))


@router.get("/objects/{object_id}/followers/count", response_model=ObjectCount)
def get_object_followers_count(
    object_id: int,
    follow_type: str = "",
    ctx: RequestContext = Depends(get_request_context),
    service: FollowService = Depends(get_follow_service)
):
    """Followers of a non-user object, e.g. a blog."""
    args = service.get_common_args(ctx, object_id=object_id, follow_type=follow_type)
    count = service.get_the_followers_count(ctx, object_id=object_id, follow_type=follow_type)
    return ObjectCount(object=args.object, object_id=args.object_id, count=count)
