"""Schemas for follow relationships and follow queries."""
import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

FOLLOW_TYPE_PATTERN = re.compile(r"^[a-z0-9_\-]*$")


def validate_follow_type(value: Optional[str]) -> str:
    value = value or ""
    if not FOLLOW_TYPE_PATTERN.match(value):
        raise ValueError(f"Invalid follow type: {value!r}")
    return value


class FollowQuery(BaseModel):
    """Extra filtering for follower/following list queries.

    A query left at its defaults is "empty": its results are cacheable.
    """
    model_config = ConfigDict(extra="forbid")

    page: Optional[int] = Field(default=None, ge=1)
    per_page: Optional[int] = Field(default=None, ge=1, le=1000)
    order_by: Literal["id", "date_recorded"] = "id"
    order: Literal["ASC", "DESC"] = "ASC"
    since: Optional[datetime] = None
    until: Optional[datetime] = None
    exclude_ids: List[int] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return self.model_dump() == _EMPTY_QUERY


_EMPTY_QUERY = FollowQuery().model_dump()


class FollowRequest(BaseModel):
    """Body for start/stop following requests."""
    follow_type: str = ""
    date_recorded: Optional[datetime] = None

    @field_validator("follow_type")
    @classmethod
    def check_follow_type(cls, v):
        return validate_follow_type(v)


class FollowResponse(BaseModel):
    """Response for follow/unfollow actions."""
    leader_id: int
    follower_id: int
    follow_type: str = ""
    is_following: bool


class FollowIdList(BaseModel):
    user_id: int
    follow_type: str = ""
    ids: List[int]


class FollowCounts(BaseModel):
    following: int = 0
    followers: int = 0


class ObjectCount(BaseModel):
    object: str
    object_id: int
    count: int


class NotificationContent(BaseModel):
    text: str
    link: str
