"""Tests for common argument resolution."""

import pytest

from followgraph.core.context import RequestContext
from followgraph.core.exceptions import InvalidFollowArgument
from followgraph.schemas.follow import FollowQuery
from followgraph.services.follow_args import resolve_common_args


class TestResolveCommonArgs:

    def test_user_follows(self):
        args = resolve_common_args(user_id=4)

        assert args.object == "user"
        assert args.object_id == 4
        assert args.follow_type == ""

    def test_typed_follow_with_user_id(self):
        """Counting blogs a user follows."""
        args = resolve_common_args(user_id=4, follow_type="blogs")

        assert args.object == "user_blogs"
        assert args.object_id == 4

    def test_object_id_takes_precedence(self):
        """Counting followers of a blog."""
        args = resolve_common_args(user_id=4, object_id=12, follow_type="blogs")

        assert args.object == "blogs"
        assert args.object_id == 12

    def test_object_id_only(self):
        args = resolve_common_args(object_id=12, follow_type="groups")

        assert args.object == "groups"
        assert args.object_id == 12

    def test_object_id_without_type_is_user(self):
        assert resolve_common_args(object_id=12).object == "user"

    def test_none_follow_type_is_empty(self):
        assert resolve_common_args(user_id=1, follow_type=None).follow_type == ""

    def test_query_defaults_to_empty(self):
        assert resolve_common_args(user_id=1).query.is_empty()

    @pytest.mark.parametrize("kwargs", [
        {},
        {"user_id": -1},
        {"user_id": 1, "follow_type": "Blogs"},
        {"user_id": 1, "follow_type": "blogs posts"},
    ])
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(InvalidFollowArgument):
            resolve_common_args(**kwargs)

    def test_service_defaults_to_logged_in_user(self, service):
        args = service.get_common_args(RequestContext(loggedin_user_id=8, displayed_user_id=3), follow_type="blogs")

        assert args.object_id == 8
        assert args.object == "user_blogs"


class TestFollowQuery:
    def test_defaults_are_empty(self):
        assert FollowQuery().is_empty()

    def test_any_filter_makes_query_non_empty(self):
        assert not FollowQuery(per_page=5).is_empty()
        assert not FollowQuery(order="DESC").is_empty()
        assert not FollowQuery(exclude_ids=[1]).is_empty()
