"""Tests for the follow HTTP endpoints."""

import inspect

import pytest
from fastapi.testclient import TestClient

from followgraph.api.deps import get_db, get_follow_cache, get_hooks
from followgraph.core.hooks import FollowFilter
from followgraph.main import create_app
from followgraph.services.follow_cache import FollowCache, InMemoryCacheStore

BOB = {"X-User-Id": "2"}


@pytest.fixture
def client(db_session, hooks, users):
    app = create_app(create_tables=False)
    cache = FollowCache(InMemoryCacheStore(), prefix="api_test")

    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_follow_cache] = lambda: cache
    app.dependency_overrides[get_hooks] = lambda: hooks

    with TestClient(app) as test_client:
        yield test_client


class TestFollowEndpoints:

    def test_follow_and_unfollow(self, client):
        response = client.post("/api/v1/follows/1", headers=BOB)
        assert response.status_code == 201
        assert response.json() == {"leader_id": 1, "follower_id": 2, "follow_type": "", "is_following": True}

        response = client.post("/api/v1/follows/1", headers=BOB)
        assert response.status_code == 409

        response = client.delete("/api/v1/follows/1", headers=BOB)
        assert response.status_code == 200
        assert response.json()["is_following"] is False

        response = client.delete("/api/v1/follows/1", headers=BOB)
        assert response.status_code == 404

    def test_follow_requires_user(self, client):
        assert client.post("/api/v1/follows/1").status_code == 401

    def test_cannot_follow_yourself(self, client):
        assert client.post("/api/v1/follows/2", headers=BOB).status_code == 400

    def test_follow_blog(self, client):
        response = client.post("/api/v1/follows/7", headers=BOB, json={"follow_type": "blogs"})
        assert response.status_code == 201

        response = client.get("/api/v1/follows/2/following", params={"follow_type": "blogs"})
        assert response.json()["ids"] == [7]

        response = client.get("/api/v1/follows/objects/7/followers/count", params={"follow_type": "blogs"})
        assert response.json() == {"object": "blogs", "object_id": 7, "count": 1}

        response = client.get("/api/v1/follows/2/counts", params={"follow_type": "blogs"})
        assert response.json() == {"following": 1, "followers": 0}

    def test_invalid_follow_type(self, client):
        response = client.post("/api/v1/follows/7", headers=BOB, json={"follow_type": "Blogs!"})
        assert response.status_code == 422

        response = client.get("/api/v1/follows/2/following", params={"follow_type": "Blogs!"})
        assert response.status_code == 422

    def test_status(self, client):
        client.post("/api/v1/follows/1", headers=BOB)

        response = client.get("/api/v1/follows/1/status", headers=BOB)
        assert response.json()["is_following"] is True

        response = client.get("/api/v1/follows/2/status", params={"follower_id": 1})
        assert response.json()["is_following"] is False

        assert client.get("/api/v1/follows/1/status").status_code == 400

    def test_lists_and_counts(self, client):
        for user_id in ("2", "3"):
            client.post("/api/v1/follows/1", headers={"X-User-Id": user_id})

        response = client.get("/api/v1/follows/1/followers")
        assert response.json() == {"user_id": 1, "follow_type": "", "ids": [2, 3]}

        response = client.get("/api/v1/follows/1/followers", params={"order": "DESC", "per_page": 1})
        assert response.json()["ids"] == [3]

        response = client.get("/api/v1/follows/1/counts")
        assert response.json() == {"following": 0, "followers": 2}

    def test_filters_apply_to_responses(self, client, hooks):
        hooks.add_filter(FollowFilter.GET_FOLLOWERS, lambda ids, context: [i for i in ids if i != 3])
        for user_id in ("2", "3"):
            client.post("/api/v1/follows/1", headers={"X-User-Id": user_id})

        assert client.get("/api/v1/follows/1/followers").json()["ids"] == [2]


class TestNotificationEndpoint:

    def test_new_follow(self, client):
        response = client.get(
            "/api/v1/follows/notifications/format",
            params={"action": "new_follow", "item_id": 1, "total_items": 1},
            headers=BOB
        )

        assert response.status_code == 200
        assert response.json()["text"] == "Alice Liddell is now following you"
        assert response.json()["link"].endswith("/members/alice/?bpf_read")

    def test_unknown_action(self, client):
        response = client.get(
            "/api/v1/follows/notifications/format",
            params={"action": "something_else", "item_id": 1},
            headers=BOB
        )

        assert response.status_code == 200
        assert response.json() is None


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_follow_endpoints_run_in_threadpool():
    """Routes doing blocking database work are plain functions."""
    from followgraph.api.v1.endpoints.follows import router

    assert router.routes
    for route in router.routes:
        assert not inspect.iscoroutinefunction(route.endpoint), route.path
