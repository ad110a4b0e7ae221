"""Unit tests for identity service request builders."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from identity_bridge.client.models import ANONYMOUS, AuthContext
from identity_bridge.client.resources import (
    ResourceRequest,
    profile_service,
    user_resource,
)


pytestmark = pytest.mark.unit


@pytest.fixture
def mock_client() -> MagicMock:
    client = MagicMock()
    client.send = AsyncMock()
    return client


class TestBuilders:
    """Tests for resource path construction."""

    def test_user_resource_path(self, mock_client: MagicMock) -> None:
        request = user_resource(mock_client, 42)

        assert request.path == "users/42"
        assert request.auth is ANONYMOUS

    def test_user_resource_custom_path(self, mock_client: MagicMock) -> None:
        assert user_resource(mock_client, 7, users_path="/accounts/").path == "accounts/7"

    @pytest.mark.parametrize(
        ("identifier", "segment"),
        [
            ("9/../1", "9%2F..%2F1"),
            ("1?x=", "1%3Fx%3D"),
            ("a b#c", "a%20b%23c"),
        ],
    )
    def test_user_resource_encodes_identifier(
        self, mock_client: MagicMock, identifier: str, segment: str
    ) -> None:
        assert user_resource(mock_client, identifier).path == f"users/{segment}"

    def test_profile_service(self, mock_client: MagicMock) -> None:
        auth = AuthContext(token="tok")

        request = profile_service(mock_client, auth)

        assert request.path == "me"
        assert request.auth is auth


class TestResourceRequest:
    """Tests for the fluent, copy-on-write builder."""

    def test_relationships_adds_include(self, mock_client: MagicMock) -> None:
        request = ResourceRequest(mock_client, "users/1").relationships("company")

        assert request.query == {"include": "company"}

    def test_relationships_accumulate_without_duplicates(
        self, mock_client: MagicMock
    ) -> None:
        request = (
            ResourceRequest(mock_client, "users/1")
            .relationships("company")
            .relationships("company", "roles")
        )

        assert request.query == {"include": "company,roles"}

    def test_builder_methods_do_not_mutate(self, mock_client: MagicMock) -> None:
        base = ResourceRequest(mock_client, "users/1")

        derived = base.add_query_argument("column", "remember_token").add_body_param(
            "token", "t"
        )

        assert base.query == {}
        assert base.body == {}
        assert derived.query == {"column": "remember_token"}
        assert derived.body == {"token": "t"}

    async def test_send_put_includes_body(self, mock_client: MagicMock) -> None:
        request = ResourceRequest(mock_client, "users/7").add_body_param("token", "t")

        await request.send("put")

        mock_client.send.assert_awaited_once_with(
            "put",
            "users/7",
            query={},
            body={"token": "t"},
            auth=ANONYMOUS,
        )

    async def test_send_get_omits_body(self, mock_client: MagicMock) -> None:
        auth = AuthContext(token="tok")
        request = (
            ResourceRequest(mock_client, "me", auth)
            .add_query_argument("include", "company")
            .add_body_param("ignored", True)
        )

        await request.send("get")

        mock_client.send.assert_awaited_once_with(
            "get",
            "me",
            query={"include": "company"},
            body=None,
            auth=auth,
        )
