"""Unit tests for CredentialExchanger.

Tests cover:
- Password grant request construction
- Email-only request construction
- Failure markers for rejected or token-less exchanges
- Transport fault propagation
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import orjson
import pytest

from identity_bridge.auth.exchange import CredentialExchanger
from identity_bridge.auth.models import ExchangeFailure
from identity_bridge.client.exceptions import IdentityServiceUnavailableError


if TYPE_CHECKING:
    import respx

    from identity_bridge.client.identity_service import RemoteIdentityClient


pytestmark = pytest.mark.unit


@pytest.fixture
def exchanger(identity_client: RemoteIdentityClient) -> CredentialExchanger:
    return CredentialExchanger(identity_client)


class TestLoginViaPassword:
    """Tests for the password grant."""

    async def test_returns_access_token(
        self,
        exchanger: CredentialExchanger,
        identity_api: respx.MockRouter,
    ) -> None:
        route = identity_api.post("/oauth/token").mock(
            return_value=httpx.Response(
                200,
                json={"token_type": "Bearer", "expires_in": 3600, "access_token": "tok"},
            )
        )

        token = await exchanger.login_via_password("a@x.com", "secret")

        assert token == "tok"
        request = route.calls.last.request
        assert "Authorization" not in request.headers
        assert orjson.loads(request.content) == {
            "grant_type": "password",
            "client_id": "client-1",
            "client_secret": "client-secret-1",
            "username": "a@x.com",
            "password": "secret",
            "scope": "*",
        }

    async def test_rejection_returns_failure(
        self,
        exchanger: CredentialExchanger,
        identity_api: respx.MockRouter,
    ) -> None:
        identity_api.post("/oauth/token").mock(
            return_value=httpx.Response(401, json={"message": "invalid_grant"})
        )

        result = await exchanger.login_via_password("a@x.com", "wrong")

        assert isinstance(result, ExchangeFailure)
        assert result.reason == "rejected"
        assert result.status_code == 401

    async def test_success_without_token_returns_failure(
        self,
        exchanger: CredentialExchanger,
        identity_api: respx.MockRouter,
    ) -> None:
        identity_api.post("/oauth/token").mock(
            return_value=httpx.Response(200, json={"token_type": "Bearer"})
        )

        result = await exchanger.login_via_password("a@x.com", "secret")

        assert isinstance(result, ExchangeFailure)
        assert result.reason == "missing access token"

    async def test_custom_path_and_scope(
        self,
        identity_client: RemoteIdentityClient,
        identity_api: respx.MockRouter,
    ) -> None:
        exchanger = CredentialExchanger(
            identity_client, login_path="v2/token", scope="users"
        )
        route = identity_api.post("/v2/token").mock(
            return_value=httpx.Response(200, json={"access_token": "tok"})
        )

        assert await exchanger.login_via_password("a@x.com", "secret") == "tok"
        assert orjson.loads(route.calls.last.request.content)["scope"] == "users"

    async def test_transport_fault_raises(
        self,
        exchanger: CredentialExchanger,
        identity_api: respx.MockRouter,
    ) -> None:
        identity_api.post("/oauth/token").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with pytest.raises(IdentityServiceUnavailableError):
            await exchanger.login_via_password("a@x.com", "secret")


class TestAuthorizeViaEmailOnly:
    """Tests for the email-only exchange."""

    async def test_forwards_credentials_without_password(
        self,
        exchanger: CredentialExchanger,
        identity_api: respx.MockRouter,
    ) -> None:
        route = identity_api.post("/auth/email").mock(
            return_value=httpx.Response(200, json={"data": {"token": "tok-email"}})
        )

        token = await exchanger.authorize_via_email_only(
            {"email": "b@x.com", "password": "nope", "provider": "magic-link"}
        )

        assert token == "tok-email"
        assert orjson.loads(route.calls.last.request.content) == {
            "email": "b@x.com",
            "provider": "magic-link",
            "client_id": "client-1",
            "client_secret": "client-secret-1",
        }

    async def test_caller_cannot_override_client_credentials(
        self,
        exchanger: CredentialExchanger,
        identity_api: respx.MockRouter,
    ) -> None:
        route = identity_api.post("/auth/email").mock(
            return_value=httpx.Response(200, json={"access_token": "tok"})
        )

        await exchanger.authorize_via_email_only(
            {"email": "b@x.com", "client_id": "evil", "client_secret": "evil"}
        )

        body = orjson.loads(route.calls.last.request.content)
        assert body["client_id"] == "client-1"
        assert body["client_secret"] == "client-secret-1"

    async def test_missing_email_defaults_to_empty(
        self,
        exchanger: CredentialExchanger,
        identity_api: respx.MockRouter,
    ) -> None:
        route = identity_api.post("/auth/email").mock(return_value=httpx.Response(422))

        result = await exchanger.authorize_via_email_only({})

        assert isinstance(result, ExchangeFailure)
        assert orjson.loads(route.calls.last.request.content)["email"] == ""
