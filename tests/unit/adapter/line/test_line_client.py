"""Unit tests for the LINE provider client."""

from datetime import datetime, timedelta, timezone
from urllib.parse import parse_qs, urlparse

import httpx
import jwt
import pytest

from tracker.adapter.line import MockLineProviderClient, RealLineProviderClient
from tracker.domain.error import ExchangeFailedError

CHANNEL_ID = "1650000000"
CHANNEL_SECRET = "line-channel-secret-for-unit-tests"
REDIRECT_URI = "http://localhost:8000/auth/line/callback"


def id_token(secret: str = CHANNEL_SECRET, **claims) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "iss": "https://access.line.me",
        "sub": "U4af4980629",
        "aud": CHANNEL_ID,
        "iat": now,
        "exp": now + timedelta(hours=1),
        "name": "Taro",
        "picture": "https://profile.line-scdn.net/taro",
    }
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def make_client(token_body: dict, profile_body: dict | None = None, status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth2/v2.1/token":
            return httpx.Response(status, json=token_body)
        if request.url.path == "/v2/profile" and profile_body is not None:
            assert request.headers["Authorization"] == "Bearer at-1"
            return httpx.Response(200, json=profile_body)
        return httpx.Response(404)

    return RealLineProviderClient(
        channel_id=CHANNEL_ID,
        channel_secret=CHANNEL_SECRET,
        redirect_uri=REDIRECT_URI,
        transport=httpx.MockTransport(handler),
    )


class TestRealLineProviderClient:
    """Tests for RealLineProviderClient."""

    def test_authorization_url(self):
        client = make_client({})

        url = urlparse(client.authorization_url("state-123"))
        params = parse_qs(url.query)

        assert url.netloc == "access.line.me"
        assert params["state"] == ["state-123"]
        assert params["client_id"] == [CHANNEL_ID]
        assert set(params["scope"][0].split()) == {"profile", "openid", "email"}

    @pytest.mark.asyncio
    async def test_id_token_with_email(self):
        client = make_client(
            {"access_token": "at-1", "id_token": id_token(email="Taro@Example.com")}
        )

        profile = await client.exchange("code-1")

        assert profile.subject_id == "U4af4980629"
        assert profile.email == "taro@example.com"
        assert profile.email_verified is True
        assert profile.display_name == "Taro"

    @pytest.mark.asyncio
    async def test_id_token_without_email(self):
        client = make_client({"access_token": "at-1", "id_token": id_token()})

        profile = await client.exchange("code-1")

        assert profile.email is None
        assert profile.email_verified is False

    @pytest.mark.asyncio
    async def test_id_token_with_wrong_signature_raises(self):
        client = make_client(
            {"access_token": "at-1", "id_token": id_token(secret="x" * 40)}
        )

        with pytest.raises(ExchangeFailedError):
            await client.exchange("code-1")

    @pytest.mark.asyncio
    async def test_id_token_for_other_channel_raises(self):
        client = make_client(
            {"access_token": "at-1", "id_token": id_token(aud="999")}
        )

        with pytest.raises(ExchangeFailedError):
            await client.exchange("code-1")

    @pytest.mark.asyncio
    async def test_profile_endpoint_fallback(self):
        client = make_client(
            {"access_token": "at-1"},
            profile_body={
                "userId": "U123",
                "displayName": "Hanako",
                "pictureUrl": "https://profile.line-scdn.net/hanako",
            },
        )

        profile = await client.exchange("code-1")

        assert profile.subject_id == "U123"
        assert profile.email is None
        assert profile.display_name == "Hanako"

    @pytest.mark.asyncio
    async def test_id_token_with_blank_subject_raises(self):
        client = make_client({"access_token": "at-1", "id_token": id_token(sub="   ")})

        with pytest.raises(ExchangeFailedError) as exc_info:
            await client.exchange("code-1")
        assert exc_info.value.code == "exchange_failed"

    @pytest.mark.asyncio
    async def test_id_token_with_oversized_subject_raises(self):
        client = make_client(
            {"access_token": "at-1", "id_token": id_token(sub="U" * 256)}
        )

        with pytest.raises(ExchangeFailedError):
            await client.exchange("code-1")

    @pytest.mark.asyncio
    async def test_profile_endpoint_with_blank_user_id_raises(self):
        client = make_client({"access_token": "at-1"}, profile_body={"userId": "   "})

        with pytest.raises(ExchangeFailedError):
            await client.exchange("code-1")

    @pytest.mark.asyncio
    async def test_token_error_raises(self):
        client = make_client({"error": "invalid_grant"}, status=400)

        with pytest.raises(ExchangeFailedError):
            await client.exchange("code-1")


class TestMockLineProviderClient:
    """Tests for the mock LINE client used by the test container."""

    @pytest.mark.asyncio
    async def test_plain_code_has_no_email(self):
        profile = await MockLineProviderClient().exchange("bob")

        assert profile.subject_id == "line-bob"
        assert profile.email is None

    @pytest.mark.asyncio
    async def test_email_code_discloses_email(self):
        profile = await MockLineProviderClient().exchange("bob@x.com")

        assert profile.subject_id == "line-bob"
        assert profile.email == "bob@x.com"
        assert profile.email_verified is True
