"""Tests for the bearer token handshake."""

from urllib.parse import parse_qs, urlsplit

import pytest

from oci_distribution_client import Reference
from oci_distribution_client.core.auth import build_token_url, pull_scope
from oci_distribution_client.core.types import AccessToken
from oci_distribution_client.exceptions import (
    AuthenticationError,
    DecodeError,
    MalformedChallengeError,
    RegistryConnectionError,
)
from tests.helpers import free_port


def test_pull_scope():
    """Test the read-only scope string."""
    assert pull_scope("library/nginx") == "repository:library/nginx:pull"


def test_build_token_url_keeps_realm_query():
    """Test that realm query parameters survive."""
    url = build_token_url(
        "https://auth.example.com/token?account=robot",
        "registry.example.com",
        "repository:team/app:pull",
    )
    parts = urlsplit(url)

    assert parts.netloc == "auth.example.com"
    assert parts.path == "/token"
    assert parse_qs(parts.query) == {
        "account": ["robot"],
        "service": ["registry.example.com"],
        "scope": ["repository:team/app:pull"],
    }


@pytest.mark.asyncio
async def test_no_challenge_header(fake_registry, client, image):
    """Test a registry that allows anonymous access."""
    await client.auth(image)

    assert client.token is None
    assert fake_registry.token_requests == []


@pytest.mark.asyncio
async def test_non_bearer_challenge(fake_registry, client, image):
    """Test that a Basic-only registry is treated as anonymous."""
    fake_registry.challenge('Basic realm="Registry Realm"')

    await client.auth(image)

    assert client.token is None
    assert fake_registry.token_requests == []


@pytest.mark.asyncio
async def test_token68_bearer_challenge(fake_registry, client, image):
    """Test that a token68 Bearer challenge is ignored."""
    fake_registry.challenge("Bearer c29tZXRva2Vu")

    await client.auth(image)

    assert client.token is None


@pytest.mark.asyncio
async def test_successful_handshake(fake_registry, client, image):
    """Test token exchange and storage."""
    fake_registry.require_bearer()
    fake_registry.token_body = {
        "access_token": "abc",
        "expires_in": 300,
        "issued_at": "2024-05-01T12:30:00Z",
    }

    await client.auth(image)

    assert client.token.access_token == "abc"
    assert client.token.expires_in == 300
    assert fake_registry.token_requests == [
        {"service": "fake-registry", "scope": "repository:test/app:pull"}
    ]
    assert "authorization" not in fake_registry.v2_requests[0]


@pytest.mark.asyncio
async def test_handshake_replaces_token(fake_registry, client, image):
    """Test that a second handshake overwrites the stored token."""
    fake_registry.require_bearer()
    fake_registry.token_body = {"access_token": "first", "expires_in": 3600}
    await client.auth(image)

    fake_registry.token_body = {"access_token": "second", "expires_in": 10}
    await client.auth(image)

    assert client.token == AccessToken(access_token="second", expires_in=10)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    [
        'Bearer service="fake-registry"',
        'Bearer realm="http://127.0.0.1/token"',
        'Bearer scope="repository:test/app:pull"',
    ],
)
async def test_challenge_missing_realm_or_service(fake_registry, client, image, header):
    """Test that an incomplete Bearer challenge fails the handshake."""
    fake_registry.challenge(header)

    with pytest.raises(MalformedChallengeError):
        await client.auth(image)

    assert client.token is None
    assert fake_registry.token_requests == []


@pytest.mark.asyncio
async def test_unparseable_challenge(fake_registry, client, image):
    """Test that a garbled header is surfaced."""
    fake_registry.challenge('Bearer realm="http://unterminated')

    with pytest.raises(MalformedChallengeError):
        await client.auth(image)


@pytest.mark.asyncio
async def test_token_endpoint_rejects(fake_registry, client, image):
    """Test that the raw rejection text is carried verbatim."""
    fake_registry.require_bearer()
    fake_registry.token_status = 403
    fake_registry.token_body = "forbidden"

    with pytest.raises(AuthenticationError) as exc_info:
        await client.auth(image)

    assert exc_info.value.reason == "forbidden"
    assert exc_info.value.status == 403
    assert "forbidden" in str(exc_info.value)
    assert client.token is None


@pytest.mark.asyncio
async def test_rejection_keeps_previous_token(fake_registry, client, image):
    """Test that only a 200 response touches the store."""
    fake_registry.require_bearer()
    await client.auth(image)

    fake_registry.token_status = 401
    fake_registry.token_body = {"details": "expired"}
    with pytest.raises(AuthenticationError):
        await client.auth(image)

    assert client.token.access_token == "abc"


@pytest.mark.asyncio
async def test_token_response_not_json(fake_registry, client, image):
    """Test an undecodable 200 token body."""
    fake_registry.require_bearer()
    fake_registry.token_body = "<html>ok</html>"

    with pytest.raises(DecodeError):
        await client.auth(image)

    assert client.token is None


@pytest.mark.asyncio
async def test_token_rejection_not_utf8(fake_registry, client, image):
    """Test that a binary rejection body is reported lossily."""
    fake_registry.require_bearer()
    fake_registry.token_status = 403
    fake_registry.token_body = b"denied \xff\xfe"

    with pytest.raises(AuthenticationError) as exc_info:
        await client.auth(image)

    assert exc_info.value.reason.startswith("denied ")
    assert exc_info.value.status == 403


@pytest.mark.asyncio
async def test_token_response_not_utf8(fake_registry, client, image):
    """Test that a binary 200 token body is a decode failure."""
    fake_registry.require_bearer()
    fake_registry.token_body = b"\xff\xfe\x00garbage"

    with pytest.raises(DecodeError):
        await client.auth(image)

    assert client.token is None


@pytest.mark.asyncio
async def test_registry_unreachable(client):
    """Test transport failures on the /v2/ request."""
    with pytest.raises(RegistryConnectionError):
        await client.auth(Reference.parse(f"127.0.0.1:{free_port()}/test/app"))


@pytest.mark.asyncio
async def test_token_endpoint_unreachable(fake_registry, client, image):
    """Test transport failures on the token request."""
    fake_registry.require_bearer(realm=f"http://127.0.0.1:{free_port()}/token")

    with pytest.raises(RegistryConnectionError) as exc_info:
        await client.auth(image)

    assert not isinstance(exc_info.value, AuthenticationError)
