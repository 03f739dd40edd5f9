import base64
import time
from urllib.parse import parse_qs, urlsplit

import pytest

from prosanteconnect_oauth2.exceptions import (
    IdentityProviderError,
    MissingAccessTokenError,
    UnexpectedResponseError,
)
from prosanteconnect_oauth2.flow import OAuth2Flow
from prosanteconnect_oauth2.resource_owner import ProSanteConnectResourceOwner

from .conftest import FakeTransport


def _query(url: str) -> dict:
    return parse_qs(urlsplit(url).query)


def test_authorization_url_with_explicit_scopes(flow: OAuth2Flow) -> None:
    url, state = flow.get_authorization_url(scope=["public", "profile"])
    query = _query(url)

    assert url.startswith("https://wallet.esw.esante.gouv.fr/auth?")
    assert query["scope"] == ["public,profile"]
    assert query["client_id"] == ["test-client-id"]
    assert query["redirect_uri"] == ["test-redirect-uri"]
    assert query["response_type"] == ["code"]
    assert query["state"] == [state]


def test_authorization_url_default_scope(flow: OAuth2Flow) -> None:
    url, _ = flow.get_authorization_url(state="fixed-state")
    query = _query(url)

    assert query["scope"] == ["scope_all"]
    assert query["state"] == ["fixed-state"]


def test_access_token_with_authorization_code(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/token", {
        "access_token": "test-access-token",
        "token_type": "bearer",
        "refresh_token": "test-refresh-token",
        "expires_in": 7200,
        "scope": "public",
        "created_at": 1666964584,
    })

    before = int(time.time())
    token = flow.get_access_token("authorization_code", code="test-authorization-code")

    assert token["access_token"] == "test-access-token"
    assert token["refresh_token"] == "test-refresh-token"
    assert before + 7200 <= token["expires_at"] <= int(time.time()) + 7200


def test_token_request_is_sent_with_uri_credentials(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/token", {"access_token": "abc", "token_type": "bearer"})

    flow.get_access_token("authorization_code", code="test-authorization-code")

    (sent,) = transport.requests
    assert sent.method == "POST"
    assert urlsplit(sent.url).username == "test-client-id"
    expected = base64.b64encode(b"test-client-id:test-client-secret").decode()
    assert sent.headers["Authorization"] == f"Basic {expected}"

    body = parse_qs(sent.body)
    assert body["code"] == ["test-authorization-code"]
    assert body["grant_type"] == ["authorization_code"]


def test_access_token_with_client_credentials(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/token", {
        "access_token": "test-access-token",
        "token_type": "bearer",
        "expires_in": 7200,
        "scope": "public",
        "created_at": 1666964584,
    })

    token = flow.get_access_token("client_credentials")

    assert token["access_token"] == "test-access-token"
    assert token.get("refresh_token") is None
    assert token["expires_at"] >= int(time.time())
    assert parse_qs(transport.requests[0].body)["grant_type"] == ["client_credentials"]


def test_access_token_error_response(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add(
        "openid-connect/token",
        {"error_description": "This is the description", "error": "error_name"},
        status_code=403,
    )

    with pytest.raises(IdentityProviderError, match="^403 - This is the description") as exc_info:
        flow.get_access_token("authorization_code", code="test-authorization-code")

    assert exc_info.value.status_code == 403


def test_access_token_missing_from_response(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/token", {}, status_code=403)

    with pytest.raises(MissingAccessTokenError, match='Required option not passed: "access_token"'):
        flow.get_access_token("authorization_code", code="test-authorization-code")


def test_access_token_invalid_json(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/token", "<html>oops</html>", status_code=400)

    with pytest.raises(UnexpectedResponseError):
        flow.get_access_token("client_credentials")


def test_get_resource_owner(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/userinfo", {"SubjectNameID": 1234567890})

    owner = flow.get_resource_owner({"access_token": "test-access-token"})

    assert isinstance(owner, ProSanteConnectResourceOwner)
    assert owner.to_dict() == {"SubjectNameID": 1234567890}
    assert owner.get_email() == "1234567890@santeconnect.pro"

    (sent,) = transport.requests
    assert sent.method == "GET"
    assert sent.headers["Authorization"] == "Bearer test-access-token"


def test_get_resource_owner_error(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add(
        "openid-connect/userinfo",
        {"error": "invalid_token", "error_description": "Token expired"},
        status_code=401,
    )

    with pytest.raises(IdentityProviderError, match="^401 - Token expired: invalid_token$"):
        flow.get_resource_owner("stale-token")


def test_access_token_with_refresh_token(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/token", {
        "access_token": "renewed-token",
        "token_type": "bearer",
        "refresh_token": "r2",
        "expires_in": 300,
    })

    token = flow.get_access_token("refresh_token", refresh_token="r1")

    assert token["access_token"] == "renewed-token"
    body = parse_qs(transport.requests[0].body)
    assert body["grant_type"] == ["refresh_token"]
    assert body["refresh_token"] == ["r1"]
    assert body["client_id"] == ["test-client-id"]
    assert body["client_secret"] == ["test-client-secret"]
    assert "code" not in body
    assert "redirect_uri" not in body


def test_access_token_is_not_kept_on_the_session(flow: OAuth2Flow, transport: FakeTransport) -> None:
    transport.add("openid-connect/token", {"access_token": "user-token", "token_type": "bearer"})

    flow.get_access_token("authorization_code", code="test-authorization-code")

    assert flow.session.token is None
