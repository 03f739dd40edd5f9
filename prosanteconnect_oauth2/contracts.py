"""
Provider adapter interface and the standard access token request.

The OAuth2 flow (see :mod:`.flow`) only talks to a provider through the
:class:`ProviderAdapter` capabilities defined here. The standard token
request is built by :func:`prepare_access_token_request`, which adapters
may reshape before it is sent.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Sequence

from authlib.oauth2.auth import encode_client_secret_post
from authlib.oauth2.rfc6749.parameters import prepare_token_request

from .config import ProviderConfiguration
from .utils import with_userinfo

DEFAULT_TOKEN_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/x-www-form-urlencoded;charset=UTF-8",
}


@dataclass(frozen=True)
class TokenRequest:
    """A prepared, not yet sent, access token request."""

    method: str
    uri: str
    headers: dict = field(default_factory=dict)
    body: str = ""

    def with_userinfo(self, user: str, password: Optional[str] = None) -> "TokenRequest":
        """Return a copy whose URI carries ``user:password@`` in its authority."""
        return replace(
            self,
            uri=with_userinfo(self.uri, user, password),
            headers=dict(self.headers),
        )


class ProviderAdapter(ABC):
    """Capabilities an identity provider supplies to the OAuth2 flow."""

    config: ProviderConfiguration

    # Joins a scope list in the authorization URL
    scope_separator: str = " "

    @abstractmethod
    def get_authorization_endpoint(self) -> str:
        """Return the base URL of the authorization endpoint."""

    @abstractmethod
    def get_token_endpoint(self, params: Mapping[str, Any]) -> str:
        """Return the URL of the access token endpoint."""

    @abstractmethod
    def get_user_info_endpoint(self, token) -> str:
        """Return the URL serving the resource owner details."""

    @abstractmethod
    def get_default_scopes(self) -> Sequence[str]:
        """Return the scopes requested when the caller gives none."""

    @abstractmethod
    def validate_response(self, response, data) -> None:
        """Raise when ``data`` (the parsed body of ``response``) is an error."""

    @abstractmethod
    def build_token_request(self, params: Mapping[str, Any]) -> TokenRequest:
        """Return the request exchanging a grant for an access token."""

    @abstractmethod
    def create_resource_owner(self, data: Mapping[str, Any], token):
        """Build the resource owner from a user-info payload."""

    @abstractmethod
    def get_authorization_headers(self, token) -> dict:
        """Return the headers authenticating a request with ``token``."""


def prepare_access_token_request(
    provider: ProviderAdapter, params: Mapping[str, Any]
) -> TokenRequest:
    """
    Build the access token request a generic OAuth2 client would send.

    The grant parameters are form encoded in the body together with the
    client credentials (``client_secret_post``).

    Args:
        provider: Adapter giving the token endpoint and client configuration
        params: Grant parameters; ``grant_type`` defaults to
            ``authorization_code``, which also receives the configured
            redirect URI

    Returns:
        The POST request to send to the token endpoint
    """
    params = dict(params)
    grant_type = params.pop("grant_type", "authorization_code")
    if grant_type == "authorization_code":
        params.setdefault("redirect_uri", provider.config.redirect_uri)

    body = prepare_token_request(grant_type, **params)
    uri, headers, body = encode_client_secret_post(
        provider.config,
        "POST",
        provider.get_token_endpoint(params),
        dict(DEFAULT_TOKEN_HEADERS),
        body,
    )
    return TokenRequest(method="POST", uri=uri, headers=headers, body=body)
