"""
OAuth2 flow orchestration on top of Authlib.

:class:`OAuth2Flow` drives the Authorization Code and Client Credentials
grants against a :class:`~.contracts.ProviderAdapter`. Authlib builds the
authorization URL and the token object; requests carries the HTTP calls.
"""

import logging
from collections.abc import Mapping
from typing import Optional, Sequence, Tuple, Union

from authlib.integrations.requests_client import OAuth2Session
from authlib.oauth2.rfc6749 import OAuth2Token

from .contracts import ProviderAdapter
from .exceptions import MissingAccessTokenError, UnexpectedResponseError

logger = logging.getLogger(__name__)


class OAuth2Flow:
    """Run OAuth2 grants for a single provider."""

    def __init__(
        self,
        provider: ProviderAdapter,
        session: Optional[OAuth2Session] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the flow.

        Args:
            provider: Adapter supplying endpoints and provider rules
            session: Authlib session to use (one is created from the
                provider configuration if omitted)
            timeout: Timeout in seconds for calls to the provider
        """
        self.provider = provider
        self.timeout = timeout

        config = provider.config
        self.session = session or OAuth2Session(
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
        )

    def get_authorization_url(
        self,
        scope: Union[str, Sequence[str], None] = None,
        state: Optional[str] = None,
        **params,
    ) -> Tuple[str, str]:
        """
        Build the URL sending the user to the provider's login page.

        Args:
            scope: Scopes to request, the provider defaults when None
            state: CSRF state, generated when None
            params: Extra query parameters

        Returns:
            Tuple of (authorization URL, state)
        """
        if scope is None:
            scope = self.provider.get_default_scopes()
        if not isinstance(scope, str):
            scope = self.provider.scope_separator.join(scope)

        url, state = self.session.create_authorization_url(
            self.provider.get_authorization_endpoint(),
            state=state,
            scope=scope,
            **params,
        )
        logger.debug(f"Authorization URL: {url}")
        return url, state

    def get_access_token(self, grant: str = "authorization_code", **params) -> OAuth2Token:
        """
        Exchange a grant for an access token.

        Args:
            grant: ``authorization_code``, ``client_credentials`` or
                ``refresh_token``
            params: Grant parameters (``code``, ``refresh_token``, ``scope``...)

        Returns:
            The access token, with ``expires_at`` computed from ``expires_in``

        Raises:
            IdentityProviderError: If the provider answered with an error
            MissingAccessTokenError: If the response holds no access token
        """
        request = self.provider.build_token_request({"grant_type": grant, **params})

        logger.info(f"Requesting access token ({grant} grant)")
        # Token auth is withheld so that requests turns the URI user-info
        # into HTTP Basic credentials
        response = self.session.request(
            request.method,
            request.uri,
            data=request.body,
            headers=request.headers,
            withhold_token=True,
            timeout=self.timeout,
        )
        data = self._parse_response(response)
        self.provider.validate_response(response, data)

        if not isinstance(data, Mapping):
            raise UnexpectedResponseError(
                f"Invalid token response from provider (HTTP {response.status_code})"
            )
        if not data.get("access_token"):
            raise MissingAccessTokenError("access_token")

        return OAuth2Token.from_dict(dict(data))

    def get_resource_owner(self, token):
        """
        Fetch the details of the user owning ``token``.

        Args:
            token: Access token (token object or raw string)

        Returns:
            The provider's resource owner object
        """
        url = self.provider.get_user_info_endpoint(token)
        response = self.session.request(
            "GET",
            url,
            headers=self.provider.get_authorization_headers(token),
            withhold_token=True,
            timeout=self.timeout,
        )
        data = self._parse_response(response)
        self.provider.validate_response(response, data)

        if not isinstance(data, Mapping):
            raise UnexpectedResponseError(
                f"Invalid user-info response from provider (HTTP {response.status_code})"
            )

        logger.debug(f"Userinfo response: {data}")
        return self.provider.create_resource_owner(data, token)

    @staticmethod
    def _parse_response(response):
        """Decode a JSON body; server errors without one are raised as HTTP errors."""
        try:
            return response.json()
        except ValueError:
            if response.status_code >= 500:
                response.raise_for_status()
            raise UnexpectedResponseError(
                f"Failed to parse JSON response from provider (HTTP {response.status_code})"
            )
