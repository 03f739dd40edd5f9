"""
Pro Santé Connect provider adapter.

Supplies the environment specific endpoints, default scopes, error
detection and resource owner mapping to :class:`~.flow.OAuth2Flow`.
The token endpoint expects the client credentials in the user-info
segment of the request URI, on top of the usual form parameters.
"""

import logging
from collections.abc import Mapping
from typing import Any, Sequence

from .config import ENDPOINTS, REALM_PATH, ProviderConfiguration
from .contracts import ProviderAdapter, TokenRequest, prepare_access_token_request
from .exceptions import IdentityProviderError
from .resource_owner import ProSanteConnectResourceOwner

logger = logging.getLogger(__name__)


def _access_token_value(token) -> str:
    if isinstance(token, Mapping):
        return token.get("access_token", "")
    return str(token)


class ProSanteConnect(ProviderAdapter):
    """Adapter for the e-santé wallet realm of Pro Santé Connect."""

    scope_separator = ","

    def __init__(self, config: ProviderConfiguration):
        """
        Initialize the adapter.

        Args:
            config: Client registration, including the target environment
        """
        self.config = config
        self._endpoints = ENDPOINTS[config.environment]

    def get_authorization_endpoint(self) -> str:
        return self._endpoints["authorization_url"]

    def get_token_endpoint(self, params: Mapping[str, Any] = None) -> str:
        return f"{self._endpoints['auth_server']}{REALM_PATH}/token"

    def get_user_info_endpoint(self, token=None) -> str:
        return f"{self._endpoints['auth_server']}{REALM_PATH}/userinfo"

    def get_default_scopes(self) -> Sequence[str]:
        return ["scope_all"]

    def validate_response(self, response, data) -> None:
        """
        Check a provider response for errors.

        Args:
            response: HTTP response the data was read from
            data: Parsed response body

        Raises:
            IdentityProviderError: If the body carries an ``error`` field,
                whatever the status code
        """
        if not isinstance(data, Mapping) or data.get("error") is None:
            return

        status_code = response.status_code
        message = (
            f"{status_code} - {data.get('error_description') or ''}: {data['error']}"
        )
        if data.get("error_uri"):
            message += f" (see: {data['error_uri']})"

        logger.warning(f"Pro Santé Connect returned an error: {message}")
        raise IdentityProviderError(message, status_code, response)

    def build_token_request(self, params: Mapping[str, Any]) -> TokenRequest:
        """
        Return the access token request with the client credentials
        embedded in the URI authority.

        Body and headers are those of the standard request.
        """
        request = prepare_access_token_request(self, params)
        logger.debug(
            f"Embedding client credentials in token request to {request.uri}"
        )
        return request.with_userinfo(self.config.client_id, self.config.client_secret)

    def create_resource_owner(self, data: Mapping[str, Any], token=None) -> ProSanteConnectResourceOwner:
        return ProSanteConnectResourceOwner(data)

    def get_authorization_headers(self, token) -> dict:
        return {"Authorization": f"Bearer {_access_token_value(token)}"}
