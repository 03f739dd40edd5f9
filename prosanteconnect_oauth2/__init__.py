"""
prosanteconnect-oauth2

An OAuth 2.0 client adapter for Pro Santé Connect, the identity provider
of French health professionals (e-santé wallet realm).

This package provides:
- Production and sandbox ("dev") endpoint selection
- Authorization Code and Client Credentials flows on top of Authlib
- Client credentials carried in the token request URI, as the provider expects
- Provider error responses raised as IdentityProviderError
- A resource owner exposing SubjectNameID and a derived email
- An optional Flask login blueprint and a CLI
"""

__version__ = "0.1.0"

from .config import IntegrationConfig, ProviderConfiguration
from .exceptions import IdentityProviderError
from .flow import OAuth2Flow
from .plugin import ProSanteConnectExtension
from .provider import ProSanteConnect
from .resource_owner import ProSanteConnectResourceOwner

__all__ = [
    "IdentityProviderError",
    "IntegrationConfig",
    "OAuth2Flow",
    "ProSanteConnect",
    "ProSanteConnectExtension",
    "ProSanteConnectResourceOwner",
    "ProviderConfiguration",
    "__version__",
]
