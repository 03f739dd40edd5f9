"""
Configuration management for the Pro Santé Connect integration.

This module holds the fixed endpoint table of the identity provider and
the dataclasses loading client settings from the environment.
"""

import os
from dataclasses import dataclass, field

PRODUCTION = "production"
DEV = "dev"
ENVIRONMENTS = (PRODUCTION, DEV)

REALM_PATH = "/auth/realms/esante-wallet/protocol/openid-connect"

# Environment -> fixed provider hosts
ENDPOINTS = {
    PRODUCTION: {
        "authorization_url": "https://wallet.esw.esante.gouv.fr/auth",
        "auth_server": "https://auth.esw.esante.gouv.fr",
    },
    DEV: {
        "authorization_url": "https://wallet.bas.psc.esante.gouv.fr/auth",
        "auth_server": "https://auth.bas.psc.esante.gouv.fr",
    },
}


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass(frozen=True)
class ProviderConfiguration:
    """Client registration at Pro Santé Connect."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = ""

    # "production" or "dev" (sandbox realm)
    environment: str = PRODUCTION

    def __post_init__(self):
        if self.environment not in ENVIRONMENTS:
            raise ValueError(
                f"Unknown environment {self.environment!r}, "
                f"expected one of: {', '.join(ENVIRONMENTS)}"
            )

    @property
    def dev(self) -> bool:
        return self.environment == DEV

    @classmethod
    def from_env(cls) -> "ProviderConfiguration":
        """Create configuration from environment variables."""
        environment = os.environ.get("PSC_ENVIRONMENT", PRODUCTION).lower()
        # PSC_DEV is a shorthand kept for deployments using a boolean switch
        if _env_flag("PSC_DEV"):
            environment = DEV

        return cls(
            client_id=os.environ.get("PSC_CLIENT_ID", ""),
            client_secret=os.environ.get("PSC_CLIENT_SECRET", ""),
            redirect_uri=os.environ.get("PSC_REDIRECT_URI", ""),
            environment=environment,
        )


@dataclass
class IntegrationConfig:
    """Settings of the Flask integration around the provider."""

    provider: ProviderConfiguration = field(default_factory=ProviderConfiguration.from_env)

    # Base URL for constructing the default callback URL
    base_url: str = "http://localhost:5000"

    # Frontend redirect settings
    frontend_url: str = "/"
    login_success_redirect: str = "/"
    login_error_redirect: str = "/login?error=auth_failed"

    # Timeout in seconds for calls to the provider
    timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "IntegrationConfig":
        """Create configuration from environment variables."""
        base_url = os.environ.get("PSC_BASE_URL", "http://localhost:5000")
        provider = ProviderConfiguration.from_env()
        if not provider.redirect_uri:
            provider = ProviderConfiguration(
                client_id=provider.client_id,
                client_secret=provider.client_secret,
                redirect_uri=f"{base_url}/auth/callback",
                environment=provider.environment,
            )

        return cls(
            provider=provider,
            base_url=base_url,
            frontend_url=os.environ.get("PSC_FRONTEND_URL", "/"),
            login_success_redirect=os.environ.get(
                "PSC_LOGIN_SUCCESS_REDIRECT", "/"
            ),
            login_error_redirect=os.environ.get(
                "PSC_LOGIN_ERROR_REDIRECT", "/login?error=auth_failed"
            ),
            timeout=float(os.environ.get("PSC_HTTP_TIMEOUT", "10")),
        )
