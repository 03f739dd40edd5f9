"""
Flask extension registering the Pro Santé Connect integration.
"""

import logging

from flask import Flask

from . import blueprint
from .blueprint import psc_bp
from .cli import cli
from .config import IntegrationConfig

logger = logging.getLogger(__name__)


class ProSanteConnectExtension:
    """
    Pro Santé Connect login for a Flask application.

    Registers the authentication blueprint and the ``prosanteconnect``
    CLI group.
    """

    def __init__(self, app: Flask = None, config: IntegrationConfig = None):
        """
        Initialize the extension.

        Args:
            app: Flask application instance (optional, can call init_app later)
            config: Integration settings, read from the environment if omitted
        """
        self.app = app
        self.config = config

        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask):
        """Initialize the extension with a Flask application."""
        self.app = app

        if self.config is None:
            self.config = IntegrationConfig.from_env()
        blueprint.configure(self.config)

        if not app.config.get("SECRET_KEY"):
            logger.warning(
                "Flask SECRET_KEY not set. Login state cannot be kept in the session."
            )
        # SAMESITE must be "Lax" for the provider redirect to carry the session
        app.config.setdefault("SESSION_COOKIE_SAMESITE", "Lax")
        app.config.setdefault("SESSION_COOKIE_HTTPONLY", True)

        app.register_blueprint(psc_bp)
        app.cli.add_command(cli)
        app.extensions["prosanteconnect"] = self

        logger.info("Pro Santé Connect extension initialized")
        logger.info(f"Environment: {self.config.provider.environment}")
        if not self.config.provider.client_id:
            logger.warning("Pro Santé Connect not fully configured - PSC_CLIENT_ID not set")

    def create_flow(self):
        """Return a new OAuth2 flow for the configured provider."""
        return blueprint.create_flow()
