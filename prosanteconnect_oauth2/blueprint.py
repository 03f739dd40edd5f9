"""
Flask blueprint for Pro Santé Connect authentication.

This blueprint provides the following endpoints:
- GET /auth/login - Initiate the Authorization Code flow
- GET /auth/callback - OAuth2 callback (receives authorization code)
- GET /auth/logout - Clear session and logout
- GET /auth/me - Current practitioner, from the session
- GET /auth/info - Provider information for the frontend
"""

import logging
import secrets

from flask import (
    jsonify,
    redirect,
    request,
    session,
    url_for,
)
from flask_smorest import Blueprint

from .config import IntegrationConfig
from .exceptions import IdentityProviderError
from .flow import OAuth2Flow
from .provider import ProSanteConnect

logger = logging.getLogger(__name__)

psc_bp = Blueprint(
    "prosanteconnect_auth",
    __name__,
    url_prefix="/auth",
    description="Pro Santé Connect authentication endpoints"
)

# Initialized on first request, or by the extension
_config: IntegrationConfig = None


def get_config() -> IntegrationConfig:
    """Get or initialize integration configuration."""
    global _config
    if _config is None:
        _config = IntegrationConfig.from_env()
    return _config


def create_flow() -> OAuth2Flow:
    """Create an OAuth2 flow, with its own HTTP session, for one request."""
    config = get_config()
    return OAuth2Flow(ProSanteConnect(config.provider), timeout=config.timeout)


def configure(config: IntegrationConfig):
    """Replace the configuration used by the views."""
    global _config
    _config = config


def _login_failed(config: IntegrationConfig):
    """Drop the pending login from the session and redirect to the error page."""
    session.pop("psc_state", None)
    session.pop("auth_return_url", None)
    return redirect(config.login_error_redirect)


@psc_bp.route("/login")
def login():
    """
    Initiate the Authorization Code flow.

    Query Parameters:
        next: URL to redirect to after successful login (optional)
    """
    config = get_config()

    if not config.provider.client_id:
        return jsonify({
            "error": "Pro Santé Connect not configured",
            "message": "PSC_CLIENT_ID is not set"
        }), 500

    # Generate state for CSRF protection
    state = secrets.token_urlsafe(32)
    session["psc_state"] = state
    session["auth_return_url"] = request.args.get("next", config.login_success_redirect)

    authorization_url, _ = create_flow().get_authorization_url(state=state)

    logger.info("Initiating Pro Santé Connect login, redirecting to provider")
    return redirect(authorization_url)


@psc_bp.route("/callback")
def callback():
    """
    OAuth2 callback endpoint.

    Exchanges the authorization code for an access token and stores the
    practitioner in the session.
    """
    config = get_config()

    # Verify state for CSRF protection
    state = request.args.get("state")
    stored_state = session.pop("psc_state", None)
    if not state or state != stored_state:
        logger.warning("Pro Santé Connect state mismatch")
        return _login_failed(config)

    error = request.args.get("error")
    if error:
        error_description = request.args.get("error_description", "Unknown error")
        logger.error(f"Pro Santé Connect error: {error} - {error_description}")
        return _login_failed(config)

    code = request.args.get("code")
    if not code:
        logger.error("No authorization code received")
        return _login_failed(config)

    flow = create_flow()
    try:
        token = flow.get_access_token("authorization_code", code=code)
        owner = flow.get_resource_owner(token)
    except IdentityProviderError as e:
        logger.error(f"Pro Santé Connect rejected the login: {e}")
        return _login_failed(config)
    except Exception as e:
        logger.exception(f"Error processing Pro Santé Connect callback: {e}")
        return _login_failed(config)

    if owner.get_id() is None:
        logger.error("No SubjectNameID in Pro Santé Connect user info")
        return _login_failed(config)

    session["psc_user"] = {"id": owner.get_id(), "email": owner.get_email()}

    logger.info(f"User {owner.get_id()} authenticated via Pro Santé Connect")
    return redirect(session.pop("auth_return_url", config.login_success_redirect))


@psc_bp.route("/logout")
def logout():
    """Logout and clear session."""
    session.clear()
    logger.info("User logged out")
    return redirect(get_config().frontend_url)


@psc_bp.route("/me")
def me():
    """Return the practitioner signed in with this session."""
    user = session.get("psc_user")
    if not user:
        return jsonify({
            "error": "Not authenticated",
            "login_url": url_for("prosanteconnect_auth.login", _external=True),
        }), 401
    return jsonify(user)


@psc_bp.route("/info")
def auth_info():
    """Return information about the configured provider."""
    config = get_config()
    provider = ProSanteConnect(config.provider)

    return jsonify({
        "provider": "prosanteconnect",
        "environment": config.provider.environment,
        "authorization_url": provider.get_authorization_endpoint(),
        "login_url": url_for("prosanteconnect_auth.login", _external=True),
        "configured": bool(config.provider.client_id and config.provider.client_secret),
    })
