"""
Command line tools for the Pro Santé Connect client.

These commands help with setup and debugging of a client registration.
"""

import json

import click
import httpx

from .config import DEV, ENVIRONMENTS, PRODUCTION, ProviderConfiguration
from .exceptions import IdentityProviderError
from .flow import OAuth2Flow
from .provider import ProSanteConnect


def _load_provider(environment=None) -> ProSanteConnect:
    config = ProviderConfiguration.from_env()
    if environment and environment != config.environment:
        config = ProviderConfiguration(
            client_id=config.client_id,
            client_secret=config.client_secret,
            redirect_uri=config.redirect_uri,
            environment=environment,
        )
    return ProSanteConnect(config)


environment_option = click.option(
    "--environment",
    type=click.Choice(ENVIRONMENTS),
    default=None,
    help="Override PSC_ENVIRONMENT.",
)


@click.group("prosanteconnect")
def cli():
    """Pro Santé Connect OAuth2 client commands."""
    pass


@cli.command("show-config")
def show_config():
    """Display current client configuration."""
    config = ProviderConfiguration.from_env()

    click.echo("=== Pro Santé Connect Configuration ===")
    click.echo(f"Environment: {config.environment}")
    click.echo(f"Redirect URI: {config.redirect_uri or 'Not configured'}")
    click.echo(f"Client ID: {config.client_id[:8] + '...' if config.client_id else 'Not configured'}")
    click.echo(f"Client Secret: {'Configured' if config.client_secret else 'Not configured'}")


@cli.command("endpoints")
@click.option("--dev", is_flag=True, help="Show the sandbox endpoints.")
def endpoints(dev):
    """List the provider endpoints of an environment."""
    provider = ProSanteConnect(
        ProviderConfiguration(environment=DEV if dev else PRODUCTION)
    )

    click.echo(f"Authorization URL: {provider.get_authorization_endpoint()}")
    click.echo(f"Token URL: {provider.get_token_endpoint({})}")
    click.echo(f"Userinfo URL: {provider.get_user_info_endpoint(None)}")
    click.echo(f"Default scopes: {provider.scope_separator.join(provider.get_default_scopes())}")


@cli.command("authorization-url")
@click.option("--scope", "scopes", multiple=True, help="Scope to request (repeatable).")
@click.option("--state", default=None, help="CSRF state, generated if omitted.")
@environment_option
def authorization_url(scopes, state, environment):
    """Print the URL starting the Authorization Code flow."""
    flow = OAuth2Flow(_load_provider(environment))
    url, state = flow.get_authorization_url(scope=list(scopes) or None, state=state)

    click.echo(url)
    click.echo(f"State: {state}")


@cli.command("client-credentials")
@environment_option
def client_credentials(environment):
    """Request an access token with the Client Credentials grant."""
    flow = OAuth2Flow(_load_provider(environment))

    try:
        token = flow.get_access_token("client_credentials")
    except IdentityProviderError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(dict(token), indent=2, sort_keys=True))


@cli.command("test-connection")
@environment_option
def test_connection(environment):
    """Test connectivity to the provider endpoints."""
    provider = _load_provider(environment)

    click.echo(f"=== Testing Pro Santé Connect ({provider.config.environment}) ===\n")

    checks = [
        ("Authorization URL", "HEAD", provider.get_authorization_endpoint()),
        ("Token URL", "POST", provider.get_token_endpoint({})),
        ("Userinfo URL", "GET", provider.get_user_info_endpoint(None)),
    ]
    with httpx.Client(follow_redirects=True, timeout=10) as client:
        for label, method, url in checks:
            try:
                # Any HTTP answer counts, credentials are not sent
                client.request(method, url)
                click.echo(f"[OK] {label} reachable: {url}")
            except httpx.HTTPError as e:
                click.echo(f"[FAIL] {label}: {e}")
