import json

import pytest
import requests

from prosanteconnect_oauth2.config import ProviderConfiguration
from prosanteconnect_oauth2.flow import OAuth2Flow
from prosanteconnect_oauth2.provider import ProSanteConnect


def make_response(status_code: int, body, request=None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if not isinstance(body, str):
        body = json.dumps(body)
    response._content = body.encode("utf-8")
    response.encoding = "utf-8"
    response.headers["Content-Type"] = "application/json"
    response.request = request
    return response


class FakeTransport:
    """Stands in for ``requests.Session.send``, answering by URL fragment."""

    def __init__(self) -> None:
        self.routes = {}
        self.requests = []

    def add(self, fragment: str, body, status_code: int = 200) -> None:
        self.routes[fragment] = (status_code, body)

    def send(self, request, **kwargs) -> requests.Response:
        self.requests.append(request)
        for fragment, (status_code, body) in self.routes.items():
            if fragment in request.url:
                return make_response(status_code, body, request)
        raise AssertionError(f"unexpected request: {request.method} {request.url}")


@pytest.fixture
def config() -> ProviderConfiguration:
    return ProviderConfiguration(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri="test-redirect-uri",
    )


@pytest.fixture
def provider(config: ProviderConfiguration) -> ProSanteConnect:
    return ProSanteConnect(config)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def flow(provider: ProSanteConnect, transport: FakeTransport, monkeypatch) -> OAuth2Flow:
    flow = OAuth2Flow(provider)
    monkeypatch.setattr(flow.session, "send", transport.send)
    return flow
