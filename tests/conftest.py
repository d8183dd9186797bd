import pytest
import ovh.exceptions
from typing import Any, Dict, List, Tuple

from terraform_provider_ovh.config.schemas.app_schema import AppConfig, ClientConfig, WaitConfig
from terraform_provider_ovh.domain.config import ResolvedConfig
from terraform_provider_ovh.infrastructure.ovh.ovh_client import OVHClient
from terraform_provider_ovh.provider import ProviderMeta

OVH_ENV_VARS = [
    'OVH_ENDPOINT',
    'OVH_APPLICATION_KEY',
    'OVH_APPLICATION_SECRET',
    'OVH_CONSUMER_KEY',
    'OVH_PROJECT_ID',
    'OVH_VRACK_ID',
    'OVH_PROVIDER_CONFIG',
    'OVH_PROVIDER_LOG_LEVEL',
    'OVH_PROVIDER_LOG_DESTINATION',
    'OVH_PROVIDER_LOG_FILE',
    'OVH_PROVIDER_CLIENT_TIMEOUT',
    'OVH_PROVIDER_VALIDATE_ON_CONFIGURE',
    'OVH_PROVIDER_WAIT_TIMEOUT',
    'OVH_PROVIDER_WAIT_INTERVAL',
]


class Responses:
    """Successive answers of one route; the last one repeats."""

    def __init__(self, *items: Any):
        self.items = list(items)

    def next(self) -> Any:
        if len(self.items) > 1:
            return self.items.pop(0)
        return self.items[0]


class FakeOVHApi:
    """In-memory stand-in for the ovh SDK client, keyed by method and path."""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def add(self, method: str, path: str, *responses: Any) -> None:
        self.routes[(method, path)] = Responses(*responses)

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [kwargs for m, p, kwargs in self.calls if m == method and p == path]

    def _handle(self, method: str, path: str, kwargs: Dict[str, Any]) -> Any:
        kwargs = {k: v for k, v in kwargs.items() if k != '_need_auth'}
        self.calls.append((method, path, kwargs))
        route = self.routes.get((method, path))
        if route is None:
            raise ovh.exceptions.ResourceNotFoundError(f"The requested object ({path}) does not exist")
        response = route.next()
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, path, **kwargs):
        return self._handle('GET', path, kwargs)

    def post(self, path, **kwargs):
        return self._handle('POST', path, kwargs)

    def put(self, path, **kwargs):
        return self._handle('PUT', path, kwargs)

    def delete(self, path, **kwargs):
        return self._handle('DELETE', path, kwargs)


@pytest.fixture(autouse=True)
def clean_ovh_environment(monkeypatch):
    """Keep the developer's OVH environment out of the tests."""
    for name in OVH_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def resolved_config():
    return ResolvedConfig(
        endpoint='ovh-eu',
        application_key='test-application-key',
        application_secret='test-application-secret',
        consumer_key='test-consumer-key',
    )


@pytest.fixture
def fake_api():
    return FakeOVHApi()


@pytest.fixture
def settings():
    """Settings with instant polling."""
    return AppConfig(
        client=ClientConfig(validate_on_configure=False),
        wait=WaitConfig(timeout=5.0, interval=0.0),
    )


@pytest.fixture
def ovh_client(resolved_config, fake_api, settings):
    return OVHClient(resolved_config, settings.client, settings.wait, sdk_client=fake_api)


@pytest.fixture
def meta(resolved_config, ovh_client, settings):
    return ProviderMeta(config=resolved_config, client=ovh_client, settings=settings)


@pytest.fixture
def write_ovh_conf(tmp_path):
    """Write a ``.ovh.conf`` file in a temporary home and return the home."""
    def _write(content: str) -> str:
        (tmp_path / '.ovh.conf').write_text(content)
        return str(tmp_path)
    return _write
