import pytest
from pytest import MonkeyPatch

from linkshortener.constants import ENV


@pytest.fixture(autouse=True)
def _runtime_env(monkeypatch: MonkeyPatch) -> None:
    """Run every test as a deployed (non-local) environment unless a test says otherwise."""
    monkeypatch.setenv(ENV.App.APP_ENV, 'test')
    monkeypatch.delenv(ENV.App.AWS_SAM_LOCAL, raising=False)
    monkeypatch.delenv(ENV.App.APP_NAME, raising=False)
    monkeypatch.delenv(ENV.AppConfig.AGENT_URL, raising=False)
