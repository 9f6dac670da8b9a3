import pytest

_ENV_VARS = (
    "GITHUB_TOKEN",
    "GEMINI_API_KEY",
    "CRITICWAVE_AUTH_HEADER",
    "CRITICWAVE_SERVICE_URL",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "INPUT_GITHUB-TOKEN",
    "INPUT_GEMINI-API-KEY",
    "INPUT_PR-STYLE-GUIDE",
    "INPUT_MODEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep the developer's or CI runner's credentials out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
