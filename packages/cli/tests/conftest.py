import pytest

_ENV_VARS = (
    "GITHUB_TOKEN",
    "GEMINI_API_KEY",
    "CRITICWAVE_AUTH_HEADER",
    "CRITICWAVE_SERVICE_URL",
    "CRITICWAVE_CONFIG",
    "GITHUB_EVENT_PATH",
    "GITHUB_REPOSITORY",
    "INPUT_GITHUB-TOKEN",
    "INPUT_GEMINI-API-KEY",
    "INPUT_PR-STYLE-GUIDE",
    "INPUT_MODEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Run every CLI test in an empty directory with no credentials set."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
