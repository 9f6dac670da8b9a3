import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from criticwave_core.errors import ConfigurationError

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_SERVICE_URL = "https://suggesstionsservice.onrender.com"

DEFAULT_CONFIG: dict = {
    "model": DEFAULT_MODEL,
    "service_url": DEFAULT_SERVICE_URL,
    "review_path": "/v1/beta/review",
    "timeout": 300,  # seconds, for the review POST
    "warmup": True,
    "style_guide": None,  # inline style-guide text
    "style_guide_path": None,  # or a Markdown file relative to cwd
}

# GitHub Actions exposes `with:` inputs as INPUT_<NAME> with the hyphens kept.
_ACTION_INPUTS = {
    "github_token": "INPUT_GITHUB-TOKEN",
    "api_key": "INPUT_GEMINI-API-KEY",
    "style_guide": "INPUT_PR-STYLE-GUIDE",
    "model": "INPUT_MODEL",
}


def _action_input(key: str) -> Optional[str]:
    value = os.environ.get(_ACTION_INPUTS[key], "").strip()
    return value or None


def load_config(config_path: str = ".criticwave.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. GitHub Actions inputs (INPUT_MODEL, INPUT_PR-STYLE-GUIDE)
      3. .criticwave.yml in the current directory
      4. CRITICWAVE_SERVICE_URL
      5. CLI argument overrides
    Credentials are only ever read from the environment.
    """
    config = dict(DEFAULT_CONFIG)

    for key in ("model", "style_guide"):
        value = _action_input(key)
        if value is not None:
            config[key] = value

    path = Path(config_path)
    if path.exists():
        try:
            with open(path) as f:
                file_config = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            raise ConfigurationError(f"Could not read {config_path}: {e}") from e
        if not isinstance(file_config, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping, got {type(file_config).__name__}.")
        config.update(file_config)

    if os.environ.get("CRITICWAVE_SERVICE_URL"):
        config["service_url"] = os.environ["CRITICWAVE_SERVICE_URL"]

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    # Resolve credentials from environment variables
    config["github_token"] = os.environ.get("GITHUB_TOKEN") or _action_input("github_token")
    config["api_key"] = os.environ.get("GEMINI_API_KEY") or _action_input("api_key")
    config["auth_header"] = os.environ.get("CRITICWAVE_AUTH_HEADER")

    return config


def load_style_guide(config: dict) -> str:
    """
    Load the style guide forwarded verbatim to the review service.

    Inline ``style_guide`` text wins over ``style_guide_path``. There is no
    built-in fallback: a run without a style guide is a configuration error.
    """
    text = config.get("style_guide")
    if text:
        return text

    custom_path = config.get("style_guide_path")
    if custom_path:
        p = Path(custom_path)
        if not p.exists():
            raise ConfigurationError(f"Style guide file not found: {custom_path}")
        return p.read_text()

    raise ConfigurationError(
        "No style guide configured. Pass --style-guide or --style-guide-file, or set INPUT_PR-STYLE-GUIDE."
    )


@dataclass(frozen=True)
class Settings:
    """Everything a run needs, resolved once at start-up and passed explicitly."""

    github_token: str
    api_key: str
    style_guide: str
    model: str = DEFAULT_MODEL
    service_url: str = DEFAULT_SERVICE_URL
    review_path: str = "/v1/beta/review"
    auth_header: Optional[str] = None
    timeout: float = 300
    warmup: bool = True


def resolve_settings(config: dict) -> Settings:
    """Validate a merged config dict and freeze it into Settings."""
    if not config.get("github_token"):
        raise ConfigurationError("No GitHub token found. Set GITHUB_TOKEN or run `gh auth login` first.")
    if not config.get("api_key"):
        raise ConfigurationError("GEMINI_API_KEY environment variable is not set.")

    try:
        timeout = float(config.get("timeout") or DEFAULT_CONFIG["timeout"])
    except (TypeError, ValueError):
        raise ConfigurationError(f"timeout must be a number, got {config.get('timeout')!r}.")

    return Settings(
        github_token=config["github_token"],
        api_key=config["api_key"],
        style_guide=load_style_guide(config),
        model=config.get("model") or DEFAULT_MODEL,
        service_url=(config.get("service_url") or DEFAULT_SERVICE_URL).rstrip("/"),
        review_path="/" + (config.get("review_path") or DEFAULT_CONFIG["review_path"]).lstrip("/"),
        auth_header=config.get("auth_header") or None,
        timeout=timeout,
        warmup=bool(config.get("warmup", True)),
    )
