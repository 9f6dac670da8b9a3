"""Tests for reading the triggering pull_request event."""

import json

import pytest

from criticwave_core.errors import ConfigurationError
from criticwave_core.gh.event import load_pull_request_event

SHA = "c" * 40


def _write_event(tmp_path, payload):
    path = tmp_path / "event.json"
    path.write_text(json.dumps(payload))
    return str(path)


def _pr_payload(number=5):
    return {
        "action": "opened",
        "pull_request": {"number": number, "head": {"sha": SHA}},
        "repository": {"full_name": "owner/repo"},
    }


def test_reads_pull_request_event(tmp_path):
    event = load_pull_request_event(_write_event(tmp_path, _pr_payload()))
    assert event.repo == "owner/repo"
    assert event.pr_number == 5
    assert event.head_sha == SHA


def test_event_path_taken_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_EVENT_PATH", _write_event(tmp_path, _pr_payload(11)))
    assert load_pull_request_event().pr_number == 11


def test_explicit_repository_wins(tmp_path):
    event = load_pull_request_event(_write_event(tmp_path, _pr_payload()), repository="fork/repo")
    assert event.repo == "fork/repo"


def test_repository_falls_back_to_env(tmp_path, monkeypatch):
    payload = _pr_payload()
    del payload["repository"]
    monkeypatch.setenv("GITHUB_REPOSITORY", "env/repo")
    assert load_pull_request_event(_write_event(tmp_path, payload)).repo == "env/repo"


def test_non_pull_request_event_rejected(tmp_path):
    path = _write_event(tmp_path, {"ref": "refs/heads/main", "repository": {"full_name": "owner/repo"}})
    with pytest.raises(ConfigurationError, match="only works on pull_request events"):
        load_pull_request_event(path)


def test_no_event_path_rejected():
    with pytest.raises(ConfigurationError):
        load_pull_request_event()


def test_missing_file_rejected(tmp_path):
    with pytest.raises(ConfigurationError, match="not found"):
        load_pull_request_event(str(tmp_path / "missing.json"))


def test_invalid_json_rejected(tmp_path):
    path = tmp_path / "event.json"
    path.write_text("{not json")
    with pytest.raises(ConfigurationError, match="not valid JSON"):
        load_pull_request_event(str(path))


def test_malformed_pull_request_rejected(tmp_path):
    payload = _pr_payload()
    del payload["pull_request"]["head"]
    with pytest.raises(ConfigurationError, match="Malformed"):
        load_pull_request_event(_write_event(tmp_path, payload))
