from __future__ import annotations

import logging

import requests
from github import Auth, Github, GithubException

from criticwave_core.errors import UpstreamFetchError, UpstreamPublishError

logger = logging.getLogger(__name__)

# Page size for the changed-files listing; GitHub's maximum for this endpoint.
PER_PAGE = 100

_DIFF_MEDIA_TYPE = "application/vnd.github.v3.diff"
_DIFF_TIMEOUT = 30


def get_repo(repo_name: str, token: str):
    gh = Github(auth=Auth.Token(token), per_page=PER_PAGE)
    try:
        return gh.get_repo(repo_name)
    except GithubException as e:
        raise UpstreamFetchError(
            f"Repository {repo_name} not found or not accessible: {e}", status_code=e.status
        ) from e


def get_pull(repo, pr_number: int):
    try:
        return repo.get_pull(pr_number)
    except GithubException as e:
        raise UpstreamFetchError(f"PR #{pr_number} not found in {repo.full_name}: {e}", status_code=e.status) from e


def fetch_diff(repo, pr_number: int, token: str, timeout: float = _DIFF_TIMEOUT) -> str:
    """Return the unified diff of a PR as one opaque text blob.

    PyGithub only exposes the JSON representation of a pull request, so the
    diff media type is requested directly against the repository's API URL
    (which also covers GitHub Enterprise hosts).
    """
    url = f"{repo.url}/pulls/{pr_number}"
    try:
        response = requests.get(
            url,
            headers={"Accept": _DIFF_MEDIA_TYPE, "Authorization": f"Bearer {token}"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        body = e.response.text if e.response is not None else None
        raise UpstreamFetchError(
            f"Could not fetch diff for PR #{pr_number}: status={status}", status_code=status, body=body
        ) from e
    except requests.RequestException as e:
        raise UpstreamFetchError(f"Could not fetch diff for PR #{pr_number}: {e}") from e

    content_type = response.headers.get("Content-Type", "")
    if "json" in content_type:
        raise UpstreamFetchError(f"Expected a unified diff for PR #{pr_number}, got {content_type}.")
    return response.text


def list_changed_files(pr, per_page: int = PER_PAGE, expected_total: int | None = None) -> list[str]:
    """Return every path touched by the PR, in the order GitHub lists them.

    Stops on the first page shorter than ``per_page``. When ``expected_total``
    (the PR's ``changed_files`` count) is known it also stops as soon as that
    many paths were collected, so an exact multiple of the page size does not
    cost an extra empty page.
    """
    paths: list[str] = []
    page = 0
    while expected_total is None or len(paths) < expected_total:
        try:
            batch = list(pr.get_files().get_page(page))
        except (GithubException, requests.RequestException) as e:
            raise UpstreamFetchError(f"Could not list changed files (page {page + 1}): {e}") from e
        paths.extend(f.filename for f in batch)
        logger.debug("Changed files page %d: %d entries", page + 1, len(batch))
        if len(batch) < per_page:
            break
        page += 1
    return paths


def fetch_content(repo, path: str, ref: str) -> bytes | None:
    """Return the raw bytes of ``path`` at ``ref``, or None if it has no inline content.

    Directories, submodules, symlinks and files too large for the contents API
    (encoding "none") all come back as None.
    """
    try:
        content = repo.get_contents(path, ref=ref)
    except (GithubException, requests.RequestException) as e:
        raise UpstreamFetchError(f"Could not fetch {path}: {e}") from e

    if isinstance(content, list):
        return None
    if content.type != "file" or content.encoding != "base64" or content.content is None:
        return None
    return content.decoded_content


def post_comment(pr, body: str) -> None:
    """Create a new issue comment on the PR. Earlier comments are left untouched."""
    try:
        pr.create_issue_comment(body)
    except (GithubException, requests.RequestException) as e:
        raise UpstreamPublishError(f"Could not post review comment on PR #{pr.number}: {e}") from e
