"""Run-scoped scratch directory for the diff and fetched file contents."""

from __future__ import annotations

import hashlib
import logging
import re
import shutil
import tempfile
from pathlib import Path, PurePosixPath

logger = logging.getLogger(__name__)

DIFF_FILENAME = "diff.diff"

_SEPARATORS_RE = re.compile(r"[\\/]")

# Below NAME_MAX (255 bytes) with room left for a "-N" collision suffix.
MAX_NAME_BYTES = 200
_MAX_SUFFIX_BYTES = 16


def safe_filename(path: str, max_bytes: int = MAX_NAME_BYTES) -> str:
    """Flatten a repository path into a single filename ("src/app.py" -> "src_app.py").

    Names longer than ``max_bytes`` keep their extension but have the stem cut
    short and a hash of the full path appended, so deep paths stay distinct.
    """
    name = _SEPARATORS_RE.sub("_", path)
    encoded = name.encode("utf-8")
    if len(encoded) <= max_bytes:
        return name

    digest = hashlib.sha1(path.encode("utf-8")).hexdigest()[:10]
    suffix = PurePosixPath(name).suffix
    if len(suffix.encode("utf-8")) > _MAX_SUFFIX_BYTES:
        suffix = ""
    keep = max_bytes - len(digest) - 1 - len(suffix.encode("utf-8"))
    stem = encoded[:keep].decode("utf-8", errors="ignore")
    return f"{stem}-{digest}{suffix}"


class ScratchArea:
    """Temporary directory that is deleted when the run leaves the ``with`` block.

    Names handed out are unique within the area: a path whose sanitized name is
    already taken ("a/b.py" after "a_b.py") gets a numeric suffix before its
    extension instead of overwriting the earlier file.
    """

    def __init__(self, prefix: str = "criticwave-"):
        self._prefix = prefix
        self._root: Path | None = None
        self._used: set[str] = {DIFF_FILENAME}

    def __enter__(self) -> ScratchArea:
        self._root = Path(tempfile.mkdtemp(prefix=self._prefix))
        logger.debug("Created scratch area %s", self._root)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def root(self) -> Path:
        if self._root is None:
            raise RuntimeError("ScratchArea used outside of its context.")
        return self._root

    def close(self) -> None:
        if self._root is not None:
            shutil.rmtree(self._root, ignore_errors=True)
            logger.debug("Removed scratch area %s", self._root)
            self._root = None

    def write_diff(self, diff: str) -> Path:
        target = self.root / DIFF_FILENAME
        target.write_text(diff, encoding="utf-8")
        return target

    def write_file(self, repo_path: str, data: bytes) -> Path:
        target = self.root / self._unique_name(safe_filename(repo_path))
        target.write_bytes(data)
        return target

    def _unique_name(self, name: str) -> str:
        candidate = name
        suffix = PurePosixPath(name).suffix
        stem = name[: len(name) - len(suffix)] if suffix else name
        n = 2
        while candidate in self._used:
            candidate = f"{stem}-{n}{suffix}"
            n += 1
        self._used.add(candidate)
        return candidate
