"""Read/write for the stored project list.

The list is a plain file of absolute directory paths, one per line, in the
order they were added.  That order is the picker's unfiltered order.
"""

import errno
import fcntl
import os
import tempfile
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional

from fzy_core.paths import configure_logger, projects_file

_log = configure_logger("fzy.store")

# Directory names are bytes on POSIX; undecodable ones round-trip through
# lone surrogates the same way os.fsdecode/os.fsencode do
FILE_ENCODING = "utf-8"
FILE_ERRORS = "surrogateescape"


class CandidateStore:
    """Ordered, de-duplicated list of project directories."""

    def __init__(self, paths: Iterable[str] = (), path: Optional[Path] = None):
        self.path = path
        self._paths: list[str] = []
        self._seen: set[str] = set()
        self.add(paths)

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "CandidateStore":
        """Load the store from *path* (default: the cache file).

        A missing file is created empty.  Blank lines are skipped; relative
        paths and repeats are dropped with a warning.
        """
        if path is None:
            path = projects_file()
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        store = cls(path=path)
        text = path.read_text(encoding=FILE_ENCODING, errors=FILE_ERRORS)
        for lineno, line in enumerate(text.splitlines(), 1):
            entry = line.strip()
            if not entry:
                continue
            if not os.path.isabs(entry):
                _log.warning("%s:%d: ignoring relative path %r", path, lineno, entry)
                continue
            if not store.add([entry]):
                _log.warning("%s:%d: ignoring duplicate %r", path, lineno, entry)
        _log.debug("loaded %d paths from %s", len(store), path)
        return store

    @property
    def candidates(self) -> list[str]:
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __contains__(self, entry: object) -> bool:
        return entry in self._seen

    def add(self, paths: Iterable[str]) -> list[str]:
        """Append paths not already stored.  Returns the ones added."""
        added = []
        for p in paths:
            if p in self._seen:
                continue
            self._seen.add(p)
            self._paths.append(p)
            added.append(p)
        return added

    def remove(self, paths: Iterable[str]) -> list[str]:
        """Drop the given paths.  Returns the ones that were stored."""
        doomed = [p for p in dict.fromkeys(paths) if p in self._seen]
        if doomed:
            gone = set(doomed)
            self._paths = [p for p in self._paths if p not in gone]
            self._seen -= gone
        return doomed

    def save(self, path: Optional[Path] = None) -> None:
        """Write the list back, replacing the file atomically."""
        path = path or self.path or projects_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        content = "".join(p + "\n" for p in self._paths)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=path.name + ".")
        try:
            with os.fdopen(fd, "w", encoding=FILE_ENCODING, errors=FILE_ERRORS) as f:
                f.write(content)
            os.replace(tmp, path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise
        _log.info("saved %d paths to %s", len(self._paths), path)


# ---------------------------------------------------------------------------
# Advisory file locking for read-modify-write operations
# ---------------------------------------------------------------------------

LOCK_TIMEOUT_SECONDS = 2.0


class StoreLockTimeout(Exception):
    """Raised when the project list lock cannot be acquired within the timeout."""


@contextmanager
def _lock(path: Path, timeout: float = LOCK_TIMEOUT_SECONDS):
    """Acquire an exclusive advisory lock on ``<path>.lock``.

    Released when the context manager exits (even on exception).
    """
    lock_path = path.with_name(path.name + ".lock")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout
    fd = open(lock_path, "w")
    try:
        while True:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
                break
            except OSError as e:
                if e.errno not in (errno.EACCES, errno.EAGAIN):
                    raise
                if time.monotonic() >= deadline:
                    fd.close()
                    raise StoreLockTimeout(
                        f"Could not acquire lock on {lock_path} within "
                        f"{timeout}s; another tmux-fzy process may be writing "
                        f"{path}."
                    ) from None
                time.sleep(0.05)
        yield fd
    finally:
        if not fd.closed:
            try:
                fcntl.flock(fd, fcntl.LOCK_UN)
            except OSError:
                pass
            fd.close()


def locked_update(
    fn: Callable[[CandidateStore], None],
    path: Optional[Path] = None,
    timeout: float = LOCK_TIMEOUT_SECONDS,
) -> CandidateStore:
    """Atomic read-modify-write of the project list.

    Loads fresh state under the lock, calls ``fn(store)`` to mutate it in
    place, saves, and returns the store.
    """
    if path is None:
        path = projects_file()
    with _lock(path, timeout):
        store = CandidateStore.load(path)
        fn(store)
        store.save(path)
    return store


def expand_directories(root: str | Path, min_depth: int = 0, max_depth: int = 0) -> list[str]:
    """List directories under *root* whose depth lies in [min_depth, max_depth].

    Depth 0 is *root* itself, so the defaults return just ``[root]``.  Hidden
    directories below the root are skipped.  Siblings come out sorted and
    parents before children.
    """
    root = os.path.abspath(root)
    if min_depth > max_depth:
        return []
    found = []
    base_depth = root.rstrip(os.sep).count(os.sep)
    for dirpath, dirnames, _ in os.walk(root):
        depth = dirpath.rstrip(os.sep).count(os.sep) - base_depth
        if min_depth <= depth <= max_depth:
            found.append(dirpath)
        if depth >= max_depth:
            dirnames[:] = []
        else:
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
    return found
