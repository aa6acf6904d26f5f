"""Filesystem cache backend implementation."""

import gzip
import logging
import os
import tempfile
import time
from collections.abc import Callable
from pathlib import Path

from cachify.core.entities.cache_config import CacheConfig
from cachify.core.entities.cache_key import CacheKey
from cachify.core.services.signature import SignatureGenerator
from cachify.infrastructure.backends.base import FlatCacheBackend
from cachify.infrastructure.key_builders.default import DefaultKeyBuilder

logger = logging.getLogger(__name__)

HTML_FILE = "index.html"
GZIP_FILE = "index.html.gz"
EXPIRES_FILE = "index.html.expires"
OWN_FILES = (HTML_FILE, GZIP_FILE, EXPIRES_FILE)


class FilesystemCacheBackend(FlatCacheBackend):
    """Cache backend writing static HTML files.

    Each page lives in ``<cache_dir>/<host>/<path>/index.html`` with an
    optional gzip copy next to it, so a web server can serve the files
    directly. The expiry time is kept in a sidecar file.
    """

    method = "HDD"

    def __init__(
        self,
        config: CacheConfig | None = None,
        key_builder: DefaultKeyBuilder | None = None,
        signature: SignatureGenerator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the filesystem backend.

        Args:
            config: Cache configuration; ``cache_dir`` and ``gzip`` apply.
            key_builder: Builds the path addresses.
            signature: Signature generator for stored pages.
            clock: Source of the current Unix time.
        """
        super().__init__(signature)
        self._config = config or CacheConfig()
        self._root = Path(self._config.cache_dir)  # type: ignore[arg-type]
        self._gzip = self._config.gzip
        self._key_builder = key_builder or DefaultKeyBuilder.from_config(self._config)
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    def is_available(self) -> bool:
        """Check that the cache directory is (or can be made) writable."""
        candidate = self._root
        while not candidate.exists():
            if candidate.parent == candidate:
                return False
            candidate = candidate.parent
        return candidate.is_dir() and os.access(candidate, os.W_OK | os.X_OK)

    def store_item(
        self,
        key: CacheKey,
        data: str,
        lifetime: int,
        sig_detail: bool = False,
    ) -> None:
        """Write the signed page, its gzip copy and expiry."""
        if not self._accepts(data):
            return

        directory = self._directory(key)
        try:
            content = self._sign(data, sig_detail).encode("utf-8")
        except UnicodeEncodeError as e:
            logger.warning("Cannot encode page for %s: %s", directory, e)
            return
        try:
            directory.mkdir(parents=True, exist_ok=True)
            _write_atomic(directory / HTML_FILE, content)
            if self._gzip:
                _write_atomic(directory / GZIP_FILE, gzip.compress(content, compresslevel=9))
            expires = directory / EXPIRES_FILE
            if lifetime > 0:
                _write_atomic(expires, str(int(self._clock()) + lifetime).encode())
            else:
                expires.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Cannot write cache file in %s: %s", directory, e)

    def get_item(self, key: CacheKey) -> str | None:
        directory = self._directory(key)
        if self._is_expired(directory):
            self._remove(directory)
            return None
        try:
            content = (directory / HTML_FILE).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None
        return content or None

    def delete_item(self, key: CacheKey, url: str | None = None) -> None:
        """Delete the page files, addressed by ``url`` when given."""
        self._remove(self._directory(key, url))

    def clear_cache(self) -> None:
        """Delete all cache files below the cache directory.

        Foreign files are left in place; emptied directories are removed.
        """
        if not self._root.is_dir():
            return
        for dirpath, _dirnames, filenames in os.walk(self._root, topdown=False):
            directory = Path(dirpath)
            for name in filenames:
                if name in OWN_FILES:
                    try:
                        (directory / name).unlink()
                    except OSError as e:
                        logger.warning("Cannot delete %s: %s", directory / name, e)
            if directory != self._root:
                _rmdir_if_empty(directory)

    def get_stats(self) -> int | None:
        """Return the total size of all cache files in bytes."""
        if not self._root.is_dir():
            return None
        total = 0
        for dirpath, _dirnames, filenames in os.walk(self._root):
            for name in filenames:
                if name in OWN_FILES:
                    try:
                        total += os.path.getsize(os.path.join(dirpath, name))
                    except OSError:
                        continue
        return total or None

    def _directory(self, key: CacheKey, path: str | None = None) -> Path:
        parts = [
            part
            for part in self._key_builder.path_for(key, path).split("/")
            if part not in ("", ".", "..")
        ]
        return self._root.joinpath(*parts)

    def _is_expired(self, directory: Path) -> bool:
        try:
            expires = int((directory / EXPIRES_FILE).read_text().strip())
        except FileNotFoundError:
            return False
        except (OSError, ValueError):
            return True
        return expires <= self._clock()

    def _remove(self, directory: Path) -> None:
        for name in OWN_FILES:
            try:
                (directory / name).unlink(missing_ok=True)
            except OSError as e:
                logger.warning("Cannot delete %s: %s", directory / name, e)


def _write_atomic(path: Path, content: bytes) -> None:
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".cachify-")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
        os.chmod(tmp, 0o644)
        os.replace(tmp, path)
    except OSError:
        Path(tmp).unlink(missing_ok=True)
        raise


def _rmdir_if_empty(directory: Path) -> None:
    try:
        directory.rmdir()
    except OSError:
        pass
