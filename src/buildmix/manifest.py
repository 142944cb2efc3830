"""Asset manifest: original asset path → served (optionally versioned) path.

Keys are normalised: public path prefix stripped, forward slashes, leading
``/``, no ``?id=`` suffix. Versioned values carry ``?id=`` followed by the
first 20 hex characters of the file's MD5.
"""

from __future__ import annotations

import hashlib
import json
import logging
import posixpath
import re
from collections.abc import Callable, Iterable
from pathlib import Path

from buildmix.core.errors import ManifestError
from buildmix.core.file_io import write_json_atomic

logger = logging.getLogger(__name__)

_VERSION_SUFFIX = re.compile(r"\?id=\w{20}")

HASH_LENGTH = 20


def content_hash(data: bytes) -> str:
    """20-character content hash used in ``?id=`` suffixes."""
    return hashlib.md5(data).hexdigest()[:HASH_LENGTH]


class Manifest:
    """In-memory manifest persisted as JSON under the public path.

    Parameters
    ----------
    public_path:
        Directory assets are served from (also where the manifest lives).
        Either a string or a zero-argument callable read on every use, so
        the manifest follows ``setPublicPath()`` calls made after it was
        created.
    name:
        Manifest file name.
    root:
        Directory the public path is relative to. Defaults to the cwd.
    """

    def __init__(
        self,
        public_path: str | Callable[[], str] = "",
        name: str = "mix-manifest.json",
        root: str | Path = ".",
    ) -> None:
        self._public_path = public_path
        self.name = name
        self.root = Path(root)
        self._manifest: dict[str, str] = {}

    @property
    def public_path(self) -> str:
        if callable(self._public_path):
            return self._public_path()
        return self._public_path

    def get(self, file: str | None = None) -> str | dict[str, str]:
        """Served path for ``file``, or the whole manifest sorted by key."""
        if file is not None:
            return self._lookup(file)

        return dict(sorted(self._manifest.items()))

    def url(self, file: str) -> str:
        """Served path joined onto the public path."""
        served = self._lookup(file)
        public_path = self.public_path
        return posixpath.join(public_path, served.lstrip("/")) if public_path else served

    def _lookup(self, file: str) -> str:
        key = self.normalize_path(file)
        try:
            return self._manifest[key]
        except KeyError:
            raise ManifestError(f"{key} is not in the manifest") from None

    def add(self, file_path: str) -> Manifest:
        """Record ``file_path`` (possibly already versioned) under its original key."""
        file_path = self.normalize_path(file_path)
        original = _VERSION_SUFFIX.sub("", file_path)
        self._manifest[original] = file_path
        return self

    def hash(self, file: str) -> Manifest:
        """Version ``file`` with the hash of its current contents."""
        key = _VERSION_SUFFIX.sub("", self.normalize_path(file))
        disk_path = self.root / self.public_path / key.lstrip("/")
        try:
            data = disk_path.read_bytes()
        except OSError as exc:
            raise ManifestError(f"Cannot version {key}: {exc}") from exc

        self._manifest[key] = f"{key}?id={content_hash(data)}"
        return self

    def transform(self, assets: Iterable[str]) -> Manifest:
        """Add emitted asset names, skipping hot-update chunks."""
        for asset in assets:
            if "hot-update" in asset:
                continue
            self.add(asset)
        return self

    def path(self) -> Path:
        return self.root / self.public_path / self.name

    def refresh(self) -> None:
        """Write the manifest to disk."""
        write_json_atomic(self.path(), self.get())
        logger.info("Manifest written to %s (%d entries)", self.path(), len(self._manifest))

    def read(self) -> dict[str, str]:
        """Parse the manifest file on disk."""
        try:
            with open(self.path(), encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            raise ManifestError(f"No manifest at {self.path()}") from None

    def normalize_path(self, file_path: str) -> str:
        if self.public_path and file_path.startswith(self.public_path):
            file_path = file_path[len(self.public_path):]

        file_path = file_path.replace("\\", "/")

        if not file_path.startswith("/"):
            file_path = "/" + file_path

        return file_path

    def __len__(self) -> int:
        return len(self._manifest)
