# src/ingestion/file_catalog.py
import logging
import os
from dataclasses import dataclass
from typing import Iterator, Protocol

import pyarrow.fs as pafs

from ingestion.errors import StorageAccessError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileRecord:
    """Snapshot of one listed entry at scan time."""

    path: str
    size_bytes: int
    mod_time_millis: int
    is_directory: bool = False

    @property
    def name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]


class FileCatalog(Protocol):
    def list_all(self, root_path: str) -> Iterator[FileRecord]:
        """Recursively list every entry under root_path. A fresh listing per call."""
        ...


class ArrowFileCatalog:
    """
    FileCatalog backed by a pyarrow filesystem.
    The filesystem is resolved once from the root URI (local path, file://,
    s3://, hdfs://, ...) and reused for every listing.
    """

    def __init__(self, root_uri: str, filesystem: pafs.FileSystem = None):
        self.root_uri = root_uri
        if filesystem is None:
            try:
                filesystem, self._root_path = _resolve(root_uri)
                self._prefix = _uri_prefix(root_uri, self._root_path, filesystem)
            except (OSError, ValueError) as e:
                raise StorageAccessError(f"Cannot open filesystem for {root_uri}: {e}") from e
        else:
            # caller-supplied filesystem: root_uri is already a path within it
            self._root_path = root_uri
            self._prefix = ""
        self.fs = filesystem

    def list_all(self, root_path: str) -> Iterator[FileRecord]:
        try:
            if root_path == self.root_uri:
                fs_path, prefix = self._root_path, self._prefix
            else:
                fs_path = _resolve(root_path)[1]
                prefix = _uri_prefix(root_path, fs_path, self.fs)
            infos = self.fs.get_file_info(pafs.FileSelector(fs_path, recursive=True))
        except (OSError, ValueError) as e:
            raise StorageAccessError(f"Unable to list {root_path}: {e}") from e

        logger.debug("Listed %d entries under %s", len(infos), root_path)
        for info in infos:
            is_dir = info.type == pafs.FileType.Directory
            yield FileRecord(
                path=prefix + info.path,
                size_bytes=0 if is_dir or info.size is None else int(info.size),
                mod_time_millis=_mtime_millis(info),
                is_directory=is_dir,
            )


def _mtime_millis(info: pafs.FileInfo) -> int:
    if info.mtime_ns is None:
        return 0
    return info.mtime_ns // 1_000_000


def _resolve(uri: str):
    """Map a root URI to (filesystem, path-within-filesystem)."""
    if "://" not in uri:
        return pafs.LocalFileSystem(), os.path.abspath(uri).replace(os.sep, "/")
    return pafs.FileSystem.from_uri(uri)


def _uri_prefix(uri: str, fs_path: str, filesystem: pafs.FileSystem) -> str:
    """
    The part of a remote URI that from_uri strips ("s3://", "hdfs://host:8020"),
    so listed paths can be handed to readers fully qualified.
    Local roots keep plain paths.
    """
    if "://" not in uri or isinstance(filesystem, pafs.LocalFileSystem):
        return ""
    trimmed = uri.rstrip("/")
    if fs_path and trimmed.endswith(fs_path.rstrip("/")):
        return trimmed[: len(trimmed) - len(fs_path.rstrip("/"))]
    return uri.split("://", 1)[0] + "://"
