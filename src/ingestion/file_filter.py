# src/ingestion/file_filter.py
from typing import Iterable, Iterator, Sequence

from ingestion.file_catalog import FileRecord

# Hidden files, in-progress writes and markers such as _SUCCESS or _temporary.
DEFAULT_IGNORE_PREFIXES = (".", "_")


class FileFilter:
    def __init__(self, ignore_prefixes: Sequence[str] = DEFAULT_IGNORE_PREFIXES):
        self.ignore_prefixes = tuple(p for p in ignore_prefixes if p)

    def is_eligible(self, record: FileRecord) -> bool:
        """Directories and files whose name starts with an ignored prefix are excluded."""
        if record.is_directory:
            return False
        return not record.name.startswith(self.ignore_prefixes)

    def filter(self, records: Iterable[FileRecord]) -> Iterator[FileRecord]:
        return (r for r in records if self.is_eligible(r))
