# src/ingestion/file_scanner.py
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ingestion.checkpoint import Checkpoint
from ingestion.file_catalog import FileCatalog, FileRecord
from ingestion.file_filter import FileFilter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanResult:
    selected_files: Tuple[FileRecord, ...]
    new_checkpoint: Checkpoint

    @property
    def is_empty(self) -> bool:
        return not self.selected_files

    @property
    def paths(self) -> List[str]:
        return [f.path for f in self.selected_files]

    @property
    def total_bytes(self) -> int:
        return sum(f.size_bytes for f in self.selected_files)


class IncrementalScanner:
    """
    Picks the next batch of files out of a landing zone:
    - Lists everything under the root and drops ineligible entries
    - Orders files by modification time (path breaks ties)
    - Skips files at or below the last checkpoint
    - Accumulates files until the byte budget would be reached
    - Reports the new checkpoint (largest modification time selected)
    """

    def __init__(self, catalog: FileCatalog, file_filter: Optional[FileFilter] = None):
        self.catalog = catalog
        self.file_filter = file_filter or FileFilter()

    def scan(self, root_path: str, last_checkpoint: Optional[Checkpoint], size_budget_bytes: int) -> ScanResult:
        if size_budget_bytes < 0:
            raise ValueError(f"size budget must be non-negative, got {size_budget_bytes}")

        eligible = list(self.file_filter.filter(self.catalog.list_all(root_path)))
        eligible.sort(key=lambda f: (f.mod_time_millis, f.path))

        current_bytes = 0
        max_mod_time = None
        selected = []
        for f in eligible:
            if last_checkpoint is not None and not last_checkpoint.admits(f.mod_time_millis):
                continue

            if current_bytes + f.size_bytes >= size_budget_bytes:
                logger.debug("Budget of %d bytes reached at %s", size_budget_bytes, f.path)
                break

            max_mod_time = f.mod_time_millis
            current_bytes += f.size_bytes
            selected.append(f)

        if not selected:
            logger.info("No new files under %s after checkpoint %s", root_path, last_checkpoint)
            return ScanResult((), last_checkpoint if last_checkpoint is not None else Checkpoint.NONE)

        new_checkpoint = Checkpoint(max_mod_time)
        logger.info(
            "Selected %d of %d eligible file(s), %d bytes, checkpoint %s -> %s",
            len(selected), len(eligible), current_bytes, last_checkpoint, new_checkpoint,
        )
        return ScanResult(tuple(selected), new_checkpoint)
