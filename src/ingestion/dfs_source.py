# src/ingestion/dfs_source.py
import logging
from typing import Iterator, Optional, Tuple

import pandas as pd
import pyarrow as pa

from ingestion.checkpoint import Checkpoint
from ingestion.config import SourceProperties
from ingestion.data_reader import BatchMaterializer, reader_for_format
from ingestion.errors import SourceReadError, StorageAccessError
from ingestion.file_catalog import ArrowFileCatalog, FileCatalog
from ingestion.file_filter import DEFAULT_IGNORE_PREFIXES, FileFilter
from ingestion.file_scanner import IncrementalScanner, ScanResult
from ingestion.schema_provider import SchemaProvider

logger = logging.getLogger(__name__)

ROOT_INPUT_PATH_PROP = "ingest.source.dfs.root"
FORMAT_PROP = "ingest.source.dfs.format"
IGNORE_PREFIXES_PROP = "ingest.source.dfs.ignore.prefixes"


class DFSSource:
    """
    Incremental source over a directory tree in a data lake landing zone.

    Each call to fetch_new_data lists the tree, selects files newer than the
    given checkpoint up to a byte budget and hands their paths to a reader.
    The checkpoint is returned to the caller, which owns persisting it.
    """

    def __init__(
        self,
        props: SourceProperties,
        schema_provider: SchemaProvider,
        catalog: Optional[FileCatalog] = None,
        reader: Optional[BatchMaterializer] = None,
    ):
        props.check_required([ROOT_INPUT_PATH_PROP])
        self.props = props
        self.schema_provider = schema_provider
        self.root_path = props.get_string(ROOT_INPUT_PATH_PROP)

        # Both handles live as long as the source does
        self.catalog = catalog if catalog is not None else ArrowFileCatalog(self.root_path)
        self.reader = reader if reader is not None else reader_for_format(props.get_string(FORMAT_PROP, "parquet"))
        file_filter = FileFilter(props.get_list(IGNORE_PREFIXES_PROP, DEFAULT_IGNORE_PREFIXES))
        self.scanner = IncrementalScanner(self.catalog, file_filter)

    def scan_new_files(self, last_checkpoint: Optional[str], source_limit: int) -> ScanResult:
        """Select the next files to read without reading them."""
        checkpoint = None if last_checkpoint is None else Checkpoint.parse(last_checkpoint)
        try:
            return self.scanner.scan(self.root_path, checkpoint, source_limit)
        except StorageAccessError as e:
            raise SourceReadError(
                f"Unable to read from source from checkpoint: {last_checkpoint}", checkpoint=last_checkpoint
            ) from e

    def read_files(self, result: ScanResult) -> Iterator[pa.RecordBatch]:
        schema = self.schema_provider.get_source_schema()
        return self.reader.materialize(schema, result.paths)

    def fetch_new_data(
        self, last_checkpoint: Optional[str], source_limit: int
    ) -> Tuple[Optional[Iterator[pa.RecordBatch]], str]:
        """
        Returns (batches, new_checkpoint). batches is None when there is
        nothing new; the checkpoint is then returned unchanged (or the
        'nothing consumed' marker when none was given).
        """
        result = self.scan_new_files(last_checkpoint, source_limit)
        if result.is_empty:
            return None, str(result.new_checkpoint)
        return self.read_files(result), str(result.new_checkpoint)

    def fetch_new_data_as_pandas(
        self, last_checkpoint: Optional[str], source_limit: int
    ) -> Tuple[Optional[pd.DataFrame], str]:
        batches, checkpoint = self.fetch_new_data(last_checkpoint, source_limit)
        if batches is None:
            return None, checkpoint
        schema = self.schema_provider.get_source_schema()
        return pa.Table.from_batches(list(batches), schema=schema).to_pandas(), checkpoint
