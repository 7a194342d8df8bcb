# src/ingestion/data_reader.py
import logging
from typing import Iterable, Iterator, Protocol

import duckdb
import pyarrow as pa

from ingestion.errors import ConfigurationError, DecodeError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_ROWS = 100_000


class BatchMaterializer(Protocol):
    def materialize(self, schema: pa.Schema, paths: Iterable[str]) -> Iterator[pa.RecordBatch]:
        ...


def _sql_str(value: str) -> str:
    return "'" + str(value).replace("'", "''") + "'"


def _sql_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class DataReader:
    """
    Reads a set of files through DuckDB and yields Arrow record batches
    shaped to the source schema (schema columns, schema order, schema types).
    Subclasses pick the DuckDB table function for their file format.
    """

    read_function = None

    def __init__(self, conn=None, batch_rows: int = DEFAULT_BATCH_ROWS):
        self.conn = conn or duckdb.connect()
        self.batch_rows = batch_rows

    def source_sql(self, paths) -> str:
        files = ", ".join(_sql_str(p) for p in paths)
        return f"{self.read_function}([{files}], union_by_name = true)"

    def materialize(self, schema: pa.Schema, paths: Iterable[str]) -> Iterator[pa.RecordBatch]:
        """Lazy: nothing is read until the first batch is requested."""
        return self._read_batches(schema, list(paths))

    def _read_batches(self, schema, paths):
        if not paths:
            return
        cursor = self.conn.cursor()
        source = self.source_sql(paths)
        try:
            # DESCRIBE returns metadata about the columns without scanning data
            described = cursor.execute(f"DESCRIBE SELECT * FROM {source}").fetchall()
            columns = {row[0] for row in described}
            missing = [name for name in schema.names if name not in columns]
            if missing:
                raise DecodeError(f"Missing columns {missing} in {len(paths)} file(s) starting at {paths[0]}")

            projection = ", ".join(_sql_ident(name) for name in schema.names)
            logger.debug("Reading %d file(s) via %s", len(paths), self.read_function)
            reader = cursor.execute(f"SELECT {projection} FROM {source}").to_arrow_reader(self.batch_rows)
            for batch in reader:
                yield from pa.Table.from_batches([batch]).cast(schema).to_batches()
        except (duckdb.Error, pa.ArrowException) as e:
            raise DecodeError(f"Unable to decode {len(paths)} file(s) against source schema: {e}") from e
        finally:
            cursor.close()


class ParquetReader(DataReader):
    read_function = "read_parquet"


class JsonReader(DataReader):
    """Newline-delimited JSON."""

    read_function = "read_json_auto"


class CsvReader(DataReader):
    read_function = "read_csv_auto"


READERS = {
    "parquet": ParquetReader,
    "json": JsonReader,
    "csv": CsvReader,
}


def reader_for_format(file_format: str, **kwargs) -> DataReader:
    try:
        reader_cls = READERS[file_format.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unsupported source format {file_format!r}, expected one of {sorted(READERS)}"
        ) from None
    return reader_cls(**kwargs)
