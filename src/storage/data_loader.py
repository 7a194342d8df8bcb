# src/storage/data_loader.py
import logging
import os
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

logger = logging.getLogger(__name__)


class DataLoader:
    """
    Writes one fetched batch to the output directory as a single
    snappy-compressed Parquet file named after the batch checkpoint.
    """

    def __init__(self, output_dir=None):
        self.output_dir = Path(output_dir or os.getenv("PROCESSED_DATA_PATH", "data/processed"))
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def write_batch(self, batches, schema: pa.Schema, checkpoint: str):
        """Returns (path, row_count). Batches are streamed, never fully held in memory."""
        out_path = self.output_dir / f"batch_{checkpoint}.parquet"
        tmp_path = out_path.with_suffix(".parquet.inprogress")
        rows = 0
        try:
            with pq.ParquetWriter(str(tmp_path), schema, compression="snappy") as writer:
                for batch in batches:
                    writer.write_batch(batch)
                    rows += batch.num_rows
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        tmp_path.replace(out_path)
        logger.info("Wrote %d rows to %s", rows, out_path)
        return out_path, rows
