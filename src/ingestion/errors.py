# src/ingestion/errors.py


class IngestionError(Exception):
    """Base class for every failure raised by the ingestion source."""


class ConfigurationError(IngestionError):
    """A required property is missing or a configured value is not usable."""


class InvalidCheckpointError(IngestionError, ValueError):
    """A checkpoint string could not be parsed back into a watermark."""


class StorageAccessError(IngestionError, OSError):
    """Listing or reading the storage layer failed."""


class SourceReadError(IngestionError, OSError):
    """
    Raised by DFSSource.fetch_new_data when the storage layer fails.
    Carries the checkpoint the fetch was started from so the caller can
    report (and later retry) from the same position.
    """

    def __init__(self, message, checkpoint=None):
        super().__init__(message)
        self.checkpoint = checkpoint


class DecodeError(IngestionError):
    """File content could not be decoded into records of the source schema."""
