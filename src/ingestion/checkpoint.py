# src/ingestion/checkpoint.py
from dataclasses import dataclass
from typing import ClassVar, Union

from ingestion.errors import InvalidCheckpointError

# Smallest signed 64-bit value; serialized as the "nothing consumed yet" marker.
MIN_WATERMARK = -(2 ** 63)


@dataclass(frozen=True, order=True)
class Checkpoint:
    """
    Watermark over file modification times (epoch millis).

    A checkpoint stores only the largest modification time consumed so far,
    never the set of consumed paths. Files that land later but carry an older
    modification time than the watermark will not be picked up.
    """

    watermark: int = MIN_WATERMARK

    NONE: ClassVar["Checkpoint"]

    @classmethod
    def parse(cls, value: Union[str, "Checkpoint", None]) -> "Checkpoint":
        if value is None:
            return cls.NONE
        if isinstance(value, Checkpoint):
            return value
        try:
            return cls(int(str(value).strip()))
        except ValueError as e:
            raise InvalidCheckpointError(f"Not a valid checkpoint: {value!r}") from e

    @property
    def is_none(self) -> bool:
        return self.watermark == MIN_WATERMARK

    def admits(self, mod_time_millis: int) -> bool:
        """True when a file with this modification time is newer than the watermark."""
        return mod_time_millis > self.watermark

    def __str__(self):
        return str(self.watermark)


Checkpoint.NONE = Checkpoint(MIN_WATERMARK)
