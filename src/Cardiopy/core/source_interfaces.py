# src/Cardiopy/core/source_interfaces.py
"""
Abstract interface for the file adapters the recording model reads from and
writes to. Decouples the core domain from concrete codecs (text, MATLAB, neo,
NWB) which live in the infrastructure layer.
"""
from typing import ClassVar, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from Cardiopy.core.data_model import LayoutEntry, LeadSignal

# One raw acquisition row: (time, one value per channel in layout order)
RawRow = Tuple[float, Sequence[float]]

READ_OK = 0


@runtime_checkable
class FileAdapter(Protocol):
    """
    A reader and/or writer for one family of file extensions.

    A fresh adapter instance is created for every read or write, so adapters
    may keep per-file state (layout, sample interval) between read() and the
    accessor calls that follow it.
    """

    extensions: ClassVar[Tuple[str, ...]]
    can_read: ClassVar[bool]
    can_write: ClassVar[bool]

    def read(self, filepath: str, raw_rows: List[RawRow]) -> int:
        """
        Appends every raw row of the file to `raw_rows`.

        Returns READ_OK (0) on success; any other value tells the caller to
        abort the import. Storage errors are raised, not encoded as status.
        """
        ...

    def get_layout(self) -> List[LayoutEntry]:
        """Layout of all channels of the last read, one entry per channel."""
        ...

    def get_sample_interval(self) -> float:
        """Time step between samples of the last read."""
        ...

    def write(self, filepath: str, signals: Sequence[LeadSignal],
              start_index: Optional[int] = None, end_index: Optional[int] = None) -> None:
        """Writes the leads, optionally restricted to samples [start_index, end_index)."""
        ...
