# src/Cardiopy/infrastructure/file_readers/base.py
# -*- coding: utf-8 -*-
"""
Shared plumbing for the concrete file adapters.

Concrete adapters declare the extensions they handle and which directions
(read/write) they support, and override read() and/or write().
"""
import logging
from pathlib import Path
from typing import ClassVar, List, Optional, Sequence, Tuple

import numpy as np

from Cardiopy.core.data_model import LayoutEntry, LeadSignal
from Cardiopy.core.source_interfaces import RawRow
from Cardiopy.shared.error_handling import CardiopyFileNotFoundError, ExportError, UnsupportedFormatError

log = logging.getLogger(__name__)

# Status codes returned by read()
READ_EMPTY = 1
READ_MALFORMED = 2
READ_LAYOUT_MISMATCH = 3


def default_layout(channel_count: int) -> List[LayoutEntry]:
    """One good lead per channel, laid out on a single row."""
    return [LayoutEntry(i, 0) for i in range(channel_count)]


def estimate_sample_interval(times: np.ndarray) -> float:
    """Median spacing of the time stamps, 0.0 when fewer than two samples exist."""
    if times.size < 2:
        return 0.0
    return float(np.median(np.diff(times)))


class BaseFileAdapter:
    """Base class holding the per-read layout and sample interval."""

    extensions: ClassVar[Tuple[str, ...]] = ()
    can_read: ClassVar[bool] = False
    can_write: ClassVar[bool] = False

    def __init__(self):
        self._layout: List[LayoutEntry] = []
        self._sample_interval: float = 0.0

    def read(self, filepath: str, raw_rows: List[RawRow]) -> int:
        raise UnsupportedFormatError(f"{type(self).__name__} cannot read files.")

    def write(self, filepath: str, signals: Sequence[LeadSignal],
              start_index: Optional[int] = None, end_index: Optional[int] = None) -> None:
        raise UnsupportedFormatError(f"{type(self).__name__} cannot write files.")

    def get_layout(self) -> List[LayoutEntry]:
        return list(self._layout)

    def get_sample_interval(self) -> float:
        return self._sample_interval

    @staticmethod
    def _require_file(filepath) -> Path:
        path = Path(filepath)
        if not path.is_file():
            raise CardiopyFileNotFoundError(f"File not found: {path}")
        return path

    @staticmethod
    def _export_window(signals: Sequence[LeadSignal], start_index: Optional[int] = None,
                       end_index: Optional[int] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Returns (times, values) for samples [start_index, end_index) of all leads.

        values is shaped (leads, samples); times come from the first lead.
        """
        if not signals:
            raise ExportError("No leads to export.")
        sizes = {lead.size() for lead in signals}
        if len(sizes) != 1:
            raise ExportError(f"Leads have differing sample counts {sorted(sizes)}; cannot export as a table.")
        window = slice(start_index, end_index)
        times = np.array(signals[0].times[window])
        values = np.vstack([lead.values[window] for lead in signals])
        return times, values
