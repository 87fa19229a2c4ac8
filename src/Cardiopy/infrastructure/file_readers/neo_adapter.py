# src/Cardiopy/infrastructure/file_readers/neo_adapter.py
# -*- coding: utf-8 -*-
"""
Read-only adapter for recordings in formats handled by the neo library.

IO class selection uses NEO_READER_EXTENSIONS, a fixed mapping from neo IO
class names to the extensions routed through them. Every analog signal of
every segment becomes channel columns; segments are appended in order, so a
multi-segment file reads as one continuous recording. All channels are
reported as good leads laid out on a single row.
"""
import logging
from pathlib import Path
from typing import List, Type

import neo.io as nIO
import numpy as np
import quantities as pq

from Cardiopy.core.source_interfaces import READ_OK, RawRow
from Cardiopy.infrastructure.file_readers.base import (
    READ_EMPTY,
    READ_MALFORMED,
    BaseFileAdapter,
    default_layout,
)
from Cardiopy.shared.constants import NEO_READER_EXTENSIONS
from Cardiopy.shared.error_handling import UnsupportedFormatError

log = logging.getLogger('Cardiopy.infrastructure.file_readers.neo_adapter')


def neo_extensions() -> tuple:
    seen = []
    for extensions in NEO_READER_EXTENSIONS.values():
        for ext in extensions:
            if ext not in seen:
                seen.append(ext)
    return tuple(seen)


class NeoAdapter(BaseFileAdapter):
    """Reads any file whose extension maps to a neo IO class."""

    extensions = neo_extensions()
    can_read = True
    can_write = False

    @staticmethod
    def _get_neo_io_class(filepath: Path) -> Type:
        """Determines the neo IO class for the file extension."""
        extension = filepath.suffix.lower().lstrip('.')
        io_names = [name for name, exts in NEO_READER_EXTENSIONS.items() if extension in exts]
        if not io_names:
            raise UnsupportedFormatError(f"No neo IO configured for extension '.{extension}'.")
        if len(io_names) > 1:
            log.warning(f"Multiple neo IOs support '.{extension}': {io_names}. Using '{io_names[0]}'.")
        return getattr(nIO, io_names[0])

    def read(self, filepath: str, raw_rows: List[RawRow]) -> int:
        path = self._require_file(filepath)
        io_class = self._get_neo_io_class(path)
        log.info(f"Reading {path} with neo {io_class.__name__}")

        try:
            reader = io_class(filename=str(path))
            block = reader.read_block(lazy=False)
        except OSError:
            raise
        except Exception as e:
            # neo readers raise a wide range of parse errors; report them as a status
            log.error(f"neo {io_class.__name__} failed to parse {path}: {e}", exc_info=True)
            return READ_MALFORMED

        times_parts = []
        value_parts = []
        channel_count = None
        sample_interval = 0.0
        for seg_index, segment in enumerate(block.segments):
            analogsignals = list(segment.analogsignals)
            if not analogsignals:
                continue
            n_samples = min(sig.shape[0] for sig in analogsignals)
            columns = np.hstack([np.asarray(sig.magnitude[:n_samples], dtype=np.float64).reshape(n_samples, -1)
                                 for sig in analogsignals])
            if channel_count is None:
                channel_count = columns.shape[1]
                sample_interval = float(analogsignals[0].sampling_period.rescale(pq.s).magnitude)
            elif columns.shape[1] != channel_count:
                log.error(f"Segment {seg_index} of {path} has {columns.shape[1]} channels, expected {channel_count}.")
                return READ_MALFORMED
            times_parts.append(np.asarray(analogsignals[0].times.rescale(pq.s).magnitude[:n_samples], dtype=np.float64))
            value_parts.append(columns)

        if channel_count is None:
            log.error(f"No analog signals found in {path}.")
            return READ_EMPTY

        times = np.concatenate(times_parts)
        values = np.vstack(value_parts)
        self._layout = default_layout(channel_count)
        self._sample_interval = sample_interval
        raw_rows.extend((float(t), row.tolist()) for t, row in zip(times, values))
        log.debug(f"neo read {times.size} rows x {channel_count} channels from {len(value_parts)} segment(s)")
        return READ_OK
