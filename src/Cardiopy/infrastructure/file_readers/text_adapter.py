# src/Cardiopy/infrastructure/file_readers/text_adapter.py
# -*- coding: utf-8 -*-
"""
Delimited text reader/writer.

Layout of a file (tab separated for .tsv/.txt, comma separated for .csv):

    # sample_interval=0.002
    # layout=0,0;1,0;-1,-1
    time    lead_0  lead_1  lead_2
    0.000   0.12    0.40    1.00
    ...

The comment lines are optional. Without a layout line every channel is a
good lead; without a sample interval line it is estimated from the time
column. The header row is optional as well.
"""
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from Cardiopy.core.data_model import LayoutEntry, LeadSignal
from Cardiopy.core.source_interfaces import READ_OK, RawRow
from Cardiopy.infrastructure.file_readers.base import (
    READ_EMPTY,
    READ_LAYOUT_MISMATCH,
    READ_MALFORMED,
    BaseFileAdapter,
    default_layout,
    estimate_sample_interval,
)
from Cardiopy.shared.constants import (
    TEXT_COMMENT_PREFIX,
    TEXT_LAYOUT_KEY,
    TEXT_SAMPLE_INTERVAL_KEY,
    TEXT_TIME_COLUMN,
)

log = logging.getLogger(__name__)

DELIMITERS = {'csv': ',', 'tsv': '\t', 'txt': '\t'}


def parse_layout(text: str) -> List[LayoutEntry]:
    """Parses 'x,y;x,y;...' into layout entries."""
    entries = []
    for pair in text.split(';'):
        pair = pair.strip()
        if not pair:
            continue
        x, y = pair.split(',')
        entries.append(LayoutEntry(int(x), int(y)))
    return entries


def format_layout(layout: Sequence[LayoutEntry]) -> str:
    return ';'.join(f"{entry.x},{entry.y}" for entry in layout)


def _is_number(token: str) -> bool:
    try:
        float(token)
    except ValueError:
        return False
    return True


class TextAdapter(BaseFileAdapter):
    """Reads and writes one column per lead, preceded by a time column."""

    extensions = ('tsv', 'txt', 'csv')
    can_read = True
    can_write = True

    @staticmethod
    def delimiter_for(filepath) -> str:
        extension = str(filepath).rsplit('.', 1)[-1].lower()
        return DELIMITERS.get(extension, '\t')

    def _scan_preamble(self, filepath: str, delimiter: str) -> Tuple[Dict[str, str], Optional[bool]]:
        """
        Reads the leading comment lines and peeks at the first data line.

        Returns (metadata, has_header); has_header is None for a file without data lines.
        """
        metadata: Dict[str, str] = {}
        with open(filepath, 'r', encoding='utf-8') as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                if stripped.startswith(TEXT_COMMENT_PREFIX):
                    key, sep, value = stripped.lstrip(TEXT_COMMENT_PREFIX).partition('=')
                    if sep:
                        metadata[key.strip()] = value.strip()
                    continue
                first_token = stripped.split(delimiter)[0].strip()
                return metadata, not _is_number(first_token)
        return metadata, None

    def read(self, filepath: str, raw_rows: List[RawRow]) -> int:
        path = self._require_file(filepath)
        delimiter = self.delimiter_for(path)
        metadata, has_header = self._scan_preamble(str(path), delimiter)
        if has_header is None:
            log.error(f"No data rows in {path}.")
            return READ_EMPTY

        try:
            frame = pd.read_csv(path, sep=delimiter, comment=TEXT_COMMENT_PREFIX,
                                header=0 if has_header else None, skipinitialspace=True)
            table = frame.to_numpy(dtype=np.float64)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, ValueError) as e:
            log.error(f"Could not parse {path}: {e}")
            return READ_MALFORMED

        if table.shape[0] == 0:
            log.error(f"No data rows in {path}.")
            return READ_EMPTY
        if table.shape[1] < 2 or np.isnan(table).any():
            log.error(f"{path} needs a time column plus one complete column per lead.")
            return READ_MALFORMED

        times = table[:, 0]
        channels = table[:, 1:]
        channel_count = channels.shape[1]

        try:
            layout = (parse_layout(metadata[TEXT_LAYOUT_KEY]) if TEXT_LAYOUT_KEY in metadata
                      else default_layout(channel_count))
            sample_interval = (float(metadata[TEXT_SAMPLE_INTERVAL_KEY]) if TEXT_SAMPLE_INTERVAL_KEY in metadata
                               else estimate_sample_interval(times))
        except ValueError as e:
            log.error(f"Malformed metadata header in {path}: {e}")
            return READ_MALFORMED

        if len(layout) != channel_count:
            log.error(f"{path}: layout lists {len(layout)} leads but the table has {channel_count} columns.")
            return READ_LAYOUT_MISMATCH

        self._layout = layout
        self._sample_interval = sample_interval
        raw_rows.extend((float(t), row.tolist()) for t, row in zip(times, channels))
        log.debug(f"Read {len(times)} rows x {channel_count} channels from {path}")
        return READ_OK

    def write(self, filepath: str, signals: Sequence[LeadSignal],
              start_index: Optional[int] = None, end_index: Optional[int] = None) -> None:
        times, values = self._export_window(signals, start_index, end_index)
        columns = {TEXT_TIME_COLUMN: times}
        for i, lead_values in enumerate(values):
            columns[f"lead_{i}"] = lead_values
        frame = pd.DataFrame(columns)

        with open(filepath, 'w', encoding='utf-8', newline='') as handle:
            if times.size >= 2:
                handle.write(f"{TEXT_COMMENT_PREFIX} {TEXT_SAMPLE_INTERVAL_KEY}={estimate_sample_interval(times)!r}\n")
            frame.to_csv(handle, sep=self.delimiter_for(filepath), index=False)
        log.info(f"Wrote {len(signals)} lead(s) x {times.size} samples to {filepath}")
