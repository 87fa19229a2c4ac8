# src/Cardiopy/infrastructure/file_readers/mat_adapter.py
# -*- coding: utf-8 -*-
"""
MATLAB (.mat, v5) reader/writer built on scipy.io.

Variables in a file:
    time            1 x N   sample times
    data            C x N   one row per channel
    layout          C x 2   optional electrode (x, y) per channel
    sample_interval scalar  optional, estimated from `time` when absent
    bad_leads       1 x B   written on export, zero-based lead indices
"""
import logging
from typing import List, Optional, Sequence

import numpy as np
from scipy import io as sio

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

log = logging.getLogger(__name__)


class MatAdapter(BaseFileAdapter):
    extensions = ('mat',)
    can_read = True
    can_write = True

    def read(self, filepath: str, raw_rows: List[RawRow]) -> int:
        path = self._require_file(filepath)
        try:
            contents = sio.loadmat(str(path))
        except (ValueError, NotImplementedError, sio.matlab.MatReadError) as e:
            log.error(f"Could not load MATLAB file {path}: {e}")
            return READ_MALFORMED

        if 'time' not in contents or 'data' not in contents:
            log.error(f"{path} lacks the 'time' and/or 'data' variables.")
            return READ_MALFORMED

        times = np.ravel(contents['time']).astype(np.float64)
        data = np.atleast_2d(np.asarray(contents['data'], dtype=np.float64))
        if times.size == 0:
            log.error(f"{path} holds no samples.")
            return READ_EMPTY
        if data.shape[1] != times.size:
            log.error(f"{path}: 'data' is {data.shape}, expected (channels, {times.size}).")
            return READ_MALFORMED

        channel_count = data.shape[0]
        if 'layout' in contents:
            layout_table = np.atleast_2d(contents['layout']).astype(int)
            layout = [LayoutEntry(int(x), int(y)) for x, y in layout_table]
        else:
            layout = default_layout(channel_count)
        if len(layout) != channel_count:
            log.error(f"{path}: layout lists {len(layout)} leads but 'data' has {channel_count} rows.")
            return READ_LAYOUT_MISMATCH

        if 'sample_interval' in contents:
            self._sample_interval = float(np.ravel(contents['sample_interval'])[0])
        else:
            self._sample_interval = estimate_sample_interval(times)
        self._layout = layout
        raw_rows.extend((float(t), data[:, i].tolist()) for i, t in enumerate(times))
        return READ_OK

    def write(self, filepath: str, signals: Sequence[LeadSignal],
              start_index: Optional[int] = None, end_index: Optional[int] = None) -> None:
        times, values = self._export_window(signals, start_index, end_index)
        contents = {
            'time': times,
            'data': values,
            'sample_interval': estimate_sample_interval(times),
            'bad_leads': np.array([i for i, lead in enumerate(signals) if lead.is_bad()], dtype=np.int32),
        }
        sio.savemat(filepath, contents, do_compression=True)
        log.info(f"Wrote {len(signals)} lead(s) x {times.size} samples to {filepath}")
