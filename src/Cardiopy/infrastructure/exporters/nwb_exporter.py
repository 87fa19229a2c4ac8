# src/Cardiopy/infrastructure/exporters/nwb_exporter.py
# -*- coding: utf-8 -*-
"""
Exporter for saving the good leads of a recording to the NWB:N 2.0 format.

Each lead becomes one TimeSeries in the acquisition group, named lead_000,
lead_001 and so on. Bad leads are flagged in the series description.
"""
__author__ = "Cardiopy Developers"
__copyright__ = "Copyright 2024-, Cardiopy Developers"
__maintainer__ = "Cardiopy Developers"

import logging
import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from pynwb import NWBHDF5IO, NWBFile, TimeSeries
from tzlocal import get_localzone

from Cardiopy.core.data_model import LeadSignal
from Cardiopy.infrastructure.file_readers.base import BaseFileAdapter
from Cardiopy.shared.error_handling import ExportError

log = logging.getLogger('Cardiopy.infrastructure.exporters.nwb_exporter')

REQUIRED_METADATA = ('session_description', 'identifier', 'session_start_time')


def default_session_metadata() -> Dict[str, Any]:
    return {
        'session_description': 'Cardiopy recording export',
        'identifier': str(uuid.uuid4()),
        'session_start_time': datetime.now(get_localzone()),
    }


class NWBExporter(BaseFileAdapter):
    """Writes leads to .nwb files; reading NWB is not supported."""

    extensions = ('nwb',)
    can_read = False
    can_write = True

    def __init__(self, session_metadata: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.session_metadata = default_session_metadata()
        if session_metadata:
            self.session_metadata.update(session_metadata)

    def _build_nwbfile(self) -> NWBFile:
        missing = [key for key in REQUIRED_METADATA if not self.session_metadata.get(key)]
        if missing:
            raise ExportError(f"Missing required NWB session metadata: {missing}")
        start_time = self.session_metadata['session_start_time']
        if start_time.tzinfo is None:
            start_time = start_time.replace(tzinfo=get_localzone())
        optional = {key: self.session_metadata[key]
                    for key in ('experimenter', 'lab', 'institution', 'session_id')
                    if self.session_metadata.get(key)}
        return NWBFile(
            session_description=self.session_metadata['session_description'],
            identifier=self.session_metadata['identifier'],
            session_start_time=start_time,
            **optional,
        )

    def write(self, filepath: str, signals: Sequence[LeadSignal],
              start_index: Optional[int] = None, end_index: Optional[int] = None) -> None:
        times, values = self._export_window(signals, start_index, end_index)
        nwbfile = self._build_nwbfile()
        for i, (lead, lead_values) in enumerate(zip(signals, values)):
            description = f"Lead {i}" + (" (marked bad)" if lead.is_bad() else "")
            nwbfile.add_acquisition(TimeSeries(
                name=f"lead_{i:03d}",
                data=lead_values,
                unit='unknown',
                timestamps=times,
                description=description,
            ))

        try:
            with NWBHDF5IO(str(filepath), 'w') as io:
                io.write(nwbfile)
        except Exception as e:
            log.error(f"Failed to write NWB file {filepath}: {e}", exc_info=True)
            raise ExportError(f"Failed to write NWB file: {e}") from e
        log.info(f"Wrote {len(signals)} lead(s) x {times.size} samples to {filepath}")
