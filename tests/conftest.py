import sys
from pathlib import Path

import numpy as np
import pytest

# Make sure src directory is included for imports if running pytest from root
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from Cardiopy.core.data_model import LayoutEntry
from Cardiopy.core.ecg_model import ECGModel
from Cardiopy.infrastructure.adapter_registry import AdapterRegistry

GOOD = LayoutEntry(0, 0)
IGNORED = LayoutEntry(-1, -1)


class InMemoryAdapter:
    """Adapter double: serves preset rows on read and records every write."""

    extensions = ('fake',)
    can_read = True
    can_write = True

    layout = []
    rows = []
    status = 0
    sample_interval = 0.002
    writes = []

    def read(self, filepath, raw_rows):
        if self.status != 0:
            return self.status
        raw_rows.extend(self.rows)
        return 0

    def get_layout(self):
        return list(self.layout)

    def get_sample_interval(self):
        return self.sample_interval

    def write(self, filepath, signals, start_index=None, end_index=None):
        window = slice(start_index, end_index)
        self.writes.append({
            'filepath': filepath,
            'times': [np.array(lead.times[window]) for lead in signals],
            'values': [np.array(lead.values[window]) for lead in signals],
            'start_index': start_index,
            'end_index': end_index,
        })


@pytest.fixture
def make_adapter():
    """Builds a fresh InMemoryAdapter subclass so class-level state never leaks between tests."""
    def _make(layout, rows, status=0, sample_interval=0.002):
        return type('ConfiguredAdapter', (InMemoryAdapter,), {
            'layout': list(layout),
            'rows': list(rows),
            'status': status,
            'sample_interval': sample_interval,
            'writes': [],
        })
    return _make


@pytest.fixture
def make_model(make_adapter):
    """Returns (model, adapter_class) with the model already read from 'recording.fake'."""
    def _make(layout, rows, status=0, sample_interval=0.002, read=True):
        adapter_class = make_adapter(layout, rows, status, sample_interval)
        model = ECGModel(registry=AdapterRegistry([adapter_class]))
        if read:
            model.read_data('recording.fake')
        return model, adapter_class
    return _make


@pytest.fixture
def five_lead_rows():
    """Four rows for the [ignored, ignored, good, ignored, good] layout."""
    return [
        (0.0, [100.0, 200.0, 1.0, 300.0, 10.0]),
        (1.0, [101.0, 201.0, 2.0, 301.0, 20.0]),
        (2.0, [102.0, 202.0, 3.0, 302.0, 30.0]),
        (3.0, [103.0, 203.0, 4.0, 303.0, 40.0]),
    ]


@pytest.fixture
def five_lead_layout():
    return [IGNORED, IGNORED, LayoutEntry(2, 0), LayoutEntry(-1, 3), LayoutEntry(4, 0)]
