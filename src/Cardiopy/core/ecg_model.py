# src/Cardiopy/core/ecg_model.py
# -*- coding: utf-8 -*-
"""
Recording model holding every lead of one multi-lead biosignal recording.

The model imports raw rows through a file adapter, splits them into good and
ignored leads according to the electrode layout, removes the DC offset of the
good leads, and exposes the per-lead query/mutation surface used by viewers,
filters and exporters.
"""

import logging
import operator
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from Cardiopy.core.data_model import Annotation, AnnotationSet, LayoutEntry, LeadSignal
from Cardiopy.core.filter_dispatch import DispatchPolicy, FilterDispatcher
from Cardiopy.core.source_interfaces import READ_OK, RawRow
from Cardiopy.shared.constants import (
    BAD_LEAD_NUMBER_OFFSET,
    SGOLAY_DEFAULT_DEGREE,
    SGOLAY_DEFAULT_LEFT,
    SGOLAY_DEFAULT_RIGHT,
)
from Cardiopy.shared.error_handling import ExportError, FileReadError, InvalidLeadIndexError

log = logging.getLogger('Cardiopy.core.ecg_model')


def classify_layout(layout: Sequence[LayoutEntry]) -> Tuple[List[int], List[int], int]:
    """
    Splits channel indices into good and ignored ones.

    Returns:
        (good_columns, ignored_columns, leading_ignored_count). The columns keep
        source order, so good_columns[k] is the channel that fills good slot k.
        leading_ignored_count counts only the ignored run before the first good lead.
    """
    good_columns: List[int] = []
    ignored_columns: List[int] = []
    leading_ignored = 0
    for j, entry in enumerate(layout):
        if entry.is_ignored:
            ignored_columns.append(j)
            if not good_columns:
                leading_ignored += 1
        else:
            good_columns.append(j)
    return good_columns, ignored_columns, leading_ignored


class ECGModel:
    """
    Owns the good and ignored leads of a recording, its layout and annotations.

    Not safe for concurrent mutation; clone() yields a fully independent copy
    that can be handed to another thread.
    """

    def __init__(self, registry=None, dispatch_policy: DispatchPolicy = DispatchPolicy.IGNORE_UNKNOWN):
        """
        Initializes an empty model.

        Args:
            registry: AdapterRegistry used to resolve readers and writers. When
                omitted the default registry (built-in adapters plus plugins) is built.
            dispatch_policy: How apply_filter treats unknown filter kinds.
        """
        if registry is None:
            from Cardiopy.infrastructure.adapter_registry import build_default_registry
            registry = build_default_registry()
        self.registry = registry
        self._dispatcher = FilterDispatcher(dispatch_policy)

        self.signals: List[LeadSignal] = []
        self.ignored_signals: List[LeadSignal] = []
        self.layout: List[LayoutEntry] = []
        self.lead_count: int = 0
        self.sample_interval: float = 0.0
        self.leading_ignored_count: int = 0
        self.annotations = AnnotationSet()

    @property
    def dispatch_policy(self) -> DispatchPolicy:
        return self._dispatcher.policy

    # --- Lifecycle ---
    def clone(self) -> "ECGModel":
        """Deep copy of leads, layout, annotations and recording metadata."""
        new_model = ECGModel(registry=self.registry, dispatch_policy=self.dispatch_policy)
        new_model.lead_count = self.lead_count
        new_model.sample_interval = self.sample_interval
        new_model.leading_ignored_count = self.leading_ignored_count
        new_model.signals = [lead.clone() for lead in self.signals]
        new_model.ignored_signals = [lead.clone() for lead in self.ignored_signals]
        # LayoutEntry is immutable, copying the list is enough
        new_model.layout = list(self.layout) if self.layout else []
        new_model.annotations = self.annotations.copy()
        return new_model

    def clear(self) -> None:
        """
        Drops all leads, the layout and the leading-ignored offset. The sample
        interval, lead count and annotations are kept.
        """
        self.signals = []
        self.ignored_signals = []
        self.layout = []
        self.leading_ignored_count = 0

    # --- Import ---
    def read_data(self, filename) -> None:
        """
        Reads a recording through the adapter registered for its extension.

        Raises:
            UnsupportedFormatError: no adapter handles the extension.
            FileReadError: the adapter reported a nonzero status or a row is
                shorter than the layout. The model is left cleared.
            OSError: storage errors from the adapter propagate unchanged.
        """
        self.clear()
        filepath = Path(filename)
        adapter = self.registry.resolve_reader(filepath)
        log.info(f"Reading {filepath} with {type(adapter).__name__}")

        raw_rows: List[RawRow] = []
        status = adapter.read(str(filepath), raw_rows)
        if status != READ_OK:
            log.error(f"{type(adapter).__name__} returned status {status} for {filepath}; import aborted.")
            raise FileReadError(f"Could not read '{filepath}' (adapter status {status}).", status=status)

        source_layout = list(adapter.get_layout())
        lead_count = len(source_layout)
        good_columns, ignored_columns, leading_ignored = classify_layout(source_layout)

        times, matrix = self._rows_to_matrix(raw_rows, lead_count, filepath)

        signals = [LeadSignal(times, matrix[:, j]) for j in good_columns]
        ignored_signals = [LeadSignal(times, matrix[:, j]) for j in ignored_columns]

        for lead in signals:
            lead.subtract_baseline_median()

        self.signals = signals
        self.ignored_signals = ignored_signals
        self.layout = [source_layout[j] for j in good_columns]
        self.lead_count = lead_count
        self.sample_interval = float(adapter.get_sample_interval())
        self.leading_ignored_count = leading_ignored

        log.info(
            f"Imported {len(raw_rows)} rows: {len(signals)} good lead(s), "
            f"{len(ignored_signals)} ignored ({leading_ignored} leading), "
            f"sample interval {self.sample_interval}"
        )

    @staticmethod
    def _rows_to_matrix(raw_rows: Sequence[RawRow], lead_count: int, filepath: Path):
        times = np.empty(len(raw_rows), dtype=np.float64)
        matrix = np.empty((len(raw_rows), lead_count), dtype=np.float64)
        for i, (time, channel_values) in enumerate(raw_rows):
            if len(channel_values) < lead_count:
                raise FileReadError(
                    f"Row {i} of '{filepath}' has {len(channel_values)} value(s), layout expects {lead_count}."
                )
            times[i] = time
            matrix[i] = channel_values[:lead_count]
        return times, matrix

    def read_subset_data(self, filename, start: float, end: float) -> None:
        """Reads the file, then keeps only samples with start <= time < end in every good lead."""
        self.read_data(filename)
        self.signals = [lead.subset(start, end) for lead in self.signals]

    # --- Lead access ---
    def _lead(self, index) -> LeadSignal:
        if isinstance(index, bool):
            raise InvalidLeadIndexError(f"Lead index must be an integer, got {index!r}.")
        try:
            position = operator.index(index)
        except TypeError:
            raise InvalidLeadIndexError(f"Lead index must be an integer, got {index!r}.") from None
        if not 0 <= position < len(self.signals):
            raise InvalidLeadIndexError(f"Lead index {index} out of range (model has {len(self.signals)} leads).")
        return self.signals[position]

    def get_dataset(self, index: int) -> LeadSignal:
        return self._lead(index)

    def size(self) -> int:
        """Number of good leads."""
        return len(self.signals)

    def set_bad(self, index: int, is_bad: bool) -> None:
        self._lead(index).set_bad(is_bad)

    def is_bad(self, index: int) -> bool:
        return self._lead(index).is_bad()

    def get_sample_interval(self) -> float:
        return self.sample_interval

    def get_layout(self) -> List[LayoutEntry]:
        """Layout of the good leads, index-aligned with get_dataset()."""
        return list(self.layout)

    def get_offset(self) -> int:
        """Number of ignored leads before the first good lead."""
        return self.leading_ignored_count

    # --- Annotations ---
    def get_annotations(self) -> List[Annotation]:
        return self.annotations.sorted()

    def add_annotation(self, kind: int, time: float) -> None:
        self.annotations.add(kind, time)

    def set_annotations(self, annotations: Iterable[Annotation]) -> None:
        self.annotations = AnnotationSet(annotations)

    def clear_annotations(self) -> None:
        self.annotations.clear()

    def is_annotated(self, time: float) -> bool:
        """True when an annotation of any kind sits exactly at `time`."""
        return self.annotations.contains_time(time)

    # --- Filters ---
    def apply_filter(self, index: int, filter_kind, params: Optional[Sequence] = None) -> None:
        """
        Applies filter `filter_kind` with `params` to good lead `index` in place.

        Unknown kinds are a no-op under DispatchPolicy.IGNORE_UNKNOWN (checked
        before the lead index is looked at); the Butterworth filter receives the
        model's sample interval in addition to its own parameters.
        """
        spec = self._dispatcher.lookup(filter_kind)
        if spec is None:
            return
        self._dispatcher.run(spec, self._lead(index), params, sample_interval=self.sample_interval)

    def apply_sgolay_filter(self, index: int, left: int = SGOLAY_DEFAULT_LEFT,
                            right: int = SGOLAY_DEFAULT_RIGHT, degree: int = SGOLAY_DEFAULT_DEGREE) -> None:
        """Savitzky-Golay shortcut taking the window sizes and degree positionally."""
        self.apply_filter(index, 0, [left, right, degree])

    # --- Array views ---
    @staticmethod
    def _stack(leads: Sequence[LeadSignal]) -> np.ndarray:
        if not leads:
            return np.empty((0, 2, 0), dtype=np.float64)
        return np.stack([np.vstack((lead.times, lead.values)) for lead in leads])

    def to_array(self) -> np.ndarray:
        """Array shaped (leads, 2, samples); [:, 0] holds times and [:, 1] values."""
        return self._stack(self.signals)

    def subset_to_array(self, start: float, end: float) -> np.ndarray:
        """Like to_array() over [start, end); every lead is subset afresh."""
        return self._stack([lead.subset(start, end) for lead in self.signals])

    # --- Export ---
    def write_data(self, filename) -> None:
        """Writes every good lead with the writer registered for the extension."""
        filepath = Path(filename)
        writer = self.registry.resolve_writer(filepath)
        if not self.signals:
            raise ExportError("The model holds no leads to export.")
        log.info(f"Writing {len(self.signals)} lead(s) to {filepath} with {type(writer).__name__}")
        writer.write(str(filepath), self.signals)

    def write_data_subset(self, filename, start_index: int, end_index: int) -> None:
        """Writes samples [start_index, end_index) of every good lead."""
        filepath = Path(filename)
        writer = self.registry.resolve_writer(filepath)
        if not self.signals:
            raise ExportError("The model holds no leads to export.")
        n_samples = self.signals[0].size()
        if not 0 <= start_index <= end_index <= n_samples:
            raise ExportError(f"Invalid sample range [{start_index}, {end_index}) for {n_samples} samples.")
        log.info(f"Writing samples [{start_index}, {end_index}) of {len(self.signals)} lead(s) to {filepath}")
        writer.write(str(filepath), self.signals, start_index, end_index)

    def write_data_window(self, filename, start: float, end: float) -> None:
        """Writes the samples whose time lies in [start, end), located on lead 0."""
        if not self.signals:
            raise ExportError("The model holds no leads to export.")
        reference = self.signals[0]
        start_index = reference.index_before(start) + 1
        end_index = max(start_index, reference.index_before(end) + 1)
        self.write_data_subset(filename, start_index, end_index)

    def write_bad_leads(self, filename) -> None:
        """Writes the external number (index + 4) of each bad lead, one per line, ascending."""
        with open(filename, 'w', encoding='utf-8') as out:
            for i, lead in enumerate(self.signals):
                if lead.is_bad():
                    out.write(f"{i + BAD_LEAD_NUMBER_OFFSET}\n")

    def write_annotations(self, filename) -> None:
        """Writes one '<kind> <time>' line per annotation, ordered by time then kind."""
        with open(filename, 'w', encoding='utf-8') as out:
            for annotation in self.get_annotations():
                out.write(f"{annotation}\n")

    def __repr__(self):
        return (f"ECGModel(leads={len(self.signals)}, ignored={len(self.ignored_signals)}, "
                f"offset={self.leading_ignored_count}, sample_interval={self.sample_interval})")
