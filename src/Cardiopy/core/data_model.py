# src/Cardiopy/core/data_model.py
# -*- coding: utf-8 -*-
"""
Core Domain Data Models for Cardiopy.

Defines the central classes of a multi-lead biosignal recording: the per-lead
sample series (LeadSignal), the electrode layout entries that classify leads
as good or ignored, and the recording-wide annotation set.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Optional

import numpy as np

from Cardiopy.core import signal_processor

log = logging.getLogger('Cardiopy.core.data_model')

# Initial buffer capacity for appended samples
_INITIAL_CAPACITY = 256


class Sample(NamedTuple):
    """One (time, value) pair of a lead."""
    time: float
    value: float


@dataclass(frozen=True)
class LayoutEntry:
    """
    Electrode coordinate of one lead as reported by the source file.

    A negative x or y marks the lead as ignored (calibration, reference lines
    and other channels that are not real acquisition leads).
    """
    x: int
    y: int

    @property
    def is_ignored(self) -> bool:
        return self.x < 0 or self.y < 0


@dataclass(frozen=True)
class Annotation:
    """A marked time point of a given kind."""
    kind: int
    time: float

    def __str__(self) -> str:
        return f"{self.kind} {self.time!r}"


class AnnotationSet:
    """
    Set of annotations scoped to a whole recording.

    Uniqueness is defined over (kind, time). Time-only membership is answered by
    contains_time(), which matches an annotation of any kind.
    """

    def __init__(self, annotations: Optional[Iterable[Annotation]] = None):
        self._items = set(annotations) if annotations is not None else set()

    def add(self, kind: int, time: float) -> None:
        self._items.add(Annotation(int(kind), float(time)))

    def clear(self) -> None:
        self._items.clear()

    def contains_time(self, time: float) -> bool:
        time = float(time)
        return any(a.time == time for a in self._items)

    def sorted(self) -> List[Annotation]:
        """Returns the annotations as a new list ordered by (time, kind)."""
        return sorted(self._items, key=lambda a: (a.time, a.kind))

    def copy(self) -> "AnnotationSet":
        # Annotation is frozen, so a shallow set copy is a deep copy
        return AnnotationSet(self._items)

    def __contains__(self, item) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[Annotation]:
        return iter(self.sorted())

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AnnotationSet):
            return NotImplemented
        return self._items == other._items

    def __repr__(self):
        return f"AnnotationSet({self.sorted()!r})"


class LeadSignal:
    """
    Owned, mutable, time-ordered sample sequence of one lead.

    Samples live in two growable float64 buffers. Times are expected to be
    non-decreasing but this is not enforced. All filter methods mutate the
    values in place; subset() and clone() return independent copies.
    """

    def __init__(self, times=None, values=None, bad: bool = False):
        """
        Initializes a LeadSignal.

        Args:
            times: Optional initial sample times.
            values: Optional initial sample values, same length as times.
            bad: Initial bad-lead flag.
        """
        times_arr = np.asarray(times if times is not None else [], dtype=np.float64).ravel()
        values_arr = np.asarray(values if values is not None else [], dtype=np.float64).ravel()
        if times_arr.shape != values_arr.shape:
            raise ValueError(
                f"times and values must have the same length ({times_arr.size} != {values_arr.size})"
            )
        self._size = times_arr.size
        capacity = max(_INITIAL_CAPACITY, self._size)
        self._times = np.empty(capacity, dtype=np.float64)
        self._values = np.empty(capacity, dtype=np.float64)
        self._times[:self._size] = times_arr
        self._values[:self._size] = values_arr
        self._bad = bool(bad)

    # --- Construction ---
    def append(self, time: float, value: float) -> None:
        """Appends one sample, growing the buffers geometrically."""
        if self._size == self._times.shape[0]:
            new_capacity = self._times.shape[0] * 2
            self._times = np.resize(self._times, new_capacity)
            self._values = np.resize(self._values, new_capacity)
        self._times[self._size] = time
        self._values[self._size] = value
        self._size += 1

    # --- Queries ---
    def size(self) -> int:
        return self._size

    def __len__(self) -> int:
        return self._size

    @property
    def times(self) -> np.ndarray:
        """Read-only view of the sample times."""
        view = self._times[:self._size]
        view.flags.writeable = False
        return view

    @property
    def values(self) -> np.ndarray:
        """
        Writable view of the sample values; writes go straight into the lead.

        The view is only valid until the next append(), which may move the
        buffers. Take a fresh view after appending.
        """
        return self._values[:self._size]

    def sample_at(self, index: int) -> Sample:
        return Sample(float(self._times[self._check_index(index)]), float(self._values[index]))

    def set_value_at(self, index: int, value: float) -> None:
        self._values[self._check_index(index)] = value

    def _check_index(self, index: int) -> int:
        if not 0 <= index < self._size:
            raise IndexError(f"Sample index {index} out of range for lead of size {self._size}")
        return index

    def index_before(self, t: float) -> int:
        """
        Returns the index of the last sample whose time is strictly less than t,
        or -1 when no sample precedes t.
        """
        preceding = np.flatnonzero(self.times < t)
        return int(preceding[-1]) if preceding.size else -1

    def is_bad(self) -> bool:
        return self._bad

    def set_bad(self, bad: bool) -> None:
        self._bad = bool(bad)

    # --- Copies ---
    def subset(self, start: float, end: float) -> "LeadSignal":
        """
        Returns a new LeadSignal holding the samples with start <= time < end.

        The window is found by a fresh scan over every sample on each call.
        """
        times = self.times
        mask = (times >= start) & (times < end)
        return LeadSignal(times[mask], self.values[mask], bad=self._bad)

    def clone(self) -> "LeadSignal":
        return LeadSignal(self.times.copy(), self.values.copy(), bad=self._bad)

    # --- In-place filters ---
    def _replace_values(self, new_values: np.ndarray) -> None:
        self._values[:self._size] = new_values

    def sgolay_filter(self, left: int, right: int, degree: int) -> None:
        """Savitzky-Golay smoothing over `left` preceding and `right` following samples."""
        if self._size == 0:
            return
        self._replace_values(signal_processor.savitzky_golay(self.values, left, right, degree))

    def highpass_filter(self, threshold: float) -> None:
        if self._size == 0:
            return
        self._replace_values(signal_processor.highpass_filter(self.values, threshold))

    def lowpass_filter(self, threshold: float) -> None:
        if self._size == 0:
            return
        self._replace_values(signal_processor.lowpass_filter(self.values, threshold))

    def highpass_fft_filter(self, threshold: float) -> None:
        if self._size == 0:
            return
        self._replace_values(signal_processor.highpass_fft_filter(self.values, threshold))

    def detrend(self, degree: int) -> None:
        if self._size == 0:
            return
        self._replace_values(signal_processor.detrend(self.times, self.values, degree))

    def wavelet_filter(self, threshold: float) -> None:
        if self._size == 0:
            return
        self._replace_values(signal_processor.wavelet_filter(self.values, threshold))

    def constant_offset_filter(self, offset: float) -> None:
        self._replace_values(signal_processor.constant_offset(self.values, offset))

    def butterworth_filter(self, order: int, sample_interval: float, cutoff: float, filter_type: int) -> None:
        if self._size == 0:
            return
        self._replace_values(
            signal_processor.butterworth_filter(self.values, order, sample_interval, cutoff, filter_type)
        )

    def subtract_baseline_median(self) -> float:
        """Subtracts the upper median from every value. Returns the median used."""
        if self._size == 0:
            return 0.0
        median = signal_processor.upper_median(self.values)
        self._replace_values(signal_processor.constant_offset(self.values, median))
        return median

    def __repr__(self):
        return f"LeadSignal(size={self._size}, bad={self._bad})"
