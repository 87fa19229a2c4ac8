# src/Cardiopy/core/filter_dispatch.py
# -*- coding: utf-8 -*-
"""
Filter dispatch table.

Maps the closed set of filter kinds onto LeadSignal's in-place filter methods,
coercing the loosely typed parameter list of each call into the parameter
shape the filter expects. Kinds outside the table are handled by an explicit
DispatchPolicy rather than by falling through a switch.
"""
import logging
import operator
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, Dict, Optional, Sequence, Tuple

from Cardiopy.core.data_model import LeadSignal
from Cardiopy.shared.error_handling import ProcessingError, UnknownFilterKindError

log = logging.getLogger(__name__)


class FilterKind(IntEnum):
    SAVITZKY_GOLAY = 0
    HIGHPASS = 1
    LOWPASS = 2
    FFT_HIGHPASS = 3
    DETREND = 4
    WAVELET = 5
    CONSTANT_OFFSET = 6
    BUTTERWORTH = 7


class DispatchPolicy(Enum):
    """What apply() does with a filter kind that is not in the table."""
    IGNORE_UNKNOWN = "ignore_unknown"  # silent no-op
    STRICT = "strict"                  # raise UnknownFilterKindError


@dataclass(frozen=True)
class FilterSpec:
    """Parameter shape and target of one filter kind."""
    name: str
    param_names: Tuple[str, ...]
    param_types: Tuple[type, ...]
    apply: Callable[..., None]
    needs_sample_interval: bool = False


FILTER_TABLE: Dict[FilterKind, FilterSpec] = {
    FilterKind.SAVITZKY_GOLAY: FilterSpec(
        "Savitzky-Golay", ("left_window", "right_window", "degree"), (int, int, int),
        LeadSignal.sgolay_filter),
    FilterKind.HIGHPASS: FilterSpec(
        "High-pass", ("threshold",), (float,), LeadSignal.highpass_filter),
    FilterKind.LOWPASS: FilterSpec(
        "Low-pass", ("threshold",), (float,), LeadSignal.lowpass_filter),
    FilterKind.FFT_HIGHPASS: FilterSpec(
        "FFT high-pass", ("threshold",), (float,), LeadSignal.highpass_fft_filter),
    FilterKind.DETREND: FilterSpec(
        "Detrend", ("degree",), (int,), LeadSignal.detrend),
    FilterKind.WAVELET: FilterSpec(
        "Wavelet", ("threshold",), (float,), LeadSignal.wavelet_filter),
    FilterKind.CONSTANT_OFFSET: FilterSpec(
        "Constant-offset", ("offset",), (float,), LeadSignal.constant_offset_filter),
    FilterKind.BUTTERWORTH: FilterSpec(
        "Butterworth", ("order", "cutoff", "type"), (int, float, int),
        LeadSignal.butterworth_filter, needs_sample_interval=True),
}


def resolve_kind(filter_kind) -> Optional[FilterKind]:
    """
    Returns the FilterKind for an integer value, or None when it is not in the
    table. Floats, strings and bools are never kinds, even when they convert.
    """
    if isinstance(filter_kind, bool):
        return None
    try:
        return FilterKind(operator.index(filter_kind))
    except (TypeError, ValueError):
        return None


def coerce_params(spec: FilterSpec, params: Optional[Sequence]) -> Tuple:
    """Converts the raw parameter list to the types the filter expects."""
    params = list(params) if params is not None else []
    if len(params) < len(spec.param_names):
        raise ProcessingError(
            f"{spec.name} filter needs {len(spec.param_names)} parameter(s) "
            f"{list(spec.param_names)}, got {len(params)}."
        )
    if len(params) > len(spec.param_names):
        log.debug(f"{spec.name}: ignoring {len(params) - len(spec.param_names)} extra parameter(s).")
    try:
        return tuple(cast(value) for cast, value in zip(spec.param_types, params))
    except (TypeError, ValueError) as e:
        raise ProcessingError(f"Invalid {spec.name} parameters {params}: {e}") from e


class FilterDispatcher:
    """Routes (kind, params) to the matching in-place filter of a LeadSignal."""

    def __init__(self, policy: DispatchPolicy = DispatchPolicy.IGNORE_UNKNOWN):
        self.policy = policy

    def lookup(self, filter_kind) -> Optional[FilterSpec]:
        """
        Returns the FilterSpec for `filter_kind`. Unknown kinds return None under
        IGNORE_UNKNOWN and raise UnknownFilterKindError under STRICT.
        """
        kind = resolve_kind(filter_kind)
        if kind is None:
            if self.policy is DispatchPolicy.STRICT:
                raise UnknownFilterKindError(f"Unknown filter kind: {filter_kind!r}")
            log.debug(f"Ignoring unknown filter kind {filter_kind!r}.")
            return None
        return FILTER_TABLE[kind]

    def apply(self, lead: LeadSignal, filter_kind, params: Optional[Sequence] = None,
              sample_interval: float = 0.0) -> bool:
        """
        Applies the filter to `lead` in place.

        Returns True when a filter ran, False for an ignored unknown kind.
        """
        spec = self.lookup(filter_kind)
        if spec is None:
            return False
        self.run(spec, lead, params, sample_interval)
        return True

    @staticmethod
    def run(spec: FilterSpec, lead: LeadSignal, params: Optional[Sequence] = None,
            sample_interval: float = 0.0) -> None:
        """Runs an already resolved filter on `lead` in place."""
        args = coerce_params(spec, params)
        if spec.needs_sample_interval:
            # Butterworth takes (order, sample_interval, cutoff, type)
            order, cutoff, filter_type = args
            spec.apply(lead, order, sample_interval, cutoff, filter_type)
        else:
            spec.apply(lead, *args)
        log.debug(f"Applied {spec.name} filter with parameters {args}.")
