# src/Cardiopy/core/signal_processor.py
# -*- coding: utf-8 -*-
"""
Signal processing kernels used by the in-place filters of LeadSignal.

Every function takes a 1D array of sample values and returns a new filtered
array of the same length; the caller decides whether to write it back.

Re-applying a filter with identical parameters:
    savitzky_golay       not idempotent (each pass smooths further)
    highpass_filter      not idempotent (single-pole IIR)
    lowpass_filter       not idempotent (single-pole IIR)
    highpass_fft_filter  idempotent (spectral projection)
    detrend              idempotent up to rounding (residual has no fit left)
    wavelet_filter       not idempotent in general (reconstruction mixes bands)
    constant offset      not idempotent (subtracts again)
    butterworth_filter   not idempotent (zero-phase IIR attenuates again)
"""
import logging

import numpy as np
import pywt
from scipy import signal

from Cardiopy.shared.constants import BUTTERWORTH_TYPES, DEFAULT_WAVELET
from Cardiopy.shared.error_handling import ProcessingError

log = logging.getLogger(__name__)


# --- Baseline ---

def upper_median(data: np.ndarray) -> float:
    """
    Median of the values, taking the larger of the two central values for an
    even number of samples instead of their average.
    """
    ordered = np.sort(np.asarray(data, dtype=np.float64))
    if ordered.size == 0:
        raise ProcessingError("Cannot compute the median of an empty series.")
    return float(ordered[ordered.size // 2])


# --- Smoothing ---

def savitzky_golay(data: np.ndarray, left: int, right: int, degree: int) -> np.ndarray:
    """
    Local polynomial regression over an asymmetric window.

    Each output sample is the value at the current position of the least-squares
    polynomial of `degree` fitted to `left` preceding and `right` following
    samples. Near the ends, where the full window is not available, the fit
    uses the truncated window (with the degree capped to what it can support).

    Args:
        data: Input signal array.
        left: Number of samples before the current one.
        right: Number of samples after the current one.
        degree: Polynomial degree.

    Returns:
        Smoothed array.
    """
    left, right, degree = int(left), int(right), int(degree)
    if left < 0 or right < 0:
        raise ProcessingError(f"Savitzky-Golay window sizes must be >= 0 (got {left}, {right}).")
    if degree < 0:
        raise ProcessingError(f"Savitzky-Golay degree must be >= 0 (got {degree}).")

    data = np.asarray(data, dtype=np.float64)
    n = data.size
    window_length = left + right + 1

    # A polynomial through every window point reproduces the input exactly
    if degree >= window_length - 1 or n == 0:
        return data.copy()

    result = np.empty_like(data)

    if n >= window_length:
        coeffs = signal.savgol_coeffs(window_length, degree, pos=left, use='dot')
        result[left:n - right] = np.correlate(data, coeffs, mode='valid')

    edge_indices = [i for i in range(n) if i < left or i >= n - right]
    for i in edge_indices:
        lo = max(0, i - left)
        hi = min(n, i + right + 1)
        offsets = np.arange(lo, hi, dtype=np.float64) - i
        fit_degree = min(degree, hi - lo - 1)
        poly = np.polynomial.polynomial.polyfit(offsets, data[lo:hi], fit_degree)
        result[i] = poly[0]

    return result


# --- Frequency-selective filters (normalized cutoff, cycles per sample) ---

def _check_normalized_cutoff(threshold: float, name: str) -> float:
    threshold = float(threshold)
    if not 0.0 < threshold < 0.5:
        raise ProcessingError(
            f"{name} threshold must be a normalized frequency in (0, 0.5) cycles/sample, got {threshold}."
        )
    return threshold


def _single_pole_lowpass(data: np.ndarray, threshold: float) -> np.ndarray:
    alpha = 1.0 - np.exp(-2.0 * np.pi * threshold)
    b = np.array([alpha])
    a = np.array([1.0, alpha - 1.0])
    # Start the recursion settled on the first sample to avoid a step transient
    zi = signal.lfilter_zi(b, a) * data[0]
    filtered, _ = signal.lfilter(b, a, data, zi=zi)
    return filtered


def lowpass_filter(data: np.ndarray, threshold: float) -> np.ndarray:
    """Single-pole low-pass; attenuates components above `threshold` cycles/sample."""
    threshold = _check_normalized_cutoff(threshold, "Low-pass")
    data = np.asarray(data, dtype=np.float64)
    if data.size == 0:
        return data.copy()
    return _single_pole_lowpass(data, threshold)


def highpass_filter(data: np.ndarray, threshold: float) -> np.ndarray:
    """Single-pole high-pass; attenuates components below `threshold` cycles/sample."""
    threshold = _check_normalized_cutoff(threshold, "High-pass")
    data = np.asarray(data, dtype=np.float64)
    if data.size == 0:
        return data.copy()
    return data - _single_pole_lowpass(data, threshold)


def highpass_fft_filter(data: np.ndarray, threshold: float) -> np.ndarray:
    """Zeroes every spectral bin below `threshold` cycles/sample (DC included)."""
    threshold = float(threshold)
    if not 0.0 <= threshold <= 0.5:
        raise ProcessingError(f"FFT high-pass threshold must lie in [0, 0.5] cycles/sample, got {threshold}.")
    data = np.asarray(data, dtype=np.float64)
    n = data.size
    if n == 0:
        return data.copy()
    spectrum = np.fft.rfft(data)
    freqs = np.fft.rfftfreq(n)
    spectrum[freqs < threshold] = 0.0
    return np.fft.irfft(spectrum, n)


# --- Trend and offset ---

def detrend(times: np.ndarray, data: np.ndarray, degree: int) -> np.ndarray:
    """Fits a polynomial baseline of `degree` against time and subtracts it."""
    degree = int(degree)
    if degree < 0:
        raise ProcessingError(f"Detrend degree must be >= 0 (got {degree}).")
    data = np.asarray(data, dtype=np.float64)
    n = data.size
    if n == 0:
        return data.copy()

    x = np.asarray(times, dtype=np.float64)
    if x.size != n or np.ptp(x) == 0:
        x = np.arange(n, dtype=np.float64)
    fit_degree = min(degree, n - 1)
    # Polynomial.fit maps x onto [-1, 1] so high degrees stay well conditioned
    baseline = np.polynomial.Polynomial.fit(x, data, fit_degree)
    return data - baseline(x)


def constant_offset(data: np.ndarray, offset: float) -> np.ndarray:
    return np.asarray(data, dtype=np.float64) - float(offset)


# --- Wavelet ---

def wavelet_filter(data: np.ndarray, threshold: float, wavelet: str = DEFAULT_WAVELET) -> np.ndarray:
    """
    Soft-thresholds the detail coefficients of a multilevel discrete wavelet
    decomposition and reconstructs the signal.

    Args:
        data: Input signal array.
        threshold: Absolute coefficient magnitude (signal units) below which
            detail coefficients are zeroed; larger ones shrink by it.
        wavelet: PyWavelets wavelet name.
    """
    threshold = float(threshold)
    if threshold < 0:
        raise ProcessingError(f"Wavelet threshold must be >= 0 (got {threshold}).")
    data = np.asarray(data, dtype=np.float64)
    n = data.size
    level = pywt.dwt_max_level(n, pywt.Wavelet(wavelet).dec_len)
    if level < 1:
        log.debug(f"Series of {n} samples too short for a '{wavelet}' decomposition; leaving unchanged.")
        return data.copy()

    coeffs = pywt.wavedec(data, wavelet=wavelet, level=level, mode='symmetric')
    approx, details = coeffs[0], coeffs[1:]
    details = [pywt.threshold(c, threshold, mode='soft') for c in details]
    reconstructed = pywt.waverec([approx] + details, wavelet=wavelet, mode='symmetric')
    return reconstructed[:n]


# --- IIR design ---

def butterworth_filter(data: np.ndarray, order: int, sample_interval: float,
                       cutoff: float, filter_type: int) -> np.ndarray:
    """
    Zero-phase Butterworth filter.

    Args:
        data: Input signal array.
        order: Filter order (>= 1).
        sample_interval: Time between samples in seconds; fs = 1 / sample_interval.
        cutoff: Cutoff frequency in Hz, below the Nyquist frequency.
        filter_type: BUTTERWORTH_LOWPASS (0) or BUTTERWORTH_HIGHPASS (1).
    """
    order = int(order)
    filter_type = int(filter_type)
    cutoff = float(cutoff)
    if order < 1:
        raise ProcessingError(f"Butterworth order must be >= 1 (got {order}).")
    if filter_type not in BUTTERWORTH_TYPES:
        raise ProcessingError(
            f"Unknown Butterworth type {filter_type}; expected one of {sorted(BUTTERWORTH_TYPES)}."
        )
    if not sample_interval or sample_interval <= 0:
        raise ProcessingError(f"Butterworth filter needs a positive sample interval (got {sample_interval}).")

    fs = 1.0 / float(sample_interval)
    nyquist = fs / 2.0
    if not 0.0 < cutoff < nyquist:
        raise ProcessingError(f"Butterworth cutoff {cutoff} Hz must lie in (0, {nyquist}) Hz.")

    data = np.asarray(data, dtype=np.float64)
    sos = signal.butter(order, cutoff, btype=BUTTERWORTH_TYPES[filter_type], fs=fs, output='sos')
    try:
        return signal.sosfiltfilt(sos, data)
    except ValueError as e:
        raise ProcessingError(f"Butterworth filter could not be applied to {data.size} samples: {e}") from e
