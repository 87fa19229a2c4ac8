# -*- coding: utf-8 -*-
"""Shared constants for the Cardiopy package."""
from pathlib import Path

# Per-user locations
CARDIOPY_HOME = Path.home() / '.cardiopy'
DEFAULT_LOG_DIR = CARDIOPY_HOME / 'logs'
DEFAULT_PLUGIN_DIR = CARDIOPY_HOME / 'plugins'

# Environment overrides
DEV_MODE_ENV_VAR = 'CARDIOPY_DEV_MODE'
PLUGIN_DIR_ENV_VAR = 'CARDIOPY_PLUGIN_DIR'

# Module-level list a plugin file uses to expose its adapter classes
PLUGIN_ADAPTERS_ATTR = 'CARDIOPY_ADAPTERS'

# Internal lead index -> externally meaningful lead number in bad-lead lists
BAD_LEAD_NUMBER_OFFSET = 4

# Savitzky-Golay defaults (left samples, right samples, polynomial degree)
SGOLAY_DEFAULT_LEFT = 25
SGOLAY_DEFAULT_RIGHT = 25
SGOLAY_DEFAULT_DEGREE = 6

# Butterworth response type codes
BUTTERWORTH_LOWPASS = 0
BUTTERWORTH_HIGHPASS = 1
BUTTERWORTH_TYPES = {
    BUTTERWORTH_LOWPASS: 'lowpass',
    BUTTERWORTH_HIGHPASS: 'highpass',
}

# Wavelet thresholding
DEFAULT_WAVELET = 'db4'

# Delimited text metadata header lines
TEXT_COMMENT_PREFIX = '#'
TEXT_SAMPLE_INTERVAL_KEY = 'sample_interval'
TEXT_LAYOUT_KEY = 'layout'
TEXT_TIME_COLUMN = 'time'

# Neo IO class name -> extensions handled through the neo adapter
NEO_READER_EXTENSIONS = {
    'AxonIO': ['abf'],
    'BrainVisionIO': ['vhdr'],
    'EDFIO': ['edf'],
    'MicromedIO': ['trc'],
    'PickleIO': ['pkl', 'pickle'],
    'Spike2IO': ['smr', 'smrx'],
    'WinWcpIO': ['wcp'],
}
