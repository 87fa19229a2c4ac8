"""
Custom Exception classes for Cardiopy.

This module defines a hierarchy of exception classes specific to Cardiopy.
All custom exceptions inherit from the base CardiopyError class, which
itself inherits from Python's Exception class.

Where a failure also has a natural builtin category (I/O, lookup, bad value)
the exception inherits from that builtin too, so callers can catch either.
"""


class CardiopyError(Exception):
    """Base class for Cardiopy specific errors."""

    pass


class FileReadError(CardiopyError, IOError):
    """A file adapter reported a nonzero status while reading."""

    def __init__(self, message: str, status: int = 1):
        super().__init__(message)
        self.status = status


class CardiopyFileNotFoundError(CardiopyError, IOError):
    """Error raised when a specified file does not exist."""

    pass


class UnsupportedFormatError(CardiopyError, ValueError):
    """File format is not supported by any registered adapter."""

    pass


class InvalidLeadIndexError(CardiopyError, IndexError):
    """Lead index is outside the range of good leads held by the model."""

    pass


class ProcessingError(CardiopyError, ValueError):
    """Error occurred during signal processing (bad filter parameters etc.)."""

    pass


class UnknownFilterKindError(ProcessingError):
    """Filter kind is not part of the dispatch table (strict policy only)."""

    pass


class ExportError(CardiopyError, IOError):
    """Error occurred during file saving/exporting."""

    pass


class ConfigurationError(CardiopyError):
    """Error occurred during application configuration."""

    pass
