# src/Cardiopy/infrastructure/file_readers/__init__.py
from .base import BaseFileAdapter
from .mat_adapter import MatAdapter
from .neo_adapter import NeoAdapter
from .text_adapter import TextAdapter

__all__ = ['BaseFileAdapter', 'MatAdapter', 'NeoAdapter', 'TextAdapter']
