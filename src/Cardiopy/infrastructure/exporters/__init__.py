# src/Cardiopy/infrastructure/exporters/__init__.py
from .nwb_exporter import NWBExporter

__all__ = ['NWBExporter']
