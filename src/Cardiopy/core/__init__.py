# src/Cardiopy/core/__init__.py
"""
Core domain of Cardiopy: lead signals, annotations, the filter set and the
recording model. Nothing in here depends on a concrete file format.
"""
from .data_model import Annotation, AnnotationSet, LayoutEntry, LeadSignal, Sample
from .ecg_model import ECGModel, classify_layout
from .filter_dispatch import DispatchPolicy, FilterDispatcher, FilterKind

__all__ = [
    'Annotation',
    'AnnotationSet',
    'LayoutEntry',
    'LeadSignal',
    'Sample',
    'ECGModel',
    'classify_layout',
    'DispatchPolicy',
    'FilterDispatcher',
    'FilterKind',
]
