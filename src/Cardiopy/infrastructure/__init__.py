# src/Cardiopy/infrastructure/__init__.py
"""Concrete file adapters and the registry that maps extensions to them."""
from .adapter_registry import AdapterRegistry, build_default_registry

__all__ = ['AdapterRegistry', 'build_default_registry']
