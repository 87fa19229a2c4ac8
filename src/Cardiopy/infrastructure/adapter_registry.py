# src/Cardiopy/infrastructure/adapter_registry.py
# -*- coding: utf-8 -*-
"""
Registry mapping file extensions to reader and writer adapters.

The registry is built once from a list of adapter classes and is read-only
afterwards. Resolving an extension always returns a fresh adapter instance.
When several classes claim the same extension for the same direction, the
first one registered wins.
"""
import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Tuple

from Cardiopy.shared.error_handling import UnsupportedFormatError

log = logging.getLogger(__name__)

READ = 'read'
WRITE = 'write'


def normalize_extension(filename) -> str:
    """'Recording.TSV' and '.tsv' both give 'tsv'."""
    text = str(filename)
    suffix = Path(text).suffix or text
    return suffix.lower().lstrip('.')


class AdapterRegistry:
    def __init__(self, adapter_classes: Iterable[type]):
        readers: Dict[str, type] = {}
        writers: Dict[str, type] = {}
        classes = tuple(adapter_classes)
        for adapter_class in classes:
            for extension in adapter_class.extensions:
                extension = extension.lower().lstrip('.')
                for enabled, table, mode in ((adapter_class.can_read, readers, READ),
                                             (adapter_class.can_write, writers, WRITE)):
                    if not enabled:
                        continue
                    if extension in table:
                        log.warning(f"'.{extension}' ({mode}) already handled by {table[extension].__name__}; "
                                    f"ignoring {adapter_class.__name__}.")
                        continue
                    table[extension] = adapter_class
        self._adapter_classes = classes
        self._readers = MappingProxyType(readers)
        self._writers = MappingProxyType(writers)

    @property
    def adapter_classes(self) -> Tuple[type, ...]:
        return self._adapter_classes

    def _table(self, mode: str):
        if mode == READ:
            return self._readers
        if mode == WRITE:
            return self._writers
        raise ValueError(f"mode must be '{READ}' or '{WRITE}', got {mode!r}")

    def resolve(self, filename, mode: str = READ):
        """Returns a fresh adapter for the file's extension, or None when nothing handles it."""
        adapter_class = self._table(mode).get(normalize_extension(filename))
        return adapter_class() if adapter_class is not None else None

    def resolve_reader(self, filename):
        adapter = self.resolve(filename, READ)
        if adapter is None:
            raise UnsupportedFormatError(f"No reader registered for '.{normalize_extension(filename)}' files.")
        return adapter

    def resolve_writer(self, filename):
        adapter = self.resolve(filename, WRITE)
        if adapter is None:
            raise UnsupportedFormatError(f"No writer registered for '.{normalize_extension(filename)}' files.")
        return adapter

    def supported_extensions(self, mode: str = READ) -> List[str]:
        return sorted(self._table(mode))

    def get_supported_file_filter(self, mode: str = READ) -> str:
        """File dialog style filter string, one group per adapter class."""
        groups: Dict[str, List[str]] = {}
        for extension, adapter_class in self._table(mode).items():
            groups.setdefault(adapter_class.__name__, []).append(f"*.{extension}")
        all_patterns = sorted(p for patterns in groups.values() for p in patterns)
        filters = [f"All Supported Files ({' '.join(all_patterns)})"]
        filters.extend(f"{name} ({' '.join(sorted(patterns))})" for name, patterns in sorted(groups.items()))
        return ";;".join(filters)

    def __repr__(self):
        return f"AdapterRegistry(readers={self.supported_extensions(READ)}, writers={self.supported_extensions(WRITE)})"


def builtin_adapter_classes() -> List[type]:
    from Cardiopy.infrastructure.exporters.nwb_exporter import NWBExporter
    from Cardiopy.infrastructure.file_readers.mat_adapter import MatAdapter
    from Cardiopy.infrastructure.file_readers.neo_adapter import NeoAdapter
    from Cardiopy.infrastructure.file_readers.text_adapter import TextAdapter
    return [TextAdapter, MatAdapter, NeoAdapter, NWBExporter]


def build_default_registry(plugin_dir=None, load_plugins: bool = True) -> AdapterRegistry:
    """Plugin adapters (when enabled) followed by the built-in adapters."""
    adapter_classes: List[type] = []
    if load_plugins:
        from Cardiopy.application.plugin_manager import PluginManager
        adapter_classes.extend(PluginManager.load_adapter_plugins(plugin_dir))
    adapter_classes.extend(builtin_adapter_classes())
    registry = AdapterRegistry(adapter_classes)
    log.debug(f"Built {registry!r}")
    return registry
