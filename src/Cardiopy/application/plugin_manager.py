# src/Cardiopy/application/plugin_manager.py
# -*- coding: utf-8 -*-
"""
Plugin Manager for Cardiopy.

Scans the user's plugin directory (`~/.cardiopy/plugins/` unless overridden
by CARDIOPY_PLUGIN_DIR) and dynamically loads external Python scripts. A
plugin exposes file adapters by listing their classes in a module-level
`CARDIOPY_ADAPTERS` sequence; they are registered ahead of the built-in
adapters, so a plugin may take over an extension.

This file is part of Cardiopy, licensed under the GNU Affero General Public License v3.0.
"""

import importlib.util
import logging
import os
import sys
from pathlib import Path
from typing import List

from Cardiopy.shared.constants import DEFAULT_PLUGIN_DIR, PLUGIN_ADAPTERS_ATTR, PLUGIN_DIR_ENV_VAR
from Cardiopy.shared.error_handling import ConfigurationError

log = logging.getLogger(__name__)


class PluginManager:
    """Manages the discovery and loading of third-party file adapters."""

    @classmethod
    def resolve_plugin_dir(cls, plugin_dir=None) -> Path:
        """Explicit argument first, then the environment override, then the default directory."""
        if plugin_dir is not None:
            return Path(plugin_dir)
        env_dir = os.environ.get(PLUGIN_DIR_ENV_VAR)
        if env_dir:
            return Path(env_dir)
        return DEFAULT_PLUGIN_DIR

    @classmethod
    def get_plugin_files(cls, plugin_dir: Path) -> List[Path]:
        """Returns the top-level .py files of the plugin directory, sorted by name."""
        if not plugin_dir.is_dir():
            return []
        return sorted(f for f in plugin_dir.glob("*.py") if f.name != "__init__.py")

    @staticmethod
    def _is_adapter_class(candidate) -> bool:
        return (isinstance(candidate, type)
                and isinstance(getattr(candidate, 'extensions', None), (tuple, list))
                and hasattr(candidate, 'can_read') and hasattr(candidate, 'can_write'))

    @classmethod
    def load_adapter_plugins(cls, plugin_dir=None) -> List[type]:
        """
        Imports every plugin file and collects the adapter classes it exposes.

        A plugin that fails to import or exposes invalid entries is logged and
        skipped so one bad plugin does not take the application down.

        Raises:
            ConfigurationError: an explicitly configured plugin directory does not exist.
        """
        explicit = plugin_dir is not None or bool(os.environ.get(PLUGIN_DIR_ENV_VAR))
        directory = cls.resolve_plugin_dir(plugin_dir)
        if explicit and not directory.is_dir():
            raise ConfigurationError(f"Plugin directory does not exist: {directory}")

        plugin_files = cls.get_plugin_files(directory)
        if not plugin_files:
            log.debug(f"No adapter plugins found in {directory}.")
            return []

        log.info(f"Discovered {len(plugin_files)} plugin(s) in {directory}. Attempting to load...")
        adapters: List[type] = []
        for p_file in plugin_files:
            module_name = f"cardiopy_plugin_{p_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, str(p_file))
                if spec is None or spec.loader is None:
                    log.warning(f"Could not load plugin specification for {p_file.name}")
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except ImportError as e:
                log.error(f"ImportError while loading plugin '{p_file.name}': {e}")
                sys.modules.pop(module_name, None)
                continue
            except SyntaxError as e:
                log.error(f"SyntaxError in plugin '{p_file.name}': {e}")
                sys.modules.pop(module_name, None)
                continue
            except Exception as e:
                log.error(f"Unexpected error loading plugin '{p_file.name}': {e}")
                sys.modules.pop(module_name, None)
                continue

            for candidate in getattr(module, PLUGIN_ADAPTERS_ATTR, ()):
                if cls._is_adapter_class(candidate):
                    adapters.append(candidate)
                else:
                    log.warning(f"Plugin '{p_file.name}' exposes {candidate!r}, which is not an adapter class.")
            log.info(f"Successfully loaded plugin: {p_file.name}")

        return adapters
