import logging

import pytest


def pytest_ignore_collect(collection_path, config):
    """
    Hook to ignore files/directories during collection.
    Explicitly ignore .DS_Store to prevent PermissionError on macOS.
    """
    if collection_path.name == '.DS_Store':
        return True
    if collection_path.name in ['.git', '.idea', '__pycache__']:
        return True
    return None


@pytest.fixture(autouse=True)
def isolated_cardiopy_env(monkeypatch):
    """Keeps tests independent of the developer's plugin directory and dev-mode setting."""
    monkeypatch.delenv('CARDIOPY_PLUGIN_DIR', raising=False)
    monkeypatch.delenv('CARDIOPY_DEV_MODE', raising=False)
    yield
    # setup_logging() attaches handlers bound to the test's captured stdout and tmp dirs
    package_logger = logging.getLogger('Cardiopy')
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
