# tests/infrastructure/test_adapter_registry.py
import pytest

from Cardiopy.core.source_interfaces import FileAdapter
from Cardiopy.infrastructure.adapter_registry import (
    READ,
    WRITE,
    AdapterRegistry,
    build_default_registry,
    normalize_extension,
)
from Cardiopy.infrastructure.exporters.nwb_exporter import NWBExporter
from Cardiopy.infrastructure.file_readers.mat_adapter import MatAdapter
from Cardiopy.infrastructure.file_readers.neo_adapter import NeoAdapter
from Cardiopy.infrastructure.file_readers.text_adapter import TextAdapter
from Cardiopy.shared.error_handling import UnsupportedFormatError


class ReadOnlyAdapter:
    extensions = ('foo', '.BAR')
    can_read = True
    can_write = False


class WriteOnlyAdapter:
    extensions = ('foo',)
    can_read = False
    can_write = True


class ShadowingAdapter:
    extensions = ('foo',)
    can_read = True
    can_write = True


@pytest.mark.parametrize("name, expected", [
    ("recording.TSV", "tsv"),
    ("/data/run.1/rec.mat", "mat"),
    (".csv", "csv"),
    ("nwb", "nwb"),
])
def test_normalize_extension(name, expected):
    assert normalize_extension(name) == expected


def test_read_and_write_tables_are_separate():
    registry = AdapterRegistry([ReadOnlyAdapter, WriteOnlyAdapter])
    assert isinstance(registry.resolve_reader("x.foo"), ReadOnlyAdapter)
    assert isinstance(registry.resolve_writer("x.foo"), WriteOnlyAdapter)
    assert isinstance(registry.resolve_reader("x.bar"), ReadOnlyAdapter)
    with pytest.raises(UnsupportedFormatError):
        registry.resolve_writer("x.bar")


def test_first_registration_wins():
    registry = AdapterRegistry([ReadOnlyAdapter, ShadowingAdapter])
    assert isinstance(registry.resolve_reader("x.foo"), ReadOnlyAdapter)
    assert isinstance(registry.resolve_writer("x.foo"), ShadowingAdapter)


def test_resolve_returns_fresh_instances():
    registry = AdapterRegistry([ReadOnlyAdapter])
    assert registry.resolve("a.foo") is not registry.resolve("a.foo")


def test_resolve_unknown_returns_none():
    assert AdapterRegistry([ReadOnlyAdapter]).resolve("a.zzz") is None


def test_resolve_rejects_unknown_mode():
    with pytest.raises(ValueError):
        AdapterRegistry([]).resolve("a.foo", mode="append")


def test_supported_extensions_and_filter():
    registry = AdapterRegistry([ReadOnlyAdapter, WriteOnlyAdapter])
    assert registry.supported_extensions(READ) == ["bar", "foo"]
    assert registry.supported_extensions(WRITE) == ["foo"]
    file_filter = registry.get_supported_file_filter(READ)
    assert file_filter.startswith("All Supported Files (*.bar *.foo)")
    assert "ReadOnlyAdapter (*.bar *.foo)" in file_filter


def test_default_registry_without_plugins():
    registry = build_default_registry(load_plugins=False)
    assert registry.adapter_classes == (TextAdapter, MatAdapter, NeoAdapter, NWBExporter)
    assert isinstance(registry.resolve_reader("a.tsv"), TextAdapter)
    assert isinstance(registry.resolve_reader("a.csv"), TextAdapter)
    assert isinstance(registry.resolve_writer("a.mat"), MatAdapter)
    assert isinstance(registry.resolve_reader("a.abf"), NeoAdapter)
    assert isinstance(registry.resolve_writer("a.nwb"), NWBExporter)
    with pytest.raises(UnsupportedFormatError):
        registry.resolve_reader("a.nwb")
    with pytest.raises(UnsupportedFormatError):
        registry.resolve_writer("a.abf")


def test_default_registry_puts_plugins_first(tmp_path):
    (tmp_path / "tsv_override.py").write_text(
        "class OverrideAdapter:\n"
        "    extensions = ('tsv',)\n"
        "    can_read = True\n"
        "    can_write = False\n"
        "CARDIOPY_ADAPTERS = [OverrideAdapter]\n"
    )
    registry = build_default_registry(plugin_dir=tmp_path)
    assert type(registry.resolve_reader("a.tsv")).__name__ == "OverrideAdapter"
    assert isinstance(registry.resolve_writer("a.tsv"), TextAdapter)


@pytest.mark.parametrize("adapter_class", [TextAdapter, MatAdapter, NeoAdapter, NWBExporter])
def test_builtin_adapters_satisfy_protocol(adapter_class):
    assert isinstance(adapter_class(), FileAdapter)
