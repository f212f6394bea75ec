"""Tests for mapping table construction and lookups."""

import pytest

from accelerator_inventory.config_loader import ConfigLoaderError, parse_vendor_models
from accelerator_inventory.mapping_table import (
    DuplicateDeviceError,
    DuplicateVendorError,
    MappingValidationError,
    ModelMatch,
    build_mapping_table,
    load_mapping_table,
)


def _records(raw):
    return parse_vendor_models(raw)


def test_build_answers_every_configured_pair() -> None:
    table = build_mapping_table(
        _records(
            [
                {
                    "vendorName": "NVIDIA",
                    "vendorID": "0x10de",
                    "models": [
                        {"pciID": "0x2230", "modelName": "RTX_A6000"},
                        {"pciID": "0x20b5", "modelName": "A100"},
                    ],
                },
                {
                    "vendorName": "AMD",
                    "vendorID": "0x1002",
                    "models": [{"pciID": "0x74a1", "modelName": "MI300X"}],
                },
            ]
        )
    )
    assert len(table) == 2
    assert table.lookup("0x10de", "0x2230") == ModelMatch("NVIDIA", "RTX_A6000")
    assert table.lookup("0x10de", "0x20b5") == ModelMatch("NVIDIA", "A100")
    assert table.lookup("0x1002", "0x74a1") == ModelMatch("AMD", "MI300X")


@pytest.mark.parametrize(
    "vendor_id, device_id",
    [
        ("0x8086", "0x2230"),  # unknown vendor
        ("0x10de", "0x74a1"),  # device of another vendor
        ("0x10DE", "0x2230"),  # no case folding
        ("10de", "2230"),  # no prefix normalization
    ],
)
def test_lookup_misses_return_none(vendor_id: str, device_id: str) -> None:
    table = build_mapping_table(
        _records(
            [
                {
                    "vendorName": "NVIDIA",
                    "vendorID": "0x10de",
                    "models": [{"pciID": "0x2230", "modelName": "RTX_A6000"}],
                },
                {
                    "vendorName": "AMD",
                    "vendorID": "0x1002",
                    "models": [{"pciID": "0x74a1", "modelName": "MI300X"}],
                },
            ]
        )
    )
    assert table.lookup(vendor_id, device_id) is None


def test_empty_records_build_empty_table() -> None:
    table = build_mapping_table([])
    assert len(table) == 0
    assert table.lookup("0x10de", "0x2230") is None


def test_vendor_without_models_matches_nothing() -> None:
    table = build_mapping_table(_records([{"vendorName": "NVIDIA", "vendorID": "0x10de"}]))
    assert table.get_vendor("0x10de") is not None
    assert table.lookup("0x10de", "0x2230") is None


def test_duplicate_vendor_fails() -> None:
    records = _records(
        [
            {"vendorName": "NVIDIA", "vendorID": "0x10de", "models": []},
            {"vendorName": "NVIDIA Corp", "vendorID": "0x10de", "models": []},
        ]
    )
    with pytest.raises(DuplicateVendorError) as exc_info:
        build_mapping_table(records)
    assert exc_info.value.vendor_id == "0x10de"
    assert "duplicate of vendor id 0x10de" in str(exc_info.value)


def test_duplicate_device_within_vendor_fails() -> None:
    records = _records(
        [
            {
                "vendorName": "NVIDIA",
                "vendorID": "0x10de",
                "models": [
                    {"pciID": "0x2230", "modelName": "RTX_A6000"},
                    {"pciID": "0x2230", "modelName": "RTX_A6000_ADA"},
                ],
            }
        ]
    )
    with pytest.raises(DuplicateDeviceError) as exc_info:
        build_mapping_table(records)
    assert exc_info.value.device_id == "0x2230"
    assert exc_info.value.vendor_id == "0x10de"


def test_same_device_id_under_different_vendors_is_allowed() -> None:
    table = build_mapping_table(
        _records(
            [
                {
                    "vendorName": "Habana",
                    "vendorID": "0x1da3",
                    "models": [{"pciID": "0x1000", "modelName": "Gaudi"}],
                },
                {
                    "vendorName": "Other",
                    "vendorID": "0x1ae0",
                    "models": [{"pciID": "0x1000", "modelName": "Other_ASIC"}],
                },
            ]
        )
    )
    assert table.lookup("0x1da3", "0x1000") == ModelMatch("Habana", "Gaudi")
    assert table.lookup("0x1ae0", "0x1000") == ModelMatch("Other", "Other_ASIC")


def test_table_cannot_be_mutated() -> None:
    table = build_mapping_table(
        _records(
            [
                {
                    "vendorName": "NVIDIA",
                    "vendorID": "0x10de",
                    "models": [{"pciID": "0x2230", "modelName": "RTX_A6000"}],
                }
            ]
        )
    )
    with pytest.raises(TypeError):
        table.vendors["0x1002"] = table.vendors["0x10de"]  # type: ignore[index]
    with pytest.raises(TypeError):
        table.vendors["0x10de"].device_models["0x20b5"] = "A100"  # type: ignore[index]


@pytest.mark.parametrize(
    "name, error",
    [
        ("accelerators_test_data_duplicated_vendors.bad.yaml", DuplicateVendorError),
        ("accelerators_test_data_duplicated_device_ids.bad.yaml", DuplicateDeviceError),
    ],
)
def test_load_mapping_table_rejects_bad_files(data_file, name, error) -> None:
    with pytest.raises(error):
        load_mapping_table(data_file(name))


def test_validation_errors_are_config_errors() -> None:
    assert issubclass(MappingValidationError, ConfigLoaderError)
    assert issubclass(DuplicateVendorError, MappingValidationError)
    assert issubclass(DuplicateDeviceError, MappingValidationError)


def test_default_mapping_builds() -> None:
    table = load_mapping_table()
    assert "0x10de" in table.vendor_ids
    assert table.lookup("0x10de", "0x2230") == ModelMatch("NVIDIA", "RTX_A6000")
