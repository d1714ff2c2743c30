import pytest

from app.utils.filenames import (
    content_type_for,
    parse_label_sku,
    sanitize_filename,
    storage_folder,
    unique_storage_name,
)


def test_sanitize_filename():
    assert sanitize_filename("COA (lot 7)/final.pdf") == "COA__lot_7__final.pdf"


def test_unique_storage_name_prefixes_timestamp():
    assert unique_storage_name("my file.pdf", timestamp_ms=1700000000000) == "1700000000000_my_file.pdf"


@pytest.mark.parametrize(
    "destinations, folder",
    [
        (["products", "labels"], "labels"),
        (["rawMaterials", "shelfLife"], "shelf-life"),
        (["suppliers"], "suppliers"),
        ([], "general"),
        (["unknown"], "general"),
    ],
)
def test_storage_folder(destinations, folder):
    assert storage_folder(destinations) == folder


def test_parse_label_sku():
    assert parse_label_sku("VN1234.01 Front Label.pdf") == "VN1234.01"
    assert parse_label_sku("front label.pdf") is None


def test_content_type_for():
    assert content_type_for("spec.PDF") == "application/pdf"
    assert content_type_for("notes") == "application/octet-stream"
