"""Helpers for naming uploaded files and mapping them to storage folders."""

import re
import time
from typing import Iterable, Optional

# Destination bucket -> storage folder, in priority order
DESTINATION_FOLDERS = (
    ("labels", "labels"),
    ("shelfLife", "shelf-life"),
    ("products", "products"),
    ("suppliers", "suppliers"),
    ("rawMaterials", "raw-materials"),
)
DEFAULT_FOLDER = "general"

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "txt": "text/plain",
    "json": "application/json",
}

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9.-]")
_LABEL_SKU = re.compile(r"^([A-Z0-9.]+)")


def sanitize_filename(filename: str) -> str:
    """Replace everything but letters, digits, dots and dashes with underscores."""
    return _UNSAFE_CHARS.sub("_", filename)


def unique_storage_name(filename: str, timestamp_ms: Optional[int] = None) -> str:
    """Prefix a sanitized filename with a millisecond timestamp."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{timestamp_ms}_{sanitize_filename(filename)}"


def storage_folder(destinations: Iterable[str]) -> str:
    """Pick the storage folder for an upload from its destination buckets."""
    chosen = set(destinations)
    for destination, folder in DESTINATION_FOLDERS:
        if destination in chosen:
            return folder
    return DEFAULT_FOLDER


def parse_label_sku(filename: str) -> Optional[str]:
    """Guess a product SKU from a label filename such as ``VN1234.01 Front.pdf``."""
    match = _LABEL_SKU.match(filename)
    return match.group(1) if match else None


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


def content_type_for(filename: str) -> str:
    return CONTENT_TYPES.get(file_extension(filename), "application/octet-stream")
