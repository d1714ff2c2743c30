"""Flatten template and document JSON into searchable text.

Template content comes in several shapes: a plain string, a list of
field definitions, a dict with ``fields``, a dict with ``sections`` each
holding fields, or free-form nested JSON. Every shape is reduced to one
space-joined string. Extraction never raises; a malformed value yields
an empty string.
"""

import json
from typing import Any, List, Optional

from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

_TEXT_KEYS = ("placeholder", "description")
_HELP_KEYS = ("helpText", "help_text", "instructions")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value
    return ""


def extract_field_text(field: Any) -> str:
    """Text of a single form field definition.

    Collects the label, the name when it differs from the label,
    placeholder, description, current value, options, help text and
    instructions.
    """
    if isinstance(field, str):
        return field
    if not isinstance(field, dict):
        return _stringify(field)

    parts: List[str] = []

    label = field.get("label")
    if label:
        parts.append(str(label))

    name = field.get("name")
    if name and name != label:
        parts.append(str(name))

    for key in _TEXT_KEYS:
        if field.get(key):
            parts.append(str(field[key]))

    value = field.get("value")
    if isinstance(value, list):
        parts.append(" ".join(_stringify(item) for item in value if _stringify(item)))
    elif value is not None:
        text = _stringify(value)
        if text:
            parts.append(text)

    options = field.get("options")
    if isinstance(options, list):
        option_texts = []
        for option in options:
            if isinstance(option, dict):
                option_texts.append(str(option.get("label") or option.get("value") or ""))
            else:
                option_texts.append(_stringify(option))
        parts.append(" ".join(text for text in option_texts if text))

    for key in _HELP_KEYS:
        if field.get(key):
            parts.append(str(field[key]))

    return " ".join(part for part in parts if part)


def _collect_leaves(value: Any, out: List[str]) -> None:
    if isinstance(value, dict):
        for item in value.values():
            _collect_leaves(item, out)
    elif isinstance(value, list):
        for item in value:
            _collect_leaves(item, out)
    else:
        text = _stringify(value)
        if text:
            out.append(text)


def _fields_text(fields: Any) -> str:
    if not isinstance(fields, list):
        return ""
    return " ".join(text for text in (extract_field_text(field) for field in fields) if text)


def extract_template_content(content: Any) -> str:
    """Flatten arbitrary template/document content to a single string.

    Args:
        content: A string, list of fields, or dict (with ``fields``,
            ``sections`` or any nested structure)

    Returns:
        Space-joined text, stripped. Empty for None or on any error.
    """
    try:
        if content is None:
            return ""

        if isinstance(content, str):
            return content.strip()

        if isinstance(content, list):
            return _fields_text(content).strip()

        if isinstance(content, dict):
            if isinstance(content.get("fields"), list):
                return _fields_text(content["fields"]).strip()

            if isinstance(content.get("sections"), list):
                section_texts = []
                for section in content["sections"]:
                    if not isinstance(section, dict):
                        continue
                    title = section.get("title") or section.get("name") or ""
                    body = _fields_text(section.get("fields"))
                    section_texts.append(f"{title} {body}".strip())
                return " ".join(text for text in section_texts if text).strip()

        leaves: List[str] = []
        _collect_leaves(content, leaves)
        return " ".join(leaves).strip()

    except Exception as e:
        LOGGER.warning(f"Content extraction failed: {e}", extra={"content_type": type(content).__name__})
        return ""


def extract_form_fields_content(document_content: Optional[str]) -> str:
    """Extract text from a document's stored content.

    Form documents store their filled-in fields as JSON; anything that
    does not parse is used as-is.
    """
    if not document_content:
        return ""
    try:
        parsed = json.loads(document_content)
    except (TypeError, ValueError):
        return document_content
    return extract_template_content(parsed)
