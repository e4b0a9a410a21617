"""
================================================================================
Allure Report Utilities
================================================================================

Attachment helpers used by page objects and tests to put harvested card
records, page state and typed failure context into the Allure report.

================================================================================
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Iterable

import allure
from loguru import logger


def _to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and sets into JSON-friendly structures."""
    if is_dataclass(value) and not isinstance(value, type):
        return {k: _to_jsonable(v) for k, v in asdict(value).items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted((_to_jsonable(v) for v in value), key=str)
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(_to_jsonable(data), indent=2, ensure_ascii=False, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_records(records: Iterable[Any], name: str = "Card Records"):
    """
    Attach a sequence of harvested card records.

    Args:
        records: Card records (dataclass instances) in DOM order
        name: Attachment name
    """
    records = list(records)
    attach_json(records, name=f"{name} ({len(records)})")
    logger.debug(f"Attached {len(records)} records as '{name}'")


def attach_condition(error: Exception, name: str = "Failure Context"):
    """
    Attach the context fields of a typed UI condition.

    Args:
        error: A UISyncError (or any exception exposing `context()`)
        name: Attachment name
    """
    context_fn = getattr(error, "context", None)
    payload = context_fn() if callable(context_fn) else {"message": str(error)}
    payload = {"condition": type(error).__name__, **payload}
    attach_json(payload, name=name)


__all__ = [
    "attach_json",
    "attach_text",
    "attach_records",
    "attach_condition",
]
