"""Allure reporting helpers."""

from .allure_utils import attach_condition, attach_json, attach_records, attach_text

__all__ = [
    "attach_condition",
    "attach_json",
    "attach_records",
    "attach_text",
]
