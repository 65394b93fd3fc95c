# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Column payload defaults, date/time format translation and update validation.

Date and time formats can be given three ways: a format key such as
``"MMDDYY"``, a display pattern such as ``"MM/dd/yy"``, or the strftime
pattern the API stores (``"%m/%d/%y"``). Outgoing payloads always carry the
strftime pattern.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional

from ..core import _error_codes as ec
from ..core.errors import ValidationError

DATE_FORMATS: Dict[str, str] = {
    "MMDDYY": "%m/%d/%y",
    "MMDDYYYY": "%m/%d/%Y",
    "MM_DD_YYYY": "%m-%d-%Y",
    "DD_MM_YYYY": "%d-%m-%Y",
    "DDMMYYYY": "%d/%m/%Y",
    "DDMMYY": "%d/%m/%y",
    "YYYY_MM_DD": "%Y-%m-%d",
    "MMMM__DD__YYYY": "%B %d %Y",
    "MMM__DD__YYYY": "%b %d %Y",
    "ddd__MMM__DD__YYYY": "%a %b %d %Y",
}

TIME_FORMATS: Dict[str, str] = {
    "HH_mm_ss": "%H:%M:%S",
    "HH_mm_ssZ": "%H:%M:%SZ",
    "HH_mm_ss_SSS": "%H:%M:%S.%f",
    "HH_mm_ss__Z": "%H:%M:%S %Z",
    "HH_mm__AMPM": "%I:%M %p",
    "HH_mm_ss__AMPM": "%I:%M:%S %p",
}

# Display pattern -> strftime pattern
_DISPLAY_DATE_FORMATS: Dict[str, str] = {
    "MM/dd/yy": "%m/%d/%y",
    "MM/dd/yyyy": "%m/%d/%Y",
    "MM-dd-yyyy": "%m-%d-%Y",
    "dd-MM-yyyy": "%d-%m-%Y",
    "dd/MM/yyyy": "%d/%m/%Y",
    "dd/MM/yy": "%d/%m/%y",
    "yyyy-MM-dd": "%Y-%m-%d",
    "MMMM dd yyyy": "%B %d %Y",
    "MMM dd yyyy": "%b %d %Y",
    "ccc MMM dd yyyy": "%a %b %d %Y",
}

_DISPLAY_TIME_FORMATS: Dict[str, str] = {
    "HH:mm:ss": "%H:%M:%S",
    "HH:mm:ssXXX": "%H:%M:%SZ",
    "HH:mm:ss.SSS": "%H:%M:%S.%f",
    "HH:mm:ss z": "%H:%M:%S %Z",
    "hh:mm:ss a": "%I:%M:%S %p",
    "HH:mm": "%H:%M",
    "hh:mm a": "%I:%M %p",
}

_COMMON_DEFAULTS: Dict[str, Any] = {
    "is_nullable": True,
    "is_indexed": False,
    "is_primary_key": False,
    "is_unique": False,
    "alignment": "center",
    "field_order": 2,
}

_TYPE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "number": {"decimals": "0.00"},
    "currency": {"decimals": "0.00", "currency_format": "INR"},
    "date-time": {"date_format": "MMDDYY", "timezone": "utc"},
    "phone-number": {"phone_format": "+91 123 456 7890"},
    "dropdown": {"selection_source": "provide-static-list"},
}

DECIMAL_OPTIONS = ("00", "0.0", "0.00", "0.000", "0.0000", "0.00000", "0.000000")
PHONE_FORMATS = ("+91 123 456 7890", "(123) 456-7890", "+1 (123) 456-7890", "+91 12 3456 7890")
ALIGNMENTS = ("left", "center", "right")
MAX_DESCRIPTION_LENGTH = 500
MAX_SELECTABLE_ITEMS = 100

_FIELD_NAME = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]*$")
_CURRENCY_CODE = re.compile(r"^[A-Z]{3}$")


def _resolve_format(value: Any, keys: Mapping[str, str], display: Mapping[str, str]) -> Optional[str]:
    if not isinstance(value, str):
        return None
    if value in keys:
        return keys[value]
    if value in display:
        return display[value]
    if value in keys.values() or value in display.values():
        return value
    return None


def to_api_date_format(value: Any) -> Optional[str]:
    """Return the strftime pattern for ``value``, or ``None`` if it is not a known date format."""
    return _resolve_format(value, DATE_FORMATS, _DISPLAY_DATE_FORMATS)


def to_api_time_format(value: Any) -> Optional[str]:
    """Return the strftime pattern for ``value``, or ``None`` if it is not a known time format."""
    return _resolve_format(value, TIME_FORMATS, _DISPLAY_TIME_FORMATS)


def apply_column_defaults(column: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Fill in the defaults the API expects for a new column.

    Unset flags get their defaults, ``is_visible`` and ``is_readonly`` are
    always forced to ``True`` and ``False``, and type-specific settings
    (decimals, currency, date format and timezone, phone format, dropdown
    source) are added for the matching ``type``. Known date and time formats
    are translated to strftime patterns; unknown ones are sent as given.

    :param column: Field definition supplied by the caller. It is not modified.
    :type column: dict
    :return: A new payload dict.
    :rtype: dict
    """
    payload = dict(column)
    for key, value in _COMMON_DEFAULTS.items():
        if payload.get(key) is None:
            payload[key] = value
    payload["is_visible"] = True
    payload["is_readonly"] = False

    for key, value in _TYPE_DEFAULTS.get(payload.get("type"), {}).items():
        if payload.get(key) is None:
            payload[key] = value

    date_format = to_api_date_format(payload.get("date_format"))
    if date_format:
        payload["date_format"] = date_format
    time_format = to_api_time_format(payload.get("time_format"))
    if time_format:
        payload["time_format"] = time_format
    return payload


def validate_column_update(changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check a column update and translate its date/time formats.

    :return: The payload to send.
    :rtype: dict
    :raises ~boltic_sdk.core.errors.ValidationError: Listing every invalid
        field when any check fails.
    """
    errors: List[Dict[str, str]] = []
    payload = dict(changes)

    if "name" in payload:
        name = payload["name"]
        if not isinstance(name, str) or not name.strip():
            errors.append({"field": "name", "message": "Column name cannot be empty"})
        elif not _FIELD_NAME.match(name):
            errors.append(
                {
                    "field": "name",
                    "message": "Column name must start with a letter and contain only letters, numbers, and underscores",
                }
            )

    description = payload.get("description")
    if isinstance(description, str) and len(description) > MAX_DESCRIPTION_LENGTH:
        errors.append(
            {"field": "description", "message": f"Description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"}
        )

    if payload.get("decimals") is not None and payload["decimals"] not in DECIMAL_OPTIONS:
        errors.append({"field": "decimals", "message": f"Decimals must be one of: {', '.join(DECIMAL_OPTIONS)}"})

    currency = payload.get("currency_format")
    if currency is not None and not (isinstance(currency, str) and _CURRENCY_CODE.match(currency)):
        errors.append(
            {"field": "currency_format", "message": "Currency format must be a 3-letter uppercase code (e.g., USD)"}
        )

    if "selectable_items" in payload:
        items = payload["selectable_items"]
        if not isinstance(items, list) or not items:
            errors.append({"field": "selectable_items", "message": "Selectable items must be a non-empty list"})
        elif len(items) > MAX_SELECTABLE_ITEMS:
            errors.append(
                {"field": "selectable_items", "message": f"Cannot have more than {MAX_SELECTABLE_ITEMS} selectable items"}
            )

    if payload.get("phone_format") is not None and payload["phone_format"] not in PHONE_FORMATS:
        errors.append({"field": "phone_format", "message": f"Phone format must be one of: {', '.join(PHONE_FORMATS)}"})

    if payload.get("alignment") is not None and payload["alignment"] not in ALIGNMENTS:
        errors.append({"field": "alignment", "message": f"Alignment must be one of: {', '.join(ALIGNMENTS)}"})

    if payload.get("date_format"):
        date_format = to_api_date_format(payload["date_format"])
        if date_format is None:
            errors.append({"field": "date_format", "message": "Invalid date format"})
        else:
            payload["date_format"] = date_format

    if payload.get("time_format"):
        time_format = to_api_time_format(payload["time_format"])
        if time_format is None:
            errors.append({"field": "time_format", "message": "Invalid time format"})
        else:
            payload["time_format"] = time_format

    if errors:
        raise ValidationError("Column update validation failed", subcode=ec.VALIDATION_COLUMN_UPDATE, errors=errors)
    return payload
