"""JSON-ready conversion shared by sinks and API responses.

Money stays exact: ``Decimal`` values are emitted as strings (``"1130.00"``)
and never pass through float.
"""

import json
from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any


def to_dict(obj: Any) -> dict:
    """Convert a record (dataclass or mapping) into a JSON-ready dict.

    Anything else is wrapped as ``{"value": str(obj)}``.
    """
    if is_dataclass(obj) and not isinstance(obj, type):
        return dataclass_to_dict(obj)
    if isinstance(obj, dict):
        return serialize_value(obj)
    return {"value": str(obj)}


def dataclass_to_dict(obj: Any) -> dict:
    """Deep conversion through ``dataclasses.asdict``."""
    return {key: serialize_value(value) for key, value in asdict(obj).items()}


def to_dict_fast(obj: Any) -> dict:
    """Shallow conversion of a dataclass, skipping the deep copy of ``asdict``.

    Nested dataclass fields are still converted, through
    :func:`serialize_value`.

    Parameters
    ----------
    obj : Any
        A dataclass instance.

    Returns
    -------
    dict
        Serialized dictionary.
    """
    return {f.name: serialize_value(getattr(obj, f.name)) for f in fields(obj)}


def serialize_value(value: Any) -> Any:
    """Serialize a single value for JSON output."""
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Path):
        return str(value)
    if is_dataclass(value) and not isinstance(value, type):
        return to_dict_fast(value)
    if isinstance(value, dict):
        return {str(k): serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [serialize_value(v) for v in value]
    return value


def dumps(data: Any, pretty: bool = False) -> str:
    """Render already serialized data, keeping non-ASCII names readable."""
    if pretty:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, ensure_ascii=False)
