# liftlog/services/validation.py
# Input coercion for mutation payloads. Everything raises ValidationFailure
# before any row is touched.
import math
from typing import Any, Dict, List, Optional

from .errors import ValidationFailure


def as_weight(v: Any, field: str = "weight") -> float:
    if v is None or isinstance(v, bool):
        raise ValidationFailure(f"{field} is required", field=field)
    try:
        value = float(v)
    except (TypeError, ValueError):
        raise ValidationFailure(f"{field} must be a number", field=field)
    if not math.isfinite(value) or value < 0:
        raise ValidationFailure(f"{field} must be a number >= 0", field=field)
    return value


def as_count(v: Any, field: str) -> int:
    if v is None or isinstance(v, bool):
        raise ValidationFailure(f"{field} is required", field=field)
    if isinstance(v, float) and not v.is_integer():
        raise ValidationFailure(f"{field} must be an integer", field=field)
    try:
        value = int(v)
    except (TypeError, ValueError):
        raise ValidationFailure(f"{field} must be an integer", field=field)
    if value < 0:
        raise ValidationFailure(f"{field} must be >= 0", field=field)
    return value


def as_weight_list(v: Any, field: str = "set_weights") -> Optional[List[float]]:
    if v is None:
        return None
    if not isinstance(v, (list, tuple)):
        raise ValidationFailure(f"{field} must be a list", field=field)
    return [as_weight(w, field) for w in v]


def as_name(v: Any, field: str = "name", max_len: int = 100) -> str:
    if v is not None and not isinstance(v, str):
        raise ValidationFailure(f"{field} must be a string", field=field)
    name = (v or "").strip()
    if not name:
        raise ValidationFailure(f"{field} is required", field=field)
    if len(name) > max_len:
        raise ValidationFailure(f"{field} must be at most {max_len} characters", field=field)
    return name


def as_optional_id(v: Any, field: str) -> Optional[int]:
    if v is None:
        return None
    return as_id(v, field)


def as_id(v: Any, field: str) -> int:
    value = as_count(v, field)
    if value < 1:
        raise ValidationFailure(f"{field} must be a positive integer", field=field)
    return value


def as_flag(v: Any, field: str) -> bool:
    # JSON booleans, or 0/1 from form-ish clients
    if isinstance(v, bool):
        return v
    if isinstance(v, int) and v in (0, 1):
        return bool(v)
    raise ValidationFailure(f"{field} must be true or false", field=field)


def as_payload(data: Any) -> Dict[str, Any]:
    """Request body as a dict; a missing body counts as empty."""
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailure("body must be a JSON object", field="body")
    return data
