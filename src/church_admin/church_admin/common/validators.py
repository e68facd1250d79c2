from __future__ import annotations

from enum import Enum
from typing import Iterable, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value.strip()) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value.strip()


def require_ids(values: Iterable[str], field_name: str) -> list[str]:
    """Strip, de-duplicate (keeping order) and require at least one id."""
    out: list[str] = []
    for v in values or []:
        v = str(v).strip()
        if v and v not in out:
            out.append(v)
    if not out:
        raise ValidationError(f"Select at least one {field_name}")
    return out


def clean_optional(value: Optional[str]) -> Optional[str]:
    return (value or "").strip() or None


def parse_enum(
    value: object,
    enum_cls: Type[E],
    allowed: Optional[Iterable[E]] = None,
    field_name: str = "status",
) -> E:
    """Coerce a raw value (or member) into ``enum_cls``, optionally restricted to ``allowed``."""
    try:
        member = enum_cls(getattr(value, "value", value))
    except ValueError:
        raise ValidationError(f"Invalid {field_name}: {value}")
    if allowed is not None:
        allowed = frozenset(allowed)
        if member not in allowed:
            names = ", ".join(sorted(str(a.value) for a in allowed))
            raise ValidationError(f"{field_name.capitalize()} must be one of: {names}")
    return member
