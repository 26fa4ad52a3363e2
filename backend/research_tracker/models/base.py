"""Base model and lenient field types shared by every tracker entity.

Entities are read back from a JSON document the user owns and may have
edited by hand, so building one never rejects a scalar: text fields take
whatever is there, list fields fall back to ``[]`` and scores are clamped.
Only references are rewritten, and that happens in the normalizer.
"""
from __future__ import annotations

import math
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

UNASSIGNED = "unassigned"
# Written by older builds of the client in place of "unassigned".
_LEGACY_UNASSIGNED = ("通用", "General")


def as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def as_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [as_text(v) for v in value if v is not None]


def clamp_score(value: Any) -> float:
    """Clamp to [0, 10] and round half-up to one decimal; junk becomes 0."""
    if isinstance(value, bool):
        return 0.0
    try:
        n = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(n):
        return 0.0
    return max(0.0, min(10.0, math.floor(n * 10 + 0.5) / 10))


def as_target(value: Any) -> str | None:
    if not isinstance(value, str) or not value:
        return None
    if value == UNASSIGNED or value in _LEGACY_UNASSIGNED:
        return None
    return value


def _target_to_wire(value: str | None) -> str:
    return value or UNASSIGNED


Text = Annotated[str, BeforeValidator(as_text)]
StrList = Annotated[list[str], BeforeValidator(as_str_list)]
Score = Annotated[float, BeforeValidator(clamp_score)]
OptionalText = Annotated[str | None, BeforeValidator(lambda v: None if v is None else as_text(v))]

# Material target: a project id, or None for "unassigned" (reusable material).
TargetRef = Annotated[
    str | None,
    BeforeValidator(as_target),
    PlainSerializer(_target_to_wire, return_type=str),
]


class TrackerModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown keys survive a round-trip."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)

    def patched(self, changes: dict) -> "TrackerModel":
        """Return a re-validated copy with *changes* (attribute names) applied."""
        return type(self).model_validate({**self.model_dump(), **changes})
