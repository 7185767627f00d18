from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Dict, List, Literal, Optional, Sequence, Tuple

FieldKind = Literal["text", "password", "number", "integer", "date", "bool", "select"]


class FormValueError(ValueError):
    def __init__(self, field: "FormField", message: str) -> None:
        super().__init__(message)
        self.field = field


@dataclass(frozen=True)
class FormField:
    """
    One input of a mutation dialog. ``name`` is the backend json key.
    """

    name: str
    label: str
    kind: FieldKind = "text"
    required: bool = False
    options: Sequence[Tuple[str, str]] = ()  # (label, value), select only
    placeholder: str = ""
    transform: Optional[Callable[[str], str]] = None


def initial_values(
    fields: Sequence[FormField],
    entity: Optional[Dict[str, Any]],
    defaults: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Values a dialog opens with: the entity's for editing, ``defaults`` for a new one.
    """
    source = entity if entity is not None else defaults
    values: Dict[str, Any] = {}
    for f in fields:
        val = source.get(f.name, defaults.get(f.name))
        if f.kind == "bool":
            values[f.name] = bool(val)
        elif f.kind == "date" and isinstance(val, str):
            values[f.name] = val.split("T")[0]
        elif f.kind == "password":
            # never prefilled
            values[f.name] = ""
        else:
            values[f.name] = "" if val is None else val
    return values


def _is_blank(val: Any) -> bool:
    return val is None or (isinstance(val, str) and not val.strip())


def missing_required(fields: Sequence[FormField], raw: Dict[str, Any]) -> List[FormField]:
    """Required fields left empty, in form order. Booleans are never missing."""
    return [
        f for f in fields if f.required and f.kind != "bool" and _is_blank(raw.get(f.name))
    ]


def coerce_values(fields: Sequence[FormField], raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Turn raw widget values into a json payload.

    Blank optional values are dropped. Raises FormValueError for a value that
    does not parse as its field kind.
    """
    out: Dict[str, Any] = {}
    for f in fields:
        val = raw.get(f.name)
        if f.kind == "bool":
            out[f.name] = bool(val)
            continue
        if _is_blank(val):
            continue

        text = str(val).strip()
        if f.transform:
            text = f.transform(text)

        try:
            if f.kind == "number":
                out[f.name] = float(text)
            elif f.kind == "integer":
                out[f.name] = int(text)
            elif f.kind == "date":
                out[f.name] = date.fromisoformat(text).isoformat() + "T00:00:00.000Z"
            elif f.kind == "select":
                allowed = [v for _, v in f.options]
                if allowed and text not in allowed:
                    raise ValueError(text)
                out[f.name] = text
            else:
                out[f.name] = text
        except ValueError as e:
            raise FormValueError(f, f"{f.label} has an invalid value.") from e
    return out
