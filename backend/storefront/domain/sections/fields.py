import copy
import math
from dataclasses import dataclass, field, fields, Field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class FieldKind(str, Enum):
    TEXT = "text"
    LONG_TEXT = "long_text"
    COLOR = "color"
    ENUM = "enum"
    IMAGE = "image"
    IMAGE_LIST = "image_list"
    RECORD_LIST = "record_list"
    TEXT_LIST = "text_list"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    PRODUCT_LIST = "product_list"


_STRING_KINDS = {FieldKind.TEXT, FieldKind.LONG_TEXT, FieldKind.COLOR, FieldKind.IMAGE, FieldKind.DATETIME}
_STRING_LIST_KINDS = {FieldKind.IMAGE_LIST, FieldKind.TEXT_LIST, FieldKind.PRODUCT_LIST}


@dataclass(frozen=True)
class FieldSpec:
    """What an editor needs to know to expose one setting."""

    name: str
    kind: FieldKind
    label: str
    default: Any
    choices: Tuple[str, ...] = ()
    record_keys: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        data = {
            "name": self.name,
            "kind": self.kind.value,
            "label": self.label,
            "default": copy.deepcopy(self.default),
        }
        if self.choices:
            data["choices"] = list(self.choices)
        if self.record_keys:
            data["record_keys"] = list(self.record_keys)
        return data


def setting(kind: FieldKind, default: Any, *, label: Optional[str] = None, choices=(), record_keys=()):
    metadata = {
        "kind": kind,
        "label": label,
        "choices": tuple(choices),
        "record_keys": tuple(record_keys),
    }
    if isinstance(default, (list, dict)):
        return field(default_factory=lambda: copy.deepcopy(default), metadata=metadata)
    return field(default=default, metadata=metadata)


def text(default: str = "", **kw):
    return setting(FieldKind.TEXT, default, **kw)


def long_text(default: str = "", **kw):
    return setting(FieldKind.LONG_TEXT, default, **kw)


def color(default: str, **kw):
    return setting(FieldKind.COLOR, default, **kw)


def choice(default: str, *choices: str, **kw):
    return setting(FieldKind.ENUM, default, choices=choices, **kw)


def image(**kw):
    return setting(FieldKind.IMAGE, "", **kw)


def images(**kw):
    return setting(FieldKind.IMAGE_LIST, [], **kw)


def records(*keys: str, default=None, **kw):
    return setting(FieldKind.RECORD_LIST, list(default or []), record_keys=keys, **kw)


def text_list(**kw):
    return setting(FieldKind.TEXT_LIST, [], **kw)


def number(default, **kw):
    return setting(FieldKind.NUMBER, default, **kw)


def flag(default: bool, **kw):
    return setting(FieldKind.BOOLEAN, default, **kw)


def moment(**kw):
    return setting(FieldKind.DATETIME, "", **kw)


def products(**kw):
    return setting(FieldKind.PRODUCT_LIST, [], **kw)


def field_specs(settings_cls) -> Tuple[FieldSpec, ...]:
    defaults = settings_cls()
    specs = []
    for f in fields(settings_cls):
        meta = f.metadata
        specs.append(FieldSpec(
            name=f.name,
            kind=meta["kind"],
            label=meta["label"] or f.name.replace("_", " ").capitalize(),
            default=getattr(defaults, f.name),
            choices=meta["choices"],
            record_keys=meta["record_keys"],
        ))
    return tuple(specs)


def coerce_value(f: Field, value: Any, default: Any) -> Any:
    """Return ``value`` if it fits the field kind, otherwise ``default``."""
    kind = f.metadata["kind"]

    if kind in _STRING_KINDS:
        if isinstance(value, str):
            return value
        if kind is FieldKind.TEXT and isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return default

    if kind is FieldKind.ENUM:
        return value if value in f.metadata["choices"] else default

    if kind is FieldKind.BOOLEAN:
        return value if isinstance(value, bool) else default

    if kind is FieldKind.NUMBER:
        if isinstance(value, bool):
            return default
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            return value if math.isfinite(value) else default
        if isinstance(value, str):
            try:
                return int(value)
            except ValueError:
                pass
            try:
                number = float(value)
            except ValueError:
                return default
            return number if math.isfinite(number) else default
        return default

    if kind in _STRING_LIST_KINDS:
        if not isinstance(value, (list, tuple)):
            return default
        return [item for item in value if isinstance(item, str) and item]

    if kind is FieldKind.RECORD_LIST:
        if not isinstance(value, (list, tuple)):
            return default
        keys = f.metadata["record_keys"]
        return [
            {key: _record_text(item.get(key)) for key in keys}
            for item in value
            if isinstance(item, Mapping)
        ]

    return default


def _record_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def build(settings_cls, bag: Optional[Mapping[str, Any]]):
    defaults = settings_cls()
    if not isinstance(bag, Mapping):
        return defaults

    values: Dict[str, Any] = {}
    for f in fields(settings_cls):
        default = getattr(defaults, f.name)
        values[f.name] = coerce_value(f, bag[f.name], default) if f.name in bag else default
    return settings_cls(**values)
