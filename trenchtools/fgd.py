"""Entity definition (FGD) value types, property parsing and FGD file writing."""

from __future__ import annotations

import enum
import logging
import math
import re
import types
import typing
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence, Tuple, Union

from .util import Aabb, Vec2, Vec3

_log = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?\d+")
_UINT_RE = re.compile(r"\+?\d+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)",
    re.IGNORECASE,
)

ChoiceKey = Union[str, int]


def _parse_int(text: str) -> int:
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _INT_RE.fullmatch(text):
        raise ValueError(f"invalid digit found in string: {text!r}")
    return int(text)


def _parse_unsigned(text: str) -> int:
    if not text:
        raise ValueError("cannot parse integer from empty string")
    if not _UINT_RE.fullmatch(text):
        raise ValueError(f"invalid digit found in string: {text!r}")
    return int(text)


def _parse_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        raise ValueError(f"invalid float literal: {text!r}")
    return float(text)


def _parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError("provided string was not `true` or `false`")


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        if value == 0:
            return "-0" if math.copysign(1.0, value) < 0 else "0"
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def _truncate_byte_color_range(channels: list[float]) -> list[float]:
    if any(channel > 1.0 for channel in channels):
        return [channel / 255.0 for channel in channels]
    return channels


def parse_array(text: str, count: int, parser: Callable[[str], Any]) -> list:
    """Parse up to ``count`` whitespace-separated elements; missing trailing elements are zero."""
    out: list = [0.0] * count
    for index, part in enumerate(text.split()):
        if index >= count:
            raise ValueError(f"Too many elements! Expected: {count}")
        out[index] = parser(part)
    return out


@dataclass(frozen=True)
class PropertyType:
    """How a property appears in an FGD: a named value type, a choice list or flags."""

    name: str
    choices: Tuple[Tuple[ChoiceKey, str], ...] = ()
    flags: Tuple[Tuple[int, str], ...] = ()

    @classmethod
    def value(cls, name: str) -> PropertyType:
        return cls(name)

    @classmethod
    def of_choices(cls, choices: Iterable[Tuple[ChoiceKey, str]]) -> PropertyType:
        return cls("choices", choices=tuple(choices))

    @classmethod
    def of_flags(cls, entries: Iterable[Tuple[int, str]]) -> PropertyType:
        return cls("flags", flags=tuple(entries))

    @property
    def is_choices(self) -> bool:
        return self.name == "choices"

    @property
    def is_flags(self) -> bool:
        return self.name == "flags"

    @classmethod
    def for_kind(cls, kind: Any) -> PropertyType:
        """The property type a value kind is written as."""
        inner = _optional_inner(kind)
        if inner is not None:
            return cls.for_kind(inner)
        if isinstance(kind, type) and issubclass(kind, enum.Flag):
            return cls.of_flags(FgdFlags(kind).flag_entries())
        try:
            return _PROPERTY_TYPES[kind]
        except (KeyError, TypeError):
            raise TypeError(f"no FGD property type for {kind!r}") from None


class ClassKind(enum.Enum):
    """The kind of an entity class."""

    BASE = "Base"
    POINT = "Point"
    SOLID = "Solid"

    @property
    def is_base(self) -> bool:
        return self is ClassKind.BASE

    @property
    def is_solid(self) -> bool:
        return self is ClassKind.SOLID

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PropertyInfo:
    """One property of an entity class."""

    name: str
    ty: PropertyType
    title: str | None = None
    description: str | None = None
    default_value: str | None = None


@dataclass(frozen=True)
class QuakeClassInfo:
    """Everything written about an entity class in an FGD file."""

    ty: ClassKind
    name: str
    description: str | None = None
    base: Tuple[QuakeClassInfo, ...] = ()
    color: str | None = None
    iconsprite: str | None = None
    size: str | None = None
    model: str | None = None
    properties: Tuple[PropertyInfo, ...] = ()
    enabled: bool = True


@dataclass(frozen=True)
class IntBool:
    """A boolean written as an integer; positive values are true."""

    value: bool = False

    def __bool__(self) -> bool:
        return self.value


class IntBoolOverride(enum.Enum):
    """1 enables, 0 inherits, -1 disables."""

    ENABLE = "1"
    INHERIT = "0"
    DISABLE = "-1"


@dataclass(frozen=True)
class Srgba:
    """An sRGB color with alpha, channels in 0..1."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0


@dataclass(frozen=True)
class Srgb:
    """An sRGB color without alpha, channels in 0..1."""

    red: float = 0.0
    green: float = 0.0
    blue: float = 0.0

    def to_srgba(self) -> Srgba:
        return Srgba(self.red, self.green, self.blue, 1.0)


Srgb.WHITE = Srgb(1.0, 1.0, 1.0)
Srgb.BLACK = Srgb(0.0, 0.0, 0.0)
Srgb.WHITE_255 = Srgb(255.0, 255.0, 255.0)


def _single_bit_members(flag_type: type[enum.Flag]) -> list[enum.Flag]:
    members: dict[int, enum.Flag] = {}
    for member in flag_type.__members__.values():
        value = member.value
        if value and value & (value - 1) == 0:
            members.setdefault(value, member)
    return list(members.values())


@dataclass(frozen=True)
class FgdFlags:
    """A set of bit flags of an ``enum.Flag`` type, stored as its integer value."""

    flag_type: type
    value: int = 0

    @classmethod
    def from_flags(cls, flags: enum.Flag) -> FgdFlags:
        return cls(type(flags), flags.value)

    @property
    def mask(self) -> int:
        mask = 0
        for member in _single_bit_members(self.flag_type):
            mask |= member.value
        return mask

    def to_flags(self) -> enum.Flag:
        return self.flag_type(self.value & self.mask)

    def flag_entries(self) -> list[Tuple[int, str]]:
        """Each single-bit flag of the type as (bit value, title), in declaration order."""
        return [(member.value, member.name) for member in _single_bit_members(self.flag_type)]

    def __str__(self) -> str:
        return str(self.to_flags())


def _optional_inner(kind: Any) -> Any:
    origin = typing.get_origin(kind)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [arg for arg in typing.get_args(kind) if arg is not type(None)]
        if len(args) == 1 and len(typing.get_args(kind)) == 2:
            return args[0]
    return None


def _parse_srgb(text: str) -> Srgb:
    red, green, blue = _truncate_byte_color_range(parse_array(text, 3, _parse_float))
    return Srgb(red, green, blue)


def _parse_srgba(text: str) -> Srgba:
    try:
        return _parse_srgb(text).to_srgba()
    except ValueError:
        return Srgba(*_truncate_byte_color_range(parse_array(text, 4, _parse_float)))


def _parse_aabb(text: str) -> Aabb:
    values = parse_array(text, 6, _parse_float)
    return Aabb.from_min_max(Vec3(*values[:3]), Vec3(*values[3:]))


def _parse_int_bool_override(text: str) -> IntBoolOverride:
    value = _parse_int(text)
    if value < 0:
        return IntBoolOverride.DISABLE
    if value == 0:
        return IntBoolOverride.INHERIT
    return IntBoolOverride.ENABLE


_PARSERS: dict[Any, Callable[[str], Any]] = {
    str: lambda text: text,
    int: _parse_int,
    float: _parse_float,
    bool: _parse_bool,
    IntBool: lambda text: IntBool(_parse_int(text) > 0),
    IntBoolOverride: _parse_int_bool_override,
    Srgb: _parse_srgb,
    Srgba: _parse_srgba,
    Vec2: lambda text: Vec2(*parse_array(text, 2, _parse_float)),
    Vec3: lambda text: Vec3(*parse_array(text, 3, _parse_float)),
    Aabb: _parse_aabb,
}

_PROPERTY_TYPES: dict[Any, PropertyType] = {
    str: PropertyType.value("string"),
    int: PropertyType.value("integer"),
    float: PropertyType.value("float"),
    bool: PropertyType.of_choices([("true", "true"), ("false", "false")]),
    IntBool: PropertyType.value("integer"),
    IntBoolOverride: PropertyType.value("integer"),
    Srgb: PropertyType.value("color1"),
    Srgba: PropertyType.value("color1"),
    Vec2: PropertyType.value("vec2"),
    Vec3: PropertyType.value("vector"),
    Aabb: PropertyType.value("aabb"),
}


def fgd_parse(kind: Any, text: str) -> Any:
    """Parse ``text`` as a value of ``kind``; raises ValueError on bad input."""
    inner = _optional_inner(kind)
    if inner is not None:
        if not text.strip():
            return None
        return fgd_parse(inner, text)
    if isinstance(kind, type) and issubclass(kind, enum.Flag):
        flags = FgdFlags(kind, _parse_unsigned(text))
        return FgdFlags(kind, flags.value & flags.mask)
    try:
        parser = _PARSERS[kind]
    except (KeyError, TypeError):
        raise TypeError(f"no FGD parser for {kind!r}") from None
    return parser(text)


def _join(values: Iterable[float]) -> str:
    return " ".join(_format_float(float(value)) for value in values)


def fgd_to_string_unquoted(value: Any) -> str:
    """Write a value the way FGD and entity properties expect, without quotes."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, IntBool):
        return "1" if value.value else "0"
    if isinstance(value, IntBoolOverride):
        return value.value
    if isinstance(value, enum.Flag):
        return str(value.value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return value
    if isinstance(value, Srgba):
        return _join((value.red, value.green, value.blue, value.alpha))
    if isinstance(value, Srgb):
        return _join((value.red, value.green, value.blue))
    if isinstance(value, (Vec2, Vec3)):
        return _join(value)
    if isinstance(value, Aabb):
        return f"{_join(value.min())}, {_join(value.max())}"
    if isinstance(value, FgdFlags):
        return str(value.value)
    if isinstance(value, (list, tuple)):
        return " ".join(fgd_to_string_unquoted(item) for item in value)
    raise TypeError(f"cannot write {type(value).__name__} as an FGD value")


def _is_quoted(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return not isinstance(value, (int, IntBool, IntBoolOverride, Aabb, FgdFlags, enum.Flag))


def fgd_to_string(value: Any) -> str:
    """Like ``fgd_to_string_unquoted``, quoted for the kinds FGD quotes."""
    text = fgd_to_string_unquoted(value)
    return f'"{text}"' if _is_quoted(value) else text


def _format_choice_key(key: ChoiceKey) -> str:
    return f'"{key}"' if isinstance(key, str) else str(key)


def _write_property(out: list[str], prop: PropertyInfo) -> None:
    ty = prop.ty
    if ty.is_flags:
        out.append(f"\t{prop.name}(flags) =\n\t[\n")
        default = 0
        if prop.default_value is not None:
            try:
                default = _parse_unsigned(prop.default_value)
            except ValueError:
                default = 0
        for index, (value, title) in enumerate(ty.flags):
            out.append(f'\t\t{value} : "{title}" : {(default >> index) & 1}\n')
        out.append("\t]\n")
        return

    title = prop.title if prop.title is not None else prop.name
    default = prop.default_value or ""
    description = prop.description or ""
    out.append(f'\t{prop.name}({ty.name}) : "{title}" : {default} : "{description}"')
    if ty.is_choices:
        out.append(" = \n\t[\n")
        for key, choice_title in ty.choices:
            out.append(f'\t\t{_format_choice_key(key)} : "{choice_title}"\n')
        out.append("\t]")
    out.append("\n")


def write_fgd(classes: Sequence[QuakeClassInfo]) -> str:
    """Write the enabled classes as the text of an FGD file."""
    registered = {cls.name for cls in classes}
    enabled = [cls for cls in classes if cls.enabled]
    out: list[str] = []

    for cls in enabled:
        if cls.ty.is_base and not any(
            base.name == cls.name for other in enabled for base in other.base
        ):
            continue

        invalid = False
        for base in cls.base:
            if base.name not in registered:
                _log.error("`%s`'s base class `%s` isn't registered, skipping", cls.name, base.name)
                invalid = True
                break
            if not base.ty.is_base:
                _log.error(
                    "`%s`'s base class `%s` is a %sClass, expected a BaseClass, skipping",
                    cls.name,
                    base.name,
                    base.ty,
                )
                invalid = True
                break
        if invalid:
            continue

        out.append(f"@{cls.ty}Class ")
        if cls.base:
            out.append(f"base({', '.join(base.name for base in cls.base)}) ")
        for key in ("color", "iconsprite", "size", "model"):
            attribute = getattr(cls, key)
            if attribute is not None:
                out.append(f"{key}({attribute}) ")
        out.append(f"= {cls.name}")
        if cls.description is not None:
            out.append(f' : "{cls.description}"')
        out.append("\n[\n")
        for prop in cls.properties:
            _write_property(out, prop)
        out.append("]\n\n")

    return "".join(out)