"""Entities of a Quake map and typed access to their properties."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .fgd import fgd_parse


class QuakeEntityError(Exception):
    """Base class for errors reading map entities."""


class RequiredPropertyNotFound(QuakeEntityError):
    def __init__(self, property: str) -> None:
        super().__init__(f"required property `{property}` not found")
        self.property = property


class PropertyParseError(QuakeEntityError):
    def __init__(self, property: str, required_type: str, error: str) -> None:
        super().__init__(
            f"requires property `{property}` to be a valid `{required_type}`. Error: {error}"
        )
        self.property = property
        self.required_type = required_type
        self.error = error


class DefinitionNotFound(QuakeEntityError):
    def __init__(self, classname: str) -> None:
        super().__init__(f'definition for "{classname}" not found')
        self.classname = classname


class InvalidBase(QuakeEntityError):
    def __init__(self, classname: str, base_name: str) -> None:
        super().__init__(
            f"Entity class {classname} has a base of {base_name}, but that class does not exist"
        )
        self.classname = classname
        self.base_name = base_name


_MISSING = object()


def _kind_name(kind: Any) -> str:
    return getattr(kind, "__name__", None) or str(kind)


@dataclass
class QuakeMapEntity:
    """One map entity: its property map and, for solid entities, its brushes."""

    properties: dict[str, str] = field(default_factory=dict)
    brushes: list = field(default_factory=list)

    def classname(self) -> str:
        try:
            return self.properties["classname"]
        except KeyError:
            raise RequiredPropertyNotFound("classname") from None

    def get(self, key: str, kind: Any) -> Any:
        """Parse property ``key`` as ``kind``."""
        try:
            text = self.properties[key]
        except KeyError:
            raise RequiredPropertyNotFound(key) from None
        try:
            return fgd_parse(kind, text)
        except ValueError as err:
            raise PropertyParseError(key, _kind_name(kind), str(err)) from err

    def get_or(self, key: str, kind: Any, default: Any) -> Any:
        """Like ``get``, but a missing property yields ``default``; parse errors still raise."""
        try:
            return self.get(key, kind)
        except RequiredPropertyNotFound:
            return default


class QuakeMapEntities(list):
    """All the entities of a map, in file order."""

    def worldspawn(self) -> Optional[QuakeMapEntity]:
        """The first entity whose classname is ``worldspawn``, if any."""
        return next(
            (entity for entity in self if entity.properties.get("classname") == "worldspawn"),
            None,
        )