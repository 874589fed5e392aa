"""TrenchBroom game configuration value types: formats, tags, bit flags and face defaults."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from .fgd import Srgba
from .util import Vec2


@dataclass(frozen=True)
class AssetPackageFormat:
    """The package format assets are stored in, given by file extension and format id."""

    extension: str = "zip"
    format: str = "zip"


AssetPackageFormat.ZIP = AssetPackageFormat("zip", "zip")
AssetPackageFormat.ID_PACK = AssetPackageFormat("pak", "idpak")
AssetPackageFormat.DK_PACK = AssetPackageFormat("pak", "dkpak")


class MapFileFormat(enum.Enum):
    """Map file formats TrenchBroom can edit."""

    STANDARD = "Standard"
    VALVE = "Valve"
    QUAKE2 = "Quake2"
    QUAKE2_VALVE = "Quake2 (Valve)"
    QUAKE3_LEGACY = "Quake3 (Legacy)"
    QUAKE3_VALVE = "Quake3 (Valve)"
    HEXEN2 = "Hexen2"

    def config_str(self) -> str:
        """How this format is named in the config file."""
        return self.value


class TrenchBroomTagAttribute(enum.Enum):
    """Attribute a tag applies to the brushes or faces it matches."""

    TRANSPARENT = "transparent"

    def config_str(self) -> str:
        """How this attribute is named in the config file."""
        return self.value


@dataclass
class TrenchBroomTag:
    """Applies attributes to brushes (matched by classname) or faces (matched by material)."""

    name: str = ""
    pattern: str = ""
    attributes: list[TrenchBroomTagAttribute] = field(default_factory=list)
    material: Optional[str] = None

    def to_json(self, match_type: str) -> dict[str, Any]:
        """The tag as a config JSON object, matching by ``match_type``."""
        json: dict[str, Any] = {
            "name": self.name,
            "attribs": [attribute.config_str() for attribute in self.attributes],
            "match": match_type,
            "pattern": self.pattern,
        }
        if self.material is not None:
            json["material"] = self.material
        return json


@dataclass(frozen=True)
class BitFlag:
    """One bit of a flag set; without a name the bit is unused."""

    name: Optional[str] = None
    description: Optional[str] = None

    @classmethod
    def unused(cls) -> BitFlag:
        return cls()

    @classmethod
    def used(cls, name: str, description: Optional[str] = None) -> BitFlag:
        return cls(name, description)

    @property
    def is_used(self) -> bool:
        return self.name is not None

    def to_json(self) -> dict[str, Any]:
        """The flag as a config JSON object."""
        if self.name is None:
            return {"unused": True}
        json: dict[str, Any] = {"name": self.name}
        if self.description is not None:
            json["description"] = self.description
        return json


@dataclass
class DefaultFaceAttributes:
    """Overrides for the attributes new faces get in the editor."""

    offset: Optional[Vec2] = None
    scale: Optional[Vec2] = None
    rotation: Optional[float] = None
    surface_value: Optional[int] = None
    surface_flags: list[str] = field(default_factory=list)
    content_flags: list[str] = field(default_factory=list)
    color: Optional[Srgba] = None

    def is_any_set(self) -> bool:
        """True if any attribute differs from the default."""
        return (
            self.offset is not None
            or self.scale is not None
            or self.rotation is not None
            or self.surface_value is not None
            or bool(self.surface_flags)
            or bool(self.content_flags)
            or self.color is not None
        )

    def to_json(self) -> dict[str, Any]:
        """The set attributes as a config JSON object."""
        json: dict[str, Any] = {}
        if self.offset is not None:
            json["offset"] = list(self.offset)
        if self.scale is not None:
            json["scale"] = list(self.scale)
        if self.rotation is not None:
            json["rotation"] = self.rotation
        if self.surface_value is not None:
            json["surfaceValue"] = self.surface_value
        if self.surface_flags:
            json["surfaceFlags"] = list(self.surface_flags)
        if self.content_flags:
            json["surfaceContents"] = list(self.content_flags)
        if self.color is not None:
            # The color is written under the "scale" key.
            color = self.color
            json["scale"] = [color.red, color.green, color.blue, color.alpha]
        return json