"""The main TrenchBroom integration configuration."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional, Tuple

from .fgd import fgd_to_string_unquoted
from .tb_types import (
    AssetPackageFormat,
    BitFlag,
    DefaultFaceAttributes,
    MapFileFormat,
    TrenchBroomTag,
    TrenchBroomTagAttribute,
)
from .util import Vec3

_SCALE_PLACEHOLDER = "%%scale%%"


class FilterMode(enum.Enum):
    """How texels are sampled between pixels."""

    NEAREST = "nearest"
    LINEAR = "linear"


class AddressMode(enum.Enum):
    """How texture coordinates outside 0..1 are handled."""

    CLAMP_TO_EDGE = "clamp_to_edge"
    REPEAT = "repeat"
    MIRROR_REPEAT = "mirror_repeat"


@dataclass(frozen=True)
class TextureSampler:
    """Filtering and addressing used for textures loaded from maps."""

    filter: FilterMode = FilterMode.NEAREST
    address_mode_u: AddressMode = AddressMode.CLAMP_TO_EDGE
    address_mode_v: AddressMode = AddressMode.CLAMP_TO_EDGE
    address_mode_w: AddressMode = AddressMode.CLAMP_TO_EDGE

    @classmethod
    def nearest(cls) -> TextureSampler:
        return cls(FilterMode.NEAREST)

    @classmethod
    def linear(cls) -> TextureSampler:
        return cls(FilterMode.LINEAR)

    def repeat(self) -> TextureSampler:
        """A copy of this sampler with every address mode set to repeat."""
        return replace(
            self,
            address_mode_u=AddressMode.REPEAT,
            address_mode_v=AddressMode.REPEAT,
            address_mode_w=AddressMode.REPEAT,
        )


def _default_texture_sampler() -> TextureSampler:
    return TextureSampler.nearest().repeat()


def _default_exclusions() -> list[str]:
    return TrenchBroomConfig.default_texture_exclusions()


def _default_face_tags() -> list[TrenchBroomTag]:
    return [TrenchBroomConfig.empty_face_tag()]


@dataclass
class TrenchBroomConfig:
    """Settings describing the game to TrenchBroom and how maps are loaded."""

    tb_format_version: int = 9
    # TrenchBroom units per world unit (1 unit = 1 inch).
    scale: float = 39.37008
    assets_path: Path = field(default_factory=lambda: Path("assets"))
    name: str = ""
    icon: Optional[bytes] = None
    file_formats: list[MapFileFormat] = field(default_factory=lambda: [MapFileFormat.VALVE])
    package_format: AssetPackageFormat = AssetPackageFormat.ZIP
    material_root: Path = field(default_factory=lambda: Path("textures"))
    texture_extensions: list[str] = field(default_factory=lambda: ["png"])
    texture_pallette: Path = field(default_factory=lambda: Path("palette.lmp"))
    texture_exclusions: list[str] = field(default_factory=_default_exclusions)
    entity_default_color: Tuple[float, float, float, float] = (0.6, 0.6, 0.6, 1.0)
    entity_scale_expression: Optional[str] = "{{ scale == undefined -> %%scale%%, scale }}"
    entity_set_default_properties: bool = False
    brush_tags: list[TrenchBroomTag] = field(default_factory=list)
    face_tags: list[TrenchBroomTag] = field(default_factory=_default_face_tags)
    surface_flags: list[BitFlag] = field(default_factory=list)
    content_flags: list[BitFlag] = field(default_factory=list)
    default_face_attributes: DefaultFaceAttributes = field(default_factory=DefaultFaceAttributes)
    # Bounding box (min, max) in TrenchBroom space (Z up).
    soft_map_bounds: Optional[Tuple[Vec3, Vec3]] = None
    generic_material_extensions: list[str] = field(default_factory=lambda: ["toml"])
    suppress_invalid_entity_definitions: bool = False
    auto_remove_textures: set[str] = field(
        default_factory=lambda: {"clip", "skip", "__TB_empty"}
    )
    origin_textures: set[str] = field(default_factory=lambda: {"origin"})
    global_transform_application: bool = True
    texture_sampler: TextureSampler = field(default_factory=_default_texture_sampler)

    @classmethod
    def new(cls, name: str) -> TrenchBroomConfig:
        """A default config for the game called ``name``."""
        return cls(name=str(name))

    def auto_remove_texture(self, texture: object) -> TrenchBroomConfig:
        """Add a texture whose meshes are skipped on map load; returns self."""
        self.auto_remove_textures.add(str(texture))
        return self

    @staticmethod
    def default_texture_exclusions() -> list[str]:
        """Excludes normal, metallic-roughness, emissive and depth maps."""
        return ["*_normal", "*_mr", "*_emissive", "*_depth"]

    @staticmethod
    def empty_face_tag() -> TrenchBroomTag:
        """Tag that makes ``__TB_empty`` faces transparent."""
        return TrenchBroomTag(
            name="empty",
            pattern="__TB_empty",
            attributes=[TrenchBroomTagAttribute.TRANSPARENT],
        )

    def linear_filtering(self) -> TrenchBroomConfig:
        """Switch to smooth, repeating texture sampling; returns self."""
        self.texture_sampler = TextureSampler.linear().repeat()
        return self

    def get_entity_scale_expression(self) -> Optional[str]:
        """The entity scale expression with ``%%scale%%`` replaced by this config's scale."""
        if self.entity_scale_expression is None:
            return None
        return self.entity_scale_expression.replace(
            _SCALE_PLACEHOLDER, fgd_to_string_unquoted(float(self.scale))
        )

    def to_bevy_space(self, vec: Vec3) -> Vec3:
        """Convert from Z-up TrenchBroom space to Y-up space, scaled down by ``scale``."""
        return vec.trenchbroom_to_bevy() / self.scale

    def from_bevy_space(self, vec: Vec3) -> Vec3:
        """Convert from Y-up space to Z-up TrenchBroom space, scaled up by ``scale``."""
        return vec.bevy_to_trenchbroom() * self.scale