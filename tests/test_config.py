import pytest

from trenchtools.config import AddressMode, FilterMode, TextureSampler, TrenchBroomConfig
from trenchtools.tb_types import MapFileFormat, TrenchBroomTagAttribute
from trenchtools.util import Vec3


def test_coordinate_conversion_round_trip():
    config = TrenchBroomConfig()
    value = Vec3(20.6, 1.72, 9.0)
    assert config.from_bevy_space(config.to_bevy_space(value)).almost_eq(value, 1e-9)


def test_to_bevy_space_known_value():
    config = TrenchBroomConfig(scale=2.0)
    assert config.to_bevy_space(Vec3(2.0, 4.0, 6.0)) == Vec3(-2.0, 3.0, -1.0)


def test_from_bevy_space_known_value():
    config = TrenchBroomConfig(scale=2.0)
    assert config.from_bevy_space(Vec3(-2.0, 3.0, -1.0)) == Vec3(2.0, 4.0, 6.0)


def test_new_sets_name_and_defaults():
    config = TrenchBroomConfig.new("mygame")
    assert config.name == "mygame"
    assert config.tb_format_version == 9
    assert config.scale == pytest.approx(39.37008)
    assert config.file_formats == [MapFileFormat.VALVE]
    assert config.texture_extensions == ["png"]
    assert config.generic_material_extensions == ["toml"]
    assert config.auto_remove_textures == {"clip", "skip", "__TB_empty"}
    assert config.origin_textures == {"origin"}
    assert config.global_transform_application is True


def test_default_configs_do_not_share_lists():
    a = TrenchBroomConfig()
    b = TrenchBroomConfig()
    a.texture_extensions.append("jpg")
    assert b.texture_extensions == ["png"]


def test_auto_remove_texture_adds_and_returns_self():
    config = TrenchBroomConfig()
    result = config.auto_remove_texture("trigger")
    assert result is config
    assert "trigger" in config.auto_remove_textures
    assert "clip" in config.auto_remove_textures


def test_default_texture_exclusions():
    assert TrenchBroomConfig.default_texture_exclusions() == [
        "*_normal",
        "*_mr",
        "*_emissive",
        "*_depth",
    ]
    assert TrenchBroomConfig().texture_exclusions == TrenchBroomConfig.default_texture_exclusions()


def test_empty_face_tag():
    tag = TrenchBroomConfig.empty_face_tag()
    assert tag.to_json("material") == {
        "name": "empty",
        "attribs": ["transparent"],
        "match": "material",
        "pattern": "__TB_empty",
    }
    assert TrenchBroomConfig().face_tags[0].attributes == [TrenchBroomTagAttribute.TRANSPARENT]


def test_default_sampler_is_repeating_nearest():
    sampler = TrenchBroomConfig().texture_sampler
    assert sampler.filter is FilterMode.NEAREST
    assert sampler.address_mode_u is AddressMode.REPEAT
    assert sampler.address_mode_v is AddressMode.REPEAT
    assert sampler.address_mode_w is AddressMode.REPEAT


def test_linear_filtering():
    config = TrenchBroomConfig()
    assert config.linear_filtering() is config
    assert config.texture_sampler == TextureSampler.linear().repeat()
    assert config.texture_sampler.filter is FilterMode.LINEAR


def test_scale_expression_default():
    assert (
        TrenchBroomConfig().get_entity_scale_expression()
        == "{{ scale == undefined -> 39.37008, scale }}"
    )


def test_scale_expression_whole_number_scale():
    config = TrenchBroomConfig(scale=1.0, entity_scale_expression="%%scale%% * %%scale%%")
    assert config.get_entity_scale_expression() == "1 * 1"


def test_scale_expression_none():
    assert TrenchBroomConfig(entity_scale_expression=None).get_entity_scale_expression() is None