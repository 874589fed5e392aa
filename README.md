# trenchtools

Helpers for describing a game to the TrenchBroom level editor: entity
definition (`.fgd`) files, the game configuration, typed access to map
entity properties, coordinate and rotation conversions, and normal smoothing
for brush meshes. Only the standard library is used.

## Modules

- `trenchtools.fgd`: describe entity classes with `QuakeClassInfo`
  (kind `ClassKind.BASE`, `POINT` or `SOLID`) and `PropertyInfo`, and turn
  them into `.fgd` text with `write_fgd`. Base classes that no enabled class
  inherits from are left out, and classes whose bases are unknown or are not
  base classes are skipped, with an error logged.
  `fgd_parse(kind, text)` parses property strings as `str`, `int`, `float`,
  `bool`, `IntBool`, `IntBoolOverride`, `Srgb`, `Srgba`, `Vec2`, `Vec3`,
  `Aabb`, any `enum.Flag` type (giving an `FgdFlags`) and `Optional[...]` of
  these. Bad input raises `ValueError`. `fgd_to_string_unquoted` and
  `fgd_to_string` write values back out; `PropertyType.for_kind` gives the
  FGD property type of a kind.
- `trenchtools.qmap`: `QuakeMapEntity` holds an entity's properties;
  `get(key, kind)` parses a property and raises `RequiredPropertyNotFound`
  or `PropertyParseError` (both `QuakeEntityError`); `get_or` returns a
  default for a missing property. `QuakeMapEntities.worldspawn()` finds the
  worldspawn entity.
- `trenchtools.config`: `TrenchBroomConfig`, with `new`,
  `auto_remove_texture`, `linear_filtering`, `get_entity_scale_expression`,
  `to_bevy_space` and `from_bevy_space`, plus `TextureSampler`.
- `trenchtools.tb_types`: `MapFileFormat`, `AssetPackageFormat`,
  `TrenchBroomTag`, `TrenchBroomTagAttribute`, `BitFlag` and
  `DefaultFaceAttributes`, each with its config JSON form.
- `trenchtools.writing`: `write_game_config(config, directory, classes)`
  writes `GameConfig.cfg`, `Icon.png` (when `config.icon` is set) and
  `<name>.fgd` into an existing directory.
  `write_game_config_to_default_directory` writes into TrenchBroom's
  `games/<name>` directory, creating it if needed. `add_game_to_preferences`
  and `add_game_to_preferences_in_default_directory` record the current
  working directory as the game's path in `Preferences.json`.
- `trenchtools.geometry`: `GeometryProvider` is a chainable stack of
  functions run over a list of `MeshData` by `apply`. `smooth_by_angle` and
  `smooth_by_default_angle` (π/4) average the normals of coincident
  vertices whose normals are closer than the threshold.
- `trenchtools.util`: `Vec2`, `Vec3`, `Quat`, `Aabb`, and the conversions
  `angle_to_quat`, `angles_to_quat`, `mangle_to_quat` and
  `quake_light_to_lux`.
- `trenchtools.hooks`: `Hook`, a callable slot whose `set(provider)`
  replaces the function with one built from the previous one.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from pathlib import Path

from trenchtools.config import TrenchBroomConfig
from trenchtools.fgd import ClassKind, PropertyInfo, PropertyType, QuakeClassInfo
from trenchtools.util import Vec3
from trenchtools.writing import write_game_config

light = QuakeClassInfo(
    ty=ClassKind.POINT,
    name="light",
    description="A light",
    properties=(
        PropertyInfo("light", PropertyType.for_kind(float), default_value="300"),
    ),
)

config = TrenchBroomConfig.new("my_game").auto_remove_texture("trigger")
out = Path("trenchbroom/games/my_game")
out.mkdir(parents=True, exist_ok=True)
write_game_config(config, out, classes=[light])
```

Reading an entity property:

```python
from trenchtools.qmap import QuakeMapEntity
from trenchtools.util import Vec3

entity = QuakeMapEntity(properties={"classname": "light", "origin": "0 64 128"})
origin = entity.get("origin", Vec3)
```

## What it does not do

There is no `.map` file parser: `QuakeMapEntity` objects are built by the
caller. Nothing turns brushes into meshes, loads textures or materials,
builds colliders or spawns entities into a scene; `geometry` only works on
mesh positions and normals handed to it. There is no command-line tool.