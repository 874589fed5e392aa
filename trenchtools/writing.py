"""Writing TrenchBroom game configurations and registering games in TrenchBroom's preferences."""

from __future__ import annotations

import json
import logging
import os
import platform
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from .config import TrenchBroomConfig
from .fgd import QuakeClassInfo, fgd_to_string_unquoted, write_fgd

_log = logging.getLogger(__name__)

_SCALE_JSON_PLACEHOLDER = "$$scale$$"


class UserdataDirError(Exception):
    """The default TrenchBroom user data directory could not be found."""


class UnsupportedOsError(UserdataDirError):
    def __init__(self, os_name: str) -> None:
        super().__init__(f"Unsupported target OS: {os_name}")
        self.os_name = os_name


class HomeDirNotFoundError(UserdataDirError):
    def __init__(self) -> None:
        super().__init__("Home directory not found")


class UserDataNotFoundError(UserdataDirError):
    def __init__(self, path: Path) -> None:
        super().__init__(
            f"TrenchBroom user data not found at {path}. Have you installed TrenchBroom?"
        )
        self.path = path


class GameConfigError(Exception):
    """Writing the game config to the default directory failed."""


class PreferencesError(Exception):
    """Adding the game to TrenchBroom's preferences failed."""


def _home_dir() -> Optional[Path]:
    home = os.environ.get("HOME")
    if home:
        return Path(home)
    try:
        return Path.home()
    except (RuntimeError, KeyError):
        return None


def default_userdata_path() -> Path:
    """TrenchBroom's user data directory for this operating system; it must exist."""
    plat = sys.platform
    if plat.startswith("linux"):
        home = _home_dir()
        userdata = home / ".TrenchBroom" if home is not None else None
    elif plat == "win32":
        appdata = os.environ.get("APPDATA")
        userdata = Path(appdata) / "TrenchBroom" if appdata is not None else None
    elif plat == "darwin":
        home = _home_dir()
        userdata = (
            home / "Library" / "Application Support" / "TrenchBroom" if home is not None else None
        )
    else:
        raise UnsupportedOsError(platform.system().lower() or plat)

    if userdata is None:
        raise HomeDirNotFoundError()
    if not userdata.exists():
        raise UserDataNotFoundError(userdata)
    return userdata


def default_preferences_path() -> Path:
    """The path of ``Preferences.json`` in the user data directory."""
    return default_userdata_path() / "Preferences.json"


def default_game_config_path(config: TrenchBroomConfig) -> Path:
    """The directory ``games/<name>`` in the user data directory."""
    try:
        userdata = default_userdata_path()
    except UserdataDirError as err:
        raise GameConfigError(str(err)) from err
    return userdata / "games" / config.name


def _game_config_json(config: TrenchBroomConfig) -> dict[str, Any]:
    package_format = config.package_format
    return {
        "version": config.tb_format_version,
        "name": config.name,
        "fileformats": [{"format": fmt.config_str()} for fmt in config.file_formats],
        "filesystem": {
            "searchpath": str(config.assets_path),
            "packageformat": {
                "extension": package_format.extension,
                "format": package_format.format,
            },
        },
        "materials": {
            "root": str(config.material_root),
            "extensions": list(config.texture_extensions),
            "palette": str(config.texture_pallette),
            "attribute": "wad",
            "excludes": list(config.texture_exclusions),
        },
        "entities": {
            "definitions": [f"{config.name}.fgd"],
            "defaultcolor": " ".join(
                fgd_to_string_unquoted(float(channel)) for channel in config.entity_default_color
            ),
            "scale": _SCALE_JSON_PLACEHOLDER,
            "setDefaultProperties": config.entity_set_default_properties,
        },
        "tags": {
            "brush": [tag.to_json("classname") for tag in config.brush_tags],
            "brushface": [tag.to_json("material") for tag in config.face_tags],
        },
    }


def write_game_config(
    config: TrenchBroomConfig, directory: os.PathLike | str, classes: Sequence[QuakeClassInfo]
) -> None:
    """Write ``GameConfig.cfg``, the icon and ``<name>.fgd`` into ``directory``."""
    if not config.name:
        raise ValueError(
            "Please set a name for your TrenchBroom config. "
            "If you have, make sure you call `write_game_config` after the app is built. "
            "(e.g. In a startup system)"
        )

    folder = Path(directory)
    document = _game_config_json(config)

    if config.icon is not None:
        (folder / "Icon.png").write_bytes(bytes(config.icon))
        document["icon"] = "Icon.png"

    insert_defaults = config.default_face_attributes.is_any_set()
    if insert_defaults or config.surface_flags or config.content_flags:
        face_attributes: dict[str, Any] = {
            "surfaceflags": [flag.to_json() for flag in config.surface_flags],
            "contentflags": [flag.to_json() for flag in config.content_flags],
        }
        if insert_defaults:
            face_attributes["defaults"] = config.default_face_attributes.to_json()
        document["faceattribs"] = face_attributes

    if config.soft_map_bounds is not None:
        document["softMapBounds"] = fgd_to_string_unquoted(tuple(config.soft_map_bounds))

    text = json.dumps(document, indent=4, ensure_ascii=False)
    expression = config.get_entity_scale_expression()
    if expression is not None:
        text = text.replace(f'"{_SCALE_JSON_PLACEHOLDER}"', expression)

    (folder / "GameConfig.cfg").write_text(text, encoding="utf-8")
    (folder / f"{config.name}.fgd").write_text(write_fgd(classes), encoding="utf-8")

    _log.info("Successfully wrote TrenchBroom game config to %s", folder)


def write_game_config_to_default_directory(
    config: TrenchBroomConfig, classes: Sequence[QuakeClassInfo]
) -> None:
    """Write the game config into TrenchBroom's default games directory, creating it if needed."""
    path = default_game_config_path(config)
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as err:
            raise GameConfigError(f"Failed to create game config directory: {err}") from err

    try:
        write_game_config(config, path, classes)
    except (OSError, ValueError) as err:
        raise GameConfigError(f"Failed to write config to {path}: {err}") from err


def add_game_to_preferences(config: TrenchBroomConfig, path: os.PathLike | str) -> None:
    """Record the current directory as the game's path in the preferences file at ``path``."""
    if not config.name:
        raise PreferencesError(
            "Please set a name for your TrenchBroom config. "
            "If you have, make sure you call `write_preferences` after the app is built. "
            "(e.g. In a startup system)"
        )

    path = Path(path)
    if path.exists():
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as err:
            raise PreferencesError(f"Failed to read preferences from {path}: {err}") from err
    else:
        text = "{}"

    try:
        preferences = json.loads(text)
    except json.JSONDecodeError as err:
        raise PreferencesError(
            f"Failed to deserialize preferences to JSON from {path}: {err}"
        ) from err
    if not isinstance(preferences, dict):
        raise PreferencesError(f"Failed read from preferences at {path} as a JSON object")

    try:
        game_dir = os.getcwd()
    except OSError as err:
        raise PreferencesError(f"Failed to find path to current directory: {err}") from err

    preferences[f"Games/{config.name}/Path"] = str(game_dir)
    output = json.dumps(preferences, indent=2, ensure_ascii=False, sort_keys=True)

    try:
        path.write_text(output, encoding="utf-8")
    except OSError as err:
        raise PreferencesError(f"Failed to write preferences to {path}: {err}") from err

    _log.info("Successfully wrote TrenchBroom preferences to %s", path)


def add_game_to_preferences_in_default_directory(config: TrenchBroomConfig) -> None:
    """Add the game to the preferences file in TrenchBroom's default user data directory."""
    try:
        path = default_preferences_path()
    except UserdataDirError as err:
        raise PreferencesError(str(err)) from err
    add_game_to_preferences(config, path)