from __future__ import annotations

from dataclasses import asdict, dataclass, fields
import json
from pathlib import Path
import tempfile
from typing import Any

from .renderers import RENDERERS
from .selector_rules import (
    CSS_MAX_CLASSES,
    CSS_MAX_DEPTH,
    EXCLUDED_CLASS_PREFIX,
    TEST_ID_ATTRIBUTES,
    TEXT_MAX_LENGTH,
    TEXT_MIN_LENGTH,
)

CONFIG_DIR = Path.home() / ".domlocator"
CONFIG_PATH = CONFIG_DIR / "config.json"


@dataclass(frozen=True, slots=True)
class EngineSettings:
    target: str = "playwright"
    text_min_length: int = TEXT_MIN_LENGTH
    text_max_length: int = TEXT_MAX_LENGTH
    css_max_depth: int = CSS_MAX_DEPTH
    css_max_classes: int = CSS_MAX_CLASSES
    excluded_class_prefix: str = EXCLUDED_CLASS_PREFIX
    test_id_attributes: tuple[str, ...] = TEST_ID_ATTRIBUTES
    verify_unique_ids: bool = False


DEFAULT_SETTINGS = EngineSettings()


def _coerce(name: str, raw: Any, default: Any) -> Any:
    if isinstance(default, bool):
        return raw if isinstance(raw, bool) else default
    if isinstance(default, int):
        if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
            return default
        return raw
    if isinstance(default, tuple):
        if not isinstance(raw, list) or not all(isinstance(item, str) and item for item in raw):
            return default
        return tuple(raw)
    if isinstance(default, str):
        if not isinstance(raw, str):
            return default
        if name == "target" and raw.strip().lower() not in RENDERERS:
            return default
        return raw.strip()
    return default


def settings_from_mapping(payload: dict[str, Any]) -> EngineSettings:
    values: dict[str, Any] = {}
    for item in fields(EngineSettings):
        default = getattr(DEFAULT_SETTINGS, item.name)
        if item.name in payload:
            values[item.name] = _coerce(item.name, payload[item.name], default)
    return EngineSettings(**values)


def load_settings(config_path: Path | None = None) -> EngineSettings:
    path = config_path or CONFIG_PATH
    if not path.exists() or not path.is_file():
        return EngineSettings()

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, TypeError, UnicodeDecodeError):
        return EngineSettings()

    if not isinstance(payload, dict):
        return EngineSettings()
    return settings_from_mapping(payload)


def save_settings(settings: EngineSettings, config_path: Path | None = None) -> tuple[bool, str | None]:
    path = config_path or CONFIG_PATH

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        return False, f"Could not create config folder: {exc}"

    data = asdict(settings)
    data["test_id_attributes"] = list(settings.test_id_attributes)
    payload = json.dumps(data, ensure_ascii=True, indent=2, sort_keys=True)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            handle.write(payload)
            handle.flush()
            temp_path = Path(handle.name)

        temp_path.replace(path)
    except OSError as exc:
        if temp_path and temp_path.exists():
            temp_path.unlink(missing_ok=True)
        return False, f"Could not write settings: {exc}"

    return True, None
