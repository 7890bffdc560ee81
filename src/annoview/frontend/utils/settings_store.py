# annoview/frontend/utils/settings_store.py
from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import yaml

from annoview.frontend.exceptions import InvalidSettingError, SettingsFileError
from annoview.models.workspace import ColorMode, DrawSettings, MaskMode

_FACTORY = DrawSettings()

_line_width: int = _FACTORY.line_width
_show_labels: bool = _FACTORY.show_labels
_color_mode: ColorMode = _FACTORY.color_mode
_mask_mode: MaskMode = _FACTORY.mask_mode
_mask_opacity: float = _FACTORY.mask_opacity


def get_line_width() -> int:
    return int(_line_width)


def set_line_width(value: int) -> None:
    global _line_width
    _line_width = validate_line_width(value)


def get_show_labels() -> bool:
    return bool(_show_labels)


def set_show_labels(value: bool) -> None:
    global _show_labels
    _show_labels = validate_show_labels(value)


def get_color_mode() -> ColorMode:
    return _color_mode


def set_color_mode(value: ColorMode | str) -> None:
    global _color_mode
    _color_mode = validate_color_mode(value)


def get_mask_mode() -> MaskMode:
    return _mask_mode


def set_mask_mode(value: MaskMode | str) -> None:
    global _mask_mode
    _mask_mode = validate_mask_mode(value)


def get_mask_opacity() -> float:
    return float(_mask_opacity)


def set_mask_opacity(value: float) -> None:
    global _mask_opacity
    _mask_opacity = validate_mask_opacity(value)


# --- Validation shared with live draw setting updates ---


def validate_line_width(value: Any) -> int:
    try:
        width = int(value)
    except (TypeError, ValueError):
        raise InvalidSettingError(f"Line width must be an integer, got {value!r}.")
    if width < 1:
        raise InvalidSettingError("Line width must be >= 1.")
    return width


def validate_show_labels(value: Any) -> bool:
    if not isinstance(value, bool):
        raise InvalidSettingError(f"Show labels must be true or false, got {value!r}.")
    return value


def validate_color_mode(value: Any) -> ColorMode:
    try:
        return ColorMode(value)
    except ValueError:
        options = ", ".join(mode.value for mode in ColorMode)
        raise InvalidSettingError(
            f"Unknown color mode '{value}'. Expected one of: {options}."
        )


def validate_mask_mode(value: Any) -> MaskMode:
    try:
        return MaskMode(value)
    except ValueError:
        options = ", ".join(mode.value for mode in MaskMode)
        raise InvalidSettingError(
            f"Unknown mask mode '{value}'. Expected one of: {options}."
        )


def validate_mask_opacity(value: Any) -> float:
    try:
        opacity = float(value)
    except (TypeError, ValueError):
        raise InvalidSettingError(f"Mask opacity must be a number, got {value!r}.")
    if not 0.0 <= opacity <= 1.0:
        raise InvalidSettingError("Mask opacity must be between 0.0 and 1.0.")
    return opacity


_VALIDATORS = {
    "line_width": validate_line_width,
    "show_labels": validate_show_labels,
    "color_mode": validate_color_mode,
    "mask_mode": validate_mask_mode,
    "mask_opacity": validate_mask_opacity,
}

_SETTERS = {
    "line_width": set_line_width,
    "show_labels": set_show_labels,
    "color_mode": set_color_mode,
    "mask_mode": set_mask_mode,
    "mask_opacity": set_mask_opacity,
}


def validate_setting(name: str, value: Any) -> Any:
    """Return ``value`` coerced for the draw setting ``name``."""
    validator = _VALIDATORS.get(name)
    if validator is None:
        raise InvalidSettingError(f"Unknown draw setting '{name}'.")
    return validator(value)


def default_draw_settings() -> DrawSettings:
    """Build draw settings from the current defaults."""
    return DrawSettings(
        line_width=get_line_width(),
        show_labels=get_show_labels(),
        color_mode=get_color_mode(),
        mask_mode=get_mask_mode(),
        mask_opacity=get_mask_opacity(),
    )


def apply_settings(values: Mapping[str, Any]) -> None:
    """Validate every value first, then apply them all."""
    validated = {name: validate_setting(name, value) for name, value in values.items()}
    for name, value in validated.items():
        _SETTERS[name](value)


def load_settings_file(path: str | Path) -> None:
    """Apply display defaults from a YAML mapping."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise SettingsFileError(f"Failed to read settings file '{path}': {exc}")
    if not isinstance(raw, dict):
        raise SettingsFileError(f"Settings file '{path}' must contain a mapping.")
    apply_settings(raw)


def reset_settings() -> None:
    global _line_width, _show_labels, _color_mode, _mask_mode, _mask_opacity
    _line_width = _FACTORY.line_width
    _show_labels = _FACTORY.show_labels
    _color_mode = _FACTORY.color_mode
    _mask_mode = _FACTORY.mask_mode
    _mask_opacity = _FACTORY.mask_opacity
