from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

import yaml


ResolutionPolicy = Literal["abort", "undefined"]

RESOLUTION_POLICIES: tuple[str, ...] = ("abort", "undefined")


@dataclass(frozen=True)
class ExpansionSettings:
    # strftime pattern for date/datetime values; ISO-8601 when unset.
    date_format: Optional[str] = None
    # "abort": a ResolutionError fails the whole expansion.
    # "undefined": the failing variable expands as if unbound.
    on_resolution_error: ResolutionPolicy = "abort"


DEFAULT_SETTINGS = ExpansionSettings()


class SettingsError(ValueError):
    pass


def settings_from_dict(raw: dict | None) -> ExpansionSettings:
    if raw is None:
        return DEFAULT_SETTINGS
    if not isinstance(raw, dict):
        raise SettingsError("settings file must be a mapping")

    unknown = sorted(set(raw) - {"date_format", "on_resolution_error"})
    if unknown:
        raise SettingsError(f"unknown settings: {', '.join(str(k) for k in unknown)}")

    date_format = raw.get("date_format")
    if date_format is not None and (not isinstance(date_format, str) or not date_format.strip()):
        raise SettingsError("date_format must be a non-empty string")

    policy = raw.get("on_resolution_error", "abort")
    if policy not in RESOLUTION_POLICIES:
        raise SettingsError(
            f"on_resolution_error must be one of: {', '.join(RESOLUTION_POLICIES)}"
        )

    return ExpansionSettings(date_format=date_format, on_resolution_error=policy)


def load_settings(path: str | Path | None) -> ExpansionSettings:
    """Load expansion settings from a YAML file.

    Format:
      date_format: "%Y-%m-%d"
      on_resolution_error: abort | undefined

    A missing path returns the defaults; an empty file does too.
    """
    if not path:
        return DEFAULT_SETTINGS
    p = Path(path)
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise SettingsError(f"invalid YAML: {e}") from e
    return settings_from_dict(raw)
