"""
solowindow.config.settings - Runtime configuration.

Configuration is a flat key -> default-value lookup read once at startup,
the same shape the desktop shell's script configuration offers:

    settings = Settings.from_reader(read_config)
    settings = Settings.from_mapping({"respectOverlap": False})

Keys use the shell's camelCase names (the field aliases); the Settings
fields are snake_case.  Validation is pydantic's.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationError,
    field_validator,
)

log = logging.getLogger(__name__)


# ============================================================================
# PolicyType enum
# ============================================================================
class PolicyType(enum.Enum):
    """Which decision policy the engine runs."""

    # A window is minimized if any qualifying window sits above it.
    DOMINANCE = "dominance"

    # Only the designated active window per monitor stays up.
    SINGLE_ACTIVE = "single_active"


class SettingsError(ValueError):
    """Raised when a configuration value cannot be interpreted."""
    pass


# Type for the host's config reader: read_config(key, default) -> value
ConfigReader = Callable[[str, Any], Any]


# ============================================================================
# Settings
# ============================================================================
class Settings(BaseModel):
    """
    Immutable engine configuration.

    Attributes (config key in parentheses):
        respect_monitors (respectMonitors):
            A window only minimizes windows on its own monitor.
        respect_virtual_desktops (respectVirtualDesktops):
            A window only minimizes windows sharing a virtual desktop.
        respect_overlap (respectOverlap):
            A window only minimizes windows it overlaps.
        pinned_windows_dont_minimize (pinnedWindowsDontMinimize):
            Pinned windows never cause other windows to be minimized.
            (Pinned windows themselves are never minimized regardless.)
        policy (policy):
            "dominance" or "single_active".
        sweep_limit (sweepLimit):
            Maximum sweeps per session, 0 = unlimited.  A debugging
            safety valve against runaway feedback loops.
        intent_max_age (intentMaxAge):
            Sweeps after which an unconfirmed intent is discarded,
            0 = keep until confirmed.
        pin_hotkey (pinHotkey):
            Global combo toggling the pin on the foreground window
            (Win32 host only; other hosts use the context menu).
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    respect_monitors: bool = Field(default=True, alias="respectMonitors")
    respect_virtual_desktops: bool = Field(default=True, alias="respectVirtualDesktops")
    respect_overlap: bool = Field(default=True, alias="respectOverlap")
    pinned_windows_dont_minimize: bool = Field(default=True, alias="pinnedWindowsDontMinimize")
    policy: PolicyType = Field(default=PolicyType.DOMINANCE, alias="policy")
    sweep_limit: NonNegativeInt = Field(default=0, alias="sweepLimit")
    intent_max_age: NonNegativeInt = Field(default=0, alias="intentMaxAge")
    pin_hotkey: str = Field(default="alt+shift+p", alias="pinHotkey")

    @field_validator("policy", mode="before")
    @classmethod
    def normalize_policy(cls, v: Any) -> Any:
        """Accept "Single-Active" and friends for "single_active"."""
        if isinstance(v, str):
            return v.strip().lower().replace("-", "_")
        return v

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_reader(cls, read_config: ConfigReader) -> Settings:
        """Build Settings by calling ``read_config(key, default)`` per key."""
        defaults = cls().as_config()
        values = {key: read_config(key, default) for key, default in defaults.items()}
        settings = cls.from_mapping(values)
        log.debug("Settings loaded: %s", settings)
        return settings

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> Settings:
        """Build Settings from a plain dict of config keys."""
        try:
            return cls.model_validate(dict(mapping))
        except ValidationError as exc:
            raise SettingsError(_describe(exc)) from None

    def replace(self, **changes: Any) -> Settings:
        """Return a validated copy with some fields changed (snake_case names)."""
        try:
            return type(self).model_validate({**self.model_dump(), **changes})
        except ValidationError as exc:
            raise SettingsError(_describe(exc)) from None

    def as_config(self) -> dict[str, Any]:
        """Inverse of from_mapping: config keys -> plain values."""
        return self.model_dump(by_alias=True, mode="json")


CONFIG_KEYS: tuple[str, ...] = tuple(
    field.alias or name for name, field in Settings.model_fields.items()
)


def _describe(exc: ValidationError) -> str:
    """One line per rejected key: "sweepLimit: Input should be ..."."""
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
