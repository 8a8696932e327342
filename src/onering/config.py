"""Global configuration for onering.

This module provides a package-wide configuration surface for the settings the
neighbor and geometry routines read at call time: the name of the per-point
normal attribute that short-circuits normal computation, and the parametric
coordinates at which face normals are sampled. It also owns the package log
level and a few environment helpers.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import contextlib
import logging
import os
from typing import ContextManager, Iterator, Optional, Tuple


# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
_LOGGER = logging.getLogger("onering.config")
_PACKAGE_LOGGER = logging.getLogger("onering")


def _parse_log_level(val: str | int | None, default: int = logging.WARNING) -> int:
    """Parse a logging level string or int into a `logging` level constant.

    Args:
        val: The desired level (e.g., "DEBUG", 10). May be None.
        default: Fallback level if `val` cannot be parsed.

    Returns:
        An integer logging level (e.g., logging.DEBUG).
    """
    if val is None:
        return default
    if isinstance(val, int):
        return val
    lvl = getattr(logging, str(val).strip().upper(), None)
    if isinstance(lvl, int):
        return lvl
    return default


def set_log_level(level: str | int = "WARNING") -> None:
    """Set the package logger level programmatically.

    Args:
        level: A standard logging level name or integer.
    """
    _PACKAGE_LOGGER.setLevel(_parse_log_level(level))


# Default level can be overridden by env.
set_log_level(os.getenv("ONERING_LOGLEVEL", "WARNING"))


# -----------------------------------------------------------------------------
# Env helpers
# -----------------------------------------------------------------------------
def str_env(varname: str, default: str) -> str:
    """Read an environment variable as a stripped string.

    Empty values fall back to `default`.
    """
    raw = os.getenv(varname, "").strip()
    return raw or default


def _uv_env(varname: str, default: Tuple[float, float]) -> Tuple[float, float]:
    """Parse a 'u,v' pair from the environment."""
    raw = os.getenv(varname, "").strip()
    if not raw:
        return default
    parts = [p for p in raw.replace(";", ",").split(",") if p.strip()]
    if len(parts) != 2:
        raise ValueError(f"invalid uv pair {raw!r} for environment {varname!r}")
    u, v = (float(p) for p in parts)
    _LOGGER.debug("Env %s=%r -> uv=(%g, %g)", varname, raw, u, v)
    return u, v


# -----------------------------------------------------------------------------
# Settings
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the active onering settings.

    Attributes:
        normal_attrib: Name of the per-point vector attribute returned verbatim
            by `point_normal` when the mesh exposes it.
        face_normal_uv: Parametric (u, v) coordinates passed to
            `face_normal` when averaging face normals.
    """

    normal_attrib: str = "N"
    face_normal_uv: Tuple[float, float] = (0.5, 0.5)


def _settings_from_env() -> Settings:
    return Settings(
        normal_attrib=str_env("ONERING_NORMAL_ATTRIB", "N"),
        face_normal_uv=_uv_env("ONERING_FACE_NORMAL_UV", (0.5, 0.5)),
    )


# -----------------------------------------------------------------------------
# Config singleton
# -----------------------------------------------------------------------------
class Config:
    """Global configuration for onering.

    Holds the active `Settings` and lets callers change them globally
    (`configure`) or temporarily (`use`).
    """

    def __init__(self) -> None:
        """Initialize config using environment defaults."""
        self._settings = _settings_from_env()
        _LOGGER.info(
            "Config initialized: normal_attrib=%r face_normal_uv=%s",
            self._settings.normal_attrib,
            self._settings.face_normal_uv,
        )

    def configure(
        self,
        *,
        normal_attrib: Optional[str] = None,
        face_normal_uv: Optional[Tuple[float, float]] = None,
    ) -> Config:
        """Update the active settings; arguments left as None are kept.

        Args:
            normal_attrib: Name of the point normal attribute.
            face_normal_uv: Parametric sample position for face normals.

        Returns:
            The `Config` instance (for chaining).

        Raises:
            ValueError: If `normal_attrib` is empty or `face_normal_uv` is not
                a pair.
        """
        changes = {}
        if normal_attrib is not None:
            if not str(normal_attrib):
                raise ValueError("normal_attrib must be a non-empty string")
            changes["normal_attrib"] = str(normal_attrib)
        if face_normal_uv is not None:
            uv = tuple(float(c) for c in face_normal_uv)
            if len(uv) != 2:
                raise ValueError(f"face_normal_uv must be a (u, v) pair; got {uv}")
            changes["face_normal_uv"] = uv
        self._settings = replace(self._settings, **changes)
        _LOGGER.info("Reconfigured: %s", self._settings)
        return self

    @contextlib.contextmanager
    def use(
        self,
        *,
        normal_attrib: Optional[str] = None,
        face_normal_uv: Optional[Tuple[float, float]] = None,
    ) -> Iterator[Settings]:
        """Temporarily change settings within a context manager.

        Yields:
            The settings active inside the block. The previous settings are
            restored on exit.
        """
        prev = self._settings
        try:
            self.configure(normal_attrib=normal_attrib, face_normal_uv=face_normal_uv)
            yield self._settings
        finally:
            self._settings = prev
            _LOGGER.info("Restored previous settings: %s", self._settings)

    def reset(self) -> None:
        """Reload settings from the environment."""
        self._settings = _settings_from_env()

    @property
    def settings(self) -> Settings:
        """Return the active settings snapshot."""
        return self._settings

    @property
    def normal_attrib(self) -> str:
        """Return the name of the point normal attribute."""
        return self._settings.normal_attrib

    @property
    def face_normal_uv(self) -> Tuple[float, float]:
        """Return the (u, v) sample position used for face normals."""
        return self._settings.face_normal_uv


# Singleton & forwards
config = Config()


def configure(
    *,
    normal_attrib: Optional[str] = None,
    face_normal_uv: Optional[Tuple[float, float]] = None,
) -> Config:
    """Update the active settings (module-level)."""
    return config.configure(normal_attrib=normal_attrib, face_normal_uv=face_normal_uv)


def use(
    *,
    normal_attrib: Optional[str] = None,
    face_normal_uv: Optional[Tuple[float, float]] = None,
) -> ContextManager[Settings]:
    """Temporarily change settings within a context manager (module-level)."""
    return config.use(normal_attrib=normal_attrib, face_normal_uv=face_normal_uv)
