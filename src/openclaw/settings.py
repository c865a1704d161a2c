"""Tool settings registry with TOML-backed persistence.

These are preferences for the ``openclaw`` tooling itself (cache policy,
``npm pack`` timeouts), not the ``openclaw.json`` document it manages.
Sections are dataclasses registered with ``@configurable``; ``load()``
builds an instance from the class defaults, then the global layer, then
the local layer, each one overriding the previous.

Settings files:
    ~/.config/openclaw/settings.toml     global (user-wide)
    .openclaw/settings.toml              local  (project-specific)
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
import tomllib
import typing
from typing import TYPE_CHECKING, Any, Literal, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger("openclaw.settings")

T = TypeVar("T")
Scope = Literal["global", "local"]

SETTINGS_FILENAME = "settings.toml"

_REGISTRY: dict[str, type] = {}
_TRUTHY = frozenset({"true", "1", "yes", "on"})


def configurable(section: str):
    """Class decorator: register a dataclass as the *section* table."""

    def decorator(cls: type[T]) -> type[T]:
        _REGISTRY[section] = cls
        return cls

    return decorator


# ---------------------------------------------------------------------------
# Locations
# ---------------------------------------------------------------------------

def _global_path() -> pathlib.Path:
    return pathlib.Path.home() / ".config" / "openclaw" / SETTINGS_FILENAME


def _local_path(root: pathlib.Path) -> pathlib.Path:
    return root / ".openclaw" / SETTINGS_FILENAME


def _find_root(root: pathlib.Path | None = None) -> pathlib.Path:
    """Nearest ancestor of the cwd holding ``.git``; the cwd when there is none."""
    if root is not None:
        return root
    cwd = pathlib.Path.cwd()
    for candidate in (cwd.resolve(), *cwd.resolve().parents):
        if (candidate / ".git").is_dir():
            return candidate
    return cwd


def settings_path(
    scope: Scope = "local", root: pathlib.Path | None = None
) -> pathlib.Path:
    """Return the TOML file that backs *scope*."""
    if scope == "global":
        return _global_path()
    return _local_path(_find_root(root))


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

def _read_layer(path: pathlib.Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except OSError as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Ignoring malformed settings file %s: %s", path, exc)
        return {}


def _edit_layer(
    scope: Scope,
    root: pathlib.Path | None,
    edit: Callable[[dict[str, Any]], bool],
) -> None:
    """Apply *edit* to the layer's tables and save when it reports a change."""
    import tomli_w

    path = settings_path(scope, root)
    data = _read_layer(path)
    if not edit(data):
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(data), encoding="utf-8")
    logger.debug("Saved %s settings to %s", scope, path)


# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------

def _section_cls(section: str) -> type:
    try:
        return _REGISTRY[section]
    except KeyError:
        raise KeyError(f"Unknown settings section: {section}") from None


def _field_names(cls: type) -> set[str]:
    return {f.name for f in dataclasses.fields(cls)}


def _field_type(cls: type, name: str) -> type:
    """Resolved annotation of field *name*; ``str`` if it is not a plain type."""
    if name not in _field_names(cls):
        raise KeyError(name)
    hint = typing.get_type_hints(cls).get(name, str)
    return hint if isinstance(hint, type) else str


def _coerce(value: str, target_type: type) -> Any:
    """Turn a command-line string into *target_type*."""
    if target_type is bool:
        return value.strip().lower() in _TRUTHY
    if target_type in (int, float):
        return target_type(value)
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def list_sections() -> dict[str, type]:
    """Return a copy of the registry."""
    return dict(_REGISTRY)


def load(section: str, root: pathlib.Path | None = None) -> Any:
    """Instantiate *section* with global then local overrides applied."""
    cls = _section_cls(section)
    known = _field_names(cls)
    values: dict[str, Any] = {}
    for scope in ("global", "local"):
        table = _read_layer(settings_path(scope, root)).get(section)
        if isinstance(table, dict):
            values.update((k, v) for k, v in table.items() if k in known)
    return cls(**values)


def get_effective(
    section: str,
    key: str,
    root: pathlib.Path | None = None,
) -> Any:
    return getattr(load(section, root), key)


def set_value(
    section: str,
    key: str,
    value: Any,
    *,
    scope: Scope = "local",
    root: pathlib.Path | None = None,
) -> None:
    """Store *value* for ``section.key`` in the *scope* layer."""
    cls = _section_cls(section)
    if key not in _field_names(cls):
        raise KeyError(f"Unknown key: {section}.{key}")
    if isinstance(value, str):
        value = _coerce(value, _field_type(cls, key))

    def _apply(data: dict[str, Any]) -> bool:
        data.setdefault(section, {})[key] = value
        return True

    _edit_layer(scope, root, _apply)


def reset_value(
    section: str,
    key: str,
    *,
    scope: Scope = "local",
    root: pathlib.Path | None = None,
) -> None:
    """Drop the *scope* override for ``section.key``; empty tables go too."""

    def _apply(data: dict[str, Any]) -> bool:
        table = data.get(section)
        if not isinstance(table, dict) or key not in table:
            return False
        del table[key]
        if not table:
            del data[section]
        return True

    _edit_layer(scope, root, _apply)
