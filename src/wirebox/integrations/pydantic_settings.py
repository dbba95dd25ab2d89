"""Provide Pydantic settings objects as container services.

Settings classes are detected without importing Pydantic eagerly: both
``pydantic_settings.BaseSettings`` and the legacy ``pydantic.v1.BaseSettings``
are supported when installed. A settings service has no dependencies and is
instantiated once per container, reading its values from the environment at
that point.
"""

from __future__ import annotations

import importlib
import warnings
from typing import Any

from wirebox.exceptions import WireboxInvalidArgumentsError
from wirebox.injectable import Injectable
from wirebox.types import Key

_SETTINGS_MODULES = ("pydantic_settings", "pydantic.v1")


def _load_base_settings(
    module_name: str,
    *,
    suppress_v1_warning: bool = False,
) -> type[Any] | None:
    with warnings.catch_warnings():
        # pydantic.v1 warns on import under Python 3.14+.
        if suppress_v1_warning:
            warnings.simplefilter("ignore", UserWarning)
        try:
            module = importlib.import_module(module_name)
        except ImportError:
            return None

    base_settings = getattr(module, "BaseSettings", None)
    return base_settings if isinstance(base_settings, type) else None


def _build_settings_bases(
    module_names: tuple[str, ...] = _SETTINGS_MODULES,
) -> tuple[type[Any], ...]:
    bases: list[type[Any]] = []
    for module_name in module_names:
        candidate = _load_base_settings(
            module_name,
            suppress_v1_warning=module_name.endswith(".v1"),
        )
        if candidate is not None and candidate not in bases:
            bases.append(candidate)
    return tuple(bases)


SETTINGS_BASES: tuple[type[Any], ...] = _build_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether ``candidate`` is a supported Pydantic settings class.

    Returns ``False`` for every candidate when Pydantic is not installed.

    Args:
        candidate: Object to test.

    """
    if not isinstance(candidate, type):
        return False
    return any(issubclass(candidate, base) for base in SETTINGS_BASES)


def settings_injectable(key: Key, settings_cls: type[Any], **values: Any) -> Injectable:
    """Build a zero-dependency ``Injectable`` that instantiates ``settings_cls``.

    Keyword ``values`` are passed to the settings constructor and take
    precedence over the environment, which is handy in tests::

        container = Container.provides(settings_injectable("settings", AppSettings, debug=True))

    Args:
        key: The key the settings object is provided under.
        settings_cls: A ``BaseSettings`` subclass.
        **values: Explicit field values.

    Raises:
        WireboxInvalidArgumentsError: If ``settings_cls`` is not a settings class.

    """
    if not is_pydantic_settings_subclass(settings_cls):
        msg = (
            f"settings_injectable expects a pydantic BaseSettings subclass for key {key!r}, "
            f"got {settings_cls!r}."
        )
        raise WireboxInvalidArgumentsError(msg)

    def load_settings() -> Any:
        return settings_cls(**values)

    return Injectable(key=key, dependencies=(), fn=load_settings)


__all__ = [
    "SETTINGS_BASES",
    "is_pydantic_settings_subclass",
    "settings_injectable",
]
