# xcorr_core/transform/registry.py
"""
Transform backend plugin registry.

Backends are registered as classes (so per-use options such as worker
counts can be passed at lookup time) and looked up by name or alias.
"""

from __future__ import annotations

import inspect
from typing import Any

from ..errors import BackendError
from ._base import TransformBackend

# -- Registry --

DEFAULT_BACKEND = "scipy"

_BACKENDS: dict[str, type] = {}

_BACKEND_ALIASES: dict[str, str] = {
    "np": "numpy",
    "pocketfft": "numpy",
    "sp": "scipy",
    "scipy.fft": "scipy",
}


def register(backend_cls: type, *aliases: str) -> None:
    """
    Register a backend class under its default name plus optional aliases.

    The class must be constructible with no arguments and produce an
    object satisfying TransformBackend.
    """
    instance = backend_cls()
    if not isinstance(instance, TransformBackend):
        raise TypeError(f"{backend_cls.__name__} does not satisfy TransformBackend")
    _BACKENDS[instance.name] = backend_cls
    for alias in aliases:
        _BACKEND_ALIASES[alias] = instance.name


def get_backend(name: str | TransformBackend, **options: Any) -> TransformBackend:
    """
    Get a backend instance by name or alias.

    Args:
        name: Registered name (e.g., "scipy"), alias (e.g., "np"), or an
            already constructed backend, which is returned unchanged
        **options: Backend constructor options (e.g., workers=4 for scipy)

    Returns:
        Instantiated backend

    Raises:
        BackendError: If the backend is unknown or rejects the options
    """
    if not isinstance(name, str):
        if options:
            raise BackendError("Options can only be applied when looking a backend up by name")
        return name

    key = _resolve(name)
    if key not in _BACKENDS:
        available = list(_BACKENDS.keys())
        raise BackendError(f"Unknown transform backend: {name}. Available: {available}")

    try:
        return _BACKENDS[key](**options)
    except TypeError as e:
        raise BackendError(
            f"Backend '{key}' rejected options {sorted(options)}: {e}"
        ) from e


def backend_accepts(name: str | TransformBackend, option: str) -> bool:
    """
    Whether get_backend(name, **{option: ...}) would accept the option.

    Backend instances take no options; unknown names accept nothing.
    """
    if not isinstance(name, str):
        return False
    backend_cls = _BACKENDS.get(_resolve(name))
    if backend_cls is None:
        return False
    return option in inspect.signature(backend_cls).parameters


def list_backends() -> list[str]:
    """Return registered backend names in insertion order."""
    return list(_BACKENDS.keys())


def _resolve(name: str) -> str:
    key = name.strip().lower()
    return _BACKEND_ALIASES.get(key, key)
