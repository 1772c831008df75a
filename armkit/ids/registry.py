"""ID-type registry — maps a type key (e.g. 'domain_service') to its ResourceId class."""

from __future__ import annotations

from typing import Callable, Optional

from ..errors import MalformedIdentifier
from .resource_id import ResourceId, parse_resource_id

_ID_TYPES: dict[str, type[ResourceId]] = {}


def register_id_type(key: str) -> Callable[[type[ResourceId]], type[ResourceId]]:
    """Class decorator: register a ResourceId subclass under *key*."""
    def decorator(cls: type[ResourceId]) -> type[ResourceId]:
        if key in _ID_TYPES and _ID_TYPES[key] is not cls:
            raise ValueError(f"ID type '{key}' is already registered to {_ID_TYPES[key].__name__}")
        _ID_TYPES[key] = cls
        return cls
    return decorator


def get_id_type(key: str) -> type[ResourceId]:
    cls = _ID_TYPES.get(key)
    if cls is None:
        raise KeyError(f"No ID type registered for '{key}'. Supported: {id_type_keys()}")
    return cls


def id_type_keys() -> list[str]:
    return sorted(_ID_TYPES)


def resolve_resource_id(input: str) -> ResourceId:
    """Parse *input* with the registered type that best matches its provider and segment keys.

    The chosen type is the one with the most segment keys, all of which
    appear in *input*; its strict parse then rejects any leftover segments.
    """
    parsed = parse_resource_id(input)
    provider = parsed.provider.lower()
    keys = {k.lower() for k, _ in parsed.segments}

    best: Optional[type[ResourceId]] = None
    for cls in _ID_TYPES.values():
        cls_provider, cls_keys = cls.shape()
        if cls_provider != provider or not set(cls_keys) <= keys:
            continue
        if best is None or len(cls_keys) > len(best.segments):
            best = cls

    if best is None:
        raise MalformedIdentifier(f"no registered ID type matches {input!r}")
    return best.parse(input)
