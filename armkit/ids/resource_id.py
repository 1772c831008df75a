"""ARM resource ID parsing and formatting.

An ARM resource ID is a slash-delimited path of ``{key}/{value}`` pairs::

    /subscriptions/{sub}/resourceGroups/{rg}/providers/{namespace}/{type}/{name}[/{type}/{name}...]

``parse_resource_id`` splits any such path into a :class:`ParsedResourceId`;
typed IDs (subclasses of :class:`ResourceId`) then pop the segments they
declare and reject anything left over.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from typing import ClassVar, TypeVar

from ..errors import MalformedIdentifier, UnexpectedSegment

T = TypeVar("T", bound="ResourceId")

SUBSCRIPTIONS = "subscriptions"
RESOURCE_GROUPS = "resourceGroups"
PROVIDERS = "providers"


@dataclass
class ParsedResourceId:
    """Generic parse result; typed IDs consume ``segments`` via ``pop_segment``."""

    subscription_id: str
    resource_group: str = ""
    provider: str = ""
    segments: list[tuple[str, str]] = field(default_factory=list)

    def pop_segment(self, key: str) -> str:
        """Remove and return the value of the first segment named *key* (any casing)."""
        wanted = key.lower()
        for i, (k, v) in enumerate(self.segments):
            if k.lower() == wanted:
                del self.segments[i]
                return v
        raise MalformedIdentifier(f"ID was missing the '{key}' element")

    def ensure_consumed(self) -> None:
        """Raise UnexpectedSegment if any segment was never popped."""
        if self.segments:
            raise UnexpectedSegment(list(self.segments))


def parse_resource_id(input: str) -> ParsedResourceId:
    """Split an ARM path into subscription, resource group, provider and the rest.

    Keys are matched case-insensitively; values keep their casing. Empty
    values anywhere in the path are rejected.
    """
    if not input:
        raise MalformedIdentifier("ID was empty")
    if not input.startswith("/"):
        raise MalformedIdentifier(f"ID must start with '/{SUBSCRIPTIONS}/': {input!r}")

    components = input[1:].split("/")
    if len(components) % 2 != 0:
        raise MalformedIdentifier(
            f"the number of path segments in {input!r} is not divisible by 2"
        )

    pairs = list(zip(components[0::2], components[1::2]))
    for key, value in pairs:
        if not key or not value:
            raise MalformedIdentifier(f"ID contains an empty segment: {input!r}")

    first_key, subscription_id = pairs[0]
    if first_key.lower() != SUBSCRIPTIONS:
        raise MalformedIdentifier(f"ID was missing the '{SUBSCRIPTIONS}' element")

    parsed = ParsedResourceId(subscription_id=subscription_id)
    for key, value in pairs[1:]:
        lowered = key.lower()
        if lowered == RESOURCE_GROUPS.lower() and not parsed.resource_group:
            parsed.resource_group = value
        elif lowered == PROVIDERS and not parsed.provider:
            parsed.provider = value
        else:
            parsed.segments.append((key, value))
    return parsed


@dataclass(frozen=True)
class ResourceId:
    """Base for typed, immutable resource identifiers.

    Subclasses declare one dataclass field per named segment and describe
    the path shape with three class attributes:

    - ``kind``: human label used by ``str()``
    - ``provider``: resource provider namespace, e.g. ``Microsoft.AAD``
    - ``segments``: ordered ``(segment_key, field_name)`` pairs after the provider
    """

    subscription_id: str
    resource_group: str

    kind: ClassVar[str] = "Resource"
    provider: ClassVar[str] = ""
    segments: ClassVar[tuple[tuple[str, str], ...]] = ()

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not value:
                raise MalformedIdentifier(
                    f"{type(self).__name__}.{f.name} must be a non-empty string"
                )
            if "/" in value:
                raise MalformedIdentifier(
                    f"{type(self).__name__}.{f.name} may not contain '/': {value!r}"
                )

    @classmethod
    def parse(cls: type[T], input: str) -> T:
        """Parse *input* strictly into this ID type."""
        parsed = parse_resource_id(input)

        if not parsed.resource_group:
            raise MalformedIdentifier(f"ID was missing the '{RESOURCE_GROUPS}' element")
        if not parsed.provider:
            raise MalformedIdentifier(f"ID was missing the '{PROVIDERS}' element")
        if parsed.provider.lower() != cls.provider.lower():
            raise MalformedIdentifier(
                f"ID has provider {parsed.provider!r}, expected {cls.provider!r}"
            )

        values = {field_name: parsed.pop_segment(key) for key, field_name in cls.segments}
        parsed.ensure_consumed()

        return cls(
            subscription_id=parsed.subscription_id,
            resource_group=parsed.resource_group,
            **values,
        )

    @classmethod
    def shape(cls) -> tuple[str, tuple[str, ...]]:
        """Case-folded provider and sorted segment keys, used to match paths to types."""
        return cls.provider.lower(), tuple(sorted(key.lower() for key, _ in cls.segments))

    def id(self) -> str:
        """Render the canonical ARM path."""
        parts = [
            "", SUBSCRIPTIONS, self.subscription_id,
            RESOURCE_GROUPS, self.resource_group,
            PROVIDERS, self.provider,
        ]
        for key, field_name in self.segments:
            parts.extend((key, getattr(self, field_name)))
        return "/".join(parts)

    def __str__(self) -> str:
        labels = [
            f"{field_name.replace('_', ' ').title()} {_quote(getattr(self, field_name))}"
            for _, field_name in reversed(self.segments)
        ]
        labels.append(f"Resource Group {_quote(self.resource_group)}")
        return f"{self.kind}: ({' / '.join(labels)})"


def format_resource_id(resource_id: ResourceId) -> str:
    """Render *resource_id* as its canonical ARM path."""
    return resource_id.id()


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)
