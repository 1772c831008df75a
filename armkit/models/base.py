"""Shared base for ARM request/response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ArmModel(BaseModel):
    """camelCase on the wire, snake_case in Python; unknown fields are ignored."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True, "extra": "ignore"}

    def to_body(self) -> dict[str, Any]:
        """Serialise for a request body."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
