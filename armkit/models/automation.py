"""Azure Automation DSC node configuration models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import ArmModel


class ContentHash(ArmModel):
    algorithm: str
    value: str


class ContentSource(ArmModel):
    hash: Optional[ContentHash] = None
    type: Optional[str] = Field(default=None, description="'embeddedContent' or 'uri'")
    value: Optional[str] = None
    version: Optional[str] = None


class DscConfigurationAssociationProperty(ArmModel):
    name: Optional[str] = None


class DscNodeConfigurationCreateOrUpdateProperties(ArmModel):
    source: ContentSource
    configuration: DscConfigurationAssociationProperty
    increment_node_configuration_build: Optional[bool] = None


class DscNodeConfigurationCreateOrUpdateParameters(ArmModel):
    properties: DscNodeConfigurationCreateOrUpdateProperties
    name: Optional[str] = None
    tags: dict[str, str] = Field(default_factory=dict)


class DscNodeConfigurationProperties(ArmModel):
    last_modified_time: Optional[datetime] = None
    creation_time: Optional[datetime] = None
    configuration: Optional[DscConfigurationAssociationProperty] = None
    source: Optional[str] = None
    node_count: Optional[int] = None
    increment_node_configuration_build: Optional[bool] = None


class DscNodeConfiguration(ArmModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    properties: Optional[DscNodeConfigurationProperties] = None


class DscNodeConfigurationListResult(ArmModel):
    value: list[DscNodeConfiguration] = Field(default_factory=list)
    next_link: Optional[str] = None
    total_count: Optional[int] = None
