"""armkit data models — re-export all models for convenient imports."""

from .automation import (
    ContentHash,
    ContentSource,
    DscConfigurationAssociationProperty,
    DscNodeConfiguration,
    DscNodeConfigurationCreateOrUpdateParameters,
    DscNodeConfigurationCreateOrUpdateProperties,
    DscNodeConfigurationListResult,
    DscNodeConfigurationProperties,
)
from .base import ArmModel
from .domain_services import DomainService, DomainServiceProperties, ReplicaSet

__all__ = [
    "ArmModel",
    "ContentHash",
    "ContentSource",
    "DomainService",
    "DomainServiceProperties",
    "DscConfigurationAssociationProperty",
    "DscNodeConfiguration",
    "DscNodeConfigurationCreateOrUpdateParameters",
    "DscNodeConfigurationCreateOrUpdateProperties",
    "DscNodeConfigurationListResult",
    "DscNodeConfigurationProperties",
    "ReplicaSet",
]
