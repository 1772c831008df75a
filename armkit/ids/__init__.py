"""Resource identifiers — re-export the codec, typed IDs and registry."""

from .registry import get_id_type, id_type_keys, register_id_type, resolve_resource_id
from .resource_id import ParsedResourceId, ResourceId, format_resource_id, parse_resource_id
from .types import (
    AutomationAccountId,
    DomainServiceId,
    DscNodeConfigurationId,
    SubnetId,
    VirtualNetworkId,
)

__all__ = [
    "AutomationAccountId",
    "DomainServiceId",
    "DscNodeConfigurationId",
    "ParsedResourceId",
    "ResourceId",
    "SubnetId",
    "VirtualNetworkId",
    "format_resource_id",
    "get_id_type",
    "id_type_keys",
    "parse_resource_id",
    "register_id_type",
    "resolve_resource_id",
]
