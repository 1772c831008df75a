"""Typed resource IDs for the resources armkit manages."""

from __future__ import annotations

from dataclasses import dataclass

from .registry import register_id_type
from .resource_id import ResourceId


@register_id_type("domain_service")
@dataclass(frozen=True)
class DomainServiceId(ResourceId):
    name: str

    kind = "Domain Service"
    provider = "Microsoft.AAD"
    segments = (("domainServices", "name"),)


@register_id_type("automation_account")
@dataclass(frozen=True)
class AutomationAccountId(ResourceId):
    name: str

    kind = "Automation Account"
    provider = "Microsoft.Automation"
    segments = (("automationAccounts", "name"),)


@register_id_type("dsc_node_configuration")
@dataclass(frozen=True)
class DscNodeConfigurationId(ResourceId):
    automation_account_name: str
    name: str

    kind = "Dsc Node Configuration"
    provider = "Microsoft.Automation"
    segments = (
        ("automationAccounts", "automation_account_name"),
        ("nodeConfigurations", "name"),
    )

    @property
    def automation_account_id(self) -> AutomationAccountId:
        return AutomationAccountId(self.subscription_id, self.resource_group, self.automation_account_name)


@register_id_type("virtual_network")
@dataclass(frozen=True)
class VirtualNetworkId(ResourceId):
    name: str

    kind = "Virtual Network"
    provider = "Microsoft.Network"
    segments = (("virtualNetworks", "name"),)


@register_id_type("subnet")
@dataclass(frozen=True)
class SubnetId(ResourceId):
    virtual_network_name: str
    name: str

    kind = "Subnet"
    provider = "Microsoft.Network"
    segments = (
        ("virtualNetworks", "virtual_network_name"),
        ("subnets", "name"),
    )

    @property
    def virtual_network_id(self) -> VirtualNetworkId:
        return VirtualNetworkId(self.subscription_id, self.resource_group, self.virtual_network_name)
