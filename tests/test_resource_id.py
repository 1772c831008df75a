"""Tests for armkit.ids.resource_id — parsing, formatting and labels."""

from __future__ import annotations

import pytest

from armkit.errors import MalformedIdentifier, UnexpectedSegment
from armkit.ids import (
    AutomationAccountId,
    DomainServiceId,
    DscNodeConfigurationId,
    SubnetId,
    VirtualNetworkId,
    format_resource_id,
    parse_resource_id,
)

SUB = "11111111-1111-1111-1111-111111111111"
DOMAIN_PATH = f"/subscriptions/{SUB}/resourceGroups/my-rg/providers/Microsoft.AAD/domainServices/my-domain"


# ── Parse / format ────────────────────────────────────────────────────────


def test_parse_domain_service_example():
    rid = DomainServiceId.parse(DOMAIN_PATH)
    assert rid == DomainServiceId(subscription_id=SUB, resource_group="my-rg", name="my-domain")
    assert rid.subscription_id == SUB
    assert rid.resource_group == "my-rg"
    assert rid.name == "my-domain"


def test_format_domain_service_example():
    rid = DomainServiceId(SUB, "my-rg", "my-domain")
    assert rid.id() == DOMAIN_PATH
    assert format_resource_id(rid) == DOMAIN_PATH


@pytest.mark.parametrize("rid", [
    DomainServiceId(SUB, "rg", "contoso.com"),
    AutomationAccountId(SUB, "Rg.With.Dots", "acct"),
    DscNodeConfigurationId(SUB, "rg", "acct", "webserver.localhost"),
    VirtualNetworkId(SUB, "rg", "vnet-01"),
    SubnetId(SUB, "rg", "vnet-01", "default"),
])
def test_round_trip(rid):
    assert type(rid).parse(rid.id()) == rid


def test_values_keep_caller_casing():
    rid = DomainServiceId(SUB, "My-RG", "My-Domain")
    assert rid.id().endswith("/resourceGroups/My-RG/providers/Microsoft.AAD/domainServices/My-Domain")
    assert DomainServiceId.parse(rid.id()).resource_group == "My-RG"


def test_nested_path():
    rid = DscNodeConfigurationId(SUB, "rg", "acct", "cfg.localhost")
    assert rid.id() == (
        f"/subscriptions/{SUB}/resourceGroups/rg/providers/Microsoft.Automation"
        "/automationAccounts/acct/nodeConfigurations/cfg.localhost"
    )
    assert rid.automation_account_id == AutomationAccountId(SUB, "rg", "acct")


def test_subnet_parent():
    rid = SubnetId.parse(
        f"/subscriptions/{SUB}/resourceGroups/rg/providers/Microsoft.Network/virtualNetworks/net/subnets/a"
    )
    assert rid.virtual_network_id == VirtualNetworkId(SUB, "rg", "net")


def test_segments_in_any_order():
    path = (
        f"/subscriptions/{SUB}/resourceGroups/rg/providers/Microsoft.Automation"
        "/nodeConfigurations/cfg/automationAccounts/acct"
    )
    assert DscNodeConfigurationId.parse(path) == DscNodeConfigurationId(SUB, "rg", "acct", "cfg")


# ── Case handling ─────────────────────────────────────────────────────────


@pytest.mark.parametrize("rg_key", ["resourceGroups", "resourcegroups", "RESOURCEGROUPS"])
def test_resource_group_key_any_case(rg_key):
    path = f"/subscriptions/{SUB}/{rg_key}/my-rg/providers/Microsoft.AAD/domainServices/my-domain"
    rid = DomainServiceId.parse(path)
    assert rid.resource_group == "my-rg"
    assert rid.id() == DOMAIN_PATH


def test_all_keys_any_case():
    path = f"/SUBSCRIPTIONS/{SUB}/ResourceGroups/my-rg/PROVIDERS/microsoft.aad/DOMAINSERVICES/my-domain"
    assert DomainServiceId.parse(path).id() == DOMAIN_PATH


# ── Rejection ─────────────────────────────────────────────────────────────


@pytest.mark.parametrize("bad", [
    "",
    "/subscriptions/",
    "/subscriptions",
    f"subscriptions/{SUB}/resourceGroups/my-rg/providers/Microsoft.AAD/domainServices/my-domain",
    f"/subscriptions/{SUB}/providers/Microsoft.AAD/domainServices/my-domain",
    f"/subscriptions/{SUB}/resourceGroups//providers/Microsoft.AAD/domainServices/my-domain",
    f"/subscriptions/{SUB}/resourceGroups/my-rg/providers/Microsoft.AAD/domainServices",
    f"/subscriptions/{SUB}/resourceGroups/my-rg/providers/Microsoft.AAD/domainServices/",
    f"/subscriptions/{SUB}/resourceGroups/my-rg/providers/Microsoft.AAD",
    f"/subscriptions/{SUB}/resourceGroups/my-rg/domainServices/my-domain",
    f"/resourceGroups/my-rg/subscriptions/{SUB}/providers/Microsoft.AAD/domainServices/my-domain",
])
def test_malformed(bad):
    with pytest.raises(MalformedIdentifier):
        DomainServiceId.parse(bad)


def test_missing_resource_group_message():
    with pytest.raises(MalformedIdentifier, match="resourceGroups"):
        DomainServiceId.parse(f"/subscriptions/{SUB}/providers/Microsoft.AAD/domainServices/x")


def test_missing_named_segment_message():
    with pytest.raises(MalformedIdentifier, match="domainServices"):
        DomainServiceId.parse(f"/subscriptions/{SUB}/resourceGroups/rg/providers/Microsoft.AAD/other/x")


def test_wrong_provider():
    with pytest.raises(MalformedIdentifier, match="Microsoft.AAD"):
        DomainServiceId.parse(f"/subscriptions/{SUB}/resourceGroups/rg/providers/Microsoft.Web/domainServices/x")


def test_extra_segment_is_unexpected():
    with pytest.raises(UnexpectedSegment) as exc:
        DomainServiceId.parse(DOMAIN_PATH + "/replicaSets/one")
    assert exc.value.segments == [("replicaSets", "one")]


def test_extra_segment_before_named_segment():
    path = f"/subscriptions/{SUB}/resourceGroups/rg/providers/Microsoft.AAD/extra/v/domainServices/x"
    with pytest.raises(UnexpectedSegment):
        DomainServiceId.parse(path)


def test_unexpected_segment_is_malformed():
    assert issubclass(UnexpectedSegment, MalformedIdentifier)
    assert issubclass(MalformedIdentifier, ValueError)


@pytest.mark.parametrize("kwargs", [
    {"subscription_id": "", "resource_group": "rg", "name": "x"},
    {"subscription_id": SUB, "resource_group": "", "name": "x"},
    {"subscription_id": SUB, "resource_group": "rg", "name": ""},
])
def test_direct_construction_rejects_empty(kwargs):
    with pytest.raises(MalformedIdentifier):
        DomainServiceId(**kwargs)


@pytest.mark.parametrize("build", [
    lambda: DomainServiceId(SUB, "rg", "a/b"),
    lambda: DomainServiceId(SUB, "rg/extra", "x"),
    lambda: DomainServiceId(f"{SUB}/", "rg", "x"),
    lambda: DscNodeConfigurationId(SUB, "rg", "acct/nodeConfigurations", "cfg"),
    lambda: SubnetId(SUB, "rg", "vnet", "/subnet"),
])
def test_direct_construction_rejects_slash(build):
    with pytest.raises(MalformedIdentifier, match="may not contain '/'"):
        build()


def test_ids_are_immutable_and_hashable():
    rid = DomainServiceId(SUB, "rg", "x")
    with pytest.raises(AttributeError):
        rid.name = "y"  # type: ignore[misc]
    assert {rid, DomainServiceId(SUB, "rg", "x")} == {rid}


# ── Labels ────────────────────────────────────────────────────────────────


def test_str_label():
    rid = DomainServiceId(SUB, "my-rg", "my-domain")
    assert str(rid) == 'Domain Service: (Name "my-domain" / Resource Group "my-rg")'


def test_str_label_nested():
    rid = DscNodeConfigurationId(SUB, "rg", "acct", "cfg.localhost")
    assert str(rid) == (
        'Dsc Node Configuration: (Name "cfg.localhost" / Automation Account Name "acct" / Resource Group "rg")'
    )


# ── Generic parser ────────────────────────────────────────────────────────


def test_parse_resource_id_generic():
    parsed = parse_resource_id(
        f"/subscriptions/{SUB}/resourceGroups/rg/providers/Microsoft.Automation"
        "/automationAccounts/acct/nodeConfigurations/cfg"
    )
    assert parsed.subscription_id == SUB
    assert parsed.resource_group == "rg"
    assert parsed.provider == "Microsoft.Automation"
    assert parsed.segments == [("automationAccounts", "acct"), ("nodeConfigurations", "cfg")]


def test_pop_segment_case_insensitive():
    parsed = parse_resource_id(DOMAIN_PATH)
    assert parsed.pop_segment("DOMAINSERVICES") == "my-domain"
    parsed.ensure_consumed()


def test_pop_segment_missing():
    parsed = parse_resource_id(DOMAIN_PATH)
    with pytest.raises(MalformedIdentifier, match="'virtualNetworks'"):
        parsed.pop_segment("virtualNetworks")


def test_resource_group_only_path():
    parsed = parse_resource_id(f"/subscriptions/{SUB}/resourceGroups/rg")
    assert parsed.resource_group == "rg"
    assert parsed.provider == ""
    assert parsed.segments == []


def test_odd_segment_count():
    with pytest.raises(MalformedIdentifier, match="divisible by 2"):
        parse_resource_id(f"/subscriptions/{SUB}/resourceGroups")
