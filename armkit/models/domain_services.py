"""Azure AD Domain Services models."""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from .base import ArmModel


class ReplicaSet(ArmModel):
    location: Optional[str] = None
    subnet_id: Optional[str] = None
    replica_set_id: Optional[str] = None
    service_status: Optional[str] = None
    domain_controller_ip_address: list[str] = Field(default_factory=list)


class DomainServiceProperties(ArmModel):
    domain_name: Optional[str] = None
    sku: Optional[str] = None
    filtered_sync: Optional[str] = None
    sync_owner: Optional[str] = None
    version: Optional[int] = None
    deployment_id: Optional[str] = None
    provisioning_state: Optional[str] = None
    replica_sets: list[ReplicaSet] = Field(default_factory=list)


class DomainService(ArmModel):
    id: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    location: Optional[str] = None
    etag: Optional[str] = None
    tags: dict[str, str] = Field(default_factory=dict)
    properties: Optional[DomainServiceProperties] = None
