"""Azure AD Domain Services client."""

from __future__ import annotations

import logging
from typing import Any

from ..ids import DomainServiceId
from ..models.domain_services import DomainService
from ..polling import AsyncOperation, model_decoder
from ..transport import HttpResponse
from .base import ArmClient, coerce_model, decode_model, validate_resource_group_name

logger = logging.getLogger(__name__)

_DOMAIN_SERVICE_PATH = (
    "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}"
    "/providers/Microsoft.AAD/domainServices/{domainServiceName}"
)


def _discard(response: HttpResponse) -> None:
    return None


class DomainServicesClient(ArmClient):
    api_version = "2020-01-01"

    def create_or_update(
        self,
        resource_group: str,
        name: str,
        domain_service: DomainService | dict[str, Any],
    ) -> AsyncOperation[DomainService]:
        validate_resource_group_name(resource_group)
        body = coerce_model(DomainService, domain_service, "domain_service")
        url = self._url(_DOMAIN_SERVICE_PATH, resourceGroupName=resource_group, domainServiceName=name)
        response = self._request("PUT", url, body.to_body())
        return self._begin(response, model_decoder(DomainService), 200, 201, 202)

    def get(self, resource_group: str, name: str) -> DomainService:
        validate_resource_group_name(resource_group)
        url = self._url(_DOMAIN_SERVICE_PATH, resourceGroupName=resource_group, domainServiceName=name)
        response = self._check_status(self._request("GET", url), 200)
        return decode_model(DomainService, response)

    def delete(self, resource_group: str, name: str) -> AsyncOperation[None]:
        validate_resource_group_name(resource_group)
        url = self._url(_DOMAIN_SERVICE_PATH, resourceGroupName=resource_group, domainServiceName=name)
        response = self._request("DELETE", url)
        return self._begin(response, _discard, 200, 202, 204)

    def exists(self, domain_service_id: DomainServiceId) -> bool:
        """True if the domain service exists, False on 404."""
        url = self._url(
            _DOMAIN_SERVICE_PATH,
            subscriptionId=domain_service_id.subscription_id,
            resourceGroupName=domain_service_id.resource_group,
            domainServiceName=domain_service_id.name,
        )
        response = self._check_status(self._request("GET", url), 200, 404)
        found = response.status_code == 200
        logger.debug("%s exists: %s", domain_service_id, found)
        return found
