"""Azure Automation client — DSC node configurations."""

from __future__ import annotations

import logging
from typing import Any, Iterator, Optional

from ..ids import DscNodeConfigurationId
from ..models.automation import (
    DscNodeConfiguration,
    DscNodeConfigurationCreateOrUpdateParameters,
    DscNodeConfigurationListResult,
)
from ..polling import AsyncOperation, model_decoder
from .base import ArmClient, coerce_model, decode_model, validate_resource_group_name

logger = logging.getLogger(__name__)

_ACCOUNT_PATH = (
    "/subscriptions/{subscriptionId}/resourceGroups/{resourceGroupName}"
    "/providers/Microsoft.Automation/automationAccounts/{automationAccountName}"
)
_NODE_CONFIGURATIONS_PATH = _ACCOUNT_PATH + "/nodeConfigurations"
_NODE_CONFIGURATION_PATH = _NODE_CONFIGURATIONS_PATH + "/{nodeConfigurationName}"


class DscNodeConfigurationClient(ArmClient):
    api_version = "2018-01-15"

    def create_or_update(
        self,
        resource_group: str,
        automation_account: str,
        name: str,
        parameters: DscNodeConfigurationCreateOrUpdateParameters | dict[str, Any],
    ) -> AsyncOperation[DscNodeConfiguration]:
        """Create the node configuration identified by *name*, or replace it.

        Returns an operation to poll; its result is the stored configuration.
        """
        validate_resource_group_name(resource_group)
        params = coerce_model(DscNodeConfigurationCreateOrUpdateParameters, parameters, "parameters")

        url = self._url(
            _NODE_CONFIGURATION_PATH,
            resourceGroupName=resource_group,
            automationAccountName=automation_account,
            nodeConfigurationName=name,
        )
        response = self._request("PUT", url, params.to_body())
        return self._begin(response, model_decoder(DscNodeConfiguration), 200, 201, 202)

    def get(self, resource_group: str, automation_account: str, name: str) -> DscNodeConfiguration:
        validate_resource_group_name(resource_group)
        url = self._url(
            _NODE_CONFIGURATION_PATH,
            resourceGroupName=resource_group,
            automationAccountName=automation_account,
            nodeConfigurationName=name,
        )
        response = self._check_status(self._request("GET", url), 200)
        return decode_model(DscNodeConfiguration, response)

    def get_by_id(self, node_configuration_id: DscNodeConfigurationId) -> DscNodeConfiguration:
        url = self._url(
            _NODE_CONFIGURATION_PATH,
            subscriptionId=node_configuration_id.subscription_id,
            resourceGroupName=node_configuration_id.resource_group,
            automationAccountName=node_configuration_id.automation_account_name,
            nodeConfigurationName=node_configuration_id.name,
        )
        response = self._check_status(self._request("GET", url), 200)
        return decode_model(DscNodeConfiguration, response)

    def delete(self, resource_group: str, automation_account: str, name: str) -> None:
        validate_resource_group_name(resource_group)
        url = self._url(
            _NODE_CONFIGURATION_PATH,
            resourceGroupName=resource_group,
            automationAccountName=automation_account,
            nodeConfigurationName=name,
        )
        self._check_status(self._request("DELETE", url), 200, 204)
        logger.info("Deleted DSC node configuration %s/%s/%s", resource_group, automation_account, name)

    def list_by_automation_account(
        self,
        resource_group: str,
        automation_account: str,
        filter: Optional[str] = None,
        skip: Optional[int] = None,
        top: Optional[int] = None,
        inlinecount: Optional[str] = None,
    ) -> Iterator[DscNodeConfiguration]:
        """Iterate every node configuration in the account, crossing page boundaries."""
        validate_resource_group_name(resource_group)
        url = self._url(
            _NODE_CONFIGURATIONS_PATH,
            query={"$filter": filter, "$skip": skip, "$top": top, "$inlinecount": inlinecount},
            resourceGroupName=resource_group,
            automationAccountName=automation_account,
        )
        for page in self._pages(url, DscNodeConfigurationListResult):
            yield from page.value
