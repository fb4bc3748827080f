# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Template deployment operations namespace."""

from __future__ import annotations

import logging
from typing import Any, Dict, TYPE_CHECKING

from ..common.constants import DEPLOYMENT_PATH, PROVISIONING_STATE_SUCCEEDED
from ..core import _error_codes as ec
from ..core._http import WebRequest
from ..core.errors import OperationFailedError, _http_error_from_response, _service_error
from ..core.results import OperationResult, _capture
from ..core.validation import (
    _require_deployment_name,
    _require_parameters,
    _require_resource_group_name,
    _serialize_parameters,
)

if TYPE_CHECKING:
    from ..client import ResourceManagementClient

_LOGGER = logging.getLogger(__name__)


class DeploymentOperations:
    """
    ARM template deployment operations.

    Accessed via ``client.deployments``.

    Example::

        outcome = client.deployments.create_or_update(
            "my-rg",
            "deploy-1",
            {"properties": {"mode": "Incremental", "template": template, "parameters": {}}},
        )
        deployment = outcome.unwrap()
        print(deployment["properties"]["outputs"])
    """

    def __init__(self, client: "ResourceManagementClient") -> None:
        self._client = client

    def _uri(self, resource_group_name: str, deployment_name: str) -> str:
        return self._client.get_request_uri(
            DEPLOYMENT_PATH,
            {"resourceGroupName": resource_group_name, "deploymentName": deployment_name},
        )

    def create_or_update(
        self,
        resource_group_name: str,
        deployment_name: str,
        parameters: Dict[str, Any],
    ) -> OperationResult[Dict[str, Any]]:
        """
        Deploy a template into a resource group and wait for it to finish.

        After the long running operation completes, the deployment is read
        back and its ``properties.provisioningState`` decides the outcome:
        the deployment resource is authoritative over the operation status.

        :param resource_group_name: Target resource group.
        :type resource_group_name: str
        :param deployment_name: Name of the deployment.
        :type deployment_name: str
        :param parameters: Deployment body (``properties.template``, ``properties.mode``, ...).
        :type parameters: dict
        :return: ``Success`` carrying the deployment when it ``Succeeded``; otherwise
            ``Failure`` carrying the deployment's ``properties.error``.
        """

        def _run() -> Dict[str, Any]:
            _require_resource_group_name(resource_group_name)
            _require_deployment_name(deployment_name)
            _require_parameters(parameters)
            request = WebRequest(
                "PUT",
                self._uri(resource_group_name, deployment_name),
                body=_serialize_parameters(parameters),
            )
            response = self._client._send(request, "deployments.create_or_update")
            if response.status_code not in (200, 201):
                raise _http_error_from_response(response)
            self._client._poller().await_completion(request, response)

            deployment = self.get(resource_group_name, deployment_name).unwrap()
            body = deployment if isinstance(deployment, dict) else {}
            properties = body.get("properties")
            if not isinstance(properties, dict):
                properties = {}
            state = properties.get("provisioningState")
            if state == PROVISIONING_STATE_SUCCEEDED:
                return deployment
            _LOGGER.warning("Deployment %s ended in provisioning state %s", deployment_name, state)
            err = _service_error(deployment)
            raise OperationFailedError(
                err.get("message") or f"Deployment '{deployment_name}' ended in provisioning state '{state}'.",
                subcode=ec.OPERATION_CANCELED if state == "Canceled" else ec.OPERATION_FAILED,
                service_error_code=err.get("code"),
                details={"provisioning_state": state, "error": err} if err else {"provisioning_state": state},
            )

        return _capture(_run)

    def get(self, resource_group_name: str, deployment_name: str) -> OperationResult[Dict[str, Any]]:
        """
        Fetch a deployment.

        :param resource_group_name: Resource group holding the deployment.
        :type resource_group_name: str
        :param deployment_name: Name of the deployment.
        :type deployment_name: str
        :return: ``Success`` carrying the parsed deployment on 200, ``Failure`` otherwise.
        """

        def _run() -> Dict[str, Any]:
            _require_resource_group_name(resource_group_name)
            _require_deployment_name(deployment_name)
            request = WebRequest("GET", self._uri(resource_group_name, deployment_name))
            response = self._client._send(request, "deployments.get")
            if response.status_code != 200:
                raise _http_error_from_response(response)
            return response.json()

        return _capture(_run)
