# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Resource group operations namespace."""

from __future__ import annotations

from typing import Any, Dict, TYPE_CHECKING

from ..common.constants import RESOURCE_GROUP_PATH
from ..core._http import WebRequest
from ..core.errors import _http_error_from_response
from ..core.results import OperationResult, _capture
from ..core.validation import _require_parameters, _require_resource_group_name, _serialize_parameters

if TYPE_CHECKING:
    from ..client import ResourceManagementClient


class ResourceGroupOperations:
    """
    Resource group operations.

    Accessed via ``client.resource_groups``. Names are validated before any
    request is sent; every method returns an ``ApiResult``.

    Example::

        outcome = client.resource_groups.check_existence("my-rg")
        if outcome.is_success and not outcome.result:
            client.resource_groups.create_or_update("my-rg", {"location": "westus"})
    """

    def __init__(self, client: "ResourceManagementClient") -> None:
        self._client = client

    def _uri(self, resource_group_name: str) -> str:
        return self._client.get_request_uri(RESOURCE_GROUP_PATH, {"resourceGroupName": resource_group_name})

    def check_existence(self, resource_group_name: str) -> OperationResult[bool]:
        """
        Check whether a resource group exists.

        :param resource_group_name: Name of the resource group.
        :type resource_group_name: str
        :return: ``Success(True)`` on 204, ``Success(False)`` on 404, ``Failure`` otherwise.
        """

        def _run() -> bool:
            _require_resource_group_name(resource_group_name)
            request = WebRequest("HEAD", self._uri(resource_group_name))
            response = self._client._send(request, "resource_groups.check_existence")
            if response.status_code == 204:
                return True
            if response.status_code == 404:
                return False
            raise _http_error_from_response(response)

        return _capture(_run)

    def delete(self, resource_group_name: str) -> OperationResult[None]:
        """
        Delete a resource group and everything in it.

        A ``200`` is immediate success. A ``202`` is polled until the operation
        finishes; the terminal response must be ``200``.

        :param resource_group_name: Name of the resource group.
        :type resource_group_name: str
        :return: ``Success(None)`` or ``Failure``.
        """

        def _run() -> None:
            _require_resource_group_name(resource_group_name)
            request = WebRequest("DELETE", self._uri(resource_group_name))
            response = self._client._send(request, "resource_groups.delete")
            if response.status_code == 200:
                return None
            if response.status_code != 202:
                raise _http_error_from_response(response)
            final = self._client._poller().await_completion(request, response)
            if final.status_code != 200:
                raise _http_error_from_response(final)
            return None

        return _capture(_run)

    def create_or_update(self, resource_group_name: str, parameters: Dict[str, Any]) -> OperationResult[Dict[str, Any]]:
        """
        Create a resource group or update an existing one.

        Resource group PUT is synchronous; no polling is performed.

        :param resource_group_name: Name of the resource group.
        :type resource_group_name: str
        :param parameters: Resource group body, e.g. ``{"location": "westus", "tags": {...}}``.
        :type parameters: dict
        :return: ``Success`` carrying the parsed resource group, or ``Failure``.
        """

        def _run() -> Dict[str, Any]:
            _require_resource_group_name(resource_group_name)
            _require_parameters(parameters)
            request = WebRequest("PUT", self._uri(resource_group_name), body=_serialize_parameters(parameters))
            response = self._client._send(request, "resource_groups.create_or_update")
            if response.status_code not in (200, 201):
                raise _http_error_from_response(response)
            return response.json()

        return _capture(_run)
