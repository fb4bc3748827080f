# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import dataclasses
import uuid
from typing import Mapping, Optional, Sequence

import requests
from azure.core.credentials import TokenCredential
from azure.core.exceptions import ClientAuthenticationError

from .common.constants import (
    HEADER_ACCEPT_LANGUAGE,
    HEADER_AUTHORIZATION,
    HEADER_CLIENT_REQUEST_ID,
    HEADER_CONTENT_TYPE,
    HEADER_REQUEST_ID,
    JSON_CONTENT_TYPE,
)
from .core import _error_codes as ec
from .core._auth import _AuthManager
from .core._http import WebRequest, WebResponse, _HttpClient
from .core._uri import _build_request_uri
from .core.config import ResourceManagerConfig
from .core.errors import AuthenticationError, TransportError
from .core.lro import _LongRunningOperationPoller
from .core.telemetry import create_telemetry_manager
from .operations.deployments import DeploymentOperations
from .operations.resource_groups import ResourceGroupOperations


class ResourceManagementClient:
    """
    Minimal client for the Azure Resource Manager REST API.

    Operations are organized under namespaces:

    - ``client.resource_groups``: existence check, create or update, delete
    - ``client.deployments``: template deployment create or update, get

    Every operation returns an :data:`~AzurePipelines.Tasks.core.results.ApiResult`
    instead of raising. The client holds only immutable configuration, so one
    instance may serve concurrent operations from several threads.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager enables connection pooling and
        ensures the session is closed::

            with ResourceManagementClient(credential, subscription_id) as client:
                client.resource_groups.create_or_update("my-rg", {"location": "westus"})

    :param credential: Azure Identity credential for authentication.
    :type credential: ~azure.core.credentials.TokenCredential
    :param subscription_id: Subscription the operations target.
    :type subscription_id: :class:`str`
    :param config: Optional endpoint, API version, polling and telemetry settings.
        If not provided, defaults are loaded from
        :meth:`~AzurePipelines.Tasks.core.config.ResourceManagerConfig.from_env`.
    :type config: ~AzurePipelines.Tasks.core.config.ResourceManagerConfig or None

    :raises ValueError: If ``credential`` or ``subscription_id`` is missing.
    :raises TypeError: If ``credential`` is not a ``TokenCredential``.

    Example::

        from azure.identity import DefaultAzureCredential
        from AzurePipelines.Tasks.client import ResourceManagementClient

        client = ResourceManagementClient(DefaultAzureCredential(), "00000000-0000-0000-0000-000000000000")
        outcome = client.deployments.create_or_update("my-rg", "deploy-1", {"properties": {...}})
        if not outcome.is_success:
            print(outcome.error.to_dict())
    """

    def __init__(
        self,
        credential: TokenCredential,
        subscription_id: str,
        config: Optional[ResourceManagerConfig] = None,
    ) -> None:
        if credential is None:
            raise ValueError("credential is required.")
        if not subscription_id:
            raise ValueError("subscription_id is required.")
        self.auth = _AuthManager(credential)
        self._subscription_id = subscription_id
        self._config = config or ResourceManagerConfig.from_env()
        self._base_url = self._config.base_url.rstrip("/")
        self._telemetry = create_telemetry_manager(self._config.telemetry)
        self._http: Optional[_HttpClient] = None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

        # Initialize operation namespaces
        self.resource_groups = ResourceGroupOperations(self)
        self.deployments = DeploymentOperations(self)

    @property
    def subscription_id(self) -> str:
        return self._subscription_id

    @property
    def config(self) -> ResourceManagerConfig:
        return self._config

    def __enter__(self) -> "ResourceManagementClient":
        """Create a pooled HTTP session used by every operation inside the context."""
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
            self._http = None
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Release the HTTP session, if any. Safe to call multiple times.
        """
        self._http = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_http(self) -> _HttpClient:
        if self._http is None:
            self._http = _HttpClient(timeout=self._config.http_timeout, session=self._session)
        return self._http

    def get_request_uri(
        self,
        template: str,
        parameters: Optional[Mapping[str, object]] = None,
        query_parameters: Optional[Sequence[str]] = None,
    ) -> str:
        """
        Build a request URI from a path template.

        :param template: Path relative to the base URL, e.g.
            ``"//subscriptions/{subscriptionId}/resourcegroups/{resourceGroupName}"``.
        :param parameters: Placeholder values keyed by placeholder name
            (``"resourceGroupName"``; ``"{resourceGroupName}"`` is accepted too).
        :param query_parameters: Extra ``key=value`` query entries, placed before ``api-version``.
        :return: Absolute URI with percent-encoded values and a single ``api-version``.
        :raises ValueError: If the template names a placeholder with no value.

        Example::

            client.get_request_uri(
                "//subscriptions/{subscriptionId}/resourcegroups/{resourceGroupName}",
                {"resourceGroupName": "my rg"},
            )
            # https://management.azure.com/subscriptions/<id>/resourcegroups/my%20rg?api-version=2016-07-01
        """
        return _build_request_uri(
            self._base_url,
            template,
            self._subscription_id,
            self._config.api_version,
            parameters,
            query_parameters,
        )

    def _send(self, request: WebRequest, operation: str) -> WebResponse:
        """
        Send ``request`` with authorization and default headers applied.

        :raises AuthenticationError: If no access token can be acquired.
        :raises TransportError: On a network-level failure. Never retried.
        """
        headers = dict(request.headers)
        try:
            token = self.auth._acquire_token(f"{self._base_url}/.default").access_token
        except ClientAuthenticationError as e:
            raise AuthenticationError(f"Failed to acquire an access token: {e}") from e
        headers[HEADER_AUTHORIZATION] = f"Bearer {token}"
        if self._config.accept_language:
            headers[HEADER_ACCEPT_LANGUAGE] = self._config.accept_language
        if request.body is not None:
            headers[HEADER_CONTENT_TYPE] = JSON_CONTENT_TYPE
        client_request_id = str(uuid.uuid4()) if self._config.generate_client_request_id else None
        if client_request_id:
            headers[HEADER_CLIENT_REQUEST_ID] = client_request_id
        headers.update(self._telemetry.get_additional_headers())
        outbound = dataclasses.replace(request, headers=headers)

        with self._telemetry.trace_request(operation, request.method, request.uri, client_request_id) as ctx:
            try:
                response = self._get_http()._request(outbound)
            except requests.exceptions.RequestException as e:
                raise TransportError(
                    f"{request.method} {request.uri} failed: {e}",
                    subcode=_transport_subcode(e),
                    details={"method": request.method, "uri": request.uri},
                ) from e
            self._telemetry.record_response(ctx, response.status_code, response.headers.get(HEADER_REQUEST_ID))
        return response

    def _poller(self) -> _LongRunningOperationPoller:
        return _LongRunningOperationPoller(
            self._send,
            timeout=self._config.long_running_operation_timeout,
            retry_interval=self._config.long_running_operation_retry_interval,
        )


def _transport_subcode(error: requests.exceptions.RequestException) -> str:
    if isinstance(error, requests.exceptions.Timeout):
        return ec.TRANSPORT_TIMEOUT
    if isinstance(error, requests.exceptions.ConnectionError):
        return ec.TRANSPORT_CONNECTION
    return ec.TRANSPORT_OTHER
