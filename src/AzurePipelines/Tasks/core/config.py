# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .telemetry import TelemetryConfig


@dataclass(frozen=True)
class ResourceManagerConfig:
    """
    Configuration settings for Resource Manager client operations.

    :param base_url: Resource Manager endpoint. Default is ``https://management.azure.com``.
    :type base_url: str
    :param api_version: ``api-version`` query value sent with every request (default: ``2016-07-01``).
    :type api_version: str
    :param accept_language: Value of the ``accept-language`` header (default: ``en-US``).
    :type accept_language: str
    :param long_running_operation_timeout: Maximum cumulative wait in seconds while polling
        a long running operation (default: 1800).
    :type long_running_operation_timeout: float
    :param long_running_operation_retry_interval: Delay in seconds between polls when the
        service sends no ``Retry-After`` header (default: 10).
    :type long_running_operation_retry_interval: float
    :param generate_client_request_id: Whether to send a fresh ``x-ms-client-request-id`` per request.
    :type generate_client_request_id: bool
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param telemetry: Optional logging and hook configuration.
    :type telemetry: ~AzurePipelines.Tasks.core.telemetry.TelemetryConfig or None
    """
    base_url: str = "https://management.azure.com"
    api_version: str = "2016-07-01"
    accept_language: str = "en-US"

    # Long running operation polling
    long_running_operation_timeout: float = 30 * 60
    long_running_operation_retry_interval: float = 10.0

    generate_client_request_id: bool = True
    http_timeout: Optional[float] = None

    telemetry: Optional[TelemetryConfig] = None

    @classmethod
    def from_env(cls) -> "ResourceManagerConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~AzurePipelines.Tasks.core.config.ResourceManagerConfig
        """
        # Environment-free defaults
        return cls(
            base_url="https://management.azure.com",
            api_version="2016-07-01",
            accept_language="en-US",
            long_running_operation_timeout=30 * 60,
            long_running_operation_retry_interval=10.0,
            generate_client_request_id=True,
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
            telemetry=None,
        )
