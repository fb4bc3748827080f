# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Azure Resource Manager REST surface.

Path templates are relative to the configured base URL. The leading double
slash is collapsed by the URI builder.
"""

RESOURCE_GROUP_PATH = "//subscriptions/{subscriptionId}/resourcegroups/{resourceGroupName}"
DEPLOYMENT_PATH = (
    "//subscriptions/{subscriptionId}/resourcegroups/{resourceGroupName}"
    "/providers/Microsoft.Resources/deployments/{deploymentName}"
)

# Request headers
HEADER_ACCEPT_LANGUAGE = "accept-language"
HEADER_AUTHORIZATION = "Authorization"
HEADER_CONTENT_TYPE = "Content-Type"
HEADER_CLIENT_REQUEST_ID = "x-ms-client-request-id"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# Response headers
HEADER_AZURE_ASYNC_OPERATION = "Azure-AsyncOperation"
HEADER_LOCATION = "Location"
HEADER_RETRY_AFTER = "Retry-After"
HEADER_REQUEST_ID = "x-ms-request-id"

# Provisioning state reported by a finished deployment
PROVISIONING_STATE_SUCCEEDED = "Succeeded"
