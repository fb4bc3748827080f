# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for the task helper tests.
"""

import pytest

from AzurePipelines.Tasks.core.config import ResourceManagerConfig
from tests.unit.test_helpers import SUBSCRIPTION_ID, DummyCredential


@pytest.fixture
def dummy_credential():
    """Credential that always returns ``dummy-token``."""
    return DummyCredential()


@pytest.fixture
def test_config():
    """Configuration with short polling intervals."""
    return ResourceManagerConfig(
        long_running_operation_timeout=60,
        long_running_operation_retry_interval=1,
        http_timeout=5,
    )


@pytest.fixture
def subscription_id():
    return SUBSCRIPTION_ID


@pytest.fixture
def deployment_body():
    """Sample deployment request body."""
    return {
        "properties": {
            "mode": "Incremental",
            "template": {"$schema": "https://schema.management.azure.com/schemas/2015-01-01/deploymentTemplate.json#", "resources": []},
            "parameters": {},
        }
    }
