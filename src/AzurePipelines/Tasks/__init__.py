# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Azure Pipelines task helpers.

- :class:`~AzurePipelines.Tasks.client.ResourceManagementClient`: Azure Resource Manager
  resource group and template deployment operations with long running operation polling.
- :class:`~AzurePipelines.Tasks.testrun.distributed_test.DistributedTest`: launches the
  distributed test execution host and maps its exit code to a task result.
"""

from .client import ResourceManagementClient
from .core.config import ResourceManagerConfig
from .core.results import ApiResult, Failure, Success

__version__ = "0.1.0"

__all__ = [
    "ResourceManagementClient",
    "ResourceManagerConfig",
    "ApiResult",
    "Failure",
    "Success",
    "__version__",
]
