# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Distributed test run orchestration.

Serializes the test run input data contract to disk, launches the test
execution host and maps its exit code to a task result.
"""

from .distributed_test import DistributedTest, DistributedTestSettings, TaskOutcome, TaskResult

__all__ = ["DistributedTest", "DistributedTestSettings", "TaskOutcome", "TaskResult"]
