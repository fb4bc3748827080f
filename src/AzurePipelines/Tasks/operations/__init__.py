# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Operation namespace classes for the Resource Manager client.

- ResourceGroupOperations: existence check, create or update, delete
- DeploymentOperations: template deployment create or update, get
"""

__all__ = []
