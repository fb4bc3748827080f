#!/usr/bin/env python3
# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Azure Pipelines task helpers - Resource Manager quickstart

Creates a resource group, deploys a small template into it, prints the
deployment outputs and optionally deletes the group again.

Prerequisites:
- Package installed (pip install -e .)
- Azure Identity credentials (browser login)
- A subscription where you may create resource groups

Usage:
    python examples/basic/quickstart.py
"""

import logging
import sys

from azure.identity import InteractiveBrowserCredential

from AzurePipelines.Tasks import ResourceManagementClient, ResourceManagerConfig
from AzurePipelines.Tasks.core.telemetry import TelemetryConfig
from AzurePipelines.Tasks.core.validation import validate_resource_group_name

TEMPLATE = {
    "$schema": "https://schema.management.azure.com/schemas/2015-01-01/deploymentTemplate.json#",
    "contentVersion": "1.0.0.0",
    "resources": [],
    "outputs": {"greeting": {"type": "string", "value": "hello from the quickstart"}},
}


def prompt(text: str) -> str:
    if not sys.stdin.isatty():
        print("❌ Interactive input required. Run this script in a terminal.")
        sys.exit(1)
    return input(text).strip()


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    subscription_id = prompt("Subscription id: ")
    resource_group = prompt("Resource group name [pipelines-quickstart-rg]: ") or "pipelines-quickstart-rg"
    check = validate_resource_group_name(resource_group)
    if not check.is_valid:
        print(f"❌ Invalid resource group name: {check.failure.value}")
        sys.exit(1)

    config = ResourceManagerConfig(telemetry=TelemetryConfig(enable_logging=True, log_level="INFO"))
    with ResourceManagementClient(InteractiveBrowserCredential(), subscription_id, config) as client:
        if not client.resource_groups.check_existence(resource_group).unwrap():
            print(f"📁 Creating resource group {resource_group}...")
            client.resource_groups.create_or_update(resource_group, {"location": "westus"}).unwrap()

        print("🚀 Deploying template (waits for the deployment to finish)...")
        outcome = client.deployments.create_or_update(
            resource_group,
            "quickstart-deployment",
            {"properties": {"mode": "Incremental", "template": TEMPLATE, "parameters": {}}},
        )
        if outcome.is_success:
            print(f"✅ Outputs: {outcome.result['properties'].get('outputs')}")
        else:
            print(f"❌ Deployment failed: {outcome.error.message}")
            print(outcome.error.to_dict())

        if prompt(f"Delete resource group {resource_group}? [y/N]: ").lower() == "y":
            deleted = client.resource_groups.delete(resource_group)
            print("🧹 Deleted." if deleted.is_success else f"❌ Delete failed: {deleted.error.message}")


if __name__ == "__main__":
    main()
