# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Resource Manager client.

This module contains the foundational components including configuration,
result types, validation, long running operation polling and error handling.
"""

from .config import ResourceManagerConfig
from .errors import (
    ArmError,
    AuthenticationError,
    HttpError,
    OperationFailedError,
    OperationTimeoutError,
    TransportError,
    ValidationError,
)
from .lro import OperationStatus
from .results import ApiResult, Failure, Success
from .validation import NameValidationFailure, ValidationResult, validate_resource_group_name

__all__ = [
    "ResourceManagerConfig",
    "ArmError",
    "AuthenticationError",
    "HttpError",
    "OperationFailedError",
    "OperationTimeoutError",
    "TransportError",
    "ValidationError",
    "OperationStatus",
    "ApiResult",
    "Failure",
    "Success",
    "NameValidationFailure",
    "ValidationResult",
    "validate_resource_group_name",
]
