# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Client-side validation of Resource Manager operation inputs.

Validation never raises: failures are reported as a :class:`ValidationResult`
which operations convert into a :class:`~AzurePipelines.Tasks.core.results.Failure`
before any request is sent.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from . import _error_codes as ec
from .errors import ValidationError

RESOURCE_GROUP_NAME_MAX_LENGTH = 90
RESOURCE_GROUP_NAME_MIN_LENGTH = 1

_RESOURCE_GROUP_NAME_RE = re.compile(r"[-\w.()]+", re.ASCII)


class NameValidationFailure(str, Enum):
    """Reason a resource group name was rejected."""

    NULL_OR_EMPTY = "NullOrEmpty"
    TOO_LONG = "TooLong"
    TOO_SHORT = "TooShort"
    INVALID_PATTERN = "InvalidPattern"


_FAILURE_DETAILS = {
    NameValidationFailure.NULL_OR_EMPTY: (
        ec.VALIDATION_RESOURCE_GROUP_NULL,
        "resourceGroupName cannot be null or undefined and it must be of type string.",
    ),
    NameValidationFailure.TOO_LONG: (
        ec.VALIDATION_RESOURCE_GROUP_TOO_LONG,
        f"resourceGroupName must be at most {RESOURCE_GROUP_NAME_MAX_LENGTH} characters.",
    ),
    NameValidationFailure.TOO_SHORT: (
        ec.VALIDATION_RESOURCE_GROUP_TOO_SHORT,
        f"resourceGroupName must be at least {RESOURCE_GROUP_NAME_MIN_LENGTH} character.",
    ),
    NameValidationFailure.INVALID_PATTERN: (
        ec.VALIDATION_RESOURCE_GROUP_PATTERN,
        r"resourceGroupName must match the pattern ^[-\w.()]+$.",
    ),
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a name validation. ``failure`` is ``None`` when the name is valid."""

    failure: Optional[NameValidationFailure] = None

    @property
    def is_valid(self) -> bool:
        return self.failure is None

    def to_error(self) -> ValidationError:
        if self.failure is None:
            raise ValueError("A valid result has no error.")
        subcode, message = _FAILURE_DETAILS[self.failure]
        return ValidationError(message, subcode=subcode, details={"failure": self.failure.value})


def validate_resource_group_name(name: Any) -> ValidationResult:
    """
    Validate a resource group name against the Resource Manager naming rules.

    :param name: Candidate name.
    :return: A result whose ``failure`` names the first rule that was broken.
    :rtype: :class:`ValidationResult`
    """
    if name is None or not isinstance(name, str):
        return ValidationResult(NameValidationFailure.NULL_OR_EMPTY)
    if len(name) > RESOURCE_GROUP_NAME_MAX_LENGTH:
        return ValidationResult(NameValidationFailure.TOO_LONG)
    if len(name) < RESOURCE_GROUP_NAME_MIN_LENGTH:
        return ValidationResult(NameValidationFailure.TOO_SHORT)
    if _RESOURCE_GROUP_NAME_RE.fullmatch(name) is None:
        return ValidationResult(NameValidationFailure.INVALID_PATTERN)
    return ValidationResult()


def _require_resource_group_name(name: Any) -> None:
    result = validate_resource_group_name(name)
    if not result.is_valid:
        raise result.to_error()


def _require_deployment_name(name: Any) -> None:
    if name is None or not isinstance(name, str):
        raise ValidationError(
            "deploymentName cannot be null or undefined and it must be of type string.",
            subcode=ec.VALIDATION_DEPLOYMENT_NAME_NULL,
        )


def _require_parameters(parameters: Any) -> None:
    if parameters is None:
        raise ValidationError("parameters cannot be null or undefined.", subcode=ec.VALIDATION_PARAMETERS_NULL)


def _serialize_parameters(parameters: Any) -> str:
    """Serialize a request body, reporting unserializable input as a :class:`ValidationError`."""
    try:
        return json.dumps(parameters)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"parameters must be JSON serializable: {e}",
            subcode=ec.VALIDATION_PARAMETERS_INVALID,
        ) from e


__all__ = [
    "NameValidationFailure",
    "ValidationResult",
    "validate_resource_group_name",
    "RESOURCE_GROUP_NAME_MAX_LENGTH",
    "RESOURCE_GROUP_NAME_MIN_LENGTH",
]
