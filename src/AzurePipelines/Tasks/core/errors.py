# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured errors for Azure Resource Manager operations.

Every error returned inside a :class:`~AzurePipelines.Tasks.core.results.Failure`
derives from :class:`ArmError` and can be serialized with :meth:`ArmError.to_dict`.
"""

from __future__ import annotations

import datetime as _dt
from typing import TYPE_CHECKING, Any, Dict, Optional

from ._error_codes import _http_subcode, _is_transient_status

if TYPE_CHECKING:
    from ._http import WebResponse


class ArmError(Exception):
    """Base structured error for the Resource Manager client."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(ArmError):
    """Raised for bad names or parameters, before any request is sent."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class HttpError(ArmError):
    """Non-success status code returned by the service."""

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        service_error_code: Optional[str] = None,
        correlation_id: Optional[str] = None,
        request_id: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        if correlation_id is not None:
            d["correlation_id"] = correlation_id
        if request_id is not None:
            d["request_id"] = request_id
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if retry_after is not None:
            d["retry_after"] = retry_after
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient,
        )


class OperationFailedError(ArmError):
    """
    A long running operation or deployment reached ``Failed`` or ``Canceled``.

    :param service_error_code: Error code reported by the service, when present.
    :param service_message: Error message reported by the service, when present.
    """

    def __init__(
        self,
        message: str,
        *,
        subcode: Optional[str] = None,
        service_error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if service_error_code is not None:
            d["service_error_code"] = service_error_code
        super().__init__(
            message,
            code="operation_failed",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
        )
        self.service_error_code = service_error_code
        self.service_message = message


class OperationTimeoutError(ArmError):
    """A long running operation did not reach a terminal state in time."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="operation_timeout", subcode=subcode, details=details, source="client")


class AuthenticationError(ArmError):
    """The credential could not produce an access token."""

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="authentication_error", details=details, source="client")


class TransportError(ArmError):
    """Network level failure. Never retried by this package."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            code="transport_error",
            subcode=subcode,
            details=details,
            source="client",
            is_transient=True,
        )


_BODY_EXCERPT_LIMIT = 200


def _service_error(body: Any) -> Dict[str, Any]:
    """Return the ARM error object (``error`` or ``properties.error``) from a parsed body."""
    if not isinstance(body, dict):
        return {}
    err = body.get("error")
    if isinstance(err, dict):
        return err
    props = body.get("properties")
    if isinstance(props, dict) and isinstance(props.get("error"), dict):
        return props["error"]
    return {}


def _http_error_from_response(response: "WebResponse") -> HttpError:
    """Build an :class:`HttpError` from a non-success response."""
    status = response.status_code
    err = _service_error(response.json())
    message = err.get("message") or f"Unexpected status code {status}."
    retry_after: Optional[int] = None
    raw_retry_after = response.headers.get("Retry-After")
    if raw_retry_after is not None:
        try:
            retry_after = int(raw_retry_after)
        except (TypeError, ValueError):
            retry_after = None
    return HttpError(
        message,
        status_code=status,
        is_transient=_is_transient_status(status),
        subcode=_http_subcode(status),
        service_error_code=err.get("code"),
        correlation_id=response.headers.get("x-ms-correlation-request-id"),
        request_id=response.headers.get("x-ms-request-id"),
        body_excerpt=(response.body or "")[:_BODY_EXCERPT_LIMIT] or None,
        retry_after=retry_after,
    )


__all__ = [
    "ArmError",
    "ValidationError",
    "HttpError",
    "OperationFailedError",
    "OperationTimeoutError",
    "TransportError",
    "AuthenticationError",
]
