# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Long running operation polling for Resource Manager.

A mutating request (PUT/DELETE) answered with ``201``/``202`` is polled until it
reaches a terminal state::

    Submitted -> Polling -> Succeeded | Failed | Canceled | TimedOut

The polling target is the ``Azure-AsyncOperation`` header, else the ``Location``
header, else the original request URI. Between polls the poller waits for the
``Retry-After`` interval (or the configured default), never exceeding the
overall timeout. Transport failures end the operation immediately; this layer
does not retry them.
"""

from __future__ import annotations

import logging
import time
from enum import Enum
from typing import Any, Callable, Optional

from ..common.constants import (
    HEADER_AZURE_ASYNC_OPERATION,
    HEADER_LOCATION,
    HEADER_RETRY_AFTER,
)
from . import _error_codes as ec
from ._http import WebRequest, WebResponse
from .errors import (
    OperationFailedError,
    OperationTimeoutError,
    _http_error_from_response,
    _service_error,
)

_LOGGER = logging.getLogger(__name__)

_Send = Callable[[WebRequest, str], WebResponse]

# Each poll costs at least this much of the wait budget, even when the service
# asks for an immediate retry.
_MIN_POLL_CHARGE = 1.0


class OperationStatus(str, Enum):
    """Status of a long running operation as reported by the service."""

    IN_PROGRESS = "InProgress"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELED = "Canceled"

    @property
    def is_terminal(self) -> bool:
        return self is not OperationStatus.IN_PROGRESS

    @classmethod
    def _from_body(cls, body: Any) -> Optional["OperationStatus"]:
        """
        Read ``status`` (operation status resource) or ``properties.provisioningState``
        (the resource itself). Unrecognized states such as ``Accepted`` or ``Running``
        are in progress; ``None`` means the body carries no status marker.
        """
        if not isinstance(body, dict):
            return None
        raw = body.get("status")
        if raw is None:
            props = body.get("properties")
            if isinstance(props, dict):
                raw = props.get("provisioningState")
        if not isinstance(raw, str):
            return None
        normalized = raw.lower()
        if normalized == "cancelled":
            return cls.CANCELED
        for member in cls:
            if member.value.lower() == normalized:
                return member
        return cls.IN_PROGRESS


class _LongRunningOperationPoller:
    """
    Drive a long running operation to a terminal state.

    :param send: Callable issuing a request and returning the response; raises
        :class:`~AzurePipelines.Tasks.core.errors.TransportError` on network failure.
    :param timeout: Default cumulative wait budget in seconds.
    :param retry_interval: Delay in seconds used when a response has no ``Retry-After``.
    """

    def __init__(self, send: _Send, *, timeout: float, retry_interval: float) -> None:
        self._send = send
        self._timeout = timeout
        self._retry_interval = retry_interval

    def await_completion(
        self,
        request: WebRequest,
        initial_response: WebResponse,
        timeout: Optional[float] = None,
    ) -> WebResponse:
        """
        Wait for the operation started by ``request`` to finish.

        :param request: The mutating request that started the operation.
        :param initial_response: The service's response to ``request``.
        :param timeout: Overrides the default wait budget, in seconds.
        :return: The terminal response.
        :raises HttpError: If the initial or a polling response has an unexpected status.
        :raises OperationFailedError: If the operation ends ``Failed`` or ``Canceled``.
        :raises OperationTimeoutError: If the wait budget is exhausted.
        :raises TransportError: If a polling request fails at the network level.
        """
        status_code = initial_response.status_code
        if status_code in (200, 204):
            return initial_response
        if status_code not in (201, 202):
            raise _http_error_from_response(initial_response)

        async_operation_url = initial_response.headers.get(HEADER_AZURE_ASYNC_OPERATION)
        location = async_operation_url or initial_response.headers.get(HEADER_LOCATION) or request.uri
        budget = self._timeout if timeout is None else timeout
        _LOGGER.debug("%s %s accepted (%d); polling %s", request.method, request.uri, status_code, location)

        waited = 0.0
        last = initial_response
        while True:
            remaining = budget - waited
            if remaining <= 0:
                raise OperationTimeoutError(
                    f"Long running operation did not complete within {budget} seconds.",
                    subcode=ec.OPERATION_TIMED_OUT,
                    details={"polling_url": location, "waited_seconds": waited},
                )
            delay = min(self._delay(last), remaining)
            time.sleep(delay)
            waited += max(delay, _MIN_POLL_CHARGE)

            poll = self._send(WebRequest("GET", location), "lro.poll")
            if not 200 <= poll.status_code < 300:
                raise _http_error_from_response(poll)

            status = OperationStatus._from_body(poll.json())
            if status is None:
                if poll.status_code == 202 or async_operation_url:
                    last = poll
                    continue
                _LOGGER.debug("Polling %s finished with %d", location, poll.status_code)
                return poll

            if status is OperationStatus.SUCCEEDED:
                _LOGGER.debug("Long running operation at %s succeeded", location)
                if async_operation_url and request.method.upper() == "PUT":
                    return self._final_get(request)
                return poll
            if status.is_terminal:
                raise self._failure(status, poll)
            last = poll

    def _delay(self, response: WebResponse) -> float:
        raw = response.headers.get(HEADER_RETRY_AFTER)
        if raw is not None:
            try:
                return max(0, int(raw))
            except (TypeError, ValueError):
                pass
        return self._retry_interval

    def _final_get(self, request: WebRequest) -> WebResponse:
        # Operation status resources carry no resource body; re-read the resource.
        response = self._send(WebRequest("GET", request.uri), "lro.final")
        if not 200 <= response.status_code < 300:
            raise _http_error_from_response(response)
        return response

    @staticmethod
    def _failure(status: OperationStatus, response: WebResponse) -> OperationFailedError:
        err = _service_error(response.json())
        _LOGGER.warning("Long running operation ended %s: %s", status.value, err or response.body)
        subcode = ec.OPERATION_CANCELED if status is OperationStatus.CANCELED else ec.OPERATION_FAILED
        if err.get("message") or err.get("code"):
            return OperationFailedError(
                err.get("message") or f"Long running operation {status.value.lower()}.",
                subcode=subcode,
                service_error_code=err.get("code"),
                status_code=response.status_code,
                details={"status": status.value},
            )
        return OperationFailedError(
            "Long running operation failed",
            subcode=subcode,
            status_code=response.status_code,
            details={"status": status.value, "body_excerpt": response.body},
        )


__all__ = ["OperationStatus"]
