# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
HTTP transport with timeout handling and optional session support.

This module provides :class:`~AzurePipelines.Tasks.core._http._HttpClient`, a thin
wrapper around the requests library, together with the immutable
:class:`WebRequest` / :class:`WebResponse` pair exchanged with it.

The transport performs no retries: a network failure surfaces to the caller
on the first attempt.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests
from requests.structures import CaseInsensitiveDict


@dataclass(frozen=True)
class WebRequest:
    """
    Outbound HTTP request.

    :param method: HTTP method (HEAD, GET, PUT, DELETE).
    :param uri: Fully built request URI.
    :param headers: Request headers. Callers never mutate a request after sending it;
        default headers are merged into a copy.
    :param body: Serialized request body, if any.
    """

    method: str
    uri: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[str] = None


@dataclass(frozen=True)
class WebResponse:
    """
    HTTP response as seen by the operations layer.

    :param status_code: HTTP status code.
    :param headers: Case-insensitive response headers.
    :param body: Raw response text (empty string when there is no body).
    """

    status_code: int
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: str = ""

    def json(self) -> Any:
        """Parse the body as JSON, returning ``None`` for an empty or non-JSON body."""
        if not self.body:
            return None
        try:
            return json.loads(self.body)
        except ValueError:
            return None

    @classmethod
    def _from_requests(cls, response: requests.Response) -> "WebResponse":
        return cls(
            status_code=response.status_code,
            headers=CaseInsensitiveDict(response.headers or {}),
            body=response.text or "",
        )


class _HttpClient:
    """
    HTTP client with timeout handling and optional session support.

    :param timeout: Default request timeout in seconds. If None, uses per-method defaults.
    :type timeout: :class:`float` | None
    :param session: Optional requests.Session for connection pooling. If provided,
        all requests use this session for efficient connection reuse.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.default_timeout: Optional[float] = timeout
        self._session = session

    def _request(self, request: WebRequest, **kwargs: Any) -> WebResponse:
        """
        Execute an HTTP request with timeout management.

        Applies default timeouts based on HTTP method (120s for PUT/DELETE, 10s for others).
        When a session is configured, uses the session for connection pooling; otherwise
        uses standalone requests.

        :param request: The request to send.
        :type request: :class:`WebRequest`
        :param kwargs: Additional arguments passed to ``requests.request()`` or
            ``session.request()``.
        :return: The response.
        :rtype: :class:`WebResponse`
        :raises requests.exceptions.RequestException: On any network-level failure.
        """
        if "timeout" not in kwargs:
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            else:
                m = (request.method or "").lower()
                kwargs["timeout"] = 120 if m in ("put", "delete") else 10

        data = request.body.encode("utf-8") if request.body is not None else None
        if self._session is not None:
            response = self._session.request(
                request.method, request.uri, headers=dict(request.headers), data=data, **kwargs
            )
        else:
            response = requests.request(request.method, request.uri, headers=dict(request.headers), data=data, **kwargs)
        return WebResponse._from_requests(response)
