# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import re
from typing import Mapping, Optional, Sequence
from urllib.parse import quote

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")

# A run of two or more slashes that does not follow the scheme's colon.
_DUPLICATE_SLASH_RE = re.compile(r"(?<!:)//+")

# Characters left unescaped by encodeURIComponent besides the RFC 3986 unreserved set.
_COMPONENT_SAFE = "!*'()"


def _encode_component(value: object) -> str:
    return quote(str(value), safe=_COMPONENT_SAFE)


def _build_request_uri(
    base_url: str,
    template: str,
    subscription_id: str,
    api_version: str,
    parameters: Optional[Mapping[str, object]] = None,
    query_parameters: Optional[Sequence[str]] = None,
) -> str:
    """
    Compose a versioned request URI from a path template.

    ``{subscriptionId}`` and every ``{name}`` placeholder with an entry in
    ``parameters`` are replaced in one pass, each value percent-encoded.
    Duplicate slashes are collapsed and ``api-version`` is always the last
    query entry.

    :raises ValueError: If the template names a placeholder with no value.
    """
    values = {"subscriptionId": subscription_id}
    for key, value in (parameters or {}).items():
        values[key.strip("{}")] = value

    def _substitute(match: "re.Match[str]") -> str:
        name = match.group(1)
        if name not in values:
            raise ValueError(f"No value supplied for URI placeholder '{{{name}}}'.")
        return _encode_component(values[name])

    uri = _PLACEHOLDER_RE.sub(_substitute, base_url + template)
    uri = _DUPLICATE_SLASH_RE.sub("/", uri)

    query = list(query_parameters or [])
    query.append("api-version=" + _encode_component(api_version))
    return uri + "?" + "&".join(query)
