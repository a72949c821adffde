# SPDX-License-Identifier: MIT
#
#  █████╗ ██████╗  █████╗ ███████╗
# ██╔══██╗██╔══██╗██╔══██╗██╔════╝
# ███████║██████╔╝███████║███████╗
# ██╔══██║██╔══██╗██╔══██║╚════██║
# ██║  ██║██║  ██║██║  ██║███████║
# ╚═╝  ╚═╝╚═╝  ╚═╝╚═╝  ╚═╝╚══════╝
# Copyright (C) 2026 Riza Emre ARAS <r.emrearas@proton.me>
#
# Licensed under the MIT License.
# See LICENSE and THIRD_PARTY_LICENSES for details.

"""Result pattern for error handling without exceptions.

Provides Ok[T] and Fail types as an alternative to raising exceptions.
Every function that can fail returns Result[T] = Ok[T] | Fail.

Dispatch failures carry an ErrorKind so callers can decide on retry or
backoff themselves. Configuration failures leave ``kind`` unset.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Typed reason for a failed SPARQL dispatch."""

    MALFORMED_QUERY = "malformed_query"
    NOT_AUTHORIZED = "not_authorized"
    SERVER_ERROR = "server_error"
    TIMEOUT = "timeout"
    TRANSPORT_FAILURE = "transport_failure"
    INVALID_RESPONSE = "invalid_response"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result carrying typed data."""

    data: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True, slots=True)
class Fail:
    """Failed result carrying error message, kind and optional context.

    ``context`` holds the diagnostics payload: the response body for HTTP
    level failures, the underlying exception for transport failures.
    """

    error: str
    context: Any = None
    kind: ErrorKind | None = None
    ok: bool = field(default=False, init=False)


Result = Ok[T] | Fail
