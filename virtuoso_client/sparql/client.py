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

"""SPARQL client for Virtuoso-style query/update endpoints.

Reads go out as GET with ``query`` in the query string, writes as POST
with ``query`` form-encoded in the body. Every call is bounded by a hard
wall-clock deadline and returns a Result; nothing is retried.
"""

from __future__ import annotations

import concurrent.futures
import threading
from collections.abc import Callable, Mapping

import requests

from virtuoso_client.config import ConnectionConfig
from virtuoso_client.logger import get_logger
from virtuoso_client.result import ErrorKind, Fail, Ok, Result
from virtuoso_client.sparql.auth import NO_AUTH, auth_options
from virtuoso_client.sparql.endpoints import EndpointResolver
from virtuoso_client.sparql.operations import OperationKind
from virtuoso_client.sparql.results import (
    RESULT_JSON,
    RESULT_XML,
    ResultSet,
    extract_ack,
    parse_results,
    parsed_body,
)
from virtuoso_client.sparql.transport import HttpRequest, HttpResponse, RequestsTransport, Transport

log = get_logger(__name__)

ResultsParser = Callable[[HttpResponse], "Result[ResultSet]"]
Options = Mapping[str, str] | None


def classify_response(response: HttpResponse) -> Fail | None:
    """Map error statuses to a Fail; None means continue to normalization.

    Statuses other than 400, 401 and 5xx (3xx, 404, ...) pass through.
    """
    code = response.status_code
    if code == 401:
        return Fail(error="SPARQL HTTP 401: not authorized", context=response.body, kind=ErrorKind.NOT_AUTHORIZED)
    if code == 400:
        return Fail(error="SPARQL HTTP 400: malformed query", context=parsed_body(response), kind=ErrorKind.MALFORMED_QUERY)
    if 500 <= code <= 599:
        return Fail(error=f"SPARQL HTTP {code}: server error", context=response.body, kind=ErrorKind.SERVER_ERROR)
    return None


class SparqlClient:
    """Dispatches typed SPARQL operations against one store.

    Holds only the immutable connection config and the transport, so an
    instance can be shared between threads if the transport allows it.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        transport: Transport | None = None,
        results_parser: ResultsParser | None = None,
    ) -> None:
        self._config = config
        self._endpoints = EndpointResolver(config)
        self._auth = auth_options(config)
        self._owns_transport = transport is None
        self._transport = transport or RequestsTransport()
        self._parse = results_parser or parse_results
        self._dispatch = {
            kind: self.execute_read if kind.is_read else self.execute_write
            for kind in OperationKind
        }

    def __enter__(self) -> SparqlClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the HTTP session if this client created it."""
        if self._owns_transport:
            self._transport.close()

    def _headers(self) -> dict[str, str]:
        return {"Accept": f"{RESULT_JSON}, {RESULT_XML}"}

    def _send(self, request: HttpRequest) -> Result[HttpResponse]:
        """Run the transport call under the configured deadline.

        The call runs on a daemon thread; once the deadline passes it is
        abandoned and does not hold up interpreter exit.
        """
        timeout = self._config.timeout
        log.info("SPARQL %s → %s", request.method, request.url)

        future: concurrent.futures.Future[HttpResponse] = concurrent.futures.Future()

        def call() -> None:
            try:
                future.set_result(self._transport.send(request))
            except BaseException as exc:
                future.set_exception(exc)

        threading.Thread(target=call, name="sparql-dispatch", daemon=True).start()
        try:
            return Ok(data=future.result(timeout=timeout))
        except concurrent.futures.TimeoutError:
            return Fail(error=f"SPARQL timeout after {timeout}s", context=request.url, kind=ErrorKind.TIMEOUT)
        except requests.Timeout as exc:
            return Fail(error=f"SPARQL timeout after {timeout}s", context=exc, kind=ErrorKind.TIMEOUT)
        except OSError as exc:
            return Fail(error=f"SPARQL connection error: {exc}", context=exc, kind=ErrorKind.TRANSPORT_FAILURE)

    def _dispatch_request(self, request: HttpRequest) -> Result[HttpResponse]:
        result = self._send(request)
        if result.ok:
            failure = classify_response(result.data)
            if failure is not None:
                result = failure
        if not result.ok:
            log.warning("%s", result.error)
        return result

    def execute_read(self, kind: OperationKind, query: str, options: Options = None) -> Result[ResultSet]:
        """GET a read operation and hand the body to the results parser.

        Credentials are attached only when an update endpoint is
        configured, since reads then go through it.
        """
        request = HttpRequest(
            method="GET",
            url=self._endpoints.read_target(),
            headers=self._headers(),
            params={"query": query, "format": RESULT_JSON, **(options or {})},
            auth=self._auth if self._endpoints.authenticated_reads else NO_AUTH,
            timeout=self._config.timeout,
        )
        result = self._dispatch_request(request)
        if not result.ok:
            return result  # type: ignore[return-value]

        parsed = self._parse(result.data)
        if not parsed.ok:
            log.warning("%s %s", kind.value, parsed.error)
        return parsed

    def execute_write(self, kind: OperationKind, query: str, options: Options = None) -> Result[str | None]:
        """POST a write operation and return its acknowledgement text."""
        request = HttpRequest(
            method="POST",
            url=self._endpoints.write_target(),
            headers=self._headers(),
            params={"format": RESULT_JSON},
            data={"query": query, **(options or {})},
            auth=self._auth,
            timeout=self._config.timeout,
        )
        result = self._dispatch_request(request)
        if not result.ok:
            return result  # type: ignore[return-value]
        return Ok(data=extract_ack(result.data))

    def execute(self, kind: OperationKind | str, query: str, options: Options = None) -> Result:
        """Run any operation kind through the dispatch table."""
        op = OperationKind(kind)
        return self._dispatch[op](op, query, options)

    # ── Read forms ─────────────────────────────────────────────

    def query(self, query: str, options: Options = None) -> Result[ResultSet]:
        return self.execute_read(OperationKind.QUERY, query, options)

    def select(self, query: str, options: Options = None) -> Result[ResultSet]:
        return self.execute_read(OperationKind.SELECT, query, options)

    def ask(self, query: str, options: Options = None) -> Result[ResultSet]:
        return self.execute_read(OperationKind.ASK, query, options)

    def construct(self, query: str, options: Options = None) -> Result[ResultSet]:
        return self.execute_read(OperationKind.CONSTRUCT, query, options)

    def describe(self, query: str, options: Options = None) -> Result[ResultSet]:
        return self.execute_read(OperationKind.DESCRIBE, query, options)

    # ── Write forms ────────────────────────────────────────────

    def insert(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.INSERT, query, options)

    def insert_data(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.INSERT_DATA, query, options)

    def update(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.UPDATE, query, options)

    def delete(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.DELETE, query, options)

    def delete_data(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.DELETE_DATA, query, options)

    def create(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.CREATE, query, options)

    def drop(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.DROP, query, options)

    def clear(self, query: str, options: Options = None) -> Result[str | None]:
        return self.execute_write(OperationKind.CLEAR, query, options)
