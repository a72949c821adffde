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

"""HTTP transport: send one request, get back status + headers + body.

Pooling and TLS are left to requests. Redirects are followed here so a
POST stays a POST with its form body. Failures surface as requests
exceptions; the dispatcher maps them to error kinds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol
from urllib.parse import urljoin

import certifi
import requests
from requests.auth import AuthBase, HTTPBasicAuth, HTTPDigestAuth

from virtuoso_client.config import AuthMode
from virtuoso_client.sparql.auth import NO_AUTH, AuthOptions


@dataclass(frozen=True, slots=True)
class HttpRequest:
    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)
    data: dict[str, str] | None = None
    auth: AuthOptions = NO_AUTH
    timeout: float | None = None


@dataclass(frozen=True, slots=True)
class HttpResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""

    @property
    def content_type(self) -> str:
        """Media type without parameters, lower-cased ('' if absent)."""
        for key, value in self.headers.items():
            if key.lower() == "content-type":
                return value.split(";", 1)[0].strip().lower()
        return ""


class Transport(Protocol):
    def send(self, request: HttpRequest) -> HttpResponse: ...


def _requests_auth(options: AuthOptions) -> AuthBase | None:
    if options.mode is AuthMode.BASIC:
        return HTTPBasicAuth(options.username, options.password)
    if options.mode is AuthMode.DIGEST:
        return HTTPDigestAuth(options.username, options.password)
    return None


class RequestsTransport:
    """Transport backed by a requests.Session, TLS verified with certifi."""

    def __init__(self, session: requests.Session | None = None, verify: str | bool | None = None) -> None:
        self._session = session or requests.Session()
        self._verify = certifi.where() if verify is None else verify

    def prepare(self, request: HttpRequest) -> requests.PreparedRequest:
        req = requests.Request(
            method=request.method,
            url=request.url,
            headers=request.headers,
            params=request.params,
            data=request.data,
            auth=_requests_auth(request.auth),
        )
        return self._session.prepare_request(req)

    def _redirected(self, prepared: requests.PreparedRequest, resp: requests.Response) -> requests.PreparedRequest:
        """Same method, headers and body, aimed at the redirect target."""
        target = prepared.copy()
        target.prepare_url(urljoin(resp.url, self._session.get_redirect_target(resp)), None)
        self._session.rebuild_auth(target, resp)
        return target

    def send(self, request: HttpRequest) -> HttpResponse:
        prepared = self.prepare(request)
        for _ in range(self._session.max_redirects + 1):
            resp = self._session.send(
                prepared,
                timeout=request.timeout,
                verify=self._verify,
                allow_redirects=False,
            )
            if not resp.is_redirect:
                break
            prepared = self._redirected(prepared, resp)
        else:
            raise requests.TooManyRedirects(f"Exceeded {self._session.max_redirects} redirects", response=resp)

        return HttpResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            body=resp.text,
        )

    def close(self) -> None:
        self._session.close()
