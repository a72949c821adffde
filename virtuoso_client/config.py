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

"""Connection settings and YAML client definition loader.

ConnectionConfig is immutable and captured by the client at construction.
Credentials left empty in YAML are filled from the environment
(VIRTUOSO_USERNAME / VIRTUOSO_PASSWORD, optionally via a .env file).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit

import yaml
from dotenv import load_dotenv

from virtuoso_client.result import Fail, Ok, Result
from virtuoso_client.sparql.operations import OperationKind

DEFAULT_AUTH_METHOD = "digest"
DEFAULT_TIMEOUT = 5.0

USERNAME_ENV = "VIRTUOSO_USERNAME"
PASSWORD_ENV = "VIRTUOSO_PASSWORD"


class AuthMode(str, Enum):
    NONE = "none"
    BASIC = "basic"
    DIGEST = "digest"


# ── Connection ─────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class ConnectionConfig:
    """Where and how to reach the store.

    ``update_path`` is None when no separate update endpoint was given.
    """
    base_uri: str
    read_path: str
    update_path: str | None = None
    username: str | None = None
    password: str | None = None
    auth_mode: AuthMode = AuthMode.DIGEST
    timeout: float = DEFAULT_TIMEOUT


def _request_uri(uri: str) -> str:
    """Path plus query string of an absolute URI, '/' when empty."""
    parts = urlsplit(uri)
    path = parts.path or "/"
    return f"{path}?{parts.query}" if parts.query else path


def _base_uri(uri: str) -> str:
    parts = urlsplit(uri)
    host = parts.netloc.rpartition("@")[2]
    return f"{parts.scheme}://{host}"


def _check_uri(uri: str | None, label: str) -> str | None:
    if not uri:
        return f"{label} is required"
    parts = urlsplit(uri)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return f"{label} must be an absolute http(s) URI: {uri!r}"
    return None


def build_config(
    uri: str,
    update_uri: str | None = None,
    username: str | None = None,
    password: str | None = None,
    auth_method: str | None = DEFAULT_AUTH_METHOD,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> Result[ConnectionConfig]:
    """Validate construction parameters and derive the endpoint paths.

    Only the read URI's scheme, host and port form the base URI; the
    update URI contributes its path.
    """
    error = _check_uri(uri, "uri")
    if error is None and update_uri:
        error = _check_uri(update_uri, "update_uri")
    if error:
        return Fail(error=error)

    try:
        mode = AuthMode((auth_method or DEFAULT_AUTH_METHOD).lower())
    except ValueError:
        allowed = ", ".join(m.value for m in AuthMode)
        return Fail(error=f"Unknown auth method {auth_method!r} (expected one of: {allowed})")

    if timeout is None:
        timeout = DEFAULT_TIMEOUT
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        return Fail(error=f"timeout must be a positive number of seconds, got {timeout!r}")

    return Ok(data=ConnectionConfig(
        base_uri=_base_uri(uri),
        read_path=_request_uri(uri),
        update_path=_request_uri(update_uri) if update_uri else None,
        username=username or None,
        password=password or None,
        auth_mode=mode,
        timeout=float(timeout),
    ))


# ── Operations ─────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class OperationStep:
    """One configured operation: kind + raw SPARQL text + extra params."""
    name: str
    kind: OperationKind
    query: str
    options: dict[str, str] = field(default_factory=dict)
    required: bool = True


# ── Top-level ──────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class ClientConfig:
    connection: ConnectionConfig
    operations: list[OperationStep]


# ── Loader ─────────────────────────────────────────────────────

def _build_operations(raw_ops: list[dict[str, Any]]) -> list[OperationStep]:
    return [
        OperationStep(
            name=op.get("name", f"op{index}"),
            kind=OperationKind(op["kind"]),
            query=op["query"],
            options={str(k): str(v) for k, v in (op.get("options") or {}).items()},
            required=bool(op.get("required", True)),
        )
        for index, op in enumerate(raw_ops, start=1)
    ]


def load_config(path: Path) -> Result[ClientConfig]:
    """Load a client YAML file into ClientConfig."""
    if not path.exists():
        return Fail(error=f"Config file not found: {path}")

    try:
        raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        return Fail(error=f"YAML parse error: {exc}", context=str(path))

    load_dotenv()

    try:
        conn = raw["connection"]
        conn_result = build_config(
            uri=conn["uri"],
            update_uri=conn.get("update_uri"),
            username=conn.get("username") or os.getenv(USERNAME_ENV),
            password=conn.get("password") or os.getenv(PASSWORD_ENV),
            auth_method=conn.get("auth_method", DEFAULT_AUTH_METHOD),
            timeout=conn.get("timeout", DEFAULT_TIMEOUT),
        )
        operations = _build_operations(raw.get("operations") or [])
    except (KeyError, TypeError, ValueError) as exc:
        return Fail(error=f"Config structure error: {exc}", context=str(path))

    if not conn_result.ok:
        return Fail(error=conn_result.error, context=str(path))

    return Ok(data=ClientConfig(connection=conn_result.data, operations=operations))
