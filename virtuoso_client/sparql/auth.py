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

"""Credential presentation derived from the configured auth mode."""

from __future__ import annotations

from dataclasses import dataclass

from virtuoso_client.config import AuthMode, ConnectionConfig


@dataclass(frozen=True, slots=True)
class AuthOptions:
    """Tagged credential value: none, basic{u,p} or digest{u,p}."""
    mode: AuthMode
    username: str | None = None
    password: str | None = None


NO_AUTH = AuthOptions(mode=AuthMode.NONE)


def auth_options(config: ConnectionConfig) -> AuthOptions:
    """Credentials to attach for the configured mode.

    Without a username there is nothing to present, so the mode
    degrades to none.
    """
    if config.auth_mode is AuthMode.NONE or config.username is None:
        return NO_AUTH
    return AuthOptions(
        mode=config.auth_mode,
        username=config.username,
        password=config.password or "",
    )
