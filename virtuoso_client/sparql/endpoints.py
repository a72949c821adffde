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

"""Endpoint resolution for the query and update paths."""

from __future__ import annotations

from virtuoso_client.config import ConnectionConfig


class EndpointResolver:
    """Absolute URLs for reads and writes, fixed at construction.

    When an update endpoint is configured, reads are routed through it as
    well so SELECT/CONSTRUCT can reach protected graphs with credentials.
    """

    def __init__(self, config: ConnectionConfig) -> None:
        self._base_uri = config.base_uri
        self._read_path = config.read_path
        self._update_path = config.update_path

    @property
    def authenticated_reads(self) -> bool:
        return self._update_path is not None

    def read_target(self) -> str:
        return self._base_uri + (self._update_path or self._read_path)

    def write_target(self) -> str:
        return self._base_uri + (self._update_path or self._read_path)
