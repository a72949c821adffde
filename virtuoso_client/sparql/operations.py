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

"""SPARQL operation kinds.

Read forms go out as GET against the query endpoint, write forms as POST
against the update endpoint. Query text is passed through untouched.
"""

from __future__ import annotations

from enum import Enum


class OperationKind(str, Enum):
    QUERY = "query"
    SELECT = "select"
    ASK = "ask"
    CONSTRUCT = "construct"
    DESCRIBE = "describe"
    INSERT = "insert"
    INSERT_DATA = "insert_data"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_DATA = "delete_data"
    CREATE = "create"
    DROP = "drop"
    CLEAR = "clear"

    @property
    def is_read(self) -> bool:
        return self in READ_OPERATIONS


READ_OPERATIONS = frozenset({
    OperationKind.QUERY,
    OperationKind.SELECT,
    OperationKind.ASK,
    OperationKind.CONSTRUCT,
    OperationKind.DESCRIBE,
})

WRITE_OPERATIONS = frozenset(OperationKind) - READ_OPERATIONS
