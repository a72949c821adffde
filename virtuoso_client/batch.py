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

"""Batch runner — executes configured operations in order.

Each step is dispatched through the client; its outcome is logged and
counted per operation kind. A failing required step stops the batch,
optional steps are skipped over.
"""

from __future__ import annotations

from typing import Any

from virtuoso_client.config import OperationStep
from virtuoso_client.logger import DispatchSummary, get_logger
from virtuoso_client.result import Fail, Ok, Result
from virtuoso_client.sparql.client import SparqlClient

log = get_logger(__name__)


def run_batch(
    client: SparqlClient,
    operations: list[OperationStep],
    summary: DispatchSummary,
) -> Result[dict[str, Any]]:
    """Run every step and collect results keyed by step name.

    Args:
        client: Client bound to the target store.
        operations: Steps loaded from the client YAML file.
        summary: Receives per-kind ok/failed counts and error kinds.
    """
    outputs: dict[str, Any] = {}

    for step in operations:
        log.info("── %s: %s ──", step.kind.value, step.name)

        result = client.execute(step.kind, step.query, step.options)
        summary.record(step.kind.value, result)
        if not result.ok:
            if step.required:
                return Fail(
                    error=f"Required step '{step.name}' failed: {result.error}",
                    context=result.context,
                    kind=result.kind,
                )
            log.warning("Skipping optional step '%s'", step.name)
            continue

        outputs[step.name] = result.data
        log.info("Step '%s' complete", step.name)

    return Ok(data=outputs)
