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

"""Structured logger with per-operation counters and final summary.

Collects success counts and failures by error kind per SPARQL operation
kind so the batch runner can print a CI-friendly summary at the end.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import Any

from virtuoso_client.result import Fail, Ok

_FMT = "%(asctime)s [%(levelname)s] %(name)s — %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a stdlib logger configured with a consistent format."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FMT, datefmt="%H:%M:%S"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


@dataclass
class OperationCounter:
    """Tracks outcomes for a single operation kind, failures by error kind."""

    name: str
    ok: int = 0
    errors: dict[str, int] = field(default_factory=dict)

    @property
    def failed(self) -> int:
        return sum(self.errors.values())

    def fail(self, kind: str) -> None:
        self.errors[kind] = self.errors.get(kind, 0) + 1


@dataclass
class DispatchSummary:
    """Accumulates outcomes across all dispatched operations."""

    operations: dict[str, OperationCounter] = field(default_factory=dict)

    def counter(self, name: str) -> OperationCounter:
        """Get or create a counter for an operation kind."""
        if name not in self.operations:
            self.operations[name] = OperationCounter(name=name)
        return self.operations[name]

    def record(self, name: str, result: Ok[Any] | Fail) -> None:
        """Count one dispatch outcome under its operation kind."""
        counter = self.counter(name)
        if result.ok:
            counter.ok += 1
        else:
            counter.fail(result.kind.value if result.kind else "other")

    @property
    def failed(self) -> int:
        return sum(c.failed for c in self.operations.values())

    def by_error_kind(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for op in self.operations.values():
            for kind, count in op.errors.items():
                totals[kind] = totals.get(kind, 0) + count
        return totals

    def report(self) -> str:
        """Format a human-readable summary block."""
        lines: list[str] = ["", "Dispatch Summary", "=" * 40]
        for op in self.operations.values():
            parts = [f"{op.name}: {op.ok} ok"]
            if op.failed:
                detail = ", ".join(f"{kind} {count}" for kind, count in sorted(op.errors.items()))
                parts.append(f"{op.failed} failed ({detail})")
            lines.append("  ".join(parts))
        totals = self.by_error_kind()
        if totals:
            lines.append("-" * 40)
            lines.extend(f"{kind}: {count}" for kind, count in sorted(totals.items()))
        lines.append("=" * 40)
        return "\n".join(lines)
