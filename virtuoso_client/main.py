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

"""Virtuoso SPARQL client — command line entry point.

Reads a client YAML file (connection + optional operations), runs the
operations, or a single ad-hoc one, and prints the results as JSON.

Usage:
    virtuoso-client --config store.yaml
    virtuoso-client --config store.yaml --kind select --query "SELECT * WHERE { ?s ?p ?o } LIMIT 5"
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from virtuoso_client.batch import run_batch
from virtuoso_client.config import OperationStep, load_config
from virtuoso_client.logger import DispatchSummary, get_logger
from virtuoso_client.sparql.client import SparqlClient
from virtuoso_client.sparql.operations import OperationKind

log = get_logger("main")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="virtuoso-client",
        description="Run SPARQL operations against a Virtuoso endpoint",
    )
    parser.add_argument(
        "--config",
        type=Path,
        required=True,
        help="Path to client YAML (connection + operations)",
    )
    parser.add_argument(
        "--kind",
        choices=[k.value for k in OperationKind],
        help="Run a single operation of this kind instead of the file's operations",
    )
    parser.add_argument("--query", help="SPARQL text for --kind")
    args = parser.parse_args(argv)

    if args.kind and not args.query:
        parser.error("--kind requires --query")

    cfg_result = load_config(args.config.resolve())
    if not cfg_result.ok:
        log.error(cfg_result.error)
        return 1

    operations = cfg_result.data.operations
    if args.kind:
        operations = [OperationStep(name=args.kind, kind=OperationKind(args.kind), query=args.query)]
    if not operations:
        log.error("No operations to run")
        return 1

    summary = DispatchSummary()
    with SparqlClient(cfg_result.data.connection) as client:
        result = run_batch(client, operations, summary)
    log.info(summary.report())
    if not result.ok:
        log.error("Batch failed: %s", result.error)
        return 1

    json.dump(result.data, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
