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

"""SPARQL result normalization.

Reads: parse application/sparql-results+json or +xml into binding rows
(JSON shape, one dict per solution) or a bool for ASK.
Writes: pull Virtuoso's ``callret-0`` acknowledgement text, if any.
"""

from __future__ import annotations

import json
from typing import Any

from lxml import etree

from virtuoso_client.logger import get_logger
from virtuoso_client.result import ErrorKind, Fail, Ok, Result
from virtuoso_client.sparql.transport import HttpResponse

log = get_logger(__name__)

RESULT_JSON = "application/sparql-results+json"
RESULT_XML = "application/sparql-results+xml"

_SRX_NS = "http://www.w3.org/2005/sparql-results#"
_XML_LANG = "{http://www.w3.org/XML/1998/namespace}lang"

Binding = dict[str, dict[str, str]]
ResultSet = list[Binding] | bool

_xml_parser = etree.XMLParser(resolve_entities=False, no_network=True)


def _is_json(response: HttpResponse) -> bool:
    ct = response.content_type
    if ct:
        return ct == "application/json" or ct.endswith("+json")
    return response.body.lstrip().startswith(("{", "["))


def _is_xml(response: HttpResponse) -> bool:
    ct = response.content_type
    if ct:
        return ct in ("application/xml", "text/xml") or ct.endswith("+xml")
    return response.body.lstrip().startswith("<")


def parsed_body(response: HttpResponse) -> Any:
    """Decoded JSON for JSON responses, raw text otherwise."""
    if _is_json(response):
        try:
            return json.loads(response.body)
        except ValueError:
            pass
    return response.body


# ── JSON ───────────────────────────────────────────────────────

def _from_json(body: str) -> Result[ResultSet]:
    try:
        raw = json.loads(body)
    except ValueError as exc:
        return Fail(error=f"Invalid SPARQL JSON: {exc}", context=body[:500], kind=ErrorKind.INVALID_RESPONSE)

    if isinstance(raw, dict) and isinstance(raw.get("boolean"), bool):
        return Ok(data=raw["boolean"])

    results = raw.get("results") if isinstance(raw, dict) else None
    if not isinstance(results, dict):
        return Fail(error="SPARQL JSON has no 'results' object", context=body[:500], kind=ErrorKind.INVALID_RESPONSE)

    bindings: list[Binding] = results.get("bindings", [])
    return Ok(data=bindings)


# ── XML ────────────────────────────────────────────────────────

def _term(element: etree._Element) -> dict[str, str]:
    tag = etree.QName(element).localname
    term = {"type": tag, "value": element.text or ""}
    if tag == "literal":
        if element.get(_XML_LANG):
            term["xml:lang"] = element.get(_XML_LANG)
        if element.get("datatype"):
            term["datatype"] = element.get("datatype")
    return term


def _from_xml(body: str) -> Result[ResultSet]:
    try:
        root = etree.fromstring(body.encode("utf-8"), parser=_xml_parser)
    except etree.XMLSyntaxError as exc:
        return Fail(error=f"Invalid SPARQL XML: {exc}", context=body[:500], kind=ErrorKind.INVALID_RESPONSE)

    boolean = root.find(f"{{{_SRX_NS}}}boolean")
    if boolean is not None:
        return Ok(data=(boolean.text or "").strip() == "true")

    results = root.find(f"{{{_SRX_NS}}}results")
    if results is None:
        return Fail(error="SPARQL XML has no <results> element", context=body[:500], kind=ErrorKind.INVALID_RESPONSE)

    rows: list[Binding] = []
    for result_el in results.iterfind(f"{{{_SRX_NS}}}result"):
        row: Binding = {}
        for binding in result_el.iterfind(f"{{{_SRX_NS}}}binding"):
            value = next(iter(binding), None)
            if value is not None:
                row[binding.get("name")] = _term(value)
        rows.append(row)
    return Ok(data=rows)


# ── Entry points ───────────────────────────────────────────────

def parse_results(response: HttpResponse) -> Result[ResultSet]:
    """Default results parser for read operations."""
    if not response.body.strip():
        return Ok(data=[])
    if _is_json(response):
        result = _from_json(response.body)
    elif _is_xml(response):
        result = _from_xml(response.body)
    else:
        return Fail(
            error=f"Unsupported result content type: {response.content_type or 'unknown'}",
            context=response.body[:500],
            kind=ErrorKind.INVALID_RESPONSE,
        )

    if result.ok and not isinstance(result.data, bool):
        log.info("SPARQL returned %d bindings", len(result.data))
    return result


def extract_ack(response: HttpResponse) -> str | None:
    """Virtuoso's write acknowledgement, e.g. 'Insert into <g>, 1 triples -- done'.

    Returns None when the body carries no ``callret-0`` binding.
    """
    body = parsed_body(response)
    try:
        value = body["results"]["bindings"][0]["callret-0"]["value"]
    except (KeyError, IndexError, TypeError):
        log.debug("No acknowledgement in update response")
        return None
    return value if isinstance(value, str) else str(value)
