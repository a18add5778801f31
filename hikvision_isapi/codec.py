"""Conversion between structured payloads and ISAPI wire bodies."""

from __future__ import annotations

from collections.abc import Mapping
import json
import logging
from typing import Any
from xml.parsers.expat import ExpatError

import httpx
import xmltodict

from .const import CONTENT_TYPE_JSON, CONTENT_TYPE_XML, RAW_KEY, XML_FALLBACK_ROOT, XML_NAMESPACE, XML_VERSION, Format
from .utils import bool_to_str

Node = dict[str, Any]

_LOGGER = logging.getLogger(__name__)

XML_CONTENT_TYPES = (CONTENT_TYPE_XML, "text/xml")
ENVELOPE_ATTRIBUTES = ("@xmlns", "@version")


def _to_xml_value(value: Any) -> Any:
    """Stringify scalars the way ISAPI expects them."""
    if isinstance(value, bool):
        return bool_to_str(value)
    if isinstance(value, Mapping):
        return {str(key): _to_xml_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_xml_value(item) for item in value]
    if value is None:
        return None
    return str(value)


def encode_xml(payload: Mapping[str, Any] | None) -> str:
    """Build ISAPI XML document.

    A payload with exactly one top-level key uses that key as the root element
    and its value as the root content, e.g. ``{"HttpHostNotification": {...}}``.
    Any other payload is wrapped in the ``XML_FALLBACK_ROOT`` element.
    Sequences are rendered as repeated sibling elements.
    """
    payload = dict(payload or {})
    if len(payload) == 1 and not isinstance(next(iter(payload.values())), (list, tuple)):
        root, content = next(iter(payload.items()))
    else:
        if payload:
            _LOGGER.warning(
                "XML payload has no single root key %s, using <%s>", list(payload), XML_FALLBACK_ROOT
            )
        root, content = XML_FALLBACK_ROOT, payload

    element: Node = {"@version": XML_VERSION, "@xmlns": XML_NAMESPACE}
    content = _to_xml_value(content)
    if isinstance(content, dict):
        element.update(content)
    elif content is not None:
        element["#text"] = content

    return xmltodict.unparse({root: element})


def encode_body(payload: Any, fmt: Format) -> str | bytes | None:
    """Encode request payload, pre-encoded strings are sent as they are."""
    if payload is None or isinstance(payload, (str, bytes)):
        return payload
    if fmt == Format.XML:
        return encode_xml(payload)
    return json.dumps(payload)


def parse_xml(text: str | bytes) -> Node:
    """Parse ISAPI XML document into plain dicts."""
    data = json.loads(json.dumps(xmltodict.parse(text)))
    for root, node in data.items():
        if not isinstance(node, dict):
            continue
        for attribute in ENVELOPE_ATTRIBUTES:
            node.pop(attribute, None)
        if list(node) == ["#text"]:
            data[root] = node["#text"]
    return data


def decode_body(body: str, content_type: str | None) -> Any:
    """Decode response body selected by its content type.

    Bodies of unknown type, or that fail to parse, are returned as ``{"raw": body}``.
    """
    content_type = (content_type or "").lower()
    is_json = content_type.startswith(CONTENT_TYPE_JSON)
    is_xml = content_type.startswith(XML_CONTENT_TYPES)

    if (is_json or is_xml) and not body.strip():
        return {}
    try:
        if is_json:
            return json.loads(body)
        if is_xml:
            return parse_xml(body)
    except (ValueError, ExpatError) as ex:
        _LOGGER.warning("Cannot parse %s response: %s", content_type, ex)

    return {RAW_KEY: body}


def decode_response(response: httpx.Response) -> Any:
    """Decode httpx response."""
    return decode_body(response.text, response.headers.get("Content-Type"))
