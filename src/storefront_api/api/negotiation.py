"""
storefront_api.api.negotiation

Content negotiation for API responses.

Responsibilities:
- Map the requested `format` parameter to a response content type.
- Apply that content type to every response of the request, errors included.
- Render payloads as JSON or XML.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from xml.etree import ElementTree

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

JSON_CONTENT_TYPE = "application/json; charset=utf-8"
XML_CONTENT_TYPE = "text/xml; charset=utf-8"

CONTENT_TYPES: dict[str, str] = {
    "json": JSON_CONTENT_TYPE,
    "xml": XML_CONTENT_TYPE,
}


def requested_format(request: Request) -> str | None:
    return request.query_params.get("format")


def content_type_for(fmt: str | None) -> str | None:
    # Unknown or missing formats leave the response's own content type untouched.
    if fmt is None:
        return None
    return CONTENT_TYPES.get(fmt)


def render(
    payload: Any,
    *,
    fmt: str | None,
    status_code: int = 200,
    root: str = "response",
) -> Response:
    if fmt == "xml":
        return Response(
            content=to_xml(jsonable_encoder(payload), root=root),
            status_code=status_code,
            media_type="text/xml",
        )
    return JSONResponse(content=jsonable_encoder(payload), status_code=status_code)


def to_xml(payload: Any, *, root: str = "response") -> bytes:
    return ElementTree.tostring(_element(root, payload), encoding="utf-8", xml_declaration=True)


def _element(tag: str, value: Any) -> ElementTree.Element:
    el = ElementTree.Element(tag)
    if isinstance(value, Mapping):
        for key, child in value.items():
            el.append(_element(str(key), child))
    elif isinstance(value, list | tuple):
        el.set("type", "array")
        item_tag = _singular(tag)
        for child in value:
            el.append(_element(item_tag, child))
    elif value is None:
        el.set("nil", "true")
    elif isinstance(value, bool):
        el.text = "true" if value else "false"
    else:
        el.text = str(value)
    return el


def _singular(tag: str) -> str:
    if tag.endswith("ies"):
        return tag[:-3] + "y"
    if tag.endswith("s") and len(tag) > 1:
        return tag[:-1]
    return "item"


class ContentTypeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        # Negotiated once, before the request is handled.
        content_type = content_type_for(requested_format(request))
        response: Response = await call_next(request)
        if content_type is not None:
            response.headers["content-type"] = content_type
        return response
