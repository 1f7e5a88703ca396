"""HTTP primitives — immutable Request, Headers, QueryParams, Response."""

from xebec.http.headers import Headers
from xebec.http.query import QueryParams
from xebec.http.request import Request
from xebec.http.response import (
    Response,
    error_response,
    json_response,
    redirect,
    text_response,
)

__all__ = [
    "Headers",
    "QueryParams",
    "Request",
    "Response",
    "error_response",
    "json_response",
    "redirect",
    "text_response",
]
