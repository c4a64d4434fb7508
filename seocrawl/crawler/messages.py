"""Messages exchanged between the crawler, its queue and its HTTP client."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Method(Enum):
    """HTTP methods the crawler can use."""

    GET = "GET"
    HEAD = "HEAD"


@dataclass
class ClientResponse:
    """An HTTP response together with its time to first byte in milliseconds."""

    response: Any
    ttfb: int = 0


@dataclass
class RequestMessage:
    """A URL waiting to be requested by the crawler."""

    url: str
    ignore_domain: bool = False
    method: Method = Method.GET
    data: Any = None


@dataclass
class ResponseMessage:
    """The outcome of requesting a URL."""

    url: str
    response: Any = None
    error: Exception | None = None
    ttfb: int = 0
    blocked: bool = False
    in_sitemap: bool = False
    timeout: bool = False
    data: Any = None