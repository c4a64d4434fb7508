"""HTTP client that sets the crawler's user agent and basic auth credentials."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Protocol
from urllib.parse import urlsplit

import requests
from requests.auth import HTTPBasicAuth

from seocrawl.crawler.messages import ClientResponse, Method


class HTTPRequester(Protocol):
    """Anything that can send a prepared request, such as requests.Session."""

    def send(self, request: requests.PreparedRequest, **kwargs: Any) -> Any: ...


@dataclass
class ClientOptions:
    """Options for the BasicClient."""

    user_agent: str = ""
    basic_auth_domains: list[str] = field(default_factory=list)
    auth_user: str = ""
    auth_pass: str = ""


class BasicClient:
    """Makes GET and HEAD requests with the configured user agent and auth."""

    def __init__(self, options: ClientOptions, client: HTTPRequester | None = None) -> None:
        self.options = options
        self._client: HTTPRequester = client if client is not None else requests.Session()

    def get(self, url: str) -> ClientResponse:
        """Make a GET request to the URL."""
        return self._request(Method.GET, url)

    def head(self, url: str) -> ClientResponse:
        """Make a HEAD request to the URL."""
        return self._request(Method.HEAD, url)

    def user_agent(self) -> str:
        """Return the user agent this client sends."""
        return self.options.user_agent

    def _is_basic_auth_domain(self, host: str) -> bool:
        return host in self.options.basic_auth_domains

    def _request(self, method: Method, url: str) -> ClientResponse:
        host = urlsplit(url).netloc.rpartition("@")[2]
        auth = None
        if self.options.auth_user and self._is_basic_auth_domain(host):
            auth = HTTPBasicAuth(self.options.auth_user, self.options.auth_pass)

        prepared = requests.Request(
            method.value,
            url,
            headers={"User-Agent": self.options.user_agent},
            auth=auth,
        ).prepare()

        start = time.monotonic()
        response = self._client.send(prepared, stream=True)
        ttfb = int((time.monotonic() - start) * 1000)

        return ClientResponse(response=response, ttfb=ttfb)