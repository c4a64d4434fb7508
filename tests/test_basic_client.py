import base64

import pytest
import requests

from seocrawl.crawler.basic_client import BasicClient, ClientOptions


class MockRequester:
    def __init__(self, force_error=False):
        self.last_request = None
        self.force_error = force_error

    def send(self, request, **kwargs):
        self.last_request = request
        if self.force_error:
            raise requests.exceptions.ConnectionError("mock error")
        response = requests.Response()
        response.status_code = 200
        return response


def test_get_user_agent():
    mock = MockRequester()
    client = BasicClient(ClientOptions(user_agent="TEST_UA"), mock)

    result = client.get("http://example.com")

    assert mock.last_request is not None
    assert mock.last_request.headers["User-Agent"] == "TEST_UA"
    assert mock.last_request.method == "GET"
    assert result.response.status_code == 200
    assert result.ttfb >= 0


def test_head_user_agent():
    mock = MockRequester()
    client = BasicClient(ClientOptions(user_agent="TEST_UA"), mock)

    client.head("http://example.com")

    assert mock.last_request.headers["User-Agent"] == "TEST_UA"
    assert mock.last_request.method == "HEAD"


def test_basic_auth_headers_sent():
    password = "password"
    options = ClientOptions(
        user_agent="TEST_UA",
        basic_auth_domains=["example.com"],
        auth_user="user",
        auth_pass=password,
    )
    mock = MockRequester()
    client = BasicClient(options, mock)

    client.get("http://example.com")

    header = mock.last_request.headers["Authorization"]
    scheme, _, encoded = header.partition(" ")
    assert scheme == "Basic"
    assert base64.b64decode(encoded) == b"user:password"


def test_basic_auth_headers_not_sent():
    password = "password"
    options = ClientOptions(
        user_agent="TEST_UA",
        basic_auth_domains=[],
        auth_user="user",
        auth_pass=password,
    )
    mock = MockRequester()
    client = BasicClient(options, mock)

    client.get("http://example.com")

    assert "Authorization" not in mock.last_request.headers


def test_basic_auth_requires_matching_host_and_port():
    password = "password"
    options = ClientOptions(
        basic_auth_domains=["example.com"],
        auth_user="user",
        auth_pass=password,
    )
    mock = MockRequester()
    client = BasicClient(options, mock)

    client.get("http://example.com:8080/page")

    assert "Authorization" not in mock.last_request.headers


def test_http_error():
    client = BasicClient(ClientOptions(), MockRequester(force_error=True))
    with pytest.raises(requests.exceptions.ConnectionError):
        client.get("http://example.com")


def test_user_agent_accessor():
    client = BasicClient(ClientOptions(user_agent="crawler-bot"), MockRequester())
    assert client.user_agent() == "crawler-bot"