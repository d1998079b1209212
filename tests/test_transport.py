# pyright: reportUnknownParameterType=false, reportUnknownMemberType=false
# pyright: reportUnknownVariableType=false, reportMissingParameterType=false
# pyright: reportUnknownArgumentType=false
import io
from unittest.mock import Mock, patch

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from courier.networking.config import HttpClientConfig
from courier.networking.errors import TransportError
from courier.networking.request import HttpRequest
from courier.networking.transport import (
    RequestsTransport,
    TransportContext,
    TransportFailure,
    header_lines,
)


class _RawHeaders:
    """Header container keeping repeated names apart, like urllib3's."""

    def __init__(self, items):
        self._items = items

    def iteritems(self):
        return iter(self._items)


class _Raw(io.BytesIO):
    def __init__(self, content, *, version=11, headers=None):
        super().__init__(content)
        self.version = version
        self.headers = headers


def _mock_response(
    *,
    content: bytes = b"",
    status: int = 200,
    reason: str = "OK",
    url: str = "http://example.com/",
    headers=None,
    history=(),
):
    response = requests.Response()
    response.status_code = status
    response.reason = reason
    response.url = url
    response.headers = CaseInsensitiveDict(headers or {})
    response.raw = io.BytesIO(content)
    response.history = list(history)
    return response


def _context(**overrides):
    values = {
        "method": "GET",
        "url": "http://example.com/",
        "headers": (("Content-Length", "0"), ("Host", "example.com")),
        "body": "",
        "follow_redirects": False,
        "max_redirects": 10,
    }
    values.update(overrides)
    return TransportContext(**values)


@pytest.fixture
def config():
    return HttpClientConfig(
        user_agent="TestAgent/1.0",
        default_headers={"X-Test": "yes"},
        timeout_seconds=5.0,
    )


@pytest.fixture
def transport(config):
    return RequestsTransport(config)


def test_init_sets_user_agent_and_default_headers(transport):
    assert transport.session.headers["User-Agent"] == "TestAgent/1.0"
    assert transport.session.headers["X-Test"] == "yes"


def test_header_block_rendering():
    context = _context(headers=(("Accept", "*/*"), ("Host", "example.com:8080")))

    assert context.header_block == "Accept: */*\r\nHost: example.com:8080\r\n"


@patch("requests.Session.request")
def test_exchange_returns_body_and_header_lines(mock_request, transport):
    mock_request.return_value = _mock_response(
        content=b"hello",
        headers={"Content-Type": "text/plain", "Content-Length": "5"},
    )

    result = transport.exchange(_context())

    assert result is not None
    assert result.body == "hello"
    assert result.header_lines == (
        "HTTP/1.1 200 OK",
        "Content-Type: text/plain",
        "Content-Length: 5",
    )
    mock_request.assert_called_once_with(
        "GET",
        "http://example.com/",
        headers={"Content-Length": "0", "Host": "example.com"},
        data=None,
        timeout=5.0,
        allow_redirects=False,
        verify=True,
        stream=False,
    )


@patch("requests.Session.request")
def test_exchange_applies_redirect_policy_and_body(mock_request, transport):
    mock_request.return_value = _mock_response()

    transport.exchange(
        _context(
            method="POST",
            body="q=xxx",
            follow_redirects=True,
            max_redirects=3,
        )
    )

    assert transport.session.max_redirects == 3
    kwargs = mock_request.call_args.kwargs
    assert kwargs["data"] == b"q=xxx"
    assert kwargs["allow_redirects"] is True


@patch("requests.Session.request")
def test_exchange_uses_connect_read_timeout_and_tls_switch(mock_request):
    config = HttpClientConfig(
        connect_timeout_seconds=1.0,
        read_timeout_seconds=3.0,
        verify_tls=False,
    )
    mock_request.return_value = _mock_response()

    RequestsTransport(config).exchange(_context())

    kwargs = mock_request.call_args.kwargs
    assert kwargs["timeout"] == (1.0, 3.0)
    assert kwargs["verify"] is False


@patch("requests.Session.request")
def test_redirect_chain_yields_every_status_line(mock_request, transport):
    moved = _mock_response(
        status=301,
        reason="Moved Permanently",
        headers={"Location": "http://example.com/new"},
    )
    mock_request.return_value = _mock_response(
        content=b"new",
        url="http://example.com/new",
        headers={"Content-Type": "text/plain"},
        history=[moved],
    )

    result = transport.exchange(_context(follow_redirects=True))

    assert result is not None
    assert result.header_lines == (
        "HTTP/1.1 301 Moved Permanently",
        "Location: http://example.com/new",
        "HTTP/1.1 200 OK",
        "Content-Type: text/plain",
    )


def test_header_lines_keep_repeated_raw_headers():
    response = _mock_response()
    response.raw = _Raw(
        b"",
        version=10,
        headers=_RawHeaders([("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")]),
    )

    assert header_lines(response) == [
        "HTTP/1.0 200 OK",
        "Set-Cookie: a=1",
        "Set-Cookie: b=2",
    ]


@patch("requests.Session.request")
def test_progress_callback_streams_body(mock_request):
    transport = RequestsTransport(HttpClientConfig(chunk_size=4))
    mock_request.return_value = _mock_response(
        content=b"abcdef", headers={"Content-Length": "6"}
    )
    callback = Mock()

    result = transport.exchange(_context(progress_callback=callback))

    assert result is not None
    assert result.body == "abcdef"
    assert [call.args for call in callback.call_args_list] == [(4, 6), (6, 6)]
    assert mock_request.call_args.kwargs["stream"] is True


@patch("requests.Session.request")
def test_progress_callback_without_declared_length(mock_request):
    transport = RequestsTransport(HttpClientConfig(chunk_size=8))
    mock_request.return_value = _mock_response(content=b"abc")
    callback = Mock()

    transport.exchange(_context(progress_callback=callback))

    callback.assert_called_once_with(3, None)


@patch("requests.Session.request")
def test_unknown_encoding_falls_back_to_utf8(mock_request, transport):
    response = _mock_response(content="héllo".encode("utf-8"))
    response.encoding = "no-such-codec"
    mock_request.return_value = response

    result = transport.exchange(_context())

    assert result is not None
    assert result.body == "héllo"


@patch("requests.Session.request")
def test_missing_data_returns_none(mock_request, transport):
    mock_request.return_value = _mock_response(status=0)

    assert transport.exchange(_context()) is None


@pytest.mark.parametrize(
    "error",
    [
        requests.exceptions.Timeout("Read timed out."),
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.TooManyRedirects("Exceeded 3 redirects."),
        requests.exceptions.RequestException("boom"),
    ],
)
@patch("requests.Session.request")
def test_request_exceptions_become_transport_failures(mock_request, error, transport):
    mock_request.side_effect = error

    with pytest.raises(TransportFailure) as info:
        transport.exchange(_context())

    assert str(info.value) == str(error)
    assert info.value.__cause__ is error


@patch("requests.Session.request")
def test_timeout_reaches_caller_as_transport_error(mock_request):
    mock_request.side_effect = requests.exceptions.Timeout("Read timed out.")
    request = HttpRequest(
        "http://example.com/", config=HttpClientConfig(timeout_seconds=5.0)
    )

    with pytest.raises(TransportError, match="Read timed out."):
        request.send()


@patch("requests.Session.request")
def test_no_data_reaches_caller_as_transport_error(mock_request):
    mock_request.return_value = _mock_response(status=0)
    request = HttpRequest("http://example.com/")

    with pytest.raises(TransportError):
        request.send()


@patch("requests.Session.request")
def test_end_to_end_post(mock_request):
    mock_request.return_value = _mock_response(
        content=b"created",
        status=201,
        reason="Created",
        headers={"Content-Length": "7"},
    )
    request = HttpRequest("http://example.com:8080/items", "POST")
    request.set_post_values({"q": "xxx"})

    response = request.send()

    assert response.status == 201
    assert response.reason_phrase == "Created"
    assert response.get_content_length() == 7
    assert mock_request.call_args.kwargs["headers"] == {
        "Content-Type": "application/x-www-form-urlencoded",
        "Content-Length": "5",
        "Host": "example.com:8080",
    }
