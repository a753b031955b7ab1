import httpx
import pytest

from pagegist.extract.fetch import FetchError, fetch_html


def test_fetch_returns_body_text():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, text="<html><body>hi</body></html>")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    assert fetch_html("https://example.com/page", client=client) == "<html><body>hi</body></html>"
    assert seen[0].headers["User-Agent"].startswith("pagegist/")


def test_fetch_error_status_raises():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
    with pytest.raises(FetchError) as exc:
        fetch_html("https://example.com/missing", client=client)
    assert "https://example.com/missing" in str(exc.value)


def test_fetch_transport_error_raises():
    def handler(request):
        raise httpx.ConnectError("no route", request=request)

    client = httpx.Client(transport=httpx.MockTransport(handler))
    with pytest.raises(FetchError):
        fetch_html("https://example.com/", client=client)
