import asyncio
import time

import httpx

from newsdesk.config import DEFAULT_OG_USER_AGENT, Settings
from newsdesk.services.og_image import (
    NOT_FOUND,
    Found,
    OgImageResolver,
    extract_og_image,
    fetch_og_image,
    resolve_og_image,
)

PAGE_URL = "https://news.example.com/story"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _resolve(handler, settings: Settings | None = None):
    async def run():
        async with _client(handler) as client:
            return await OgImageResolver(settings or Settings()).resolve(PAGE_URL, client=client)

    return asyncio.run(run())


def test_extract_og_image_property_first() -> None:
    html = '<html><head><meta property="og:image" content="https://cdn.example.com/a.jpg"></head></html>'
    assert extract_og_image(html) == Found(url="https://cdn.example.com/a.jpg")


def test_extract_og_image_attribute_order_does_not_matter() -> None:
    forward = '<meta property="og:image" content="https://cdn.example.com/a.jpg" />'
    reverse = '<meta content="https://cdn.example.com/a.jpg" property="og:image" />'
    assert extract_og_image(forward) == extract_og_image(reverse) == Found(url="https://cdn.example.com/a.jpg")


def test_extract_og_image_single_quotes_and_uppercase_tags() -> None:
    html = "<META PROPERTY='og:image' CONTENT='https://cdn.example.com/b.png'>"
    assert extract_og_image(html) == Found(url="https://cdn.example.com/b.png")


def test_extract_og_image_unquoted_content_first() -> None:
    html = "<meta content=https://example.com/img.jpg property=og:image>"
    assert extract_og_image(html) == Found(url="https://example.com/img.jpg")


def test_extract_og_image_unquoted_property_first() -> None:
    html = "<meta property=og:image content=https://example.com/img.jpg>"
    assert extract_og_image(html) == Found(url="https://example.com/img.jpg")


def test_extract_og_image_twitter_fallback() -> None:
    quoted = '<meta name="twitter:image" content="https://example.com/card.jpg">'
    reversed_ = '<meta content="https://example.com/card.jpg" name="twitter:image">'
    bare = "<meta content=https://example.com/card.jpg name=twitter:image>"
    for html in (quoted, reversed_, bare):
        assert extract_og_image(html) == Found(url="https://example.com/card.jpg")


def test_extract_og_image_prefers_open_graph_over_twitter() -> None:
    html = """
    <head>
      <meta name="twitter:image" content="https://example.com/twitter.jpg">
      <meta property="og:image" content="https://example.com/og.jpg">
    </head>
    """
    assert extract_og_image(html) == Found(url="https://example.com/og.jpg")


def test_extract_og_image_ignores_og_image_subproperties() -> None:
    html = """
    <meta property="og:image:width" content="1200">
    <meta property="og:image" content="https://example.com/real.jpg">
    """
    assert extract_og_image(html) == Found(url="https://example.com/real.jpg")


def test_extract_og_image_returns_value_verbatim() -> None:
    html = '<meta property="og:image" content=" /img/a.jpg?w=1&amp;h=2 ">'
    assert extract_og_image(html) == Found(url=" /img/a.jpg?w=1&amp;h=2 ")


def test_extract_og_image_not_found() -> None:
    assert extract_og_image("<html><head><title>Nothing</title></head></html>") is NOT_FOUND
    assert extract_og_image('<meta property="og:image" content="">') is NOT_FOUND
    assert extract_og_image("") is NOT_FOUND


def test_resolve_returns_image_and_sends_user_agent() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text='<meta property="og:image" content="https://cdn.example.com/a.jpg">')

    assert _resolve(handler) == Found(url="https://cdn.example.com/a.jpg")
    assert len(seen) == 1
    assert seen[0].method == "GET"
    assert seen[0].headers["user-agent"] == DEFAULT_OG_USER_AGENT


def test_resolve_ignores_body_of_error_status() -> None:
    body = '<meta property="og:image" content="https://cdn.example.com/a.jpg">'
    for status in (404, 500):
        assert _resolve(lambda request, status=status: httpx.Response(status, text=body)) is NOT_FOUND


def test_resolve_page_without_tags() -> None:
    assert _resolve(lambda request: httpx.Response(200, text="<html><body>hi</body></html>")) is NOT_FOUND


def test_resolve_swallows_transport_errors() -> None:
    def connect_error(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def read_timeout(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    def unexpected(request: httpx.Request) -> httpx.Response:
        raise RuntimeError("boom")

    for handler in (connect_error, read_timeout, unexpected):
        assert _resolve(handler) is NOT_FOUND


def test_resolve_times_out_within_bound() -> None:
    async def slow(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, text='<meta property="og:image" content="late.jpg">')

    started = time.monotonic()
    result = _resolve(slow, Settings(og_timeout_seconds=0.05))
    assert result is NOT_FOUND
    assert time.monotonic() - started < 2


def test_resolve_unsupported_url_is_not_found() -> None:
    assert asyncio.run(resolve_og_image("ftp://example.com/page")) is NOT_FOUND


def test_fetch_og_image_maps_results_to_optional() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/with-image":
            return httpx.Response(200, text='<meta name="twitter:image" content="https://example.com/t.jpg">')
        return httpx.Response(200, text="<html></html>")

    async def run():
        async with _client(handler) as client:
            found = await fetch_og_image("https://example.com/with-image", client=client)
            missing = await fetch_og_image("https://example.com/plain", client=client)
        return found, missing

    assert asyncio.run(run()) == ("https://example.com/t.jpg", None)


def test_resolve_many_keeps_input_order(monkeypatch) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/missing":
            return httpx.Response(404)
        return httpx.Response(200, text=f'<meta property="og:image" content="{request.url.path}.jpg">')

    resolver = OgImageResolver(Settings(http_concurrency=2))
    monkeypatch.setattr(resolver, "build_client", lambda: _client(handler))

    urls = ["https://example.com/a", "https://example.com/missing", "https://example.com/c"]
    results = asyncio.run(resolver.resolve_many(urls))
    assert results == [Found(url="/a.jpg"), NOT_FOUND, Found(url="/c.jpg")]


def test_extract_og_image_unclosed_meta_markup_stays_fast() -> None:
    html = "<meta content='a' " * 2000

    started = time.monotonic()
    assert extract_og_image(html) is NOT_FOUND
    assert time.monotonic() - started < 2


def test_extract_og_image_finds_tag_after_malformed_markup() -> None:
    html = "<meta content='a' " * 500 + '><meta property="og:image" content="https://example.com/ok.jpg">'
    assert extract_og_image(html) == Found(url="https://example.com/ok.jpg")
