from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Union

import httpx

from newsdesk.config import Settings, get_settings

logger = logging.getLogger(__name__)

_QUOTED_VALUE = r"""["']([^"']+)["']"""
_BARE_VALUE = r"""([^\s"'>]+)"""

# Longest tag scanned; keeps unclosed <meta markup from rescanning the whole page.
MAX_META_TAG_LENGTH = 2048
_META_TAG = re.compile(r"<meta\b[^>]{0,%d}>" % MAX_META_TAG_LENGTH, re.IGNORECASE)


def _key(attribute: str, value: str) -> str:
    # Accept quoted or bare keys, but never a prefix match such as og:image:width.
    return rf"""\s{attribute}=(?P<quote>["']?){re.escape(value)}(?P=quote)(?=[\s/>])"""


@dataclass(frozen=True)
class Found:
    url: str


@dataclass(frozen=True)
class NotFound:
    pass


NOT_FOUND = NotFound()

PreviewImageResult = Union[Found, NotFound]


@dataclass(frozen=True)
class MetaMatcher:
    name: str
    pattern: re.Pattern[str]

    def match(self, tag: str) -> str | None:
        found = self.pattern.match(tag)
        if found is None:
            return None
        return found.group("value") or None


def _matcher(name: str, *parts: str) -> MetaMatcher:
    return MetaMatcher(name=name, pattern=re.compile(r"<meta" + "".join(parts), re.IGNORECASE))


def _content(value_pattern: str) -> str:
    return r"[^>]*?\scontent=" + value_pattern.replace("(", "(?P<value>", 1)


# Most standard declarations first; the first hit wins.
OG_IMAGE_MATCHERS: tuple[MetaMatcher, ...] = (
    _matcher("og:image quoted, property first", r"[^>]*?", _key("property", "og:image"), _content(_QUOTED_VALUE)),
    _matcher("og:image quoted, content first", _content(_QUOTED_VALUE), r"[^>]*?", _key("property", "og:image")),
    _matcher("og:image bare, content first", _content(_BARE_VALUE), r"[^>]*?", _key("property", "og:image")),
    _matcher("og:image bare, property first", r"[^>]*?", _key("property", "og:image"), _content(_BARE_VALUE)),
    _matcher("twitter:image quoted, name first", r"[^>]*?", _key("name", "twitter:image"), _content(_QUOTED_VALUE)),
    _matcher("twitter:image quoted, content first", _content(_QUOTED_VALUE), r"[^>]*?", _key("name", "twitter:image")),
    _matcher("twitter:image bare, content first", _content(_BARE_VALUE), r"[^>]*?", _key("name", "twitter:image")),
)


def meta_tags(html: str) -> list[str]:
    return [found.group(0) for found in _META_TAG.finditer(html)]


def extract_og_image(html: str) -> PreviewImageResult:
    tags = meta_tags(html)
    for matcher in OG_IMAGE_MATCHERS:
        for tag in tags:
            value = matcher.match(tag)
            if value:
                logger.debug("Matched %s", matcher.name)
                return Found(url=value)
    return NOT_FOUND


def to_optional(result: PreviewImageResult) -> str | None:
    if isinstance(result, Found):
        return result.url
    return None


class OgImageResolver:
    """Best-effort preview image lookup for third-party pages.

    Every failure (transport error, timeout, non-2xx status, no matching tag)
    collapses to ``NOT_FOUND``. Nothing is raised, retried or cached.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def build_client(self) -> httpx.AsyncClient:
        timeout = httpx.Timeout(self.settings.og_timeout_seconds)
        return httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def resolve(self, url: str, client: httpx.AsyncClient | None = None) -> PreviewImageResult:
        if client is None:
            async with self.build_client() as owned_client:
                return await self._resolve_with(owned_client, url)
        return await self._resolve_with(client, url)

    async def resolve_many(self, urls: list[str]) -> list[PreviewImageResult]:
        semaphore = asyncio.Semaphore(max(1, self.settings.http_concurrency))

        async with self.build_client() as client:
            async def worker(url: str) -> PreviewImageResult:
                async with semaphore:
                    return await self._resolve_with(client, url)

            return list(await asyncio.gather(*(worker(url) for url in urls)))

    async def _resolve_with(self, client: httpx.AsyncClient, url: str) -> PreviewImageResult:
        try:
            html = await asyncio.wait_for(
                self._fetch_html(client, url),
                timeout=self.settings.og_timeout_seconds,
            )
            if html is None:
                return NOT_FOUND
            return extract_og_image(html)
        except Exception as exc:
            logger.debug("og:image lookup failed for %s: %r", url, exc)
            return NOT_FOUND

    async def _fetch_html(self, client: httpx.AsyncClient, url: str) -> str | None:
        headers = {"User-Agent": self.settings.og_user_agent}
        response = await client.get(url, headers=headers)
        if not response.is_success:
            logger.debug("og:image lookup got HTTP %s for %s", response.status_code, url)
            return None
        return response.text


async def resolve_og_image(
    url: str,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> PreviewImageResult:
    return await OgImageResolver(settings).resolve(url, client=client)


async def fetch_og_image(
    url: str,
    client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> str | None:
    return to_optional(await resolve_og_image(url, client=client, settings=settings))
