from __future__ import annotations

import logging

from newsdesk.config import get_settings
from newsdesk.graph.state import SiteState
from newsdesk.schemas.content import parse_news, serialize_items
from newsdesk.services.og_image import OgImageResolver, to_optional

logger = logging.getLogger(__name__)


async def enrich_node(state: SiteState) -> SiteState:
    settings = get_settings()

    news = parse_news(state.get("news_raw"))
    pending = [item for item in news if item.needs_image]

    resolved = 0
    if pending:
        resolver = OgImageResolver(settings)
        results = await resolver.resolve_many([item.href for item in pending])
        for item, result in zip(pending, results):
            image_url = to_optional(result)
            if image_url:
                resolved += 1
                item.news_image = image_url
            else:
                item.news_image = settings.placeholder_image

    next_state: SiteState = dict(state)
    next_state["news_enriched"] = serialize_items(news)
    next_state["images_resolved"] = resolved
    next_state["images_missing"] = len(pending) - resolved

    logger.info("Enrichment complete: %s of %s missing images resolved", resolved, len(pending))
    return next_state
