from __future__ import annotations

import logging

from newsdesk.config import get_settings
from newsdesk.data.news_blocks import default_news_blocks
from newsdesk.graph.state import SiteState
from newsdesk.schemas.content import serialize_items
from newsdesk.services.collections import ContentCollections

logger = logging.getLogger(__name__)


async def ingest_node(state: SiteState) -> SiteState:
    settings = get_settings()
    collections = ContentCollections(settings)

    news, news_errors = collections.load_news()
    columns, column_errors = collections.load_columns()

    news_source = "collection"
    if not news:
        news = default_news_blocks()
        news_source = "static"

    next_state: SiteState = dict(state)
    next_state["news_source"] = news_source
    next_state["news_raw"] = serialize_items(news)
    next_state["columns"] = serialize_items(columns)

    existing_errors = list(next_state.get("errors", []))
    existing_errors.extend(str(error) for error in [*news_errors, *column_errors])
    next_state["errors"] = existing_errors

    logger.info("Ingestion complete: %s news (%s), %s columns", len(news), news_source, len(columns))
    return next_state
