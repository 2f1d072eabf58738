from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from newsdesk.config import get_settings
from newsdesk.graph.state import SiteState

logger = logging.getLogger(__name__)


def build_site_document(state: SiteState) -> dict[str, Any]:
    return {
        "generatedAt": state.get("started_at"),
        "news": list(state.get("news_enriched", [])),
        "columns": list(state.get("columns", [])),
    }


async def render_node(state: SiteState) -> SiteState:
    settings = get_settings()
    document = build_site_document(state)

    next_state: SiteState = dict(state)
    if state.get("dry_run", False):
        next_state["output_path"] = None
        logger.info("Dry run: skipped writing %s", settings.site_file_name)
        return next_state

    output_dir = Path(settings.output_dir)
    output_path = output_dir / settings.site_file_name
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as exc:
        existing_errors = list(next_state.get("errors", []))
        existing_errors.append(f"Render failed ({output_path}): {exc}")
        next_state["errors"] = existing_errors
        next_state["output_path"] = None
        logger.error("Render failed: %s", exc)
        return next_state

    next_state["output_path"] = str(output_path)
    logger.info("Render complete: %s news, %s columns -> %s", len(document["news"]), len(document["columns"]), output_path)
    return next_state
