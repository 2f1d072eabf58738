from __future__ import annotations

from typing import Any, TypedDict


class SiteState(TypedDict, total=False):
    run_id: str
    started_at: str
    dry_run: bool
    news_source: str
    news_raw: list[dict[str, Any]]
    news_enriched: list[dict[str, Any]]
    columns: list[dict[str, Any]]
    images_resolved: int
    images_missing: int
    output_path: str | None
    errors: list[str]
