from __future__ import annotations

import argparse
import asyncio
import logging
from datetime import datetime, timezone
from uuid import uuid4

from newsdesk.config import get_settings
from newsdesk.graph.state import SiteState
from newsdesk.graph.workflow import build_workflow
from newsdesk.logging import setup_logging
from newsdesk.services.og_image import OgImageResolver, to_optional

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Newsdesk site content builder")
    subparsers = parser.add_subparsers(dest="command")

    build_parser_ = subparsers.add_parser("build", help="Load content, fill missing images and write the site data")
    build_parser_.add_argument("--dry-run", action="store_true", help="Run without writing output")
    build_parser_.add_argument("--verbose", action="store_true", help="Enable debug logs")

    og_parser = subparsers.add_parser("og-image", help="Print the preview image of a page")
    og_parser.add_argument("url", help="Absolute URL of the page")
    og_parser.add_argument("--verbose", action="store_true", help="Enable debug logs")

    return parser


async def run_build(args: argparse.Namespace) -> int:
    dry_run = bool(args.dry_run)
    initial_state: SiteState = {
        "run_id": str(uuid4()),
        "started_at": datetime.now(timezone.utc).isoformat(),
        "dry_run": dry_run,
        "errors": [],
    }

    workflow = build_workflow()
    final_state = await workflow.ainvoke(initial_state)

    news_count = len(final_state.get("news_enriched", []))
    column_count = len(final_state.get("columns", []))
    resolved = final_state.get("images_resolved", 0)
    missing = final_state.get("images_missing", 0)
    errors = final_state.get("errors", [])

    logger.info(
        "Build complete | news=%s columns=%s images_resolved=%s images_missing=%s dry_run=%s",
        news_count,
        column_count,
        resolved,
        missing,
        dry_run,
    )
    if errors:
        logger.warning("Non-fatal errors captured: %s", len(errors))
        for error in errors[:3]:
            logger.warning("%s", error)

    print(
        f"Build complete. news={news_count} columns={column_count} "
        f"images_resolved={resolved} images_missing={missing} dry_run={dry_run}"
    )
    output_path = final_state.get("output_path")
    if output_path:
        print(f"Wrote {output_path}")
    return 0 if not errors else 1


async def run_og_image(args: argparse.Namespace) -> int:
    resolver = OgImageResolver(get_settings())
    image_url = to_optional(await resolver.resolve(args.url))
    if image_url is None:
        logger.info("No preview image found for %s", args.url)
        return 1
    print(image_url)
    return 0


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "build":
        runner = run_build
    elif args.command == "og-image":
        runner = run_og_image
    else:
        parser.print_help()
        return

    setup_logging(verbose=bool(args.verbose))
    exit_code = asyncio.run(runner(args))
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
