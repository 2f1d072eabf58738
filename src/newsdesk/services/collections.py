from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from newsdesk.config import Settings
from newsdesk.schemas.content import CollectionError, ColumnItem, NewsItem

logger = logging.getLogger(__name__)

# Entries whose file name starts with "_" are drafts.
ENTRY_PATTERN = "**/[!_]*.md"
FRONT_MATTER_DELIMITER = "---"

ModelT = TypeVar("ModelT", bound=BaseModel)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_DELIMITER:
            raw = "\n".join(lines[1:index])
            body = "\n".join(lines[index + 1 :])
            data = yaml.safe_load(raw) or {}
            if not isinstance(data, dict):
                raise ValueError("front matter must be a mapping")
            return data, body

    raise ValueError("unterminated front matter")


def entry_id(path: Path, base: Path) -> str:
    return path.relative_to(base).with_suffix("").as_posix()


class ContentCollections:
    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.content_dir = Path(settings.content_dir)

    def load_news(self) -> tuple[list[NewsItem], list[CollectionError]]:
        return self._load("news", NewsItem)

    def load_columns(self) -> tuple[list[ColumnItem], list[CollectionError]]:
        return self._load("columns", ColumnItem)

    def _load(self, collection: str, model: type[ModelT]) -> tuple[list[ModelT], list[CollectionError]]:
        base = self.content_dir / collection
        if not base.is_dir():
            logger.info("Collection directory missing: %s", base)
            return [], []

        items: list[ModelT] = []
        errors: list[CollectionError] = []
        for path in sorted(base.glob(ENTRY_PATTERN)):
            if not path.is_file():
                continue
            try:
                data, _body = split_front_matter(path.read_text(encoding="utf-8"))
                data["id"] = entry_id(path, base)
                items.append(model.model_validate(data))
            except (OSError, ValueError, yaml.YAMLError) as exc:
                # pydantic's ValidationError is a ValueError
                message = _format_error(exc)
                errors.append(CollectionError(collection=collection, path=str(path), message=message))
                logger.warning("Skipping %s entry %s: %s", collection, path, message)

        logger.info("Loaded %s %s entries", len(items), collection)
        return items, errors


def _format_error(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        fields = ", ".join(".".join(str(part) for part in error["loc"]) for error in exc.errors())
        return f"invalid fields: {fields}"
    return str(exc)
