from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _date_to_text(value: Any) -> Any:
    # YAML front matter turns bare ISO dates into date objects
    if isinstance(value, dt.date):
        return value.isoformat()
    return value


class NewsItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str | None = None
    news_image: str | None = Field(default=None, alias="newsImage")
    news_headline: str = Field(alias="newsHeadline")
    news_source: str = Field(alias="newsSource")
    news_date: str = Field(alias="newsDate")
    href: str

    @field_validator("news_date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _date_to_text(value)

    @property
    def needs_image(self) -> bool:
        return not (self.news_image or "").strip()


class ColumnItem(BaseModel):
    id: str | None = None
    headline: str
    source: str
    date: str
    href: str

    @field_validator("date", mode="before")
    @classmethod
    def coerce_date(cls, value: Any) -> Any:
        return _date_to_text(value)


class CollectionError(BaseModel):
    collection: str
    path: str
    message: str

    def __str__(self) -> str:
        return f"Invalid {self.collection} entry ({self.path}): {self.message}"


def serialize_items(items: list[NewsItem] | list[ColumnItem]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json", by_alias=True) for item in items]


def parse_news(payload: list[dict[str, Any]] | None) -> list[NewsItem]:
    if not payload:
        return []
    return [NewsItem.model_validate(item) for item in payload]
