from __future__ import annotations

from newsdesk.schemas.content import NewsItem

# Shown when the news collection has no entries.
NEWS_BLOCKS: list[NewsItem] = [
    NewsItem(
        id="story01",
        newsImage="/images/news/story01.jpg",
        newsHeadline="Raids on Medical Cannabis Dispensaries Threaten Drug-Testing Services",
        newsSource="The Tyee",
        newsDate="January 29, 2025",
        href="https://thetyee.ca/News/2025/01/30/Raids-Medical-Cannabis-Dispensaries/",
    ),
    NewsItem(
        id="story02",
        newsImage="/images/news/story02.jpg",
        newsHeadline="Police raid Vancouver cannabis dispensaries linked to Dana Larsen",
        newsSource="Vancouver Sun",
        newsDate="January 28, 2025",
        href="https://potheadbooks.com/",
    ),
    NewsItem(
        id="story03",
        newsImage="/images/news/story03.jpg",
        newsHeadline="Pot Activist, retailer Dana Larsen sue for not paying supplier",
        newsSource="North Shore News",
        newsDate="May 31, 2024",
        href="https://potheadbooks.com/",
    ),
]


def default_news_blocks() -> list[NewsItem]:
    return [item.model_copy(deep=True) for item in NEWS_BLOCKS]
