import logging
import math
from typing import Awaitable, Callable

from models.tecdoc import ArticlesResponse, CompatibleParts

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
# Hard cap on pages per walk, page 1 included
DEFAULT_MAX_PAGES = 5


async def walk_article_pages(
    fetch_page: Callable[[int], Awaitable[ArticlesResponse]],
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = DEFAULT_MAX_PAGES,
    paginate: bool = True,
) -> CompatibleParts:
    """
    Collects articles across result pages, one page at a time.

    Page 1 is always fetched and its failure propagates. Further pages are
    fetched sequentially up to `max_pages`; the first failing page ends the walk
    and whatever was gathered so far is returned as a normal result.

    Args:
        fetch_page: Coroutine factory returning the response for a 1-based page number.
        page_size: Articles per page, used to turn the upstream total into a page count.
        max_pages: Upper bound on pages fetched, page 1 included.
        paginate: When False only page 1 is used (mock mode).
    """
    first_page = await fetch_page(1)
    total_matching = first_page.total_matching_articles or 0
    articles = list(first_page.articles)
    pages_fetched = 1

    total_pages = math.ceil(total_matching / page_size) if page_size > 0 else 1
    if total_pages > 1 and paginate:
        last_page = min(total_pages, max_pages)
        logger.info(f"Fetching {last_page - 1} additional pages of parts (out of {total_pages - 1} remaining pages)")

        for page in range(2, last_page + 1):
            try:
                page_response = await fetch_page(page)
            except Exception as e:
                logger.error(f"Failed to fetch page {page}, keeping {len(articles)} parts gathered so far: {e}")
                break
            pages_fetched += 1
            if page_response.articles:
                articles.extend(page_response.articles)
                logger.info(f"Fetched page {page}/{last_page}, got {len(page_response.articles)} more parts")

    logger.info(f"Returning {len(articles)} parts out of {total_matching} total matching parts")
    return CompatibleParts(
        articles=articles,
        total_matching_articles=total_matching,
        pages_fetched=pages_fetched,
    )
