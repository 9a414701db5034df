import asyncio
import logging
from typing import List

from models.tecdoc import Article
from .client import TecDocClient
from .utils import merge_article_details

logger = logging.getLogger(__name__)

DEFAULT_DETAILS_LIMIT = 10
DEFAULT_MAX_IN_FLIGHT = 10


async def _enrich_one(client: TecDocClient, article: Article, semaphore: asyncio.Semaphore) -> Article:
    # Without both keys there is nothing to look the article up by
    if not (article.data_supplier_id and article.article_number):
        return article

    async with semaphore:
        try:
            details = await client.get_article_details_by_number(article.article_number, article.mfr_id or 0)
        except Exception as e:
            logger.error(f"Failed to get details for part {article.article_number}: {e}")
            return article

    if details is None:
        logger.warning(f"No detailed information found for part {article.article_number}")
        return article
    return merge_article_details(article, details)


async def enrich_with_details(
    client: TecDocClient,
    articles: List[Article],
    limit: int = DEFAULT_DETAILS_LIMIT,
    max_in_flight: int = DEFAULT_MAX_IN_FLIGHT,
) -> List[Article]:
    """
    Merges article-search details into the first `limit` articles.

    Lookups run concurrently, at most `max_in_flight` at a time. A lookup that
    fails leaves its article untouched and does not affect the others. The
    returned list keeps the input order and length.

    Args:
        client: Gateway used for the per-article detail lookups.
        articles: Articles in display order.
        limit: How many leading articles to enrich.
        max_in_flight: Upper bound on concurrent detail lookups.

    Returns:
        A new list: enriched head followed by the untouched tail.
    """
    if not articles or limit <= 0:
        return list(articles)

    head = articles[:limit]
    logger.info(f"Fetching detailed information for {len(head)} parts")

    semaphore = asyncio.Semaphore(max(1, max_in_flight))
    enriched = await asyncio.gather(*(_enrich_one(client, article, semaphore) for article in head))
    return list(enriched) + articles[limit:]
