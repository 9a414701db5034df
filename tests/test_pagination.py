"""
Tests for the sequential article page walker.
"""

import json

import httpx
import pytest

from agents.tecdoc.errors import TecDocHTTPError
from agents.tecdoc.pagination import walk_article_pages
from models.tecdoc import Article, ArticlesResponse
from conftest import RecordingHandler


def page_of(page: int, size: int, total: int) -> ArticlesResponse:
    return ArticlesResponse(
        status=200,
        total_matching_articles=total,
        articles=[Article(article_number=f"P{page}-{i}", mfr_name="BOSCH") for i in range(size)],
    )


class PageSource:
    """Serves `total` articles in pages of 100, optionally failing on one page."""

    def __init__(self, total: int, fail_on: int = 0):
        self.total = total
        self.fail_on = fail_on
        self.pages = []

    async def __call__(self, page: int) -> ArticlesResponse:
        self.pages.append(page)
        if page == self.fail_on:
            raise TecDocHTTPError(500, "Internal Server Error")
        remaining = self.total - (page - 1) * 100
        return page_of(page, max(0, min(100, remaining)), self.total)


class TestWalkArticlePages:

    @pytest.mark.asyncio
    async def test_fetches_only_needed_pages(self):
        source = PageSource(total=250)
        result = await walk_article_pages(source)

        assert source.pages == [1, 2, 3]
        assert len(result.articles) == 250
        assert result.total_matching_articles == 250
        assert result.pages_fetched == 3

    @pytest.mark.asyncio
    async def test_page_cap(self):
        source = PageSource(total=1000)
        result = await walk_article_pages(source)

        assert source.pages == [1, 2, 3, 4, 5]
        assert len(result.articles) == 500
        assert result.total_matching_articles == 1000

    @pytest.mark.asyncio
    async def test_articles_keep_page_order(self):
        result = await walk_article_pages(PageSource(total=150))
        numbers = [a.article_number for a in result.articles]
        assert numbers[0] == "P1-0"
        assert numbers[99] == "P1-99"
        assert numbers[100] == "P2-0"

    @pytest.mark.asyncio
    async def test_failing_page_returns_partial_result(self):
        source = PageSource(total=500, fail_on=3)
        result = await walk_article_pages(source)

        assert source.pages == [1, 2, 3]
        assert len(result.articles) == 200
        assert result.pages_fetched == 2
        assert result.total_matching_articles == 500

    @pytest.mark.asyncio
    async def test_first_page_failure_propagates(self):
        with pytest.raises(TecDocHTTPError):
            await walk_article_pages(PageSource(total=500, fail_on=1))

    @pytest.mark.asyncio
    async def test_no_pagination_when_disabled(self):
        source = PageSource(total=1000)
        result = await walk_article_pages(source, paginate=False)

        assert source.pages == [1]
        assert len(result.articles) == 100

    @pytest.mark.asyncio
    async def test_single_page_total(self):
        source = PageSource(total=40)
        result = await walk_article_pages(source)

        assert source.pages == [1]
        assert len(result.articles) == 40

    @pytest.mark.asyncio
    async def test_missing_total_means_one_page(self):
        async def fetch(page):
            return ArticlesResponse(articles=[Article(article_number="A")])

        result = await walk_article_pages(fetch)
        assert len(result.articles) == 1
        assert result.total_matching_articles == 0


class TestCompatiblePartsPagination:

    @pytest.mark.asyncio
    async def test_client_requests_pages_in_order(self, make_client):
        def respond(request):
            query = json.loads(request.content)["getArticles"]
            page = query["page"]
            articles = [{"articleNumber": f"P{page}-{i}", "mfrName": "ATE"} for i in range(100 if page < 3 else 50)]
            return httpx.Response(200, json={"status": 200, "totalMatchingArticles": 250, "articles": articles})

        handler = RecordingHandler(respond)
        client = make_client(handler)

        result = await client.get_compatible_parts(138779, assembly_group_node_id=100006)

        bodies = [body["getArticles"] for body in handler.bodies]
        assert [body["page"] for body in bodies] == [1, 2, 3]
        assert all(body["assemblyGroupNodeId"] == 100006 for body in bodies)
        assert all(body["linkageTargetId"] == 138779 for body in bodies)
        assert all(body["perPage"] == 100 for body in bodies)
        assert "genericArticleId" not in bodies[0]
        assert len(result.articles) == 250

    @pytest.mark.asyncio
    async def test_default_assembly_group_is_all_parts(self, make_client):
        handler = RecordingHandler(lambda request: httpx.Response(200, json={"status": 200, "articles": []}))
        client = make_client(handler)

        await client.get_compatible_parts(1, generic_article_id=82)

        body = handler.bodies[0]["getArticles"]
        assert body["assemblyGroupNodeId"] == 100002
        assert body["genericArticleId"] == 82
