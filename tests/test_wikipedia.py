"""Tests for the Wikipedia client (httpx mock transport)."""

import json
from collections.abc import Callable

import httpx
import pytest

from src.config import WikipediaConfig
from src.errors import DocumentNotFoundError, MalformedUpstreamError
from src.ingestion.identifiers import derive_id
from src.ingestion.wikipedia import WikipediaClient, article_url, build_query_params

API_URL = "https://en.wikipedia.org/w/api.php"


def _client(handler: Callable[[httpx.Request], httpx.Response]) -> WikipediaClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return WikipediaClient(WikipediaConfig(api_url=API_URL), http_client=http_client)


def _page_response(page: dict) -> httpx.Response:
    return httpx.Response(200, json={"batchcomplete": True, "query": {"pages": [page]}})


class TestBuildQueryParams:
    def test_full_article(self) -> None:
        params = build_query_params("Eiffel Tower", full=True)
        assert params["titles"] == "Eiffel Tower"
        assert params["explaintext"] == "1"
        assert params["exsectionformat"] == "wiki"
        assert params["redirects"] == "1"
        assert "exintro" not in params

    def test_intro_only(self) -> None:
        assert build_query_params("Eiffel Tower", full=False)["exintro"] == "1"


class TestArticleUrl:
    def test_spaces_become_underscores(self) -> None:
        assert article_url("Eiffel Tower") == "https://en.wikipedia.org/wiki/Eiffel_Tower"

    def test_special_characters_escaped(self) -> None:
        assert article_url("Sagrada Família") == "https://en.wikipedia.org/wiki/Sagrada_Fam%C3%ADlia"


class TestGetPage:
    def test_returns_document(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _page_response(
                {
                    "pageid": 9232,
                    "title": "Eiffel Tower",
                    "extract": "  The Eiffel Tower is in Paris.\n\n== History ==\nBuilt 1889.  ",
                }
            )

        document = _client(handler).get_page("eiffel tower", full=True)

        assert document.title == "Eiffel Tower"
        assert document.id == derive_id("Eiffel Tower")
        assert document.full_text.startswith("The Eiffel Tower")
        assert document.full_text.endswith("Built 1889.")
        assert document.source_url == "https://en.wikipedia.org/wiki/Eiffel_Tower"
        assert seen[0].url.params["titles"] == "eiffel tower"
        assert "exintro" not in seen[0].url.params

    def test_intro_only_request(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return _page_response({"title": "Colosseum", "extract": "An amphitheatre."})

        _client(handler).get_page("Colosseum")
        assert seen[0].url.params["exintro"] == "1"

    def test_default_client_sends_user_agent(self) -> None:
        client = WikipediaClient(WikipediaConfig(user_agent="TestAgent/0.1", timeout_seconds=5))
        try:
            assert client._client.headers["User-Agent"] == "TestAgent/0.1"
            assert client._client.timeout.read == 5
        finally:
            client.close()

    def test_missing_page(self) -> None:
        client = _client(lambda r: _page_response({"title": "Atlantis", "missing": True}))
        with pytest.raises(DocumentNotFoundError) as exc_info:
            client.get_page("Atlantis")
        assert exc_info.value.item == "Atlantis"

    def test_no_pages(self) -> None:
        client = _client(lambda r: httpx.Response(200, json={"query": {"pages": []}}))
        with pytest.raises(DocumentNotFoundError):
            client.get_page("Nowhere")

    def test_empty_extract(self) -> None:
        client = _client(lambda r: _page_response({"title": "Stub", "extract": "   "}))
        with pytest.raises(MalformedUpstreamError) as exc_info:
            client.get_page("Stub")
        assert exc_info.value.source == "wikipedia"
        assert exc_info.value.item == "Stub"

    def test_missing_title(self) -> None:
        client = _client(lambda r: _page_response({"extract": "Text"}))
        with pytest.raises(MalformedUpstreamError):
            client.get_page("Untitled")

    def test_non_json_response(self) -> None:
        client = _client(lambda r: httpx.Response(200, content=b"<html>oops</html>"))
        with pytest.raises(MalformedUpstreamError):
            client.get_page("Broken")

    def test_non_object_json_response(self) -> None:
        client = _client(lambda r: httpx.Response(200, json=["Eiffel Tower"]))
        with pytest.raises(MalformedUpstreamError) as exc_info:
            client.get_page("Eiffel Tower")
        assert exc_info.value.item == "Eiffel Tower"

    def test_http_error_propagates(self) -> None:
        client = _client(lambda r: httpx.Response(503, content=json.dumps({}).encode()))
        with pytest.raises(httpx.HTTPStatusError):
            client.get_page("Eiffel Tower")
