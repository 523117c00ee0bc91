"""Tests for index metadata clients."""

import base64

import httpx
import pytest

from index_catalog.config import ClusterConfig
from index_catalog.metadata.base import MetadataConnectionError, MetadataRequestError
from index_catalog.metadata.http import HttpIndexMetadataClient, parse_mapping_response
from index_catalog.metadata.memory import InMemoryIndexMetadataClient


DOC = {"properties": {"title": {"type": "text"}}}


def make_client(handler, **config) -> tuple[HttpIndexMetadataClient, list[httpx.Request]]:
    """HTTP client whose requests are answered by ``handler`` and recorded."""
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = HttpIndexMetadataClient(
        config=ClusterConfig(url="http://search:9200", **config),
        transport=httpx.MockTransport(record),
    )
    return client, seen


def respond(body, status_code: int = 200):
    return lambda request: httpx.Response(status_code, json=body)


class TestParseMappingResponse:
    def test_typed(self):
        body = {"library": {"mappings": {"_default_": {}, "book": DOC}}}
        assert parse_mapping_response(body) == {"library": {"_default_": {}, "book": DOC}}

    def test_typeless(self):
        body = {"library": {"mappings": DOC}}
        assert parse_mapping_response(body) == {"library": {"_doc": DOC}}

    def test_typeless_without_properties(self):
        body = {"library": {"mappings": {"dynamic": "strict"}}}
        assert parse_mapping_response(body) == {"library": {"_doc": {"dynamic": "strict"}}}

    def test_empty_mappings(self):
        body = {"library": {"mappings": {}}, "other": {}}
        assert parse_mapping_response(body) == {"library": {}, "other": {}}

    def test_non_object_index_entry(self):
        with pytest.raises(MetadataRequestError, match=r"entry for \[library\] is not an object"):
            parse_mapping_response({"library": "oops"})

    def test_non_object_mappings(self):
        with pytest.raises(MetadataRequestError, match=r"mappings of \[library\] are not an object"):
            parse_mapping_response({"library": {"mappings": ["book"]}})


@pytest.mark.http
class TestHttpIndexMetadataClient:
    @pytest.mark.asyncio
    async def test_request_shape(self):
        client, seen = make_client(respond({}))
        await client.request_index_metadata(["logs-*", "books"])

        request = seen[0]
        assert request.method == "GET"
        assert request.url.host == "search"
        assert request.url.path == "/logs-*,books/_mapping"
        assert request.url.params["local"] == "true"
        assert request.url.params["ignore_unavailable"] == "true"
        assert request.url.params["allow_no_indices"] == "true"
        assert request.url.params["expand_wildcards"] == "open"

    @pytest.mark.asyncio
    async def test_no_names_means_all(self):
        client, seen = make_client(respond({}))
        await client.request_index_metadata([])
        assert seen[0].url.path == "/_all/_mapping"

    @pytest.mark.asyncio
    async def test_parses_response(self):
        body = {
            "books_v1": {"mappings": {"book": DOC}},
            "books_v2": {"mappings": DOC},
        }
        client, _ = make_client(respond(body))

        mappings = await client.request_index_metadata(["books"])

        assert mappings == {
            "books_v1": {"book": DOC},
            "books_v2": {"_doc": DOC},
        }

    @pytest.mark.asyncio
    async def test_not_found_is_empty(self):
        client, _ = make_client(respond({"error": "index_not_found_exception"}, 404))
        assert await client.request_index_metadata(["missing"]) == {}

    @pytest.mark.asyncio
    async def test_error_status(self):
        client, _ = make_client(respond({"error": "security_exception"}, 403))

        with pytest.raises(MetadataRequestError) as exc_info:
            await client.request_index_metadata(["books"])

        assert exc_info.value.status_code == 403
        assert "403" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        client, _ = make_client(lambda request: httpx.Response(200, text="not json"))

        with pytest.raises(MetadataRequestError, match="Malformed"):
            await client.request_index_metadata(["books"])

    @pytest.mark.asyncio
    async def test_non_object_body(self):
        client, _ = make_client(respond(["books"]))

        with pytest.raises(MetadataRequestError, match="expected an object"):
            await client.request_index_metadata(["books"])

    @pytest.mark.asyncio
    async def test_non_object_index_entry(self):
        client, _ = make_client(respond({"books": {"mappings": {"doc": DOC}}, "idx": "oops"}))

        with pytest.raises(MetadataRequestError, match="Malformed mapping response"):
            await client.request_index_metadata(["*"])

    @pytest.mark.asyncio
    async def test_connection_error(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client, _ = make_client(refuse)

        with pytest.raises(MetadataConnectionError, match="search:9200"):
            await client.request_index_metadata(["books"])

    @pytest.mark.asyncio
    async def test_timeout(self):
        def stall(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client, _ = make_client(stall)

        with pytest.raises(MetadataRequestError, match="timeout"):
            await client.request_index_metadata(["books"])

    @pytest.mark.asyncio
    async def test_basic_auth(self):
        client, seen = make_client(
            respond({}),
            auth_type="basic",
            auth_config={"username": "sql", "password": "secret"},
        )
        await client.request_index_metadata(["books"])

        expected = base64.b64encode(b"sql:secret").decode()
        assert seen[0].headers["Authorization"] == f"Basic {expected}"

    @pytest.mark.asyncio
    async def test_bearer_auth(self):
        client, seen = make_client(respond({}), auth_type="bearer", auth_config={"token": "t0k"})
        await client.request_index_metadata(["books"])
        assert seen[0].headers["Authorization"] == "Bearer t0k"

    @pytest.mark.asyncio
    async def test_api_key_auth(self):
        client, seen = make_client(respond({}), auth_type="api_key", auth_config={"key": "abc=="})
        await client.request_index_metadata(["books"])
        assert seen[0].headers["Authorization"] == "ApiKey abc=="

    @pytest.mark.asyncio
    async def test_api_key_custom_header(self):
        client, seen = make_client(
            respond({}),
            auth_type="api_key",
            auth_config={"key": "abc", "header": "X-Api-Key"},
        )
        await client.request_index_metadata(["books"])

        assert seen[0].headers["X-Api-Key"] == "abc"
        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_extra_headers(self):
        client, seen = make_client(respond({}), headers={"X-Opaque-Id": "sql-1"})
        await client.request_index_metadata(["books"])
        assert seen[0].headers["X-Opaque-Id"] == "sql-1"


class TestInMemoryIndexMetadataClient:
    @pytest.fixture
    def client(self) -> InMemoryIndexMetadataClient:
        client = InMemoryIndexMetadataClient()
        client.add_index("logs-1", {"doc": DOC})
        client.add_index("logs-2", {"doc": DOC})
        client.add_index("books", {"book": DOC})
        client.add_alias("logs", "logs-1", "logs-2")
        client.add_alias("dangling", "gone")
        return client

    @pytest.mark.asyncio
    async def test_concrete_name(self, client):
        assert await client.request_index_metadata(["books"]) == {"books": {"book": DOC}}

    @pytest.mark.asyncio
    async def test_wildcard(self, client):
        mappings = await client.request_index_metadata(["logs-*"])
        assert sorted(mappings) == ["logs-1", "logs-2"]

    @pytest.mark.asyncio
    async def test_alias(self, client):
        mappings = await client.request_index_metadata(["logs"])
        assert sorted(mappings) == ["logs-1", "logs-2"]

    @pytest.mark.asyncio
    async def test_lenient(self, client):
        assert await client.request_index_metadata(["missing", "dangling"]) == {}

    @pytest.mark.asyncio
    async def test_exclusion(self, client):
        mappings = await client.request_index_metadata(["*", "-logs-2"])
        assert sorted(mappings) == ["books", "logs-1"]

    @pytest.mark.asyncio
    async def test_all(self, client):
        assert sorted(await client.request_index_metadata([])) == ["books", "logs-1", "logs-2"]
        assert sorted(await client.request_index_metadata(["_all"])) == ["books", "logs-1", "logs-2"]

    @pytest.mark.asyncio
    async def test_returns_copies(self, client):
        mappings = await client.request_index_metadata(["books"])
        mappings["books"]["book"]["properties"]["extra"] = {"type": "keyword"}

        again = await client.request_index_metadata(["books"])
        assert "extra" not in again["books"]["book"]["properties"]

    @pytest.mark.asyncio
    async def test_failure(self, client):
        failure = MetadataConnectionError("down")
        client.failure = failure

        with pytest.raises(MetadataConnectionError) as exc_info:
            await client.request_index_metadata(["books"])

        assert exc_info.value is failure

    @pytest.mark.asyncio
    async def test_records_requests(self, client):
        await client.request_index_metadata(["a", "b*"])
        await client.request_index_metadata(["c"])
        assert client.requests == [["a", "b*"], ["c"]]
