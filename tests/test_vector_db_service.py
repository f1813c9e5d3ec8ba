"""Tests for the Qdrant-backed VectorDBService with a mocked async client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from k8s_advisor.core.models.vector import VectorDocument
from k8s_advisor.core.vector.vector_db_service import VectorDBService
from k8s_advisor.utils.exceptions import (
    VectorDBConfigurationError,
    VectorDBNotInitializedError,
    VectorDBOperationError,
)


def _collection_info(size: int, points: int = 0):
    return SimpleNamespace(
        points_count=points,
        status=SimpleNamespace(value="green"),
        config=SimpleNamespace(params=SimpleNamespace(vectors=SimpleNamespace(size=size))),
    )


def _point(point_id, payload, score=None, vector=None):
    return SimpleNamespace(id=point_id, payload=payload, score=score, vector=vector)


@pytest.fixture
def qdrant():
    client = MagicMock()
    client.collection_exists = AsyncMock(return_value=True)
    client.get_collection = AsyncMock(return_value=_collection_info(3))
    client.create_collection = AsyncMock()
    client.delete_collection = AsyncMock()
    client.upsert = AsyncMock()
    client.query_points = AsyncMock(return_value=SimpleNamespace(points=[]))
    client.scroll = AsyncMock(return_value=([], None))
    client.retrieve = AsyncMock(return_value=[])
    client.delete = AsyncMock()
    client.get_collections = AsyncMock()
    return client


@pytest.fixture
def service(qdrant):
    return VectorDBService(collection_name="capabilities", url="http://qdrant:6333", client=qdrant)


class TestConstruction:
    def test_collection_name_required(self):
        with pytest.raises(VectorDBConfigurationError):
            VectorDBService(collection_name="", url="test-url")

    def test_empty_url_rejected(self):
        with pytest.raises(VectorDBConfigurationError):
            VectorDBService(collection_name="c", url="")

    def test_sentinel_url_has_no_client(self):
        assert VectorDBService(collection_name="c", url="test-url").client is None
        assert VectorDBService(collection_name="c", url="mock-url").client is None

    def test_url_defaults_from_environment(self):
        assert VectorDBService(collection_name="c").url == "test-url"


class TestWithoutClient:
    @pytest.mark.asyncio
    async def test_operations_raise(self):
        service = VectorDBService(collection_name="c", url="test-url")
        with pytest.raises(VectorDBNotInitializedError, match="Vector DB client not initialized"):
            await service.search_similar([0.1])
        with pytest.raises(VectorDBNotInitializedError):
            await service.get_all_documents()

    @pytest.mark.asyncio
    async def test_health_check_false(self):
        assert await VectorDBService(collection_name="c", url="test-url").health_check() is False


class TestInitializeCollection:
    @pytest.mark.asyncio
    async def test_creates_when_absent(self, service, qdrant):
        qdrant.collection_exists.return_value = False
        await service.initialize_collection(1536)

        qdrant.create_collection.assert_awaited_once()
        kwargs = qdrant.create_collection.await_args.kwargs
        assert kwargs["collection_name"] == "capabilities"
        assert kwargs["vectors_config"].size == 1536

    @pytest.mark.asyncio
    async def test_keeps_matching_collection(self, service, qdrant):
        await service.initialize_collection(3)
        qdrant.delete_collection.assert_not_awaited()
        qdrant.create_collection.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_recreates_on_dimension_mismatch(self, service, qdrant):
        await service.initialize_collection(1536)
        qdrant.delete_collection.assert_awaited_once_with(collection_name="capabilities")
        qdrant.create_collection.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_recreates_when_inspection_fails(self, service, qdrant):
        qdrant.get_collection.side_effect = RuntimeError("unreadable")
        await service.initialize_collection(3)
        qdrant.delete_collection.assert_awaited_once()
        qdrant.create_collection.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_already_exists_is_success(self, service, qdrant):
        qdrant.collection_exists.return_value = False
        qdrant.create_collection.side_effect = RuntimeError("Collection `capabilities` already exists!")
        await service.initialize_collection(3)

    @pytest.mark.asyncio
    async def test_other_create_errors_wrapped(self, service, qdrant):
        qdrant.collection_exists.return_value = False
        qdrant.create_collection.side_effect = RuntimeError("disk full")
        with pytest.raises(VectorDBOperationError, match="Failed to create collection: disk full"):
            await service.initialize_collection(3)


class TestDocuments:
    @pytest.mark.asyncio
    async def test_upsert_requires_vector(self, service):
        with pytest.raises(VectorDBOperationError):
            await service.upsert_document(VectorDocument(id="a", payload={}))

    @pytest.mark.asyncio
    async def test_upsert(self, service, qdrant):
        await service.upsert_document(VectorDocument(id="a", payload={"x": 1}, vector=[0.1, 0.2, 0.3]))
        points = qdrant.upsert.await_args.kwargs["points"]
        assert points[0].id == "a"
        assert points[0].payload == {"x": 1}

    @pytest.mark.asyncio
    async def test_get_document(self, service, qdrant):
        qdrant.retrieve.return_value = [_point("a", {"k": "v"}, vector=[0.1])]
        doc = await service.get_document("a")
        assert doc == VectorDocument(id="a", payload={"k": "v"}, vector=[0.1])

    @pytest.mark.asyncio
    async def test_get_missing_document(self, service):
        assert await service.get_document("missing") is None

    @pytest.mark.asyncio
    async def test_get_all_documents_requires_collection(self, service, qdrant):
        qdrant.collection_exists.return_value = False
        with pytest.raises(VectorDBOperationError, match="does not exist"):
            await service.get_all_documents()

    @pytest.mark.asyncio
    async def test_delete_all_recreates_with_same_size(self, service, qdrant):
        qdrant.get_collection.return_value = _collection_info(768)
        await service.delete_all_documents()
        qdrant.delete_collection.assert_awaited_once()
        assert qdrant.create_collection.await_args.kwargs["vectors_config"].size == 768

    @pytest.mark.asyncio
    async def test_delete_all_noop_when_absent(self, service, qdrant):
        qdrant.collection_exists.return_value = False
        await service.delete_all_documents()
        qdrant.delete_collection.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failures_are_wrapped(self, service, qdrant):
        qdrant.delete.side_effect = RuntimeError("timeout")
        with pytest.raises(VectorDBOperationError, match="Failed to delete document: timeout"):
            await service.delete_document("a")

    @pytest.mark.asyncio
    async def test_collection_info(self, service, qdrant):
        qdrant.get_collection.return_value = _collection_info(3, points=42)
        assert await service.get_collection_info() == {"points_count": 42, "vectors_size": 3, "status": "green"}


class TestSearch:
    @pytest.mark.asyncio
    async def test_search_similar(self, service, qdrant):
        qdrant.query_points.return_value = SimpleNamespace(points=[_point("a", {"n": 1}, score=0.8)])
        results = await service.search_similar([0.1, 0.2], limit=5, score_threshold=0.3)

        assert [(r.id, r.score) for r in results] == [("a", 0.8)]
        kwargs = qdrant.query_points.await_args.kwargs
        assert kwargs["limit"] == 5
        assert kwargs["score_threshold"] == 0.3

    @pytest.mark.asyncio
    async def test_keyword_scoring(self, service, qdrant):
        qdrant.scroll.return_value = ([
            _point("exact", {"triggers": ["postgres"], "searchText": "postgres database"}),
            _point("partial", {"triggers": ["postgresql"], "searchText": "relational"}),
            _point("text-only", {"triggers": [], "searchText": "a postgres operator"}),
            _point("none", {"triggers": ["redis"], "searchText": "cache"}),
        ], None)

        results = await service.search_by_keywords(["postgres"])
        scores = {r.id: r.score for r in results}

        assert scores == {"exact": 1.0, "partial": 0.5, "text-only": 0.5}
        assert results[0].id == "exact"

    @pytest.mark.asyncio
    async def test_keyword_score_averaged_over_keywords(self, service, qdrant):
        qdrant.scroll.return_value = ([_point("a", {"triggers": ["database"], "searchText": ""})], None)
        results = await service.search_by_keywords(["database", "backup"])
        assert results[0].score == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_keyword_scan_limit(self, service, qdrant):
        await service.search_by_keywords(["x"])
        assert qdrant.scroll.await_args.kwargs["limit"] == 1000


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_healthy(self, service):
        assert await service.health_check() is True

    @pytest.mark.asyncio
    async def test_unhealthy(self, service, qdrant):
        qdrant.get_collections.side_effect = ConnectionError("refused")
        assert await service.health_check() is False
