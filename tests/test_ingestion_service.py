"""Tests for the ingestion pipeline."""

from unittest.mock import MagicMock

import pytest

from docsearch.clients import FakeEmbeddingClient
from docsearch.domain import Document, EmptyBatch, IngestionError, ValidationError
from docsearch.indexes import IndexAlgo, VectorIndex
from docsearch.services import Embedder, IngestionPipeline, IngestionReport
from tests.conftest import TEST_EMBEDDING_DIM, make_embedder, sample_documents


class FailingClient(FakeEmbeddingClient):
    """Fake client that fails on any text containing ``poison``."""

    def __init__(self, poison: str) -> None:
        super().__init__(embedding_dim=TEST_EMBEDDING_DIM)
        self.poison = poison

    def embed_text(self, text):
        if self.poison in text:
            raise RuntimeError(f"provider rejected {text!r}")
        return super().embed_text(text)

    def embed_texts(self, texts):
        if any(self.poison in text for text in texts):
            raise RuntimeError("provider rejected batch")
        return super().embed_texts(texts)


class TestIngestionPipeline:
    """Test cases for IngestionPipeline.run."""

    def test_run_writes_loadable_store(self, tmp_path):
        pipeline = IngestionPipeline(make_embedder(), algorithm="linear")

        report = pipeline.run(sample_documents(), 20, 5, tmp_path / "store")

        assert isinstance(report, IngestionReport)
        assert report.documents_processed == 2
        assert report.chunks_indexed == 6
        assert report.destination == str(tmp_path / "store")
        assert report.duration_s >= 0

        index = VectorIndex.load(tmp_path / "store")
        assert index.size == 6
        assert index.dim == TEST_EMBEDDING_DIM
        assert index.algorithm is IndexAlgo.LINEAR
        assert [entry.chunk.text for entry in index.entries][:3] == [
            "A quick test. ",
            "Another sentence ",
            "here.",
        ]

    def test_hnsw_params_are_persisted(self, tmp_path):
        pipeline = IngestionPipeline(
            make_embedder(), algorithm=IndexAlgo.HNSW, index_params={"m": 4, "ef_search": 8}
        )

        pipeline.run(sample_documents(), 20, 5, tmp_path / "store")

        index = VectorIndex.load(tmp_path / "store")
        assert index.algorithm is IndexAlgo.HNSW
        assert index.stats()["index"]["m"] == 4
        assert index.stats()["index"]["ef_search"] == 8

    def test_embeds_in_batches(self, tmp_path):
        client = MagicMock(wraps=FakeEmbeddingClient(embedding_dim=8))
        client.embedding_dim = 8
        pipeline = IngestionPipeline(Embedder(client), algorithm="linear", batch_size=4)

        pipeline.run(sample_documents(), 20, 5, tmp_path / "store")

        batch_sizes = [len(call.args[0]) for call in client.embed_texts.call_args_list]
        assert batch_sizes == [4, 2]

    def test_rerun_replaces_store(self, tmp_path):
        destination = tmp_path / "store"
        IngestionPipeline(make_embedder(), algorithm="linear").run(
            sample_documents(), 20, 5, destination
        )

        report = IngestionPipeline(make_embedder(), algorithm="linear").run(
            sample_documents()[:1], 20, 5, destination
        )

        assert report.chunks_indexed == 3
        assert VectorIndex.load(destination).size == 3

    def test_embedding_failure_names_chunk_and_writes_nothing(self, tmp_path):
        destination = tmp_path / "store"
        IngestionPipeline(make_embedder(), algorithm="linear").run(
            sample_documents(), 20, 5, destination
        )
        pipeline = IngestionPipeline(Embedder(FailingClient("oceans")), algorithm="linear")
        documents = [
            Document(id="new.md", source_path="new.md", raw_text="Fresh words only."),
            *sample_documents(),
        ]

        with pytest.raises(IngestionError) as exc_info:
            pipeline.run(documents, 20, 5, destination)

        error = exc_info.value
        assert error.code == "INGESTION_FAILED"
        assert error.document_id == "doc2.md"
        assert error.chunk_index == 2
        assert "doc2.md" in error.message
        assert error.__cause__ is not None
        # Previous store untouched
        assert VectorIndex.load(destination).size == 6

    def test_no_chunks_is_empty_batch(self, tmp_path):
        pipeline = IngestionPipeline(make_embedder())
        documents = [Document(id="blank.md", source_path="blank.md", raw_text="  \n\n ")]

        with pytest.raises(EmptyBatch):
            pipeline.run(documents, 20, 5, tmp_path / "store")

        assert not (tmp_path / "store").exists()

    def test_invalid_chunk_parameters(self, tmp_path):
        pipeline = IngestionPipeline(make_embedder())

        with pytest.raises(ValidationError):
            pipeline.run(sample_documents(), 10, 10, tmp_path / "store")

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError, match="batch_size must be positive"):
            IngestionPipeline(make_embedder(), batch_size=0)
