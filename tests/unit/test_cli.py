"""Unit tests for the command-line entry point."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from segment_rag.cli import main
from segment_rag.errors import UploadError
from segment_rag.ingestion.pipeline import IngestionReport


def test_init_collection(recording_store, capsys) -> None:
    with patch("segment_rag.retrieval.get_vector_store", return_value=recording_store):
        assert main(["--collection", "book", "init-collection", "--dimension", "8"]) == 0
    assert recording_store.dimensions == {"book": 8}
    assert '"points_count": 0' in capsys.readouterr().out


def test_delete_missing_collection(recording_store, capsys) -> None:
    with patch("segment_rag.retrieval.get_vector_store", return_value=recording_store):
        assert main(["--collection", "book", "delete-collection"]) == 0
    assert "No collection book" in capsys.readouterr().out


def test_ingest_reads_file(tmp_path, capsys) -> None:
    source = tmp_path / "book.txt"
    source.write_text("Chapter 1", encoding="utf-8")
    pipeline = MagicMock()
    pipeline.ingest.return_value = IngestionReport(collection="book", chunks=1, segments=2, points_uploaded=2)

    with patch("segment_rag.ingestion.pipeline.IngestionPipeline.from_settings", return_value=pipeline):
        assert main(["--collection", "book", "ingest", str(source), "--max-tokens", "4500"]) == 0

    pipeline.ingest.assert_called_once_with("Chapter 1")
    assert pipeline.max_tokens == 4500
    assert "Uploaded 2 segments from 1 chunks" in capsys.readouterr().out


def test_pipeline_error_returns_non_zero(tmp_path) -> None:
    source = tmp_path / "book.txt"
    source.write_text("text", encoding="utf-8")
    pipeline = MagicMock()
    pipeline.ingest.side_effect = UploadError("rejected")

    with patch("segment_rag.ingestion.pipeline.IngestionPipeline.from_settings", return_value=pipeline):
        assert main(["ingest", str(source)]) == 1


def test_dimension_conflict_returns_non_zero(recording_store) -> None:
    recording_store.create_collection("book", 8)
    with patch("segment_rag.retrieval.get_vector_store", return_value=recording_store):
        assert main(["--collection", "book", "init-collection", "--dimension", "384"]) == 1


def test_store_transport_error_returns_non_zero() -> None:
    store = MagicMock()
    store.collection_info.side_effect = ConnectionError("connection refused")
    store.delete_collection.side_effect = ConnectionError("connection refused")
    with patch("segment_rag.retrieval.get_vector_store", return_value=store):
        assert main(["info"]) == 1
        assert main(["delete-collection"]) == 1
