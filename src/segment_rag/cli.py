"""Command-line entry point.

Examples
--------
    segment-rag init-collection
    segment-rag ingest book.txt
    segment-rag query "how are numbers represented in Rust?" -k 5
    segment-rag info
    segment-rag delete-collection
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from segment_rag.config import settings
from segment_rag.errors import SegmentRagError
from segment_rag.retrieval.models import Distance

logger = logging.getLogger("segment_rag")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="segment-rag", description="Segment, embed and search documents")
    parser.add_argument(
        "--collection",
        default=settings.collection_name,
        help="Target collection (default: %(default)s)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    init = sub.add_parser("init-collection", help="Create the collection if it does not exist")
    init.add_argument("--dimension", type=int, default=settings.embedding_dimension)
    init.add_argument("--distance", choices=[d.value for d in Distance], default=settings.distance)

    sub.add_parser("delete-collection", help="Drop the collection and all its points")
    sub.add_parser("info", help="Show point count and vector parameters")

    ingest = sub.add_parser("ingest", help="Chunk, segment, embed and upload a text file")
    ingest.add_argument("path", type=Path)
    ingest.add_argument("--max-tokens", type=int, default=settings.chunk_max_tokens)

    query = sub.add_parser("query", help="Search the collection")
    query.add_argument("question")
    query.add_argument("-k", type=int, default=5)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    from segment_rag.retrieval import get_vector_store

    try:
        if args.command == "init-collection":
            info = get_vector_store().ensure_collection(args.collection, args.dimension, Distance(args.distance))
            print(info.model_dump_json(indent=2))
        elif args.command == "delete-collection":
            deleted = get_vector_store().delete_collection(args.collection)
            print(f"Deleted {args.collection}" if deleted else f"No collection {args.collection}")
        elif args.command == "info":
            print(get_vector_store().collection_info(args.collection).model_dump_json(indent=2))
        elif args.command == "ingest":
            from segment_rag.ingestion.pipeline import IngestionPipeline

            pipeline = IngestionPipeline.from_settings()
            pipeline.collection_name = args.collection
            pipeline.max_tokens = args.max_tokens
            report = pipeline.ingest(args.path.read_text(encoding="utf-8"))
            print(f"Uploaded {report.points_uploaded} segments from {report.chunks} chunks → {args.collection}")
        elif args.command == "query":
            from segment_rag.retrieval.query import Retriever

            retriever = Retriever(collection_name=args.collection)
            for hit in retriever.query(args.question, args.k):
                print(f"{hit.id}\t{hit.score:.4f}\t{hit.text}")
    except SegmentRagError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    except Exception as exc:
        # Store clients raise their own transport and validation errors.
        logger.error("%s failed: %s: %s", args.command, type(exc).__name__, exc)
        return 1
    return 0
