#!/usr/bin/env python3
"""
Vectorize the documentation tree into the Pinecone index.
Clears the index, then embeds every markdown and README file under ./docs.
"""
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from perigon_rag.core.config import ConfigurationError, settings
from perigon_rag.core.pinecone_client import create_pinecone_client, get_index
from perigon_rag.services.embeddings import create_openai_client
from perigon_rag.services.vectorizer import DocumentVectorizer, IndexInitializationError


def main() -> int:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("Perigon Documentation Vectorization")
    print("=" * 60)
    print("This will process ALL markdown files and READMEs in the docs directory")

    try:
        settings.require("OPENAI_API_KEY", "PINECONE_API_KEY")
    except ConfigurationError as e:
        print(f"ERROR: {e}")
        return 1

    docs_dir = Path.cwd() / settings.DOCS_DIR
    if not docs_dir.exists():
        print(f"ERROR: Directory not found: {docs_dir}")
        return 1

    openai_client = create_openai_client()
    index = get_index(create_pinecone_client())
    vectorizer = DocumentVectorizer(openai_client, index, docs_dir=docs_dir)

    try:
        report = vectorizer.vectorize_documentation()
    except IndexInitializationError as e:
        print(f"Vectorization failed: {e}")
        return 1

    print("\n" + "=" * 60)
    if report is None:
        print("NOTHING TO VECTORIZE")
    else:
        print("VECTORIZATION COMPLETE")
        print("=" * 60)
        print(f"Index: {settings.PINECONE_INDEX}")
        print(f"Batches: {report.total_batches}")
        print(f"Vectors upserted: {report.vectors_upserted}")
        print(f"Failed chunks: {len(report.failed_chunk_ids)}")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
