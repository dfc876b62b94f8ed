#!/usr/bin/env python3
"""
Create the Pinecone index used by the vectorizer and the RAG server.
Safe to re-run: an existing index is left untouched and its stats reported.
"""
import logging
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from perigon_rag.core.config import settings
from perigon_rag.core.pinecone_client import (
    create_pinecone_client,
    describe_index_stats,
    ensure_index,
    get_index,
)


def main() -> int:
    logging.basicConfig(level=settings.LOG_LEVEL)
    print("Setting up Pinecone index...")

    if not settings.PINECONE_API_KEY:
        print("ERROR: PINECONE_API_KEY not found in environment variables")
        print("Make sure your .env file contains:")
        print("PINECONE_API_KEY=your-pinecone-api-key")
        return 1

    client = create_pinecone_client()
    index_name = settings.PINECONE_INDEX

    try:
        created = ensure_index(client, index_name)
        if created:
            print(f"Index '{index_name}' created "
                  f"({settings.EMBEDDING_DIMENSION} dimensions, cosine)")
        else:
            print(f"Index '{index_name}' already exists")
            stats = describe_index_stats(get_index(client, index_name))
            print(f"Current vector count: {stats['totalRecordCount']}")
    except Exception as e:
        print(f"ERROR setting up Pinecone: {e}")
        if "401" in str(e):
            print("This looks like an authentication error. Please check your PINECONE_API_KEY.")
        return 1

    print("Pinecone setup complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
