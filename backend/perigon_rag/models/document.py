"""In-memory document records shared by the vectorizer and the server."""
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional


class DocumentType(str, Enum):
    """Kind of documentation a chunk came from, inferred from its path."""
    COMPONENT = "component"
    DESIGN_SYSTEM = "design-system"
    CODING_PATTERNS = "coding-patterns"
    APP_ARCHITECTURE = "app-architecture"
    SERVICES = "services"
    QUERY_HOOKS = "query-hooks"
    TYPES = "types"
    GENERAL_DOCS = "general-docs"
    README = "readme"


@dataclass
class ChunkMetadata:
    source: str
    filename: str
    category: str
    type: DocumentType
    path: str
    section: str = "full-document"
    subcategory: Optional[str] = None

    def to_dict(self) -> dict:
        """Flatten for the vector store, which rejects null values."""
        data = asdict(self)
        data["type"] = self.type.value
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class DocumentChunk:
    """A bounded slice of one document, the unit of embedding."""
    id: str
    content: str
    metadata: ChunkMetadata


@dataclass
class RetrievedDocument:
    """A similarity-search hit. Lives only for one request."""
    content: str
    score: float
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "content": self.content,
            "metadata": dict(self.metadata),
            "score": self.score,
        }
