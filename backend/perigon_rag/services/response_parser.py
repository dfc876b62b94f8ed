"""
Best-effort parsing of free-text LLM replies.

The model is asked for code plus an explanation but nothing enforces a
format. The first untagged or TypeScript/JavaScript fenced block is taken as
code; a reply with no such block is returned whole as code.
"""
import re
from typing import List

from perigon_rag.models.document import RetrievedDocument

FENCED_BLOCK_PATTERN = re.compile(
    r"^[ \t]*```(\w*)[ \t]*\n(.*?)^[ \t]*```",
    re.MULTILINE | re.DOTALL,
)
CODE_LANGUAGES = {"", "ts", "tsx", "js", "jsx", "typescript", "javascript"}
ANY_FENCED_BLOCK_PATTERN = re.compile(r"```.*?```", re.DOTALL)
COMPONENT_IMPORT_PATTERN = re.compile(
    r"import\s+\{([^}]+)\}\s+from\s+['\"]@/perigon/components['\"]"
)


def extract_code(text: str) -> str:
    for match in FENCED_BLOCK_PATTERN.finditer(text):
        if match.group(1).lower() in CODE_LANGUAGES:
            return match.group(2).strip()
    return text


def extract_explanation(text: str) -> str:
    return ANY_FENCED_BLOCK_PATTERN.sub("", text).strip()


def extract_components(docs: List[RetrievedDocument]) -> List[str]:
    """Component names referenced by retrieved docs, deduplicated in order."""
    components = {}
    for doc in docs:
        for name in (doc.metadata.get("component"), doc.metadata.get("filename")):
            if name:
                components[name] = None

        for imports in COMPONENT_IMPORT_PATTERN.findall(doc.content):
            for name in imports.split(","):
                name = name.strip()
                if name:
                    components[name] = None

    return list(components)


def describe_context(docs: List[RetrievedDocument]) -> List[str]:
    return [
        f"{doc.metadata.get('type')}: "
        f"{doc.metadata.get('filename') or doc.metadata.get('component') or 'Unknown'}"
        f" - {doc.metadata.get('section')}"
        for doc in docs
    ]


def parse_generation(text: str, docs: List[RetrievedDocument]) -> dict:
    return {
        "code": extract_code(text),
        "explanation": extract_explanation(text),
        "components": extract_components(docs),
        "context_used": describe_context(docs),
    }
