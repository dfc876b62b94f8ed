import pytest
from conftest import FakeAnthropic, FakeIndex, FakeOpenAI, make_match

from perigon_rag.models.document import RetrievedDocument
from perigon_rag.services.generation import CodeGenerator, GenerationError
from perigon_rag.services.prompt_builder import build_system_prompt, build_user_prompt
from perigon_rag.services.response_parser import (
    describe_context,
    extract_code,
    extract_components,
    extract_explanation,
)
from perigon_rag.services.vector_search import VectorSearchService

REPLY = """Here is the card.

```tsx
import { Card } from '@/perigon/components';

export function ProfileCard() {
  return <Card />;
}
```

It uses the Card component with design tokens.

```bash
npm run dev
```
"""


def _doc(content, **metadata):
    base = {"filename": "", "component": "", "section": "", "type": "general-docs"}
    base.update(metadata)
    return RetrievedDocument(content=content, score=0.5, metadata=base)


def _generator(reply=REPLY, matches=None, index=None, **anthropic_kwargs):
    index = index or FakeIndex(matches=matches or [])
    search_service = VectorSearchService(FakeOpenAI(), index)
    anthropic_client = FakeAnthropic(reply=reply, **anthropic_kwargs)
    return CodeGenerator(anthropic_client, search_service), anthropic_client, index


def test_extract_code_takes_first_fenced_block():
    assert extract_code(REPLY).startswith("import { Card } from '@/perigon/components';")
    assert "npm run dev" not in extract_code(REPLY)
    assert extract_code("```\nconst x = 1;\n```") == "const x = 1;"


def test_extract_code_skips_leading_shell_block():
    reply = (
        "Install first:\n\n```bash\nnpm i\n```\n\n"
        "Then add the component:\n\n```tsx\nexport const A = () => null;\n```\n"
    )

    assert extract_code(reply) == "export const A = () => null;"


def test_extract_code_without_fence_returns_whole_reply():
    assert extract_code("no code here") == "no code here"


def test_extract_explanation_strips_every_block():
    explanation = extract_explanation(REPLY)

    assert explanation.startswith("Here is the card.")
    assert "It uses the Card component" in explanation
    assert "```" not in explanation
    assert "npm run dev" not in explanation


def test_extract_components_deduplicates():
    docs = [
        _doc("import { Button, Badge } from '@/perigon/components';", filename="Button"),
        _doc('import {Dialog,Button} from "@/perigon/components"', component="Dialog", filename="dialog"),
        _doc("import { useQuery } from '@/lib/hooks';"),
    ]

    assert extract_components(docs) == ["Button", "Badge", "Dialog", "dialog"]


def test_describe_context():
    docs = [
        _doc("a", type="component", filename="Button", section="variants"),
        _doc("b", type="readme", component="Setup", section="install"),
        _doc("c", type="general-docs", section="full-document"),
    ]

    assert describe_context(docs) == [
        "component: Button - variants",
        "readme: Setup - install",
        "general-docs: Unknown - full-document",
    ]


def test_system_prompt_groups_documents_by_type_in_order():
    docs = [
        _doc("GENERAL-ONE", type="general-docs"),
        _doc("BUTTON-DOC", type="component"),
        _doc("ARCH-DOC", type="app-architecture"),
        _doc("BADGE-DOC", type="component"),
    ]

    prompt = build_system_prompt(docs)

    assert "BUTTON-DOC\n\n---\n\nBADGE-DOC" in prompt
    positions = [prompt.index(marker) for marker in ("ARCH-DOC", "BUTTON-DOC", "GENERAL-ONE")]
    assert positions == sorted(positions)
    assert prompt.index("### Component Library") < prompt.index("BUTTON-DOC")
    assert "$" not in prompt


def test_system_prompt_with_no_documents_keeps_template():
    prompt = build_system_prompt([])

    assert "### App Architecture & Patterns\n\n\n### Coding Patterns" in prompt
    assert "typography-titleH1" in prompt


def test_user_prompt_includes_context_only_when_given():
    assert "Additional Context: for admins" in build_user_prompt("Build a table", "for admins")
    assert "Additional Context" not in build_user_prompt("Build a table")
    assert "User Request: Build a table" in build_user_prompt("Build a table")


def test_generate_builds_response_from_retrieved_context():
    matches = [
        make_match(
            "m1", 0.9,
            "import { Card, Avatar } from '@/perigon/components';",
            filename="Card", type="component", section="usage",
        ),
    ]
    generator, anthropic_client, index = _generator(matches=matches)

    result = generator.generate("Build a profile card", "with avatar", max_results=5)

    assert result["code"].startswith("import { Card }")
    assert result["components"] == ["Card", "Avatar"]
    assert result["context_used"] == ["component: Card - usage"]
    assert index.query_kwargs["top_k"] == 5

    call = anthropic_client.messages.calls[0]
    assert call["model"] == "claude-sonnet-4-20250514"
    assert call["max_tokens"] == 5000
    assert call["temperature"] == 0.1
    assert "import { Card, Avatar }" in call["system"]
    assert "User Request: Build a profile card" in call["messages"][0]["content"]


def test_generate_continues_without_context_when_retrieval_fails():
    generator, anthropic_client, _ = _generator(index=FakeIndex(fail_query=True))

    result = generator.generate("Build a profile card")

    assert result["components"] == []
    assert result["context_used"] == []
    assert len(anthropic_client.messages.calls) == 1


def test_generate_wraps_upstream_errors():
    generator, _, _ = _generator(error=RuntimeError("overloaded"))

    with pytest.raises(GenerationError, match="Failed to generate code: overloaded"):
        generator.generate("Build a profile card")


def test_generate_rejects_non_text_reply():
    generator, _, _ = _generator(block_type="tool_use")

    with pytest.raises(GenerationError, match="Unexpected response type"):
        generator.generate("Build a profile card")
