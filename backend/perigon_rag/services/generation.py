"""Retrieval-augmented code generation with Claude."""
import logging
from typing import Optional

import anthropic

from perigon_rag.core.config import settings
from perigon_rag.services.prompt_builder import build_system_prompt, build_user_prompt
from perigon_rag.services.response_parser import parse_generation
from perigon_rag.services.vector_search import VectorSearchService

logger = logging.getLogger(__name__)

DEFAULT_CONTEXT_RESULTS = 12


class GenerationError(Exception):
    """Generation failed upstream; the only error surfaced to API clients."""


def create_anthropic_client(api_key: Optional[str] = None) -> anthropic.Anthropic:
    return anthropic.Anthropic(api_key=api_key or settings.ANTHROPIC_API_KEY)


class CodeGenerator:
    """Retrieves documentation context and asks Claude for Perigon code."""

    def __init__(
        self,
        anthropic_client: anthropic.Anthropic,
        search_service: VectorSearchService,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ):
        self.anthropic_client = anthropic_client
        self.search_service = search_service
        self.model = model or settings.ANTHROPIC_MODEL
        self.max_tokens = max_tokens or settings.GENERATION_MAX_TOKENS
        self.temperature = settings.GENERATION_TEMPERATURE if temperature is None else temperature

    def generate(
        self,
        prompt: str,
        context: Optional[str] = None,
        max_results: int = DEFAULT_CONTEXT_RESULTS,
    ) -> dict:
        """
        Generate code for a request.

        Retrieval failures degrade to an empty context; any failure of the
        generation call itself is raised as GenerationError.
        """
        try:
            search_query = f"{prompt} {context}" if context else prompt
            relevant_docs = self.search_service.search(search_query, max_results)

            logger.info(f"Calling Anthropic API with model: {self.model}")
            message = self.anthropic_client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=build_system_prompt(relevant_docs),
                messages=[
                    {"role": "user", "content": build_user_prompt(prompt, context)}
                ],
            )
            logger.info("Anthropic API call successful")

            block = message.content[0] if message.content else None
            if block is None or block.type != "text":
                raise ValueError("Unexpected response type from Anthropic")

            return parse_generation(block.text, relevant_docs)
        except Exception as e:
            logger.exception(f"Error generating code: {e}")
            raise GenerationError(f"Failed to generate code: {e}") from e
