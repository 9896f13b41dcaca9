"""Generative answers over retrieved chunks."""

import logging
import time
from typing import Protocol

import anthropic

from src.config import GenerationConfig
from src.errors import MalformedUpstreamError
from src.generation.prompt import RAG_SYSTEM_PROMPT, build_user_prompt
from src.models.query_result import GeneratedAnswer, QueryResult
from src.retrieval.correlation import ChunkRetriever

logger = logging.getLogger(__name__)


class AnswerGenerator(Protocol):
    """Produces free text from a system prompt and a user prompt."""

    def generate(self, system_prompt: str, user_prompt: str) -> GeneratedAnswer: ...


class AnthropicAnswerGenerator:
    """Generates answers with the Anthropic messages API.

    Args:
        config: GenerationConfig with model, max_tokens and temperature.
        api_key: Anthropic API key. If None, the SDK reads ANTHROPIC_API_KEY.
        client: Optional pre-built client.
    """

    def __init__(
        self,
        config: GenerationConfig,
        api_key: str | None = None,
        client: anthropic.Anthropic | None = None,
    ) -> None:
        self._config = config
        self._client = client or anthropic.Anthropic(api_key=api_key)

    def generate(self, system_prompt: str, user_prompt: str) -> GeneratedAnswer:
        """Send one request and return the text answer.

        Raises:
            MalformedUpstreamError: If the response carries no text block.
        """
        started = time.monotonic()
        response = self._client.messages.create(
            model=self._config.model,
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
            system=system_prompt,
            messages=[{"role": "user", "content": user_prompt}],
        )
        latency_ms = int((time.monotonic() - started) * 1000)

        text = "".join(
            block.text for block in response.content or [] if getattr(block, "type", None) == "text"
        )
        if not text:
            raise MalformedUpstreamError(
                "Generation response contained no text", source="anthropic", item=self._config.model
            )

        usage = getattr(response, "usage", None)
        tokens_used = (usage.input_tokens + usage.output_tokens) if usage else 0

        return GeneratedAnswer(
            text=text,
            model_used=getattr(response, "model", None) or self._config.model,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
        )

    def close(self) -> None:
        self._client.close()


class RagQuestionService:
    """Answers questions: retrieve ranked chunks, build a prompt, generate.

    Args:
        retriever: Finds relevant chunks.
        generator: Produces the final answer.
        top_k: Number of chunks to put in the prompt.
    """

    def __init__(self, retriever: ChunkRetriever, generator: AnswerGenerator, top_k: int = 5) -> None:
        self._retriever = retriever
        self._generator = generator
        self._top_k = top_k

    def answer_question(self, question: str) -> QueryResult:
        """Answer one question.

        A blank question returns a QueryResult without sources or answer,
        and nothing is sent to any collaborator.
        """
        if not question or not question.strip():
            return QueryResult(question=question)

        sources = self._retriever.find_top_k(question, self._top_k)
        user_prompt = build_user_prompt(question, sources)
        answer = self._generator.generate(RAG_SYSTEM_PROMPT, user_prompt)

        logger.info(
            "Answered question with %d sources (%d tokens, %d ms)",
            len(sources),
            answer.tokens_used,
            answer.latency_ms,
        )
        return QueryResult(question=question, sources=sources, answer=answer)
