"""Answer generation over retrieved chunks."""

from src.generation.answerer import AnswerGenerator, AnthropicAnswerGenerator, RagQuestionService
from src.generation.prompt import RAG_SYSTEM_PROMPT, build_user_prompt, render_chunk

__all__ = [
    "RAG_SYSTEM_PROMPT",
    "AnswerGenerator",
    "AnthropicAnswerGenerator",
    "RagQuestionService",
    "build_user_prompt",
    "render_chunk",
]
