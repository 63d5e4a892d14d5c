"""Format retrieved records into prompt context."""

from __future__ import annotations

from typing import Sequence

from langchain_core.prompts import PromptTemplate

from .schemas import RetrievalResult


DEFAULT_ASSISTANT_DESCRIPTION = "a helpful AI assistant for our product's FAQ"

ANSWER_PROMPT = PromptTemplate.from_template(
    """You are {assistant_description}.
Answer the user's question based on the following FAQ knowledge base context.

IMPORTANT INSTRUCTIONS:
1. Only use information from the provided context
2. If the context doesn't contain relevant information, say so clearly
3. Be concise but helpful (2-4 sentences)
4. If appropriate, mention which section of the FAQ you're referencing
5. Never make up information not in the context

FAQ CONTEXT:
{context}

USER QUESTION: {question}

ANSWER:"""
)


def build_context(results: Sequence[RetrievalResult]) -> str:
    """Label each result with its rank and category, keeping the given order."""
    blocks = [
        f"[Source {position}: {result.record.metadata.category}]\n{result.record.text}\n"
        for position, result in enumerate(results, start=1)
    ]
    return "\n".join(blocks)


def build_prompt(question: str, context: str, assistant_description: str = DEFAULT_ASSISTANT_DESCRIPTION) -> str:
    return ANSWER_PROMPT.format(
        assistant_description=assistant_description,
        context=context,
        question=question,
    )
