"""
Suggest-and-confirm recovery for questions that could not be answered.

One rephrasing round per failed request: the suggestion is returned to the
user and only regenerated into a query after an explicit "yes" on the next
turn.
"""
from typing import List, Optional, Sequence

from app.schemas.chat import ChatResponse
from app.services import messages
from conversation.models import EntitySet, Turn, format_turns
from core.logging import get_logger
from llm.chain import FailureKind, uses_referential_language
from llm.prompts import rephrase_prompt, rephrase_request_prompt
from llm.providers import CompletionProvider, Message, ProviderError

logger = get_logger(__name__)

RECOVERY_HISTORY_TURNS = 3
RECOVERY_TURN_CHARS = 200

SYNTAX_HINTS = """Rephrase so it is simple to answer in one query:
- Prefer "for each distributor" / "per distributor" over nested phrasing
- Name the ranking measure ("by sales amount", "by quantity")
- Ask for at most one ranking inside another
"""

DEFAULT_HINTS = """Focus on:
- Being specific about time periods
- Clarifying what data is wanted (sales, distributors, products)
- Using standard business terminology
- Fixing any typos
"""


def clean_suggestion(text: str) -> str:
    lines = [line.strip() for line in (text or "").strip().splitlines() if line.strip()]
    if not lines:
        return ""
    return lines[0].strip().strip("\"'`").strip()


class RecoveryCoordinator:
    def __init__(self, provider: CompletionProvider):
        self.provider = provider

    def build_messages(
        self,
        question: str,
        failure_kind: FailureKind,
        history: Sequence[Turn] = (),
        entities: Optional[EntitySet] = None,
    ) -> List[Message]:
        transcript = format_turns(history, limit=RECOVERY_HISTORY_TURNS, max_chars=RECOVERY_TURN_CHARS)
        history_block = f"\nRecent conversation:\n{transcript}\n" if transcript else ""

        entity_block = ""
        if entities and uses_referential_language(question):
            entity_block = (
                f"\nThe user's \"these/those/each\" refers to these {entities.entity_type or 'items'}: "
                f"{', '.join(entities.entities)}. Name them explicitly in the suggestion.\n"
            )

        hints = SYNTAX_HINTS if failure_kind == FailureKind.SYNTAX_ERROR else DEFAULT_HINTS
        user = rephrase_request_prompt.format(
            question=question,
            failure_kind=failure_kind.value,
            history_block=history_block,
            entity_block=entity_block,
            hints=hints,
        )
        return [
            {"role": "system", "content": rephrase_prompt.format().strip()},
            {"role": "user", "content": user.strip()},
        ]

    def suggest(
        self,
        question: str,
        failure_kind: FailureKind,
        history: Sequence[Turn] = (),
        entities: Optional[EntitySet] = None,
    ) -> Optional[str]:
        """A rephrased question that differs from ``question``, or None."""
        try:
            raw = self.provider.complete(
                self.build_messages(question, failure_kind, history, entities),
                temperature=0.7,
                max_tokens=200,
            )
        except ProviderError as e:
            logger.warning(f"Rephrase suggestion failed: {e}")
            return None

        suggestion = clean_suggestion(raw)
        if not suggestion or suggestion.lower() == question.strip().lower():
            return None
        return suggestion

    def recover(
        self,
        question: str,
        failure_kind: FailureKind,
        history: Sequence[Turn] = (),
        entities: Optional[EntitySet] = None,
    ) -> ChatResponse:
        syntax_related = failure_kind == FailureKind.SYNTAX_ERROR
        suggestion = self.suggest(question, failure_kind, history, entities)
        if suggestion:
            logger.info(f"Suggesting rephrased question after {failure_kind.value}: {suggestion}")
            return ChatResponse(
                answer=messages.suggestion_message(suggestion, syntax_related=syntax_related),
                row_count=0,
                type="suggestion",
                suggested_question=suggestion,
            )
        if syntax_related:
            return ChatResponse(answer=messages.SYNTAX_ERROR, row_count=0, type="error_with_suggestions")
        return ChatResponse(
            answer=messages.clarification_message(),
            row_count=0,
            type="clarification_needed",
        )
