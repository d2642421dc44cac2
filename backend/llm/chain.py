import json
import logging
import re
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence

from app.services import messages
from conversation.models import EntitySet, QueryContext, Turn, format_turns, recent_turns
from core.config import settings
from db.sql_safety import clean_generated_sql, extract_table_tag, is_sql_safe
from llm.date_context import DateWindows
from llm.prompts import (
    SCHEMA_DESCRIPTION, answer_data_prompt, answer_prompt, conversational_prompt,
    entity_context_prompt, metadata_prompt, sql_generation_prompt,
)
from llm.providers import CompletionProvider, Message, ProviderError, ProviderTimeout

logger = logging.getLogger(__name__)

GENERATION_HISTORY_TURNS = 4
CONTEXT_CHARS = 300

REFERENTIAL = re.compile(r"\b(these|those|each|them|their)\b", re.IGNORECASE)
WHO_ARE_YOU = re.compile(r"who are you|what are you|tell me about yourself", re.IGNORECASE)
CAPABILITIES = re.compile(r"what can you do|^\s*help\b", re.IGNORECASE)
ASKS_PRIMARY = re.compile(r"\bprimary\b", re.IGNORECASE)
ASKS_SECONDARY = re.compile(r"\bsecondary\b", re.IGNORECASE)


class FailureKind(str, Enum):
    GENERATION_FAILED = "SQL_GENERATION_FAILED"
    SAFETY_CHECK_FAILED = "SQL_SAFETY_CHECK_FAILED"
    SYNTAX_ERROR = "SQL_SYNTAX_ERROR"


class SqlGenerationError(Exception):
    kind = FailureKind.GENERATION_FAILED


class UnsafeSqlError(SqlGenerationError):
    kind = FailureKind.SAFETY_CHECK_FAILED


def uses_referential_language(text: str) -> bool:
    return bool(REFERENTIAL.search(text or ""))


class SalesQueryCore:
    """
    Provider-backed steps of a turn:
    - SQL generation + cleanup + safety gate
    - answer composition from rows
    - conversational and metadata replies
    """

    def __init__(self, provider: CompletionProvider, today: Optional[Callable[[], date]] = None):
        self.provider = provider
        self._today = today or date.today

    # --- Query generation ---
    def generation_messages(
        self,
        question: str,
        history: Sequence[Turn] = (),
        entities: Optional[EntitySet] = None,
        include_entities: bool = False,
    ) -> List[Message]:
        system = sql_generation_prompt.format(
            company=settings.COMPANY_NAME,
            date_context=DateWindows.for_date(self._today()).describe(),
            schema=SCHEMA_DESCRIPTION,
        )
        msgs: List[Message] = [{"role": "system", "content": system.strip()}]

        if entities and (include_entities or uses_referential_language(question)):
            period_line = f"Time period of that answer: {entities.period}\n" if entities.period else ""
            note = entity_context_prompt.format(
                entity_type=entities.entity_type or "items",
                entities=", ".join(entities.entities),
                period_line=period_line,
            )
            msgs.append({"role": "system", "content": note.strip()})

        for turn in recent_turns(history, GENERATION_HISTORY_TURNS):
            if turn.role == "user":
                msgs.append({"role": "user", "content": f"Previous question: {turn.content}"})
            else:
                msgs.append({"role": "assistant", "content": f"Previous context: {turn.content[:CONTEXT_CHARS]}"})

        msgs.append({"role": "user", "content": question})
        return msgs

    def generate_sql(
        self,
        question: str,
        history: Sequence[Turn] = (),
        entities: Optional[EntitySet] = None,
        include_entities: bool = False,
    ) -> str:
        """Generate one read-only statement for ``question``; raises SqlGenerationError."""
        msgs = self.generation_messages(question, history, entities, include_entities)
        try:
            raw = self.provider.complete(msgs, temperature=0.2, max_tokens=1500)
        except ProviderTimeout:
            raise
        except ProviderError as e:
            raise SqlGenerationError(str(e)) from e

        sql = clean_generated_sql(raw)
        logger.debug(f"Generated SQL:\n{sql}")
        if not sql:
            raise SqlGenerationError("Empty query generated")
        if not is_sql_safe(sql):
            logger.warning(f"SQL safety check failed. Generated SQL:\n{sql}")
            raise UnsafeSqlError("Generated query failed the safety check")
        return sql

    # --- Answer composition ---
    def compose_answer(self, question: str, rows: Sequence[Dict[str, Any]], sql: str, row_count: int) -> str:
        table = extract_table_tag(sql)
        source_note = ""
        if table in messages.SOURCE_DESCRIPTIONS:
            source_note = f"\n\n*Note: This data is from {messages.SOURCE_DESCRIPTIONS[table]}*"

        system = answer_prompt.format(
            company=settings.COMPANY_NAME,
            currency=settings.CURRENCY,
            question=question,
            row_count=row_count,
            source_note=source_note,
        )
        user = answer_data_prompt.format(
            question=question,
            rows_json=json.dumps(list(rows[:settings.CHART_SAMPLE_LIMIT]), indent=2, default=str),
        )
        return self.provider.complete(
            [{"role": "system", "content": system.strip()}, {"role": "user", "content": user.strip()}],
            temperature=0.7,
            max_tokens=2500,
        ).strip()

    # --- Non-data replies ---
    def conversational_reply(self, message: str, history: Sequence[Turn] = ()) -> str:
        if WHO_ARE_YOU.search(message):
            return messages.who_are_you()
        if CAPABILITIES.search(message):
            return messages.capabilities()

        recent = format_turns(history, limit=2, max_chars=150)
        if recent:
            user = f'Recent conversation:\n{recent}\n\nUser now says: "{message}"\n\nRespond conversationally and helpfully.'
        else:
            user = f'User says: "{message}"\n\nRespond conversationally and helpfully.'
        system = conversational_prompt.format(company=settings.COMPANY_NAME).strip()
        try:
            return self.provider.complete(
                [{"role": "system", "content": system}, {"role": "user", "content": user}],
                temperature=0.7,
                max_tokens=150,
            ).strip()
        except ProviderError as e:
            logger.warning(f"Conversational reply failed: {e}")
            return messages.CONVERSATIONAL_FALLBACK

    def metadata_reply(self, question: str, history: Sequence[Turn], context: QueryContext) -> str:
        table = context.last_table
        if table not in messages.OTHER_SOURCE and context.last_sql:
            table = extract_table_tag(context.last_sql)

        if table in messages.OTHER_SOURCE:
            if ASKS_PRIMARY.search(question):
                return messages.source_confirmation(table, "primary")
            if ASKS_SECONDARY.search(question):
                return messages.source_confirmation(table, "secondary")
            return messages.source_description(table)

        user = f'User asked: "{question}"\n\nPrevious conversation:\n{format_turns(history, limit=2, max_chars=200)}'
        if context.last_sql:
            user += f"\n\nPrevious SQL used: {context.last_sql[:200]}"
        user += "\n\nExplain what data source was used in the previous answer."
        system = metadata_prompt.format(company=settings.COMPANY_NAME).strip()
        try:
            return self.provider.complete(
                [{"role": "system", "content": system}, {"role": "user", "content": user}],
                temperature=0.7,
                max_tokens=200,
            ).strip()
        except ProviderError as e:
            logger.warning(f"Metadata reply failed: {e}")
            return messages.METADATA_FALLBACK
