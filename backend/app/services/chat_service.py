import logging
import time
from typing import Optional, Sequence

from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool

from app.schemas.chat import ChatResponse
from app.services import messages
from app.services.chart_service import classify_result_shape, preferred_chart_type, wants_chart
from app.services.recovery import RecoveryCoordinator
from app.utils.helpers import format_fallback_answer
from conversation.entities import extract_entities
from conversation.intent import Intent, classify_intent
from conversation.models import EntitySet, PendingSuggestion, QueryContext, Turn
from core.config import settings
from db.safe_query import QueryExecutionError, QueryExecutor
from db.sql_safety import extract_table_tag, is_sql_safe
from llm.chain import FailureKind, SalesQueryCore, SqlGenerationError
from llm.providers import CompletionProvider, ProviderError, ProviderTimeout

logger = logging.getLogger(__name__)

AUTO_CHART_MIN_ROWS = 2
AUTO_CHART_MAX_ROWS = 50
RAW_DATA_ROWS = 100


class ChatService:
    """
    Runs one conversational turn: classify, then answer directly, query the
    warehouse, or hand over to recovery. Every path returns an envelope.
    """

    def __init__(self, provider: CompletionProvider, executor: QueryExecutor):
        self.core = SalesQueryCore(provider)
        self.recovery = RecoveryCoordinator(provider)
        self.executor = executor

    async def process_message(self, question: str, history: Sequence[Turn] = ()) -> ChatResponse:
        t0 = time.time()
        history = list(history)[-settings.HISTORY_WINDOW:]
        intent = None
        try:
            intent = classify_intent(question, history)
            logger.info(f"Classified intent: {intent.value}")
            response = await self._dispatch(intent, question.strip(), history)
        except ProviderTimeout as e:
            logger.error(f"Completion provider timed out: {e}")
            response = ChatResponse(answer=messages.TIMEOUT, row_count=0, type="timeout")
        except Exception:
            logger.exception("Chat turn failed")
            response = ChatResponse(answer=messages.GENERIC_ERROR, row_count=0, type="error")

        response.meta = {
            "latency_ms": int((time.time() - t0) * 1000),
            "intent": intent.value if intent else None,
        }
        return response

    async def _dispatch(self, intent: Intent, question: str, history: Sequence[Turn]) -> ChatResponse:
        if intent == Intent.REJECTION:
            return ChatResponse(answer=messages.REJECTION, row_count=0, type="rejection")

        if intent == Intent.METADATA:
            context = QueryContext.from_history(history)
            answer = await run_in_threadpool(self.core.metadata_reply, question, history, context)
            return ChatResponse(answer=answer, row_count=0, type="metadata")

        if intent == Intent.CONVERSATIONAL:
            answer = await run_in_threadpool(self.core.conversational_reply, question, history)
            return ChatResponse(answer=answer, row_count=0, type="conversational")

        if intent == Intent.CONFIRMATION:
            pending = PendingSuggestion.from_history(history)
            question = pending.question
            logger.info(f"User confirmed suggested question, proceeding with: {question}")

        entities = extract_entities(history)
        return await self._answer_data_question(
            question, history, entities, include_entities=intent == Intent.FOLLOW_UP
        )

    async def _answer_data_question(
        self,
        question: str,
        history: Sequence[Turn],
        entities: EntitySet,
        include_entities: bool = False,
    ) -> ChatResponse:
        try:
            sql = await run_in_threadpool(self.core.generate_sql, question, history, entities, include_entities)
        except SqlGenerationError as e:
            logger.error(f"{e.kind.value}: {e}")
            return await self._recover(question, e.kind, history, entities)

        # Gate again right before execution
        if not is_sql_safe(sql):
            return await self._recover(question, FailureKind.SAFETY_CHECK_FAILED, history, entities)

        try:
            result = await run_in_threadpool(self.executor.execute, sql)
        except QueryExecutionError as e:
            if e.is_syntax_error:
                return await self._recover(question, FailureKind.SYNTAX_ERROR, history, entities)
            return ChatResponse(answer=messages.DATABASE_ERROR, row_count=0, type="database_error")

        logger.info(f"Query executed successfully. Returned {result.row_count} rows")
        if result.row_count == 0:
            return ChatResponse(answer=messages.EMPTY_RESULT, row_count=0, type="empty_result")

        rows = jsonable_encoder(result.rows)
        try:
            answer = await run_in_threadpool(self.core.compose_answer, question, rows, sql, result.row_count)
        except ProviderError as e:
            logger.error(f"Answer generation error: {e}")
            return ChatResponse(
                answer=format_fallback_answer(rows, result.row_count),
                row_count=result.row_count,
                type="fallback",
                sql=sql,
            )

        asked_for_chart = wants_chart(question)
        chart = None
        if asked_for_chart or AUTO_CHART_MIN_ROWS <= result.row_count <= AUTO_CHART_MAX_ROWS:
            chart = classify_result_shape(rows, preferred=preferred_chart_type(question))

        return ChatResponse(
            answer=answer,
            row_count=result.row_count,
            type="success",
            sql=sql,
            table=extract_table_tag(sql),
            chart_data=chart,
            chart_type=chart.type if chart else None,
            raw_data=rows[:RAW_DATA_ROWS] if asked_for_chart else None,
        )

    async def _recover(
        self,
        question: str,
        failure_kind: FailureKind,
        history: Sequence[Turn],
        entities: Optional[EntitySet],
    ) -> ChatResponse:
        return await run_in_threadpool(self.recovery.recover, question, failure_kind, history, entities)
