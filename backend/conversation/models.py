from typing import List, Literal, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field


class Turn(BaseModel):
    """One message of the client-held conversation."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    role: Literal["user", "assistant"]
    content: str = ""
    sql: Optional[str] = None
    table: Optional[str] = None
    suggested_question: Optional[str] = Field(default=None, alias="suggestedQuestion")
    turn_type: Optional[str] = Field(default=None, alias="type")


class PendingSuggestion(BaseModel):
    """A rephrased question offered on the previous assistant turn."""
    question: str

    @classmethod
    def from_history(cls, history: Sequence[Turn]) -> Optional["PendingSuggestion"]:
        if not history:
            return None
        last = history[-1]
        if last.role != "assistant" or not (last.suggested_question or "").strip():
            return None
        return cls(question=last.suggested_question.strip())


class QueryContext(BaseModel):
    """SQL and source tag of the most recent answered data question."""
    last_sql: Optional[str] = None
    last_table: Optional[str] = None

    @classmethod
    def from_history(cls, history: Sequence[Turn]) -> "QueryContext":
        for turn in reversed(history):
            if turn.role == "assistant" and (turn.sql or turn.table):
                return cls(last_sql=turn.sql, last_table=turn.table)
        return cls()


class EntitySet(BaseModel):
    entities: List[str] = []
    entity_type: Optional[Literal["distributors", "products"]] = None
    period: Optional[str] = None

    def __bool__(self) -> bool:
        return bool(self.entities)


def recent_turns(history: Sequence[Turn], limit: int) -> List[Turn]:
    return list(history[-limit:]) if limit > 0 else []


def format_turns(history: Sequence[Turn], limit: int, max_chars: int) -> str:
    """Role-labelled transcript of the last ``limit`` turns, each cut to ``max_chars``."""
    lines = []
    for turn in recent_turns(history, limit):
        label = "User" if turn.role == "user" else "Assistant"
        lines.append(f"{label}: {turn.content[:max_chars]}")
    return "\n".join(lines)
