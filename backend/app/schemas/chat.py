from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from conversation.models import Turn

ResponseType = Literal[
    "metadata",
    "conversational",
    "suggestion",
    "rejection",
    "success",
    "empty_result",
    "error_with_suggestions",
    "database_error",
    "fallback",
    "timeout",
    "clarification_needed",
    "error",
]

# Envelope types that are not handled business outcomes
STATUS_BY_TYPE = {
    "timeout": 504,
    "error": 500,
}


class ChatRequest(BaseModel):
    question: str
    history: List[Turn] = []


class ChartData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["line", "bar", "pie"]
    data: List[Dict[str, Any]]
    x_axis: str = Field(alias="xAxis")
    y_axis: str = Field(alias="yAxis")


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    answer: str
    row_count: int = Field(default=0, alias="rowCount")
    type: ResponseType
    sql: Optional[str] = None
    table: Optional[str] = None
    suggested_question: Optional[str] = Field(default=None, alias="suggestedQuestion")
    chart_data: Optional[ChartData] = Field(default=None, alias="chartData")
    chart_type: Optional[str] = Field(default=None, alias="chartType")
    raw_data: Optional[List[Dict[str, Any]]] = Field(default=None, alias="rawData")
    meta: Optional[Dict[str, Any]] = None

    @property
    def status_code(self) -> int:
        return STATUS_BY_TYPE.get(self.type, 200)
