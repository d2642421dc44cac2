from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.api.deps import get_chat_service
from app.schemas.chat import ChatRequest, ChatResponse
from app.services import messages
from app.services.chat_service import ChatService
from app.utils.exceptions import BadRequestError
from core.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post("", response_model=ChatResponse, response_model_by_alias=True)
async def chat(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service)
):
    """
    Answer a question about the sales warehouse, given the recent conversation.
    """
    if not request.question or not request.question.strip():
        raise BadRequestError(messages.EMPTY_QUESTION, error="Please provide a question")

    logger.info(f"Chat question: {request.question[:200]} (history: {len(request.history)} turns)")
    response = await service.process_message(request.question, request.history)
    return JSONResponse(
        status_code=response.status_code,
        content=jsonable_encoder(response, by_alias=True, exclude_none=True),
    )
