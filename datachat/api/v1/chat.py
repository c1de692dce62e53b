"""
Chat API Endpoints
Ask questions about a dataset, read the conversation
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from datachat.core.exceptions import DatasetNotFound, QuestionMissing
from datachat.db.session import Store, get_store
from datachat.schemas.chat import AskRequest, ChatHistoryResponse, ChatMessageResponse
from datachat.services.conversation_service import ConversationService


router = APIRouter(prefix="/datasets", tags=["Chat"])


def get_conversation_service(
    request: Request,
    store: Store = Depends(get_store)
) -> ConversationService:
    """ConversationService over the app's store and query bridge"""
    return ConversationService(store, request.app.state.bridge)


# ==========================================
# ASK QUESTION
# ==========================================

@router.post("/{dataset_id}/ask", response_model=ChatMessageResponse)
def ask_question(
    dataset_id: int,
    payload: AskRequest,
    service: ConversationService = Depends(get_conversation_service)
):
    """
    Ask a question about a dataset

    Returns the system answer: explanation, generated query,
    result rows and an optional chart.
    """
    try:
        message = service.ask(dataset_id, payload.question)
    except QuestionMissing as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except DatasetNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dataset not found"
        )

    return message.to_dict()


# ==========================================
# CHAT HISTORY
# ==========================================

@router.get("/{dataset_id}/chat", response_model=ChatHistoryResponse)
def get_chat_history(
    dataset_id: int,
    service: ConversationService = Depends(get_conversation_service)
):
    """Chat messages of a dataset, oldest first"""
    try:
        messages = service.history(dataset_id)
    except DatasetNotFound:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dataset not found"
        )

    return {
        "dataset_id": dataset_id,
        "total": len(messages),
        "messages": [m.to_dict() for m in messages]
    }
