"""Chat board API endpoints."""

from fastapi import APIRouter, Depends

from app.dependencies import get_current_user
from app.exceptions import NotFoundError
from app.models.user import User
from app.schemas.auth import ApiResponse
from app.schemas.chat import ChatBoardResponse

router = APIRouter(prefix="/api/v1/chat-board", tags=["Chat"])


@router.get("", response_model=ApiResponse)
def get_chat_board(user: User = Depends(get_current_user)) -> ApiResponse:
    """Get the chat board created for the current user at registration."""
    if user.chat_board is None:
        raise NotFoundError("Chat board not found")
    board = ChatBoardResponse.model_validate(user.chat_board).model_dump(by_alias=True, mode="json")
    return ApiResponse(status_code=200, data=board, message="Chat board fetched successfully")
