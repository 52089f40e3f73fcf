from fastapi import APIRouter, Depends, status

from src.app.use_cases.auth import Principal
from src.app.use_cases.auth.dtos import CamelModel
from src.depends import get_current_user

router = APIRouter(tags=["User"])


class InfoResponse(CamelModel):
    """GET /info response payload"""

    user_id: str


@router.get("/info", status_code=status.HTTP_200_OK, response_model=InfoResponse)
async def get_info(current_user: Principal = Depends(get_current_user)):
    """
    Current User

    Returns the user id bound to the bearer access token.

    Raises:
        - 401 Unauthorized: Invalid or expired token, or session not active
    """
    return InfoResponse(user_id=current_user.user_id)
