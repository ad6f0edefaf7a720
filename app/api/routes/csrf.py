"""CSRF token issuance."""

from fastapi import APIRouter, Response

from app.core.auth import Session
from app.core.logging import get_logger
from app.core.security import generate_csrf_token
from app.schemas.auth import CsrfTokenResponse
from app.services.csrf import set_csrf_cookie

logger = get_logger(__name__)

router = APIRouter(tags=["csrf"])


@router.get("/csrf", response_model=CsrfTokenResponse)
async def issue_csrf_token(session: Session, response: Response) -> CsrfTokenResponse:
    """
    Issue a fresh CSRF token for the logged-in caller.

    The token goes both in the body (to be echoed in the X-CSRF-Token header)
    and in an HTTP-only cookie.
    """
    token = generate_csrf_token()
    set_csrf_cookie(response, token)
    logger.debug("csrf_token_issued", user_id=session.user_id)
    return CsrfTokenResponse(token=token)
