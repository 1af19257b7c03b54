import secrets
from typing import Any, Optional

from fastapi import APIRouter, Header, Request, status
from fastapi.responses import JSONResponse

from storefront.config import get_settings
from storefront.errors import AuthError
from storefront.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["authentication"])

ADMIN_PASSWORD_HEADER = "X-Admin-Password"


# --- Credential gate ---
def secrets_match(submitted: Any, configured: Optional[str]) -> bool:
    """Exact, case-sensitive match. An unset or empty configured secret never matches."""
    if not configured:
        return False
    if not isinstance(submitted, str):
        return False
    return secrets.compare_digest(submitted.encode("utf-8"), configured.encode("utf-8"))


def authenticate(submitted_secret: Any) -> bool:
    return secrets_match(submitted_secret, get_settings().admin_password)


async def require_admin(
    x_admin_password: Optional[str] = Header(None, alias=ADMIN_PASSWORD_HEADER),
) -> None:
    """
    Re-checks the shared secret on every admin request. The frontend keeps
    its own "logged in" flag, but that flag never grants access here.
    """
    if not authenticate(x_admin_password):
        raise AuthError("Invalid password")


async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(
        content={"detail": exc.message},
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": ADMIN_PASSWORD_HEADER},
    )


# --- Endpoints ---
@router.post("/login")
async def login(request: Request):
    try:
        payload = await request.json()
        password = payload.get("password") if isinstance(payload, dict) else None

        if authenticate(password):
            return JSONResponse(content={"success": True}, status_code=200)

        logger.info("Admin login denied")
        return JSONResponse(content={"error": "Invalid password"}, status_code=401)
    except Exception as e:
        logger.warning("Admin login failed: %s", e)
        return JSONResponse(content={"error": "Something went wrong"}, status_code=500)
