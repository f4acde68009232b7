from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

router = APIRouter()

@router.get("")
async def basic_auth_challenge():
    """Challenge the browser for basic credentials."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": "Basic Auth Required"},
        headers={"WWW-Authenticate": "Basic realm='secure_area'"},
    )
