from fastapi import APIRouter

router = APIRouter(tags=["Status"])


@router.get("")
async def health_check():
    """Basic liveness endpoint."""
    return {"status": "ok"}
