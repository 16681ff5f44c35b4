from fastapi import APIRouter

router = APIRouter()


@router.get("/health", summary="Health Check", description="Liveness probe; does not touch the AI provider or storage.")
async def health_check():
    return {"status": "healthy"}
