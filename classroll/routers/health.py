"""Health check endpoints."""
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(request: Request):
    """Basic health check"""
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.app_version,
    }


@router.get("/db")
async def database_health(request: Request):
    """Database health check"""
    ok = await request.app.state.database.health_check()
    return JSONResponse(
        status_code=200 if ok else 503,
        content={"status": "healthy" if ok else "unhealthy", "db": ok},
    )
