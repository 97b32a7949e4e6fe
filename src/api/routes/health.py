"""
Health check API route
"""

from datetime import datetime, timezone
from fastapi import APIRouter, HTTPException, Request

router = APIRouter()

@router.get("/")
async def health_check(request: Request):
    """Health check - reports whether the database answers"""
    database = request.app.state.database

    try:
        await database.ping()
    except Exception as e:
        raise HTTPException(status_code=503, detail=f"Health check failed: {str(e)}")

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": "connected"
    }
