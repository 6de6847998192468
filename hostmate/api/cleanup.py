"""Retention sweep endpoints (staff only)"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hostmate.database import get_db
from hostmate.models.user import User
from hostmate.schemas.cleanup import CleanupPreview, CleanupResult
from hostmate.api.auth import require_admin
from hostmate.services.cleanup import cleanup_past_reservations, preview_past_reservations

router = APIRouter()


@router.post("", response_model=CleanupResult)
async def run_cleanup(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Delete reservations scheduled before today (UTC)"""
    result = await cleanup_past_reservations(db, actor_id=admin.id)
    if not result.success:
        return JSONResponse(
            status_code=500,
            content=result.model_dump(mode="json", by_alias=True),
        )
    return result


@router.get("", response_model=CleanupPreview)
async def preview_cleanup(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Reservations the next sweep would delete"""
    return await preview_past_reservations(db)
