"""Guest reservation linking endpoints"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from hostmate.database import get_db
from hostmate.schemas.auth import UserIdentity
from hostmate.schemas.linking import LinkCheckResult, LinkResult
from hostmate.api.auth import get_current_identity
from hostmate.services.linking import check_linkable, link

router = APIRouter()


async def get_verified_identity(
    identity: UserIdentity = Depends(get_current_identity),
) -> UserIdentity:
    """Signed-in identity whose email address has been verified"""
    if not identity.email:
        raise HTTPException(status_code=400, detail="Account has no email address")
    if not identity.email_verified:
        raise HTTPException(status_code=403, detail="Verify your email address first")
    return identity


@router.get("/linkable", response_model=LinkCheckResult)
async def linkable_reservations(
    identity: UserIdentity = Depends(get_verified_identity),
    db: AsyncSession = Depends(get_db),
):
    """Guest reservations made with the signed-in user's email"""
    return await check_linkable(db, identity.email)


@router.post("/link", response_model=LinkResult)
async def link_reservations(
    identity: UserIdentity = Depends(get_verified_identity),
    db: AsyncSession = Depends(get_db),
):
    """Attach matching guest reservations to the signed-in account"""
    return await link(db, identity.email, identity.id)
