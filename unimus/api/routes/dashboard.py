from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.dependencies.database import get_db_session
from unimus.api.schemas.dashboard import DashboardStats
from unimus.config import Settings, get_settings
from unimus.services.dashboard import get_dashboard_stats

router = APIRouter(prefix="/dashboard")


@router.get("/stats", response_model=DashboardStats)
async def get_stats(
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> DashboardStats:
    return await get_dashboard_stats(db, recent_days=settings.RECENT_SUBMISSION_DAYS)
