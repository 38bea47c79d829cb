# api/routes/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.services.dashboard import get_dashboard_stats
from api.dependencies import get_db
from api.schemas.common import DashboardStats

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(db: Session = Depends(get_db)):
    """Counts of books, active users, active loans and overdue loans."""
    return DashboardStats(**get_dashboard_stats(db))
