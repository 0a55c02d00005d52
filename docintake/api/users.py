import logging

from fastapi import APIRouter, Depends, HTTPException

from docintake.auth import get_current_user
from docintake.database import document_crud
from docintake.models.users import DashboardStats, ReportsData, UserOut

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/auth/user", response_model=UserOut)
async def get_user_details(user_id: str = Depends(get_current_user)):
    user = await document_crud.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(user_id: str = Depends(get_current_user)):
    try:
        return await document_crud.get_dashboard_stats(user_id)
    except Exception:
        logger.exception("Error fetching dashboard stats")
        raise HTTPException(status_code=500, detail="Failed to fetch dashboard stats")


@router.get("/reports", response_model=ReportsData)
async def get_reports(user_id: str = Depends(get_current_user)):
    try:
        return await document_crud.get_reports_data(user_id)
    except Exception:
        logger.exception("Error fetching reports")
        raise HTTPException(status_code=500, detail="Failed to fetch reports")
