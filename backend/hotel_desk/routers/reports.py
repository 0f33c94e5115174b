"""
报表路由
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from hotel_desk.database import get_db
from hotel_desk.models.ontology import Manager
from hotel_desk.models.schemas import DashboardStats
from hotel_desk.services.report_service import ReportService
from hotel_desk.security.auth import get_current_manager

router = APIRouter(prefix="/reports", tags=["统计报表"])


@router.get("/dashboard", response_model=DashboardStats)
def get_dashboard(
    time_filter: str = Query(default="7days", pattern="^(today|7days|30days)$"),
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取仪表盘数据"""
    return DashboardStats(**ReportService(db).get_dashboard_stats(time_filter))
