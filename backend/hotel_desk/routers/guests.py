"""
客人管理路由
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from hotel_desk.database import get_db
from hotel_desk.models.ontology import Manager
from hotel_desk.models.schemas import (
    GuestCreate, GuestUpdate, GuestResponse, GuestStatsResponse,
    ReservationResponse, OperationResult
)
from hotel_desk.services.guest_service import GuestService
from hotel_desk.services.reservation_service import ReservationService
from hotel_desk.security.auth import get_current_manager

router = APIRouter(prefix="/guests", tags=["客人管理"])


@router.get("", response_model=List[GuestResponse])
def list_guests(
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取客人列表"""
    return GuestService(db).get_guests()


@router.get("/stats", response_model=List[GuestStatsResponse])
def list_guests_with_stats(
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取客人列表及住宿统计"""
    return GuestService(db).get_guests_with_stats()


@router.get("/{guest_id}", response_model=GuestResponse)
def get_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取客人详情"""
    guest = GuestService(db).get_guest(guest_id)
    if not guest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="客人不存在")
    return guest


@router.get("/{guest_id}/reservations", response_model=List[ReservationResponse])
def get_guest_reservations(
    guest_id: int,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取客人预订历史"""
    reservations = GuestService(db).get_guest_reservations(guest_id)
    detail = ReservationService(db).get_reservation_detail
    return [detail(r) for r in reservations]


@router.post("", response_model=OperationResult)
def create_guest(
    data: GuestCreate,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """创建客人"""
    guest = GuestService(db).create_guest(data)
    return OperationResult(success=True, message="客人创建成功", guest_id=guest.id)


@router.put("/{guest_id}", response_model=OperationResult)
def update_guest(
    guest_id: int,
    data: GuestUpdate,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """更新客人信息"""
    GuestService(db).update_guest(guest_id, data)
    return OperationResult(success=True, message="客人信息已更新")
