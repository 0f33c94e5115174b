"""
预订管理路由
"""
from typing import List
from datetime import date
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hotel_desk.database import get_db
from hotel_desk.models.ontology import Manager
from hotel_desk.models.schemas import (
    ReservationCreate, ReservationUpdate, ReservationResponse,
    DateConflictResponse, OperationResult
)
from hotel_desk.services.reservation_service import ReservationService
from hotel_desk.security.auth import get_current_manager

router = APIRouter(prefix="/reservations", tags=["预订管理"])


@router.get("", response_model=List[ReservationResponse])
def list_reservations(
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取有效预订列表"""
    service = ReservationService(db)
    return [service.get_reservation_detail(r) for r in service.get_reservations()]


@router.get("/conflict", response_model=DateConflictResponse)
def check_date_conflict(
    room_id: int,
    check_in_date: date,
    check_out_date: date,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """检查日期冲突"""
    service = ReservationService(db)
    return DateConflictResponse(
        conflict=service.check_availability(room_id, check_in_date, check_out_date)
    )


@router.post("", response_model=OperationResult)
def create_reservation(
    data: ReservationCreate,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """创建预订"""
    reservation = ReservationService(db).create_reservation(data, current_manager.id)
    return OperationResult(
        success=True,
        message="预订创建成功",
        reservation_id=reservation.id,
        guest_id=reservation.guest_id
    )


@router.put("/{reservation_id}", response_model=OperationResult)
def update_reservation(
    reservation_id: int,
    data: ReservationUpdate,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """更新预订"""
    ReservationService(db).update_reservation(reservation_id, data)
    return OperationResult(success=True, message="预订更新成功")


@router.post("/{reservation_id}/cancel", response_model=OperationResult)
def cancel_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """取消预订"""
    ReservationService(db).cancel_reservation(reservation_id)
    return OperationResult(success=True, message="预订已取消")


@router.post("/checkout/{room_id}", response_model=OperationResult)
def checkout_reservation(
    room_id: int,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """按房间退房"""
    reservation = ReservationService(db).checkout_reservation(room_id)
    return OperationResult(
        success=True,
        message="退房成功",
        reservation_id=reservation.id if reservation else None
    )
