"""
房间管理路由
写操作返回 {success, message}；业务异常由全局处理器转换
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from hotel_desk.database import get_db
from hotel_desk.models.ontology import Manager, RoomStatus
from hotel_desk.models.schemas import (
    RoomCreate, RoomBatchCreate, RoomRemove, RoomStatusUpdate,
    RoomResponse, ReservationResponse, OperationResult
)
from hotel_desk.services.room_service import RoomService
from hotel_desk.services.reservation_service import ReservationService
from hotel_desk.security.auth import get_current_manager, require_manager_role

router = APIRouter(prefix="/rooms", tags=["房间管理"])


@router.get("", response_model=List[RoomResponse])
def list_rooms(
    floor: Optional[int] = None,
    status: Optional[RoomStatus] = None,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取房间列表"""
    return RoomService(db).get_rooms(floor, status)


@router.get("/status-summary")
def get_room_status_summary(
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取房态统计"""
    return RoomService(db).get_room_status_summary()


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取房间详情"""
    room = RoomService(db).get_room(room_id)
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="房间不存在")
    return room


@router.get("/{room_id}/reservation", response_model=Optional[ReservationResponse])
def get_room_reservation(
    room_id: int,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """获取房间当前的有效预订，没有时返回 null"""
    service = ReservationService(db)
    reservation = service.get_room_reservation(room_id)
    if reservation is None:
        return None
    return service.get_reservation_detail(reservation)


@router.post("", response_model=OperationResult)
def add_rooms(
    data: List[RoomCreate],
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(require_manager_role)
):
    """添加房间（明细列表）"""
    rooms = RoomService(db).add_room_list(data)
    return OperationResult(
        success=True,
        message=f"成功添加 {len(rooms)} 间房间",
        room_ids=[r.id for r in rooms]
    )


@router.post("/batch", response_model=OperationResult)
def add_room_batch(
    data: RoomBatchCreate,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(require_manager_role)
):
    """按起始房号批量添加房间"""
    rooms = RoomService(db).add_rooms(data)
    return OperationResult(
        success=True,
        message=f"成功添加 {len(rooms)} 间房间",
        room_ids=[r.id for r in rooms]
    )


@router.post("/remove", response_model=OperationResult)
def remove_rooms(
    data: RoomRemove,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(require_manager_role)
):
    """批量删除房间"""
    deleted = RoomService(db).remove_rooms(data.room_ids)
    return OperationResult(success=True, message=f"成功删除 {deleted} 间房间")


@router.patch("/{room_id}/status", response_model=OperationResult)
def update_room_status(
    room_id: int,
    data: RoomStatusUpdate,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(get_current_manager)
):
    """更新房间状态"""
    room = RoomService(db).set_room_status(room_id, data.status)
    return OperationResult(
        success=True,
        message=f"房间状态已更新为 {room.status.value}",
        status=room.status
    )
