"""
房间服务 - 本体操作层
管理 Room 对象：批量添加、批量删除、状态维护
"""
from typing import List, Optional
import logging
from sqlalchemy.orm import Session
from hotel_desk.database import atomic
from hotel_desk.exceptions import ValidationError, ConflictError, NotFoundError
from hotel_desk.models.ontology import Room, RoomStatus, Reservation, ReservationStatus
from hotel_desk.models.schemas import RoomCreate, RoomBatchCreate

logger = logging.getLogger(__name__)


def expand_room_batch(data: RoomBatchCreate) -> List[RoomCreate]:
    """按起始房号生成连续房号的房间列表"""
    try:
        start = int(data.start_number)
    except ValueError:
        raise ValidationError("起始房号必须为数字")
    if start < 0:
        raise ValidationError("起始房号不能为负数")

    return [
        RoomCreate(
            room_number=str(start + i),
            floor=data.floor,
            type=data.type,
            price_per_night=data.price_per_night,
            max_guests=data.max_guests
        )
        for i in range(data.count)
    ]


class RoomService:
    """房间服务"""

    def __init__(self, db: Session):
        self.db = db

    # ============== 查询 ==============

    def get_rooms(self, floor: Optional[int] = None,
                  status: Optional[RoomStatus] = None) -> List[Room]:
        """获取房间列表"""
        query = self.db.query(Room)

        if floor is not None:
            query = query.filter(Room.floor == floor)
        if status is not None:
            query = query.filter(Room.status == status)

        return query.order_by(Room.floor, Room.room_number).all()

    def get_room(self, room_id: int) -> Optional[Room]:
        """获取单个房间"""
        return self.db.query(Room).filter(Room.id == room_id).first()

    def get_room_status_summary(self) -> dict:
        """获取房态统计"""
        summary = {'total': 0}
        for s in RoomStatus:
            summary[s.value] = 0
        for room in self.get_rooms():
            summary['total'] += 1
            summary[room.status.value] += 1
        return summary

    # ============== 写操作 ==============

    def add_room_list(self, rooms: List[RoomCreate]) -> List[Room]:
        """批量添加房间，全部成功或全部失败"""
        if not rooms:
            raise ValidationError("没有要添加的房间")

        numbers = [r.room_number for r in rooms]
        if len(set(numbers)) != len(numbers):
            raise ValidationError("房间号重复")

        with atomic(self.db):
            existing = self.db.query(Room.room_number).filter(Room.room_number.in_(numbers)).all()
            if existing:
                taken = ', '.join(sorted(n for (n,) in existing))
                raise ConflictError(f"房间号已存在: {taken}")

            created = []
            for data in rooms:
                room = Room(**data.model_dump(), status=RoomStatus.AVAILABLE)
                self.db.add(room)
                created.append(room)

        for room in created:
            self.db.refresh(room)
        logger.info(f"Added {len(created)} room(s): {', '.join(numbers)}")
        return created

    def add_rooms(self, data: RoomBatchCreate) -> List[Room]:
        """按起始房号批量添加房间"""
        return self.add_room_list(expand_room_batch(data))

    def remove_rooms(self, room_ids: List[int]) -> int:
        """
        批量删除房间

        任一房间入住中（或仍有有效预订）则整批拒绝；历史预订保留。
        """
        ids = sorted(set(room_ids))
        if not ids:
            raise ValidationError("请选择要删除的房间")

        with atomic(self.db):
            rooms = self.db.query(Room).filter(Room.id.in_(ids)).with_for_update().all()
            missing = set(ids) - {r.id for r in rooms}
            if missing:
                raise NotFoundError(f"房间不存在: {', '.join(str(i) for i in sorted(missing))}")

            occupied = {r.id for r in rooms if r.status == RoomStatus.OCCUPIED}
            occupied |= {
                room_id for (room_id,) in self.db.query(Reservation.room_id).filter(
                    Reservation.room_id.in_(ids),
                    Reservation.status == ReservationStatus.ACTIVE
                ).distinct().all()
            }
            if occupied:
                numbers = sorted(r.room_number for r in rooms if r.id in occupied)
                logger.warning(f"Room removal rejected, occupied: {', '.join(numbers)}")
                raise ConflictError(f"入住中的房间不能删除，请先办理退房: {', '.join(numbers)}")

            deleted = self.db.query(Room).filter(Room.id.in_(ids)).delete(synchronize_session=False)

        self.db.expire_all()
        logger.info(f"Removed {deleted} room(s)")
        return deleted

    def set_room_status(self, room_id: int, status: RoomStatus) -> Room:
        """手动设置房间状态（仅空闲 / 维修中）"""
        if status == RoomStatus.OCCUPIED:
            raise ValidationError("入住状态只能通过创建预订设置")

        with atomic(self.db):
            room = self.db.query(Room).filter(Room.id == room_id).with_for_update().first()
            if not room:
                raise NotFoundError("房间不存在")

            has_active = self.db.query(Reservation).filter(
                Reservation.room_id == room_id,
                Reservation.status == ReservationStatus.ACTIVE
            ).count() > 0
            if room.status == RoomStatus.OCCUPIED or has_active:
                raise ConflictError("入住中的房间不能手动更改状态，请通过退房操作")

            old_status = room.status
            room.status = status

        self.db.refresh(room)
        logger.info(f"Room {room.room_number} status {old_status.value} -> {status.value}")
        return room
