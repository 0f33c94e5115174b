"""
预订服务 - 本体操作层
管理 Reservation 对象的创建、修改、取消和退房
所有写操作在单个事务内完成，并维护 Room.status 与有效预订的一致性
"""
from typing import List, Optional
from datetime import date
import logging
from sqlalchemy.orm import Session
from hotel_desk.config import settings
from hotel_desk.database import atomic
from hotel_desk.exceptions import ValidationError, ConflictError, NotFoundError
from hotel_desk.models.ontology import (
    Room, RoomStatus, Guest, Reservation, ReservationStatus
)
from hotel_desk.models.schemas import ReservationCreate, ReservationUpdate

logger = logging.getLogger(__name__)


def dates_conflict(existing_in: date, existing_out: date,
                   check_in: date, check_out: date, inclusive: bool = True) -> bool:
    """
    判断两个入住区间是否冲突

    inclusive=True 时首尾相接（一方离店日等于另一方入住日）也算冲突，
    与旧系统的判定一致；False 时按半开区间判断。
    """
    if inclusive:
        return existing_in <= check_out and existing_out >= check_in
    return existing_in < check_out and existing_out > check_in


class ReservationService:
    """预订服务"""

    def __init__(self, db: Session, inclusive_boundary: Optional[bool] = None):
        self.db = db
        self.inclusive_boundary = (
            settings.INCLUSIVE_DATE_BOUNDARY if inclusive_boundary is None else inclusive_boundary
        )

    # ============== 查询 ==============

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        """获取单个预订"""
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def get_reservations(self, status: Optional[ReservationStatus] = ReservationStatus.ACTIVE) -> List[Reservation]:
        """获取预订列表（默认仅有效预订，按入住日期倒序）"""
        query = self.db.query(Reservation)
        if status is not None:
            query = query.filter(Reservation.status == status)
        return query.order_by(Reservation.check_in_date.desc(), Reservation.id.desc()).all()

    def get_active_reservations_for_room(self, room_id: int) -> List[Reservation]:
        """获取房间的全部有效预订（按入住日期升序）"""
        return self.db.query(Reservation).filter(
            Reservation.room_id == room_id,
            Reservation.status == ReservationStatus.ACTIVE
        ).order_by(Reservation.check_in_date, Reservation.id).all()

    def get_room_reservation(self, room_id: int) -> Optional[Reservation]:
        """获取房间当前的有效预订（入住日期最早的一条）"""
        reservations = self.get_active_reservations_for_room(room_id)
        return reservations[0] if reservations else None

    def get_reservation_detail(self, reservation: Reservation) -> dict:
        """预订详情（包含房间和客人信息）"""
        room = reservation.room
        guest = reservation.guest
        return {
            'id': reservation.id,
            'room_id': reservation.room_id,
            'guest_id': reservation.guest_id,
            'check_in_date': reservation.check_in_date,
            'check_out_date': reservation.check_out_date,
            'number_of_guests': reservation.number_of_guests,
            'staff_notes': reservation.staff_notes,
            'status': reservation.status,
            'created_at': reservation.created_at,
            'created_by_manager_id': reservation.created_by_manager_id,
            'room_number': room.room_number if room else None,
            'room_type': room.type if room else None,
            'price_per_night': room.price_per_night if room else None,
            'guest_name': guest.full_name if guest else None,
            'phone_number': guest.phone_number if guest else None,
            'email': guest.email if guest else None,
            'gender': guest.gender if guest else None,
        }

    # ============== 可用性 ==============

    def _require_room(self, room_id: int, for_update: bool = False) -> Room:
        query = self.db.query(Room).filter(Room.id == room_id)
        if for_update:
            # 锁住房间行，串行化同一房间的并发预订（SQLite 下忽略）
            query = query.with_for_update()
        room = query.first()
        if not room:
            raise NotFoundError("房间不存在")
        return room

    @staticmethod
    def _validate_dates(check_in: date, check_out: date) -> None:
        if check_out <= check_in:
            raise ValidationError("离店日期必须晚于入住日期")

    def _find_conflicts(self, room_id: int, check_in: date, check_out: date,
                        exclude_reservation_id: Optional[int] = None) -> List[Reservation]:
        return [
            r for r in self.get_active_reservations_for_room(room_id)
            if r.id != exclude_reservation_id
            and dates_conflict(r.check_in_date, r.check_out_date,
                               check_in, check_out, self.inclusive_boundary)
        ]

    def check_availability(self, room_id: int, check_in: date, check_out: date) -> bool:
        """
        检查日期冲突

        Returns:
            True 表示与现有有效预订冲突
        """
        self._validate_dates(check_in, check_out)
        self._require_room(room_id)
        return len(self._find_conflicts(room_id, check_in, check_out)) > 0

    # ============== 写操作 ==============

    def _validate_create(self, data: ReservationCreate) -> None:
        self._validate_dates(data.check_in_date, data.check_out_date)
        if data.number_of_guests < 1:
            raise ValidationError("入住人数至少为 1")
        if data.is_new_guest:
            if not data.guest_name or not data.guest_phone:
                raise ValidationError("新客人必须填写姓名和手机号")
        elif data.guest_id is None:
            raise ValidationError("请选择客人")

    @staticmethod
    def _check_capacity(room: Room, number_of_guests: int) -> None:
        if number_of_guests > room.max_guests:
            raise ValidationError(f"房间 {room.room_number} 最多入住 {room.max_guests} 人")

    def create_reservation(self, data: ReservationCreate, created_by: Optional[int] = None) -> Reservation:
        """
        创建预订

        同一事务内：
        1. 锁定房间并重新检查日期冲突
        2. 按需创建新客人
        3. 写入有效预订
        4. 房间状态置为入住中
        """
        self._validate_create(data)

        with atomic(self.db):
            room = self._require_room(data.room_id, for_update=True)

            if room.status == RoomStatus.MAINTENANCE:
                raise ConflictError(f"房间 {room.room_number} 维修中，无法预订")
            self._check_capacity(room, data.number_of_guests)

            if self._find_conflicts(room.id, data.check_in_date, data.check_out_date):
                logger.warning(
                    f"Booking rejected: room {room.room_number} "
                    f"{data.check_in_date} ~ {data.check_out_date} conflicts with an active reservation"
                )
                raise ConflictError("该房间在所选日期已被预订")

            if data.is_new_guest:
                guest = Guest(
                    full_name=data.guest_name,
                    phone_number=data.guest_phone,
                    email=data.guest_email,
                    gender=data.guest_gender
                )
                self.db.add(guest)
                self.db.flush()
            else:
                guest = self.db.query(Guest).filter(Guest.id == data.guest_id).first()
                if not guest:
                    raise NotFoundError("客人不存在")

            reservation = Reservation(
                room_id=room.id,
                guest_id=guest.id,
                check_in_date=data.check_in_date,
                check_out_date=data.check_out_date,
                number_of_guests=data.number_of_guests,
                staff_notes=data.staff_notes,
                status=ReservationStatus.ACTIVE,
                created_by_manager_id=created_by
            )
            self.db.add(reservation)
            room.status = RoomStatus.OCCUPIED

        self.db.refresh(reservation)
        logger.info(
            f"Reservation {reservation.id} created: room {room.room_number}, "
            f"guest {guest.id}, {reservation.check_in_date} ~ {reservation.check_out_date}"
        )
        return reservation

    def update_reservation(self, reservation_id: int, data: ReservationUpdate) -> Reservation:
        """更新预订（日期、人数、备注），并重新检查日期冲突"""
        self._validate_dates(data.check_in_date, data.check_out_date)
        if data.number_of_guests < 1:
            raise ValidationError("入住人数至少为 1")

        with atomic(self.db):
            reservation = self.get_reservation(reservation_id)
            if not reservation:
                raise NotFoundError("预订不存在")
            if reservation.status != ReservationStatus.ACTIVE:
                raise ConflictError(f"状态为 {reservation.status.value} 的预订不可修改")

            room = self.db.query(Room).filter(Room.id == reservation.room_id).with_for_update().first()
            if room:
                self._check_capacity(room, data.number_of_guests)

            if self._find_conflicts(reservation.room_id, data.check_in_date, data.check_out_date,
                                    exclude_reservation_id=reservation.id):
                raise ConflictError("修改后的日期与该房间其他预订冲突")

            reservation.check_in_date = data.check_in_date
            reservation.check_out_date = data.check_out_date
            reservation.number_of_guests = data.number_of_guests
            reservation.staff_notes = data.staff_notes

        self.db.refresh(reservation)
        logger.info(f"Reservation {reservation.id} updated")
        return reservation

    def _release_room_if_free(self, room: Optional[Room]) -> None:
        """房间没有其他有效预订时置为空闲"""
        if room is None:
            return
        self.db.flush()
        if not self.get_active_reservations_for_room(room.id) and room.status == RoomStatus.OCCUPIED:
            room.status = RoomStatus.AVAILABLE

    def checkout_reservation(self, room_id: int) -> Optional[Reservation]:
        """
        按房间退房

        当前有效预订置为已退房；无有效预订时视为成功的空操作。
        """
        with atomic(self.db):
            room = self._require_room(room_id, for_update=True)
            reservation = self.get_room_reservation(room.id)
            if reservation is None:
                logger.info(f"Checkout on room {room.room_number}: no active reservation, nothing to do")
            else:
                reservation.status = ReservationStatus.CHECKED_OUT
            self._release_room_if_free(room)

        if reservation is not None:
            self.db.refresh(reservation)
            logger.info(f"Reservation {reservation.id} checked out from room {room.room_number}")
        return reservation

    def cancel_reservation(self, reservation_id: int) -> Reservation:
        """取消预订"""
        with atomic(self.db):
            reservation = self.get_reservation(reservation_id)
            if not reservation:
                raise NotFoundError("预订不存在")
            if reservation.status != ReservationStatus.ACTIVE:
                raise ConflictError(f"状态为 {reservation.status.value} 的预订不可取消")

            reservation.status = ReservationStatus.CANCELLED
            room = self.db.query(Room).filter(Room.id == reservation.room_id).with_for_update().first()
            self._release_room_if_free(room)

        self.db.refresh(reservation)
        logger.info(f"Reservation {reservation.id} cancelled")
        return reservation
