"""
客人服务 - 本体操作层
管理 Guest 对象及其住宿统计
"""
from typing import List, Optional
from decimal import Decimal
import logging
from sqlalchemy.orm import Session
from sqlalchemy import desc
from hotel_desk.database import atomic
from hotel_desk.exceptions import NotFoundError
from hotel_desk.models.ontology import Guest, Room, Reservation, ReservationStatus
from hotel_desk.models.schemas import GuestCreate, GuestUpdate

logger = logging.getLogger(__name__)


class GuestService:
    """客人服务"""

    def __init__(self, db: Session):
        self.db = db

    def get_guests(self) -> List[Guest]:
        """获取客人列表（按创建时间倒序）"""
        return self.db.query(Guest).order_by(desc(Guest.created_at), desc(Guest.id)).all()

    def get_guest(self, guest_id: int) -> Optional[Guest]:
        """获取单个客人"""
        return self.db.query(Guest).filter(Guest.id == guest_id).first()

    def create_guest(self, data: GuestCreate) -> Guest:
        """创建客人"""
        guest = Guest(**data.model_dump())
        with atomic(self.db):
            self.db.add(guest)
        self.db.refresh(guest)
        logger.info(f"Guest {guest.id} created")
        return guest

    def update_guest(self, guest_id: int, data: GuestUpdate) -> Guest:
        """更新客人信息"""
        with atomic(self.db):
            guest = self.get_guest(guest_id)
            if not guest:
                raise NotFoundError("客人不存在")

            for key, value in data.model_dump(exclude_unset=True).items():
                setattr(guest, key, value)

        self.db.refresh(guest)
        logger.info(f"Guest {guest.id} updated")
        return guest

    def get_guest_reservations(self, guest_id: int) -> List[Reservation]:
        """获取客人的全部预订（按入住日期倒序）"""
        if not self.get_guest(guest_id):
            raise NotFoundError("客人不存在")
        return self.db.query(Reservation).filter(
            Reservation.guest_id == guest_id
        ).order_by(desc(Reservation.check_in_date), desc(Reservation.id)).all()

    def get_guests_with_stats(self) -> List[dict]:
        """
        客人列表及累计统计

        total_stays: 未取消的预订数
        total_revenue: 间夜数 × 房价（房间已删除的预订不计收入）
        last_stay_date: 最近一次离店日期
        """
        rows = self.db.query(Reservation, Room).outerjoin(
            Room, Room.id == Reservation.room_id
        ).filter(
            Reservation.status != ReservationStatus.CANCELLED
        ).all()

        stats = {}
        for reservation, room in rows:
            entry = stats.setdefault(reservation.guest_id, {
                'total_stays': 0,
                'total_revenue': Decimal("0"),
                'last_stay_date': None
            })
            entry['total_stays'] += 1
            if room is not None:
                nights = (reservation.check_out_date - reservation.check_in_date).days
                entry['total_revenue'] += nights * Decimal(room.price_per_night)
            if entry['last_stay_date'] is None or reservation.check_out_date > entry['last_stay_date']:
                entry['last_stay_date'] = reservation.check_out_date

        result = []
        for guest in self.get_guests():
            entry = stats.get(guest.id, {})
            result.append({
                'id': guest.id,
                'full_name': guest.full_name,
                'phone_number': guest.phone_number,
                'email': guest.email,
                'gender': guest.gender,
                'created_at': guest.created_at,
                'total_stays': entry.get('total_stays', 0),
                'total_revenue': entry.get('total_revenue', Decimal("0")),
                'last_stay_date': entry.get('last_stay_date')
            })
        return result
