"""
报表服务 - 本体操作层
提供仪表盘统计（只读）
"""
from typing import List, Optional
from datetime import date, datetime, timedelta
import logging
from sqlalchemy.orm import Session
from sqlalchemy import func
from hotel_desk.exceptions import ValidationError
from hotel_desk.models.ontology import Room, RoomStatus, Reservation, ReservationStatus

logger = logging.getLogger(__name__)

# 时间筛选 -> 统计天数
TIME_FILTER_DAYS = {
    'today': 1,
    '7days': 7,
    '30days': 30,
}


def percent_change(current: int, previous: int) -> int:
    """环比变化百分比；上期为 0 时按 1 计算（近似值）"""
    previous = previous or 1
    return round((current - previous) / previous * 100)


class ReportService:
    """报表服务"""

    def __init__(self, db: Session, today: Optional[date] = None):
        self.db = db
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    def get_occupancy_rate(self) -> int:
        """入住率（百分比取整），无房间时为 0"""
        total = self.db.query(func.count(Room.id)).scalar() or 0
        if total == 0:
            return 0
        occupied = self.db.query(func.count(Room.id)).filter(
            Room.status == RoomStatus.OCCUPIED
        ).scalar() or 0
        return round(occupied / total * 100)

    def get_today_check_ins(self) -> int:
        """今日入住的有效预订数"""
        return self.db.query(Reservation).filter(
            Reservation.check_in_date == self.today,
            Reservation.status == ReservationStatus.ACTIVE
        ).count()

    def get_today_check_outs(self) -> int:
        """今日离店的有效预订数"""
        return self.db.query(Reservation).filter(
            Reservation.check_out_date == self.today,
            Reservation.status == ReservationStatus.ACTIVE
        ).count()

    def _count_created_between(self, start: date, end: date) -> int:
        """[start, end) 日期内创建的预订数"""
        return self.db.query(Reservation).filter(
            Reservation.created_at >= datetime.combine(start, datetime.min.time()),
            Reservation.created_at < datetime.combine(end, datetime.min.time())
        ).count()

    def get_booking_trends(self, days: int) -> List[dict]:
        """
        预订趋势：截至今天的 days 天内每天创建的预订数
        无预订的日期补 0，按日期升序
        """
        start = self.today - timedelta(days=days - 1)
        buckets = {start + timedelta(days=i): 0 for i in range(days)}

        created = self.db.query(Reservation.created_at).filter(
            Reservation.created_at >= datetime.combine(start, datetime.min.time()),
            Reservation.created_at < datetime.combine(self.today + timedelta(days=1), datetime.min.time())
        ).all()
        for (created_at,) in created:
            day = created_at.date()
            if day in buckets:
                buckets[day] += 1

        return [{'day': day, 'count': count} for day, count in sorted(buckets.items())]

    def get_dashboard_stats(self, time_filter: str = '7days') -> dict:
        """获取仪表盘统计数据"""
        if time_filter not in TIME_FILTER_DAYS:
            raise ValidationError(f"不支持的时间范围: {time_filter}")
        days = TIME_FILTER_DAYS[time_filter]

        trends = self.get_booking_trends(days)
        total_bookings = sum(point['count'] for point in trends)

        window_start = self.today - timedelta(days=days - 1)
        previous_bookings = self._count_created_between(window_start - timedelta(days=days), window_start)

        stats = {
            'occupancy_rate': self.get_occupancy_rate(),
            # 没有历史快照，不计算以下环比
            'occupancy_change': None,
            'today_check_ins': self.get_today_check_ins(),
            'check_ins_change': None,
            'today_check_outs': self.get_today_check_outs(),
            'check_outs_change': None,
            'booking_trends': trends,
            'total_bookings': total_bookings,
            'bookings_change': percent_change(total_bookings, previous_bookings),
        }
        logger.debug(f"Dashboard stats ({time_filter}): {stats}")
        return stats
