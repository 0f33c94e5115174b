"""
本体对象定义
Room / Guest / Reservation / Manager 四个实体
Reservation 通过 ID 引用 Room 和 Guest，不拥有其他实体
"""
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, Integer, String, DateTime, Date,
    ForeignKey, Text, Enum as SQLEnum, Numeric
)
from sqlalchemy.orm import relationship
from hotel_desk.database import Base


# ============== 枚举定义 ==============

class RoomType(str, Enum):
    """房型枚举"""
    STANDARD = "Standard"  # 标准间
    DELUXE = "Deluxe"      # 豪华间
    SUITE = "Suite"        # 套房


class RoomStatus(str, Enum):
    """房间状态枚举"""
    AVAILABLE = "Available"      # 空闲
    OCCUPIED = "Occupied"        # 入住中
    MAINTENANCE = "Maintenance"  # 维修中


class ReservationStatus(str, Enum):
    """预订状态枚举"""
    ACTIVE = "Active"            # 有效
    CHECKED_OUT = "CheckedOut"   # 已退房
    CANCELLED = "Cancelled"      # 已取消


class ManagerRole(str, Enum):
    """账号角色"""
    MANAGER = "Manager"  # 经理级
    STAFF = "Staff"      # 员工级


# ============== 本体对象定义 ==============

class Room(Base):
    """
    房间对象
    状态为 Occupied 当且仅当存在引用该房间的有效预订
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    room_number = Column(String(10), unique=True, nullable=False)  # 房间号
    type = Column(SQLEnum(RoomType), nullable=False)
    status = Column(SQLEnum(RoomStatus), default=RoomStatus.AVAILABLE, nullable=False)
    floor = Column(Integer, nullable=False)                        # 楼层
    price_per_night = Column(Numeric(10, 2), nullable=False)       # 每晚价格
    max_guests = Column(Integer, nullable=False, default=2)        # 最大入住人数
    created_at = Column(DateTime, default=datetime.now)


class Guest(Base):
    """客人对象"""
    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)     # 姓名
    phone_number = Column(String(20), nullable=False)   # 手机号
    email = Column(String(100))                         # 邮箱
    gender = Column(String(20))                         # 性别
    created_at = Column(DateTime, default=datetime.now)

    # 链接
    reservations = relationship("Reservation", back_populates="guest")


class Reservation(Base):
    """
    预订对象
    入住区间为 [check_in_date, check_out_date)
    room_id 不设数据库外键：删除房间后历史预订保留
    """
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    room_id = Column(Integer, nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False)
    check_in_date = Column(Date, nullable=False)         # 入住日期
    check_out_date = Column(Date, nullable=False)        # 离店日期
    number_of_guests = Column(Integer, nullable=False, default=1)
    staff_notes = Column(Text)                           # 员工备注
    status = Column(SQLEnum(ReservationStatus), default=ReservationStatus.ACTIVE, nullable=False)
    created_at = Column(DateTime, default=datetime.now)
    created_by_manager_id = Column(Integer, ForeignKey("managers.id", ondelete="SET NULL"))

    # 链接
    guest = relationship("Guest", back_populates="reservations")
    room = relationship(
        "Room",
        primaryjoin="foreign(Reservation.room_id) == Room.id",
        viewonly=True
    )
    creator = relationship("Manager")


class Manager(Base):
    """
    员工账号对象
    password_hash 永不返回给调用方
    """
    __tablename__ = "managers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(100), unique=True, nullable=False)  # 登录邮箱
    password_hash = Column(String(255), nullable=False)       # 密码哈希
    full_name = Column(String(100), nullable=False)           # 姓名
    role = Column(SQLEnum(ManagerRole), nullable=False, default=ManagerRole.STAFF)
    created_at = Column(DateTime, default=datetime.now)
    last_login_at = Column(DateTime)                          # 最近登录

    @property
    def is_manager(self) -> bool:
        return self.role == ManagerRole.MANAGER
