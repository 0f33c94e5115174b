"""
Pydantic 模式定义
用于 API 请求/响应验证
"""
from datetime import datetime, date
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator, ConfigDict
from hotel_desk.models.ontology import (
    RoomType, RoomStatus, ReservationStatus, ManagerRole
)


# ============== 通用响应 ==============

class OperationResult(BaseModel):
    """统一的写操作响应，成功时可附带数据字段"""
    success: bool
    message: str
    model_config = ConfigDict(extra="allow")


# ============== 房间 Schemas ==============

class RoomCreate(BaseModel):
    room_number: str = Field(..., min_length=1, max_length=10)
    floor: int
    type: RoomType
    price_per_night: Decimal = Field(..., ge=0)
    max_guests: int = Field(default=2, ge=1)


class RoomBatchCreate(BaseModel):
    """按起始房号批量生成房间"""
    start_number: str = Field(..., min_length=1, max_length=10)
    count: int = Field(..., ge=1, le=100)
    floor: int
    type: RoomType
    price_per_night: Decimal = Field(..., ge=0)
    max_guests: int = Field(default=2, ge=1)


class RoomRemove(BaseModel):
    room_ids: List[int]


class RoomStatusUpdate(BaseModel):
    status: RoomStatus


class RoomResponse(BaseModel):
    id: int
    room_number: str
    type: RoomType
    status: RoomStatus
    floor: int
    price_per_night: Decimal
    max_guests: int
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


# ============== 客人 Schemas ==============

class GuestCreate(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    phone_number: str = Field(..., min_length=1, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)


class GuestUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(None, min_length=1, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    gender: Optional[str] = Field(None, max_length=20)


class GuestResponse(BaseModel):
    id: int
    full_name: str
    phone_number: str
    email: Optional[str] = None
    gender: Optional[str] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class GuestStatsResponse(GuestResponse):
    """客人及累计统计"""
    total_stays: int = 0
    total_revenue: Decimal = Decimal("0")
    last_stay_date: Optional[date] = None


# ============== 预订 Schemas ==============

class ReservationCreate(BaseModel):
    room_id: int
    is_new_guest: bool = False
    guest_id: Optional[int] = None
    guest_name: Optional[str] = None
    guest_phone: Optional[str] = None
    guest_email: Optional[str] = None
    guest_gender: Optional[str] = None
    check_in_date: date
    check_out_date: date
    number_of_guests: int = 1
    staff_notes: Optional[str] = None

    @field_validator('guest_name', 'guest_phone', 'guest_email', 'guest_gender', 'staff_notes')
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """空白字符串视为未填写"""
        if v is not None and not v.strip():
            return None
        return v.strip() if v is not None else v


class ReservationUpdate(BaseModel):
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    staff_notes: Optional[str] = None


class ReservationResponse(BaseModel):
    id: int
    room_id: int
    guest_id: int
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    staff_notes: Optional[str] = None
    status: ReservationStatus
    created_at: datetime
    created_by_manager_id: Optional[int] = None
    room_number: Optional[str] = None
    room_type: Optional[RoomType] = None
    price_per_night: Optional[Decimal] = None
    guest_name: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None
    gender: Optional[str] = None


class DateConflictResponse(BaseModel):
    conflict: bool


# ============== 账号 Schemas ==============

class ManagerCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)
    full_name: str = Field(..., min_length=1, max_length=100)
    role: ManagerRole = ManagerRole.STAFF

    @field_validator('role', mode='before')
    @classmethod
    def parse_role(cls, v):
        """兼容旧系统的角色文本"""
        from hotel_desk.services.manager_service import parse_role_label
        if isinstance(v, str):
            return parse_role_label(v)
        return v


class ManagerResponse(BaseModel):
    id: int
    email: str
    full_name: str
    role: ManagerRole
    created_at: datetime
    last_login_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


# ============== 登录 Schemas ==============

class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    manager: ManagerResponse


# ============== 统计报表 Schemas ==============

class BookingTrendPoint(BaseModel):
    day: date
    count: int


class DashboardStats(BaseModel):
    occupancy_rate: int
    occupancy_change: Optional[int] = None
    today_check_ins: int
    check_ins_change: Optional[int] = None
    today_check_outs: int
    check_outs_change: Optional[int] = None
    booking_trends: List[BookingTrendPoint]
    total_bookings: int
    bookings_change: int
