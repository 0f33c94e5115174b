"""
Pytest 配置和共享 fixtures
"""
import os

# 应用启动时的建表/种子账号写入内存库，不落盘
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient
from decimal import Decimal

from hotel_desk.database import Base, get_db
from hotel_desk.models import ontology  # noqa
from hotel_desk.models.ontology import (
    Manager, ManagerRole, Room, RoomType, RoomStatus, Guest
)
from hotel_desk.security.auth import get_password_hash, create_access_token
from hotel_desk.main import app


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== 认证相关 Fixtures ==============

@pytest.fixture
def manager_user(db_session):
    """创建经理级账号"""
    manager = Manager(
        email="manager@hotel.local",
        password_hash=get_password_hash("123456"),
        full_name="经理",
        role=ManagerRole.MANAGER
    )
    db_session.add(manager)
    db_session.commit()
    db_session.refresh(manager)
    return manager


@pytest.fixture
def staff_user(db_session):
    """创建员工级账号"""
    staff = Manager(
        email="front1@hotel.local",
        password_hash=get_password_hash("123456"),
        full_name="前台小王",
        role=ManagerRole.STAFF
    )
    db_session.add(staff)
    db_session.commit()
    db_session.refresh(staff)
    return staff


@pytest.fixture
def manager_token(manager_user):
    return create_access_token(manager_user.id, manager_user.role)


@pytest.fixture
def staff_token(staff_user):
    return create_access_token(staff_user.id, staff_user.role)


@pytest.fixture
def manager_auth_headers(manager_token):
    """返回经理认证的请求头"""
    return {"Authorization": f"Bearer {manager_token}"}


@pytest.fixture
def staff_auth_headers(staff_token):
    """返回员工认证的请求头"""
    return {"Authorization": f"Bearer {staff_token}"}


# ============== 实体相关 Fixtures ==============

@pytest.fixture
def sample_room(db_session):
    """创建101房间"""
    room = Room(
        room_number="101",
        floor=1,
        type=RoomType.STANDARD,
        price_per_night=Decimal("100.00"),
        max_guests=2,
        status=RoomStatus.AVAILABLE
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_room_102(db_session):
    """创建102房间"""
    room = Room(
        room_number="102",
        floor=1,
        type=RoomType.DELUXE,
        price_per_night=Decimal("180.00"),
        max_guests=3,
        status=RoomStatus.AVAILABLE
    )
    db_session.add(room)
    db_session.commit()
    db_session.refresh(room)
    return room


@pytest.fixture
def sample_guest(db_session):
    """创建测试客人"""
    guest = Guest(
        full_name="Ada Lovelace",
        phone_number="555-0101",
        email="ada@example.com",
        gender="Female"
    )
    db_session.add(guest)
    db_session.commit()
    db_session.refresh(guest)
    return guest
