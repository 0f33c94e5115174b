"""
账号服务 - 本体操作层
管理 Manager 对象、登录认证和角色迁移
"""
from typing import List, Optional
from datetime import datetime
import logging
from sqlalchemy.orm import Session
from sqlalchemy import desc, text
from hotel_desk.database import atomic
from hotel_desk.exceptions import ValidationError, ConflictError, NotFoundError
from hotel_desk.models.ontology import Manager, ManagerRole
from hotel_desk.models.schemas import ManagerCreate
from hotel_desk.security.auth import get_password_hash, verify_password, create_access_token

logger = logging.getLogger(__name__)

# 旧系统中表示经理级的角色文本（含编码损坏的写法）
LEGACY_MANAGER_LABELS = {
    "yönetici", "y??netici", "administrator", "manager", "admin",
}


def parse_role_label(label: Optional[str]) -> ManagerRole:
    """
    将角色文本解析为枚举

    接受枚举值 / 枚举名 / 旧系统文本，无法识别的一律视为员工级。
    """
    if not label:
        return ManagerRole.STAFF
    value = label.strip()
    for role in ManagerRole:
        if value == role.value or value == role.name:
            return role

    lowered = value.lower()
    if lowered in LEGACY_MANAGER_LABELS:
        return ManagerRole.MANAGER
    # 编码损坏的 "Yönetici"，如 "Y?netici"、"YÃ¶netici"
    upper = value.upper()
    if upper.startswith("Y") and upper.endswith("NETICI"):
        return ManagerRole.MANAGER
    return ManagerRole.STAFF


def migrate_legacy_roles(db: Session) -> int:
    """
    一次性迁移：把 managers.role 中的旧文本改写为枚举名

    需在 ORM 读取 Manager 之前执行，否则无法识别的值会导致加载失败。
    返回改写的行数。
    """
    valid = {role.name for role in ManagerRole}
    labels = [row[0] for row in db.execute(text("SELECT DISTINCT role FROM managers")).all()]

    migrated = 0
    with atomic(db):
        for label in labels:
            if label in valid:
                continue
            role = parse_role_label(label)
            result = db.execute(
                text("UPDATE managers SET role = :role WHERE role = :label"),
                {"role": role.name, "label": label}
            )
            migrated += result.rowcount
            logger.info(f"Migrated legacy role label {label!r} -> {role.name} ({result.rowcount} rows)")
    return migrated


class ManagerService:
    """账号服务"""

    def __init__(self, db: Session):
        self.db = db

    def get_managers(self) -> List[Manager]:
        """获取账号列表"""
        return self.db.query(Manager).order_by(desc(Manager.created_at), desc(Manager.id)).all()

    def get_manager(self, manager_id: int) -> Optional[Manager]:
        """获取单个账号"""
        return self.db.query(Manager).filter(Manager.id == manager_id).first()

    def get_manager_by_email(self, email: str) -> Optional[Manager]:
        """根据邮箱获取账号"""
        return self.db.query(Manager).filter(Manager.email == email).first()

    def create_manager(self, data: ManagerCreate) -> Manager:
        """创建账号"""
        email = data.email.strip().lower()
        with atomic(self.db):
            if self.get_manager_by_email(email):
                raise ConflictError(f"邮箱 '{email}' 已存在")

            manager = Manager(
                email=email,
                password_hash=get_password_hash(data.password),
                full_name=data.full_name,
                role=data.role
            )
            self.db.add(manager)

        self.db.refresh(manager)
        logger.info(f"Manager {manager.id} created with role {manager.role.value}")
        return manager

    def delete_manager(self, manager_id: int, current_manager_id: int) -> bool:
        """
        删除账号

        不能删除自己，也不能删除最后一个账号。
        """
        if manager_id == current_manager_id:
            raise ValidationError("不能删除自己的账号")

        with atomic(self.db):
            manager = self.get_manager(manager_id)
            if not manager:
                raise NotFoundError("账号不存在")

            if self.db.query(Manager).count() <= 1:
                raise ConflictError("系统需至少保留一个账号")

            self.db.delete(manager)

        logger.info(f"Manager {manager_id} deleted by {current_manager_id}")
        return True

    def authenticate(self, email: str, password: str) -> Optional[dict]:
        """认证登录，成功时记录登录时间"""
        manager = self.get_manager_by_email(email.strip().lower())
        if not manager or not verify_password(password, manager.password_hash):
            logger.warning("Login failed")
            return None

        with atomic(self.db):
            manager.last_login_at = datetime.now()
        self.db.refresh(manager)

        logger.info(f"Manager {manager.id} logged in")
        return {
            'access_token': create_access_token(manager.id, manager.role),
            'token_type': 'bearer',
            'manager': manager
        }

    def ensure_default_manager(self, email: str, password: str, full_name: str) -> Optional[Manager]:
        """账号表为空时创建一个经理级账号"""
        if self.db.query(Manager).count() > 0:
            return None
        manager = self.create_manager(ManagerCreate(
            email=email,
            password=password,
            full_name=full_name,
            role=ManagerRole.MANAGER
        ))
        logger.info(f"Seeded default manager account {manager.email}")
        return manager
