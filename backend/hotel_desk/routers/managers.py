"""
账号管理路由（仅经理级）
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from hotel_desk.database import get_db
from hotel_desk.models.ontology import Manager
from hotel_desk.models.schemas import ManagerCreate, ManagerResponse, OperationResult
from hotel_desk.services.manager_service import ManagerService
from hotel_desk.security.auth import require_manager_role

router = APIRouter(prefix="/managers", tags=["账号管理"])


@router.get("", response_model=List[ManagerResponse])
def list_managers(
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(require_manager_role)
):
    """获取账号列表"""
    return ManagerService(db).get_managers()


@router.post("", response_model=OperationResult)
def create_manager(
    data: ManagerCreate,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(require_manager_role)
):
    """创建账号"""
    manager = ManagerService(db).create_manager(data)
    return OperationResult(success=True, message="账号创建成功", manager_id=manager.id)


@router.delete("/{manager_id}", response_model=OperationResult)
def delete_manager(
    manager_id: int,
    db: Session = Depends(get_db),
    current_manager: Manager = Depends(require_manager_role)
):
    """删除账号"""
    ManagerService(db).delete_manager(manager_id, current_manager.id)
    return OperationResult(success=True, message="账号已删除")
