"""
认证路由
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from hotel_desk.database import get_db
from hotel_desk.models.schemas import LoginRequest, LoginResponse, ManagerResponse
from hotel_desk.models.ontology import Manager
from hotel_desk.services.manager_service import ManagerService
from hotel_desk.security.auth import get_current_manager

router = APIRouter(prefix="/auth", tags=["认证"])


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, db: Session = Depends(get_db)):
    """账号登录"""
    result = ManagerService(db).authenticate(data.email, data.password)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="邮箱或密码错误"
        )
    return LoginResponse(
        access_token=result["access_token"],
        token_type=result["token_type"],
        manager=ManagerResponse.model_validate(result["manager"])
    )


@router.get("/me", response_model=ManagerResponse)
def get_current_manager_info(current_manager: Manager = Depends(get_current_manager)):
    """获取当前账号信息"""
    return current_manager
