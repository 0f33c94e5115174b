"""
Hotel Desk 主应用入口
酒店前台管理：房态、预订、客人、统计
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from hotel_desk.config import settings
from hotel_desk.database import SessionLocal, get_db, init_db, ping
from hotel_desk.exceptions import HotelError
from hotel_desk.routers import auth, managers, rooms, reservations, guests, reports

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)


def bootstrap_database(session_factory=SessionLocal, bind=None) -> None:
    """建表、迁移旧角色文本、确保至少有一个经理账号"""
    from hotel_desk.services.manager_service import ManagerService, migrate_legacy_roles

    init_db(bind)
    db = session_factory()
    try:
        migrated = migrate_legacy_roles(db)
        if migrated:
            logger.info(f"Legacy role labels migrated: {migrated} row(s)")
        ManagerService(db).ensure_default_manager(
            settings.DEFAULT_ADMIN_EMAIL,
            settings.DEFAULT_ADMIN_PASSWORD,
            settings.DEFAULT_ADMIN_NAME
        )
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    bootstrap_database()
    logger.info(f"{settings.APP_NAME} started")
    yield
    logger.info(f"{settings.APP_NAME} stopped")


# 创建应用
app = FastAPI(
    title="Hotel Desk - 酒店前台管理系统",
    description="房态、预订、客人与统计",
    version="1.0.0",
    lifespan=lifespan
)

# CORS 配置
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应限制具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HotelError)
async def hotel_error_handler(request: Request, exc: HotelError):
    """业务异常统一转换为 {success: false, message}"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} (cause: {getattr(exc, 'cause', None)})")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message}
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """请求体格式错误"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"参数错误: {field} {first.get('msg', '')}".strip()
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message}
    )


# 注册路由
app.include_router(auth.router)
app.include_router(managers.router)
app.include_router(rooms.router)
app.include_router(reservations.router)
app.include_router(guests.router)
app.include_router(reports.router)


@app.get("/")
def root():
    """根路径"""
    return {
        "name": settings.APP_NAME,
        "version": "1.0.0"
    }


@app.get("/health")
def health_check(db: Session = Depends(get_db)):
    """健康检查（含数据库连接）"""
    try:
        ping(db)
    except SQLAlchemyError as e:
        logger.error(f"Database ping failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"success": False, "message": "数据库连接失败"}
        )
    return {"success": True, "message": "数据库连接正常"}
