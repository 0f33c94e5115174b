"""
数据库配置 - 持久化层
会话按请求创建并注入服务，多语句写操作通过 atomic() 保证全部成功或全部回滚
"""
import logging
from contextlib import contextmanager
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from hotel_desk.config import settings
from hotel_desk.exceptions import PersistenceError

logger = logging.getLogger(__name__)


def _connect_args(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """依赖注入：获取数据库会话"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def atomic(db: Session):
    """
    事务边界

    正常结束时提交；任何异常都回滚。
    SQLAlchemy 异常转换为 PersistenceError，原始异常保存在 cause 中。
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Transaction rolled back: {e}")
        raise PersistenceError("数据库操作失败，已回滚", cause=e) from e
    except BaseException:
        db.rollback()
        raise


def ping(db: Session) -> bool:
    """连接检查"""
    db.execute(text("SELECT 1"))
    return True


def init_db(bind=None):
    """初始化数据库表"""
    from hotel_desk.models import ontology  # noqa
    Base.metadata.create_all(bind=bind or engine)
