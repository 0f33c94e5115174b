"""
应用配置
从环境变量 / .env 读取配置
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用设置"""

    # 应用基础配置
    APP_NAME: str = "Hotel Desk"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./hotel_desk.db"

    # JWT 配置
    SECRET_KEY: str = "hotel-desk-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_HOURS: int = 24

    # 日期冲突判定：True 时首尾相接的日期也视为冲突（与旧系统一致）
    INCLUSIVE_DATE_BOUNDARY: bool = True

    # 首次启动时创建的经理账号
    DEFAULT_ADMIN_EMAIL: str = "admin@hotel.local"
    DEFAULT_ADMIN_PASSWORD: str = "admin123"
    DEFAULT_ADMIN_NAME: str = "Administrator"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


# 全局设置实例
settings = Settings()
