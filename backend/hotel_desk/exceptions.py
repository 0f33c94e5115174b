"""
业务异常定义
服务层抛出，API 层统一转换为 {success, message} 结构
"""
from typing import Optional


class HotelError(Exception):
    """业务异常基类"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(HotelError):
    """输入缺失或不合法（如缺少客人姓名、离店早于入住）"""
    status_code = 400


class NotFoundError(HotelError):
    """操作目标不存在"""
    status_code = 404


class ConflictError(HotelError):
    """与现有数据冲突（日期重叠、删除入住中的房间等）"""
    status_code = 409


class PersistenceError(HotelError):
    """数据库操作失败，事务已回滚"""
    status_code = 500

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
