# Security module
from hotel_desk.security.auth import (
    get_password_hash, verify_password, create_access_token,
    get_current_manager, require_manager_role
)

__all__ = [
    'get_password_hash', 'verify_password', 'create_access_token',
    'get_current_manager', 'require_manager_role'
]
