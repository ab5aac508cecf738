from auth_service.models.refresh_token import RefreshToken
from auth_service.models.tenant import Tenant
from auth_service.models.user import User

__all__ = [
    "RefreshToken",
    "Tenant",
    "User",
]
