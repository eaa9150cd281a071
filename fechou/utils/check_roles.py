from fastapi import Depends

from fechou.constants.error_codes import ErrorCode
from fechou.core.exceptions import AppException
from fechou.models.users.user_models import User
from fechou.services.plans.plan_service import is_premium
from fechou.utils.get_user import get_current_user


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise AppException(
            403,
            "Admin access required",
            ErrorCode.ADMIN_REQUIRED,
        )
    return user


async def require_premium(user: User = Depends(get_current_user)) -> User:
    if not is_premium(user):
        raise AppException(
            403,
            "This feature is available on the Premium plan",
            ErrorCode.PREMIUM_REQUIRED,
        )
    return user
