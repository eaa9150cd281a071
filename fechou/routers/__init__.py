# fechou/routers/__init__.py

from .auth.auth_router import router as auth_router
from .users.user_router import router as user_router
from .admin.admin_router import router as admin_router

from .clients.client_router import router as client_router
from .quotes.quote_router import router as quote_router
from .public.public_router import router as public_router

from .reviews.review_router import router as review_router
from .payments.payment_router import router as payment_router
from .notifications.notification_router import router as notification_router
from .saved_items.saved_item_router import router as saved_item_router
from .referrals.referral_router import router as referral_router
from .stats.stats_router import router as stats_router


__all__ = [
    "auth_router",
    "user_router",
    "admin_router",

    "client_router",
    "quote_router",
    "public_router",

    "review_router",
    "payment_router",
    "notification_router",
    "saved_item_router",
    "referral_router",
    "stats_router",
]
