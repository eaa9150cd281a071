# Users and auth
from fechou.models.users.user_models import User, RefreshToken
from fechou.models.support.activity_models import UserActivity

# Business
from fechou.models.clients.client_models import Client
from fechou.models.quotes.quote_models import Quote, QuoteItem
from fechou.models.reviews.review_models import Review
from fechou.models.payments.payment_models import Payment
from fechou.models.saved_items.saved_item_models import SavedItem

# Engagement
from fechou.models.notifications.notification_models import Notification
from fechou.models.referrals.referral_models import Referral
