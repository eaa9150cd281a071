# fechou/models/enums/notification_type.py
import enum

class NotificationType(str, enum.Enum):
    QUOTE_VIEWED = "QUOTE_VIEWED"
    QUOTE_APPROVED = "QUOTE_APPROVED"
    QUOTE_REJECTED = "QUOTE_REJECTED"
    QUOTE_PAID = "QUOTE_PAID"
    REVIEW_RECEIVED = "REVIEW_RECEIVED"
    REFERRAL_REWARD = "REFERRAL_REWARD"
