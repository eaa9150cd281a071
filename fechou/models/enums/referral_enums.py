# fechou/models/enums/referral_enums.py
import enum

class ReferralStatus(str, enum.Enum):
    pending = "pending"
    completed = "completed"
    rewarded = "rewarded"


class RewardType(str, enum.Enum):
    bonus_quote = "bonus_quote"
    premium_extension = "premium_extension"
