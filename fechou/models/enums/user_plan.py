# fechou/models/enums/user_plan.py
import enum

class UserPlan(str, enum.Enum):
    FREE = "FREE"
    PREMIUM = "PREMIUM"
    PREMIUM_CORTESIA = "PREMIUM_CORTESIA"


class SubscriptionStatus(str, enum.Enum):
    ativo = "ativo"
    pendente = "pendente"
    vencido = "vencido"
