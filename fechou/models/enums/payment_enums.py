# fechou/models/enums/payment_enums.py
import enum

class PaymentMethod(str, enum.Enum):
    PIX = "PIX"
    CREDIT_CARD = "CREDIT_CARD"
    BANK_SLIP = "BANK_SLIP"
    CASH = "CASH"
    TRANSFER = "TRANSFER"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
