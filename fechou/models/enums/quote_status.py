# fechou/models/enums/quote_status.py
import enum

class QuoteStatus(str, enum.Enum):
    draft = "draft"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    paid = "paid"
