from enum import Enum


class ErrorCode(str, Enum):
    # ---------------- GENERIC ----------------
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # ---------------- AUTH ----------------
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_TOKEN = "INVALID_TOKEN"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    USER_INACTIVE = "USER_INACTIVE"

    # ---------------- USERS ----------------
    USER_NOT_FOUND = "USER_NOT_FOUND"
    USER_EMAIL_EXISTS = "USER_EMAIL_EXISTS"
    USER_DOCUMENT_EXISTS = "USER_DOCUMENT_EXISTS"
    ADMIN_REQUIRED = "ADMIN_REQUIRED"

    # ---------------- PLANS ----------------
    PLAN_INVALID = "PLAN_INVALID"
    PLAN_QUOTE_LIMIT_REACHED = "PLAN_QUOTE_LIMIT_REACHED"
    PREMIUM_REQUIRED = "PREMIUM_REQUIRED"

    # ---------------- CLIENTS ----------------
    CLIENT_NOT_FOUND = "CLIENT_NOT_FOUND"

    # ---------------- QUOTES ----------------
    QUOTE_NOT_FOUND = "QUOTE_NOT_FOUND"
    QUOTE_EMPTY = "QUOTE_EMPTY"
    QUOTE_INVALID_DISCOUNT = "QUOTE_INVALID_DISCOUNT"
    QUOTE_INVALID_STATE = "QUOTE_INVALID_STATE"
    QUOTE_INVALID_TRANSITION = "QUOTE_INVALID_TRANSITION"
    QUOTE_NOT_PAID = "QUOTE_NOT_PAID"
    QUOTE_NUMBER_EXHAUSTED = "QUOTE_NUMBER_EXHAUSTED"

    # ---------------- REVIEWS ----------------
    REVIEW_NOT_FOUND = "REVIEW_NOT_FOUND"
    REVIEW_ALREADY_EXISTS = "REVIEW_ALREADY_EXISTS"

    # ---------------- SAVED ITEMS ----------------
    SAVED_ITEM_NOT_FOUND = "SAVED_ITEM_NOT_FOUND"

    # ---------------- NOTIFICATIONS ----------------
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"

    # ---------------- REFERRALS ----------------
    REFERRAL_CODE_EXHAUSTED = "REFERRAL_CODE_EXHAUSTED"
