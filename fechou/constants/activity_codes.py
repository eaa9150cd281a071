from enum import Enum


class ActivityCode(str, Enum):
    # AUTH
    REGISTER = "register"
    LOGIN = "login"
    LOGOUT = "logout"
    UPDATE_PROFILE = "update_profile"
    UPDATE_BRANDING = "update_branding"

    # PLANS / ADMIN
    CHANGE_PLAN = "plan_changed"
    RESET_QUOTES = "reset_quotes"
    AUTO_RESET_QUOTES = "auto_reset_quotes"
    PLAN_OVERDUE = "plan_overdue"

    # CLIENTS
    CREATE_CLIENT = "create_client"
    UPDATE_CLIENT = "update_client"
    DELETE_CLIENT = "delete_client"

    # QUOTES
    CREATE_QUOTE = "create_quote"
    UPDATE_QUOTE = "update_quote"
    DELETE_QUOTE = "delete_quote"
    SEND_QUOTE = "send_quote"
    CHANGE_QUOTE_STATUS = "change_quote_status"
    CONFIRM_PAYMENT = "confirm_payment"

    # REVIEWS
    RESPOND_REVIEW = "respond_review"

    # SAVED ITEMS
    CREATE_SAVED_ITEM = "create_saved_item"
    UPDATE_SAVED_ITEM = "update_saved_item"
    DELETE_SAVED_ITEM = "delete_saved_item"

    # REFERRALS
    REFERRAL_REWARD = "referral_reward"
    GENERATE_REFERRAL_CODE = "generate_referral_code"


ACTIVITY_CATEGORIES = {
    ActivityCode.REGISTER: "authentication",
    ActivityCode.LOGIN: "authentication",
    ActivityCode.LOGOUT: "authentication",
    ActivityCode.UPDATE_PROFILE: "profile",
    ActivityCode.UPDATE_BRANDING: "profile",
    ActivityCode.CHANGE_PLAN: "payment",
    ActivityCode.RESET_QUOTES: "payment",
    ActivityCode.AUTO_RESET_QUOTES: "payment",
    ActivityCode.PLAN_OVERDUE: "payment",
    ActivityCode.CREATE_CLIENT: "client",
    ActivityCode.UPDATE_CLIENT: "client",
    ActivityCode.DELETE_CLIENT: "client",
    ActivityCode.CREATE_QUOTE: "quote",
    ActivityCode.UPDATE_QUOTE: "quote",
    ActivityCode.DELETE_QUOTE: "quote",
    ActivityCode.SEND_QUOTE: "quote",
    ActivityCode.CHANGE_QUOTE_STATUS: "quote",
    ActivityCode.CONFIRM_PAYMENT: "payment",
    ActivityCode.RESPOND_REVIEW: "review",
    ActivityCode.CREATE_SAVED_ITEM: "saved_item",
    ActivityCode.UPDATE_SAVED_ITEM: "saved_item",
    ActivityCode.DELETE_SAVED_ITEM: "saved_item",
    ActivityCode.REFERRAL_REWARD: "referral",
    ActivityCode.GENERATE_REFERRAL_CODE: "referral",
}
