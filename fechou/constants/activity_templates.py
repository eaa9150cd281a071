from fechou.constants.activity_codes import ActivityCode


ACTIVITY_TEMPLATES = {
    # ---------------- AUTH ----------------
    ActivityCode.REGISTER:
        "{actor_email} registered",

    ActivityCode.LOGIN:
        "{actor_email} logged in",

    ActivityCode.LOGOUT:
        "{actor_email} logged out",

    ActivityCode.UPDATE_PROFILE:
        "{actor_email} updated profile: {changes}",

    ActivityCode.UPDATE_BRANDING:
        "{actor_email} updated branding: {changes}",

    # ---------------- PLANS ----------------
    ActivityCode.CHANGE_PLAN:
        "{actor_email} changed plan of {target_email} from {old_plan} to {new_plan}",

    ActivityCode.RESET_QUOTES:
        "{actor_email} reset monthly quotes of {target_email}",

    ActivityCode.AUTO_RESET_QUOTES:
        "Monthly quotes of {target_email} reset automatically on {today}",

    ActivityCode.PLAN_OVERDUE:
        "Premium plan of {target_email} expired on {expired_at}",

    # ---------------- CLIENTS ----------------
    ActivityCode.CREATE_CLIENT:
        "{actor_email} created client {target_name}",

    ActivityCode.UPDATE_CLIENT:
        "{actor_email} updated client {target_name}: {changes}",

    ActivityCode.DELETE_CLIENT:
        "{actor_email} deleted client {target_name}",

    # ---------------- QUOTES ----------------
    ActivityCode.CREATE_QUOTE:
        "{actor_email} created quote {target_name} ({total})",

    ActivityCode.UPDATE_QUOTE:
        "{actor_email} updated quote {target_name}: {changes}",

    ActivityCode.DELETE_QUOTE:
        "{actor_email} deleted quote {target_name}",

    ActivityCode.SEND_QUOTE:
        "{actor_email} sent quote {target_name}",

    ActivityCode.CHANGE_QUOTE_STATUS:
        "{actor_email} moved quote {target_name} from {old_status} to {new_status}",

    ActivityCode.CONFIRM_PAYMENT:
        "{actor_email} confirmed payment of quote {target_name} via {method} ({amount})",

    # ---------------- REVIEWS ----------------
    ActivityCode.RESPOND_REVIEW:
        "{actor_email} responded to review {target_id}",

    # ---------------- SAVED ITEMS ----------------
    ActivityCode.CREATE_SAVED_ITEM:
        "{actor_email} saved item {target_name}",

    ActivityCode.UPDATE_SAVED_ITEM:
        "{actor_email} updated saved item {target_name}",

    ActivityCode.DELETE_SAVED_ITEM:
        "{actor_email} deleted saved item {target_name}",

    # ---------------- REFERRALS ----------------
    ActivityCode.REFERRAL_REWARD:
        "{target_email} earned {reward_type} ({reward_value}) for referring {referred_email}",

    ActivityCode.GENERATE_REFERRAL_CODE:
        "{actor_email} generated referral code {referral_code}",
}
