from sqlalchemy.ext.asyncio import AsyncSession
from fechou.models.support.activity_models import UserActivity
from fechou.constants.activity_templates import ACTIVITY_TEMPLATES
from fechou.constants.activity_codes import ActivityCode, ACTIVITY_CATEGORIES


async def emit_activity(
    db: AsyncSession,
    *,
    user_id: int | None,
    username: str,
    code: ActivityCode,
    details: dict | None = None,
    **context,
):
    template = ACTIVITY_TEMPLATES.get(code)
    if not template:
        raise ValueError(f"No activity template for code {code}")

    try:
        message = template.format(**context)
    except KeyError as e:
        raise ValueError(
            f"Missing activity context key: {e.args[0]} for {code}"
        )

    db.add(
        UserActivity(
            user_id=user_id,
            username_snapshot=username,
            action=code.value,
            category=ACTIVITY_CATEGORIES.get(code, "general"),
            message=message,
            details=details,
        )
    )
