from apscheduler.schedulers.asyncio import AsyncIOScheduler

from fechou.core.db import AsyncSessionLocal
from fechou.services.plans.plan_jobs import auto_reset_monthly_quotes, mark_overdue_plans
from fechou.utils.db_retry import run_with_db_retry

scheduler = AsyncIOScheduler(timezone="UTC")


async def _reset_quotes():
    async with AsyncSessionLocal() as db:
        return await auto_reset_monthly_quotes(db)


async def _overdue_plans():
    async with AsyncSessionLocal() as db:
        return await mark_overdue_plans(db)


@scheduler.scheduled_job("cron", day=1, hour=0, minute=5)  # 1st of the month @ 00:05
async def monthly_quota_reset_job():
    await run_with_db_retry(_reset_quotes, label="monthly quota reset")


@scheduler.scheduled_job("cron", hour=0, minute=10)  # daily @ 00:10
async def plan_overdue_job():
    await run_with_db_retry(_overdue_plans, label="plan overdue check")
