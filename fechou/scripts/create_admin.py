import asyncio
import os

from sqlalchemy import select

from fechou.core.db import AsyncSessionLocal
from fechou.core.security import hash_password
from fechou.models.users.user_models import User
from fechou.models.enums.user_plan import UserPlan
from fechou.core.config import PREMIUM_QUOTES_LIMIT


async def create_admin():
    email = os.getenv("ADMIN_EMAIL", "admin@fechou.com.br").lower()

    async with AsyncSessionLocal() as session:
        existing = await session.scalar(select(User).where(User.email == email))
        if existing:
            existing.is_admin = True
            await session.commit()
            print(f"{email} promoted to admin")
            return

        session.add(
            User(
                email=email,
                password_hash=hash_password(os.getenv("ADMIN_PASSWORD", "admin123")),
                first_name="Admin",
                plan=UserPlan.PREMIUM_CORTESIA,
                quotes_limit=PREMIUM_QUOTES_LIMIT,
                is_admin=True,
                is_active=True,
            )
        )
        await session.commit()
        print("Admin user created!")


if __name__ == "__main__":
    asyncio.run(create_admin())
