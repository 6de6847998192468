#!/usr/bin/env python3
"""
Seed script to create the dining room tables and a staff account
"""

import asyncio
import os

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# (number, capacity)
DEMO_TABLES = [
    (1, 2), (2, 2), (3, 2), (4, 2),
    (5, 4), (6, 4), (7, 4), (8, 4),
    (9, 6), (10, 6),
    (11, 8),
    (12, 12),
]


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select
    from hostmate.database import SessionLocal, engine, Base
    from hostmate.models import DiningTable, User
    from hostmate.models.user import UserRole

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        result = await db.execute(select(DiningTable).limit(1))
        if result.scalar_one_or_none():
            print("Demo data already exists. Skipping...")
            return

        print("Creating dining tables...")
        for number, capacity in DEMO_TABLES:
            db.add(DiningTable(number=number, capacity=capacity, is_active=True))

        admin_email = os.environ.get("SEED_ADMIN_EMAIL", "admin@hostmate.example")
        admin_password = os.environ.get("SEED_ADMIN_PASSWORD", "admin123")

        admin = User(
            email=admin_email,
            hashed_password=pwd_context.hash(admin_password),
            full_name="HostMate Admin",
            role=UserRole.ADMIN,
            is_active=True,
            email_verified=True,
        )
        db.add(admin)

        await db.commit()

        print(f"Created {len(DEMO_TABLES)} tables")
        print(f"Created admin user: {admin_email} / {admin_password}")
        print("\nDemo data seeded successfully!")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
