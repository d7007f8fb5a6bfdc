#!/usr/bin/env python3
"""
Development Seed Script

Creates demo accounts and job postings in the configured database so the
API can be exercised locally. Also the only way to create an admin account,
since the sign-up endpoint refuses admin self-registration.

Accounts (password: "password123" unless --password is given):
    admin@example.com      admin
    recruiter@example.com  recruiter (owns the demo jobs)
    seeker@example.com     job_seeker

Usage:
    # Seed accounts and jobs
    python scripts/seed.py

    # Only create an admin with a custom email/password
    python scripts/seed.py --admin-only --admin-email ops@example.com --password s3cret!
"""

import asyncio
import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from jobboard.config import get_settings
from jobboard.database import Database
from jobboard.enums import ExperienceLevel, JobType, Role
from jobboard.errors import ValidationError
from jobboard.models import Job
from jobboard.services.identity import LocalIdentityProvider
from jobboard.services.profiles import ProfileService

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


DEMO_ACCOUNTS = [
    {"email": "admin@example.com", "full_name": "Ada Admin", "role": Role.ADMIN},
    {"email": "recruiter@example.com", "full_name": "Rita Recruiter", "role": Role.RECRUITER},
    {"email": "seeker@example.com", "full_name": "Sam Seeker", "role": Role.JOB_SEEKER},
]

DEMO_JOBS = [
    {
        "title": "Frontend Engineer",
        "company_name": "Acme Inc",
        "location": "Remote",
        "description": "Work on a React + Vite frontend",
        "job_type": JobType.FULL_TIME,
        "experience_level": ExperienceLevel.MID,
        "salary_min": 80000,
        "salary_max": 120000,
        "required_skills": ["React", "TypeScript"],
    },
    {
        "title": "Backend Engineer",
        "company_name": "Beta LLC",
        "location": "New York, NY",
        "description": "Python APIs on Postgres",
        "job_type": JobType.FULL_TIME,
        "experience_level": ExperienceLevel.SENIOR,
        "salary_min": 90000,
        "salary_max": 130000,
        "required_skills": ["Python", "PostgreSQL"],
    },
    {
        "title": "Data Scientist",
        "company_name": "Delta Data",
        "location": "San Francisco, CA",
        "description": "Models, analytics, and data pipelines",
        "job_type": JobType.CONTRACT,
        "experience_level": ExperienceLevel.MID,
        "salary_min": 120000,
        "salary_max": 160000,
        "required_skills": ["Python", "SQL", "Machine Learning"],
    },
    {
        "title": "DevOps Intern",
        "company_name": "OpsWorks",
        "location": "London, UK",
        "description": "CI/CD, infrastructure as code, monitoring",
        "job_type": JobType.INTERNSHIP,
        "experience_level": ExperienceLevel.ENTRY,
        "required_skills": ["Docker", "Kubernetes"],
    },
]


async def create_account(
    database: Database,
    provider: LocalIdentityProvider,
    email: str,
    password: str,
    full_name: str,
    role: Role,
):
    """Register an identity plus its profile. Returns None if the email exists."""
    try:
        user, _ = await provider.sign_up(email, password, {"full_name": full_name, "role": role.value})
    except ValidationError:
        logger.info(f"  {email} already exists, skipping")
        return None

    async with database.session_factory() as session:
        await ProfileService(session).create(user.id, user.email, full_name, role)

    logger.info(f"  Created {role.value} {email}")
    return user


async def seed_jobs(database: Database, recruiter_id: str) -> int:
    async with database.session_factory() as session:
        for data in DEMO_JOBS:
            session.add(
                Job(
                    recruiter_id=recruiter_id,
                    **{k: v.value if hasattr(v, "value") else v for k, v in data.items()},
                )
            )
        await session.commit()
    return len(DEMO_JOBS)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the job board database")
    parser.add_argument("--password", default="password123", help="Password for created accounts")
    parser.add_argument("--admin-only", action="store_true", help="Only create the admin account")
    parser.add_argument("--admin-email", default="admin@example.com", help="Email of the admin account")
    args = parser.parse_args()

    settings = get_settings()
    database = Database.from_settings(settings)
    provider = LocalIdentityProvider(
        database.session_factory,
        settings.jwt_secret,
        expire_minutes=settings.access_token_expire_minutes,
        bcrypt_rounds=settings.bcrypt_rounds,
    )

    try:
        await database.init()

        accounts = [dict(account) for account in DEMO_ACCOUNTS]
        accounts[0]["email"] = args.admin_email
        if args.admin_only:
            accounts = accounts[:1]

        logger.info("Creating accounts...")
        created = {}
        for account in accounts:
            user = await create_account(
                database,
                provider,
                account["email"],
                args.password,
                account["full_name"],
                account["role"],
            )
            if user is not None:
                created[account["role"]] = user

        recruiter = created.get(Role.RECRUITER)
        if recruiter is not None:
            count = await seed_jobs(database, recruiter.id)
            logger.info(f"Created {count} demo jobs")
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
