"""Create one dev user per role plus sample content, and print bearer tokens."""
import asyncio
import sys

sys.path.insert(0, ".")

from sqlalchemy import select

from cms.database import async_session_maker, init_db, close_db
from cms.kernel.identity.jwt import create_access_token
from cms.kernel.models import BlogPost, JobListing, Project, User, UserRole


async def main() -> None:
    await init_db()

    async with async_session_maker() as session:
        users = []
        for role in UserRole:
            email = f"{role.value}@acme.test"
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalar_one_or_none()
            if user is None:
                user = User(email=email, name=role.value.replace("_", " ").title(), role=role.value)
                session.add(user)
            users.append(user)

        existing = await session.execute(select(BlogPost).where(BlogPost.slug == "hello-world"))
        if existing.scalar_one_or_none() is None:
            session.add(BlogPost(title="Hello World", slug="hello-world", content="First post."))
            session.add(JobListing(title="Backend Engineer", slug="backend-engineer", employment_type="full_time"))
            session.add(Project(title="Harbor Redesign", slug="harbor-redesign", client_name="Port Authority"))

        await session.commit()

        print("=== Dev users ===\n")
        for user in users:
            token, expires_at, _ = create_access_token(user.id, user.email, user.role)
            print(f"{user.role:16} {user.email}")
            print(f"  Authorization: Bearer {token}")
            print(f"  expires: {expires_at.isoformat()}\n")

        for model in (BlogPost, JobListing, Project):
            result = await session.execute(select(model))
            for entity in result.scalars().all():
                print(f"[{model.__tablename__}] {entity.title} ({entity.status}) id: {entity.id}")

    await close_db()


if __name__ == "__main__":
    asyncio.run(main())
