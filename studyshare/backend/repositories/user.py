"""
Account Repositories.

Lookups for end users (by email) and admins (by username).
"""

from sqlalchemy import select

from studyshare.backend.models.user import Admin, User
from studyshare.backend.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    model = User
    not_found_message = "User not found"

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()


class AdminRepository(BaseRepository[Admin]):
    model = Admin
    not_found_message = "Admin not found"

    async def get_by_username(self, username: str) -> Admin | None:
        result = await self.session.execute(select(Admin).where(Admin.username == username))
        return result.scalar_one_or_none()
