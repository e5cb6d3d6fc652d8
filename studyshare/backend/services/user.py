"""
Account Services.

Registration and credential checks for end users, plus admin login and
seeding.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from studyshare.backend.core.exceptions import AuthenticationError, ConflictError, NotFoundError
from studyshare.backend.core.security import EXTERNAL_AUTH_PASSWORD, hash_password, verify_password
from studyshare.backend.models.user import Admin, User
from studyshare.backend.repositories.user import AdminRepository, UserRepository
from studyshare.backend.services.base import BaseService

DUPLICATE_EMAIL_MESSAGE = "This email is already registered. Please login instead."


class UserService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = UserRepository(session)

    async def register(self, name: str, email: str, password: str) -> User:
        """
        Create an account with a bcrypt-hashed password.

        Raises:
            ValidationError: If a field is empty
            ConflictError: If the email is already registered
        """
        self._validate_required(
            {"name": name, "email": email, "password": password},
            ["name", "email", "password"],
        )
        email = email.strip()
        if await self.repo.get_by_email(email) is not None:
            raise ConflictError(DUPLICATE_EMAIL_MESSAGE)

        self._log_operation("Registering user", email=email)
        return await self._execute_db_operation(
            "register_user",
            self.repo.create(name=name.strip(), email=email, password=hash_password(password)),
            conflict_message=DUPLICATE_EMAIL_MESSAGE,
        )

    async def authenticate(self, email: str, password: str) -> User:
        """
        Check an email/password pair.

        Raises:
            NotFoundError: "User not found"
            AuthenticationError: "Wrong password"
        """
        user = await self.repo.get_by_email((email or "").strip())
        if user is None:
            raise NotFoundError("User not found")
        if not verify_password(password or "", user.password):
            self._log_operation("Login rejected", user_id=user.id)
            raise AuthenticationError("Wrong password")

        self._log_operation("User logged in", user_id=user.id)
        return user

    async def login_external(self, name: str, email: str) -> User:
        """Find or create the account for an externally verified email."""
        user = await self.repo.get_by_email(email)
        if user is not None:
            return user

        self._log_operation("Creating account from external identity", email=email)
        return await self._execute_db_operation(
            "register_external_user",
            self.repo.create(name=name or email, email=email, password=EXTERNAL_AUTH_PASSWORD),
            conflict_message=DUPLICATE_EMAIL_MESSAGE,
        )


class AdminService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = AdminRepository(session)

    async def authenticate(self, username: str, password: str) -> Admin:
        """
        Check admin credentials.

        Raises:
            NotFoundError: "Admin not found"
            AuthenticationError: "Incorrect password"
        """
        admin = await self.repo.get_by_username((username or "").strip())
        if admin is None:
            raise NotFoundError("Admin not found")
        if not verify_password(password or "", admin.password):
            raise AuthenticationError("Incorrect password")

        self._log_operation("Admin logged in", admin_id=admin.id)
        return admin

    async def create_admin(self, username: str, password: str) -> Admin:
        """Seed an admin account."""
        self._validate_required(
            {"username": username, "password": password},
            ["username", "password"],
        )
        self._log_operation("Creating admin", username=username)
        return await self._execute_db_operation(
            "create_admin",
            self.repo.create(username=username.strip(), password=hash_password(password)),
            conflict_message="Admin already exists",
        )
