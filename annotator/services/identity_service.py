"""
Identity Service - registration and login.

Accounts are session-less: a successful login simply returns the public view
of the user and the client keeps it.
"""
from typing import List, Optional

from annotator.repositories.protocol import Store
from annotator.core.errors import AuthError, ConflictError, ErrorCode, ValidationError
from annotator.core.logging_config import get_logger
from annotator.core.security import hash_password, verify_password
from annotator.schemas import PublicUser, Role, User

logger = get_logger(__name__)


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _parse_role(role: Optional[str]) -> Role:
    try:
        return Role(role)
    except ValueError:
        raise ValidationError(
            code=ErrorCode.VAL_INVALID_ROLE,
            message="无效的角色",
            details={"role": role},
        )


class IdentityService:
    """
    Registration and login against the store.

    Invariants kept here, under the store lock:
    - user ids are unique
    - at most one user has the admin role
    """

    def __init__(self, store: Store):
        self.store = store

    async def register(
        self,
        name: Optional[str],
        user_id: Optional[str],
        password: Optional[str],
        role: Optional[str] = None,
    ) -> PublicUser:
        """
        Create an account.

        Args:
            name: Display name
            user_id: Identifier chosen by the registrant
            password: Plaintext password, stored hashed
            role: "user" or "admin"; missing means "user"

        Returns:
            The public view of the new user (no password)

        Raises:
            ValidationError: A required field is empty or the role is unknown
            ConflictError: The id is taken, or an admin already exists
        """
        if _blank(name) or _blank(user_id) or _blank(password):
            raise ValidationError(code=ErrorCode.VAL_MISSING_FIELD, message="请填写所有字段")

        parsed_role = Role.user if _blank(role) else _parse_role(role)

        async with self.store.lock:
            if await self.store.get_user(user_id) is not None:
                logger.warning("registration_rejected", user_id=user_id, reason="duplicate_id")
                raise ConflictError(
                    code=ErrorCode.CONFLICT_USER_EXISTS,
                    message="用户ID已存在",
                    details={"user_id": user_id},
                )

            if parsed_role == Role.admin and await self.store.admin_exists():
                logger.warning("registration_rejected", user_id=user_id, reason="admin_exists")
                raise ConflictError(code=ErrorCode.CONFLICT_ADMIN_EXISTS, message="管理员已存在")

            user = User(
                id=user_id,
                name=name,
                password_hash=hash_password(password),
                role=parsed_role,
            )
            await self.store.add_user(user)

        logger.info("user_registered", user_id=user.id, role=user.role.value)
        return user.public()

    async def login(
        self,
        name: Optional[str],
        user_id: Optional[str],
        password: Optional[str],
        role: Optional[str] = None,
    ) -> PublicUser:
        """
        Check credentials.

        Name, id and password must all match one account. When ``role`` is
        given it must also match, but that is only checked once the
        credentials are known to be right.

        Raises:
            ValidationError: A required field is missing, or the role differs
            AuthError: No account matches the credentials
        """
        if _blank(name) or _blank(user_id) or _blank(password):
            raise ValidationError(code=ErrorCode.VAL_MISSING_FIELD, message="请填写所有字段")

        user = await self.store.get_user(user_id)
        if user is None or user.name != name or not verify_password(password, user.password_hash):
            logger.warning("login_failed", user_id=user_id)
            raise AuthError(code=ErrorCode.AUTH_INVALID_CREDENTIALS, message="用户名、ID或密码错误")

        if not _blank(role) and user.role.value != role:
            logger.warning("login_role_mismatch", user_id=user_id, requested_role=role)
            raise ValidationError(
                code=ErrorCode.VAL_ROLE_MISMATCH,
                message="角色不匹配",
                details={"requested_role": role},
            )

        logger.info("user_logged_in", user_id=user.id, role=user.role.value)
        return user.public()

    async def admin_exists(self) -> bool:
        return await self.store.admin_exists()

    async def list_users(self) -> List[PublicUser]:
        return [u.public() for u in await self.store.list_users()]
