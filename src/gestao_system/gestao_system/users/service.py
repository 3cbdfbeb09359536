from __future__ import annotations

import logging
from typing import Optional

from itsdangerous import BadSignature, URLSafeTimedSerializer
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import AuthToken, SessionUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)

_TOKEN_SALT = "gestao-system.auth"


class AuthService:
    """Use case: login and bearer-token lookup."""

    def __init__(self, users: UserRepository, *, secret_key: str, max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS):
        self._users = users
        self._serializer = URLSafeTimedSerializer(secret_key, salt=_TOKEN_SALT)
        self._max_age = int(max_age_seconds)

    @staticmethod
    def _session_user(user: User) -> SessionUser:
        return SessionUser(user_id=user.user_id, username=user.username, full_name=user.full_name, role=user.role)

    def authenticate(self, username: str, password: str) -> AuthToken:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            raise AuthenticationError("Usuário ou senha inválidos")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Usuário ou senha inválidos")

        token = self._serializer.dumps({"uid": user.user_id})
        logger.info("login ok: %s", user.username)
        return AuthToken(token=token, user=self._session_user(user), expires_in=self._max_age)

    def me(self, token: Optional[str]) -> SessionUser:
        if not token:
            raise AuthenticationError("Unauthorized")
        try:
            payload = self._serializer.loads(token, max_age=self._max_age)
        except BadSignature as exc:
            raise AuthenticationError("Unauthorized") from exc

        user = self._users.get_by_id(str(payload.get("uid", "")))
        if not user or not user.is_active:
            raise AuthenticationError("Unauthorized")
        return self._session_user(user)


class UserService:
    """Use case: manage users (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_user(self, *, full_name: str, username: str, password: str, email: str = "", role: Role = Role.USER) -> str:
        full_name = require_non_empty(full_name, "Nome")
        username = require_non_empty(username, "Usuário")
        require_min_length(password, "Senha", MIN_PASSWORD_LENGTH)

        if self._users.get_by_username(username):
            raise ValidationError("Nome de usuário já existe")

        return self._users.create_user(
            full_name=full_name,
            username=username,
            email=(email or "").strip(),
            password_hash=generate_password_hash(password),
            role=role,
        )

    def list_users(self) -> list[dict]:
        return [
            {
                "id": u.user_id,
                "username": u.username,
                "full_name": u.full_name,
                "email": u.email,
                "role": u.role.value,
                "is_active": u.is_active,
            }
            for u in self._users.list_users()
        ]
