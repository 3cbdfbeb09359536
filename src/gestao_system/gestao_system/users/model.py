from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Entidade de domínio: usuário do sistema.

    Observação: objeto de dados puro (sem acesso ao armazenamento).
    """

    user_id: str
    username: str
    full_name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True

    @classmethod
    def from_record(cls, record: dict) -> "User":
        return cls(
            user_id=str(record["id"]),
            username=str(record.get("username") or ""),
            full_name=str(record.get("full_name") or ""),
            email=str(record.get("email") or ""),
            password_hash=str(record.get("password_hash") or ""),
            role=Role(record.get("role") or Role.USER.value),
            is_active=bool(record.get("is_active", True)),
        )


@dataclass(frozen=True)
class SessionUser:
    """What a bearer token resolves to."""

    user_id: str
    username: str
    full_name: str
    role: Role

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "full_name": self.full_name,
            "role": self.role.value,
        }


@dataclass(frozen=True)
class AuthToken:
    token: str
    user: SessionUser
    expires_in: int
