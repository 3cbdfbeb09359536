from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from ..entities.store import Entity, EntityStore
from .model import User


class UserRepository(Protocol):
    """Interface do repositório de usuários.

    Observação (DIP): a camada de serviço depende desta interface, não do armazenamento concreto.
    """

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, *, full_name: str, username: str, email: str, password_hash: str, role: Role) -> str:
        raise NotImplementedError

    def list_users(self) -> Sequence[User]:
        raise NotImplementedError


class StoreUserRepository(UserRepository):
    def __init__(self, store: EntityStore):
        self._store = store

    def get_by_id(self, user_id: str) -> Optional[User]:
        record = self._store.get(Entity.USER, user_id)
        return User.from_record(record) if record else None

    def get_by_username(self, username: str) -> Optional[User]:
        found = self._store.filter(Entity.USER, {"username": username})
        return User.from_record(found[0]) if found else None

    def create_user(self, *, full_name: str, username: str, email: str, password_hash: str, role: Role) -> str:
        created = self._store.create(
            Entity.USER,
            {
                "full_name": full_name,
                "username": username,
                "email": email,
                "password_hash": password_hash,
                "role": role.value,
                "is_active": True,
            },
        )
        return str(created["id"])

    def list_users(self) -> Sequence[User]:
        return [User.from_record(r) for r in self._store.list(Entity.USER, sort="username")]
