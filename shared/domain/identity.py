"""
Who is acting

Identity itself is owned by the authentication layer; the domain only
needs the user id and whether the user is a platform admin.
"""

from dataclasses import dataclass
from enum import Enum


class ActorRole(Enum):
    """Platform-wide role, as reported by the identity provider"""
    USER = 'user'
    ADMIN = 'admin'


@dataclass(frozen=True)
class Actor:
    user_id: int
    role: ActorRole = ActorRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMIN

    @classmethod
    def from_user(cls, user) -> 'Actor':
        """Build an actor from a Django user (staff and superusers are admins)"""
        is_admin = getattr(user, 'is_staff', False) or getattr(user, 'is_superuser', False)
        return cls(user_id=user.pk, role=ActorRole.ADMIN if is_admin else ActorRole.USER)
