"""Identity provider interface consumed by the Learning Center."""

from dataclasses import dataclass
from typing import Optional, Protocol


class IdentityProvider(Protocol):
    def current_user_id(self) -> Optional[str]:
        ...

    def is_admin(self) -> bool:
        ...


@dataclass
class StaticIdentityProvider:
    """Identity fixed at construction (single-user app, scripts, tests)."""
    user_id: Optional[str] = None
    admin: bool = False

    def current_user_id(self) -> Optional[str]:
        return self.user_id or None

    def is_admin(self) -> bool:
        return self.admin
