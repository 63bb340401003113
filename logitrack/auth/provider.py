# logitrack/auth/provider.py
"""
Authentication provider interface.

Wraps the identity service: token verification, user lookup and listing,
user creation and custom claims. FirebaseAuthProvider is the only backend;
tests substitute a fake with the same methods.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass
class AuthUser:
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None
    custom_claims: dict[str, Any] = field(default_factory=dict)
    creation_time: Optional[datetime] = None
    last_sign_in_time: Optional[datetime] = None
    provider_ids: list[str] = field(default_factory=list)


class AuthProvider:
    def verify_id_token(self, token: str) -> dict[str, Any]:
        """Decoded claims of a valid ID token. Raises AuthorizationError("unauthenticated")."""
        raise NotImplementedError

    def get_user(self, uid: str) -> Optional[AuthUser]:
        raise NotImplementedError

    def list_users(self, max_results: int = 1000) -> list[AuthUser]:
        raise NotImplementedError

    def create_user(self, email: str, password: str, display_name: str) -> AuthUser:
        raise NotImplementedError

    def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        """Replace the user's custom claims."""
        raise NotImplementedError
