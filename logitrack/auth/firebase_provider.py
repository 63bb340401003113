# logitrack/auth/firebase_provider.py

from datetime import datetime, timezone
from typing import Optional

from firebase_admin import auth

from logitrack.auth.provider import AuthProvider, AuthUser
from logitrack.errors import AuthorizationError
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)


def _from_millis(millis) -> Optional[datetime]:
    if not millis:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def to_auth_user(record) -> AuthUser:
    """firebase_admin UserRecord -> AuthUser."""
    metadata = record.user_metadata
    return AuthUser(
        uid=record.uid,
        email=record.email,
        display_name=record.display_name,
        photo_url=record.photo_url,
        custom_claims=dict(record.custom_claims or {}),
        creation_time=_from_millis(metadata.creation_timestamp) if metadata else None,
        last_sign_in_time=_from_millis(metadata.last_sign_in_timestamp) if metadata else None,
        provider_ids=[p.provider_id for p in (record.provider_data or [])],
    )


class FirebaseAuthProvider(AuthProvider):
    def __init__(self, app=None):
        self._app = app

    def verify_id_token(self, token):
        try:
            return auth.verify_id_token(token, app=self._app)
        except (auth.InvalidIdTokenError, ValueError) as e:
            logger.warning(f"[AUTH] Rejected ID token: {e}")
            raise AuthorizationError("unauthenticated", "User must be authenticated")

    def get_user(self, uid):
        try:
            return to_auth_user(auth.get_user(uid, app=self._app))
        except auth.UserNotFoundError:
            return None

    def list_users(self, max_results=1000):
        page = auth.list_users(max_results=max_results, app=self._app)
        return [to_auth_user(record) for record in page.users]

    def create_user(self, email, password, display_name):
        record = auth.create_user(email=email, password=password,
                                  display_name=display_name, app=self._app)
        return to_auth_user(record)

    def set_custom_claims(self, uid, claims):
        auth.set_custom_user_claims(uid, claims, app=self._app)
