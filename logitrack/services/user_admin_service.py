# logitrack/services/user_admin_service.py
"""
Privileged user administration.

The role lives in two places: the auth custom claims {role, admin} and the
`role` field of users/{uid}. Writes are two-phase:
  1. set the auth claims (authoritative, failure aborts the call)
  2. mirror the role into the store (failure is logged and reported as
     mirrored=False, the claims stay applied)
sync_users() is the reconciliation job: it rewrites every users/{uid} from
the auth records, after which the stored role equals the claim role.

Every entry point except bootstrap_admin requires the caller's `admin` claim.
"""

from dataclasses import dataclass
from typing import Any, Optional

from logitrack.auth.provider import AuthProvider, AuthUser
from logitrack.config import settings
from logitrack.errors import AuthorizationError, DocumentNotFoundError, InvalidArgumentError
from logitrack.store.base import USERS, DocumentStore
from logitrack.utils.logger import get_logger

logger = get_logger(__name__)

ROLES = ("admin", "partner", "subcontractor", "customer", "user")


@dataclass
class RoleUpdate:
    uid: str
    role: str
    admin: bool
    mirrored: bool


@dataclass
class CreatedUser:
    uid: str
    role: str
    mirrored: bool


def require_admin(caller: Optional[dict[str, Any]]) -> None:
    if not caller:
        raise AuthorizationError("unauthenticated", "User must be authenticated")
    if caller.get("admin") is not True:
        raise AuthorizationError("permission-denied", "Only admins can manage users")


def claims_for_role(role: str) -> dict[str, Any]:
    return {"role": role, "admin": role == "admin"}


def role_from_claims(claims: Optional[dict[str, Any]]) -> str:
    claims = claims or {}
    return claims.get("role") or ("admin" if claims.get("admin") else "user")


def user_document(user: AuthUser) -> dict[str, Any]:
    """users/{uid} mirror of an auth record."""
    return {
        "uid": user.uid,
        "email": user.email or "",
        "displayName": user.display_name or "",
        "photoURL": user.photo_url or "",
        "role": role_from_claims(user.custom_claims),
        "authCreationTime": user.creation_time,
        "lastLogin": user.last_sign_in_time,
        "providerData": list(user.provider_ids),
    }


def _mirror(store: DocumentStore, uid: str, data: dict[str, Any]) -> bool:
    try:
        store.set(USERS, uid, data, merge=True)
    except Exception as e:
        logger.error(f"[USERS] ⚠️ Claims applied but users/{uid} mirror failed: {e}; "
                     f"run sync_users to reconcile", exc_info=True)
        return False
    return True


async def list_auth_users(auth: AuthProvider, caller: Optional[dict],
                          max_results: int = settings.AUTH_LIST_MAX_RESULTS) -> list[AuthUser]:
    require_admin(caller)
    try:
        return auth.list_users(max_results=max_results)
    except Exception as e:
        logger.error(f"[USERS] Failed to list auth users: {e}", exc_info=True)
        raise


async def create_user(auth: AuthProvider, store: DocumentStore, caller: Optional[dict],
                      email: str, password: str, display_name: str,
                      role: Optional[str] = None) -> CreatedUser:
    require_admin(caller)
    if not email or not password or not display_name:
        raise InvalidArgumentError("Email, password, and display name are required")
    role = role or "user"
    if role not in ROLES:
        raise InvalidArgumentError(f"Unknown role '{role}'")

    try:
        user = auth.create_user(email=email, password=password, display_name=display_name)
        auth.set_custom_claims(user.uid, claims_for_role(role))
    except Exception as e:
        logger.error(f"[USERS] Failed to create user {email}: {e}", exc_info=True)
        raise

    user.custom_claims = claims_for_role(role)
    mirrored = _mirror(store, user.uid, user_document(user))
    logger.info(f"[USERS] ✅ Created {email} ({user.uid}) as {role}")
    return CreatedUser(uid=user.uid, role=role, mirrored=mirrored)


async def update_user_role(auth: AuthProvider, store: DocumentStore, caller: Optional[dict],
                           target_uid: str, role: Optional[str] = None,
                           is_admin: Optional[bool] = None) -> RoleUpdate:
    """
    Set a user's role. `role` wins over `is_admin`; is_admin=True/False alone
    means admin/user. Other custom claims on the account are kept.
    """
    require_admin(caller)
    if not target_uid:
        raise InvalidArgumentError("Target UID is required")
    if role:
        new_role = role
    elif isinstance(is_admin, bool):
        new_role = "admin" if is_admin else "user"
    else:
        raise InvalidArgumentError("Either role or is_admin is required")
    if new_role not in ROLES:
        raise InvalidArgumentError(f"Unknown role '{new_role}'")

    try:
        user = auth.get_user(target_uid)
        if user is None:
            raise DocumentNotFoundError("auth_users", target_uid)
        auth.set_custom_claims(target_uid, {**user.custom_claims, **claims_for_role(new_role)})
    except DocumentNotFoundError:
        raise
    except Exception as e:
        logger.error(f"[USERS] Failed to update role of {target_uid}: {e}", exc_info=True)
        raise

    mirrored = _mirror(store, target_uid, {"role": new_role})
    logger.info(f"[USERS] Role of {target_uid} set to {new_role} (mirrored={mirrored})")
    return RoleUpdate(uid=target_uid, role=new_role, admin=new_role == "admin", mirrored=mirrored)


async def sync_users(auth: AuthProvider, store: DocumentStore, caller: Optional[dict],
                     max_results: int = settings.AUTH_LIST_MAX_RESULTS) -> int:
    """Mirror every auth account into `users`. Returns the number of documents written."""
    require_admin(caller)
    try:
        users = auth.list_users(max_results=max_results)
        count = store.set_many(USERS, {user.uid: user_document(user) for user in users}, merge=True)
    except Exception as e:
        logger.error(f"[USERS] Sync failed: {e}", exc_info=True)
        raise
    logger.info(f"[USERS] 🔄 Synced {count} users")
    return count


async def bootstrap_admin(auth: AuthProvider, store: DocumentStore, uid: str,
                          admin_emails: Optional[list[str]] = None) -> bool:
    """
    Promote a signing-in user to admin when their email is in ADMIN_EMAILS.
    Returns True when claims were changed.
    """
    admin_emails = settings.admin_email_list if admin_emails is None else admin_emails
    user = auth.get_user(uid)
    if user is None or not user.email or user.email not in admin_emails:
        return False
    if user.custom_claims.get("admin") is True and user.custom_claims.get("role") == "admin":
        return False

    try:
        auth.set_custom_claims(uid, {**user.custom_claims, **claims_for_role("admin")})
    except Exception as e:
        logger.error(f"[SESSION] Failed to promote {user.email}: {e}", exc_info=True)
        raise
    _mirror(store, uid, {"role": "admin"})
    logger.info(f"[SESSION] 👑 {user.email} promoted to admin from ADMIN_EMAILS")
    return True
