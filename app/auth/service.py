"""
OrganiJob - Authentication Service

Core authentication logic: password hashing, registration, login and
server-side session tokens.

Features:
- PBKDF2-HMAC-SHA512 password hashing with a per-user random salt
- Constant-time hash comparison
- Opaque random session tokens, one active session per user
"""
import hashlib
import hmac
import logging
import secrets
from typing import Optional, Tuple

from ..storage import Storage, StorageConflictError, UserRecord

logger = logging.getLogger("organijob.auth")

# Key derivation parameters. Changing them invalidates every stored hash.
PBKDF2_ALGORITHM = "sha512"
PBKDF2_ITERATIONS = 100_000
PBKDF2_KEY_LENGTH = 64
SALT_BYTES = 16
TOKEN_BYTES = 24

MIN_PASSWORD_LENGTH = 8

# User-facing messages (the front-end is French)
MSG_INVALID_EMAIL = "Adresse email invalide."
MSG_PASSWORD_TOO_SHORT = "Mot de passe trop court (8 caracteres minimum)."
MSG_ACCOUNT_EXISTS = "Ce compte existe deja. Connecte-toi."
MSG_ACCOUNT_NOT_FOUND = "Compte introuvable. Cree un compte."
MSG_BAD_CREDENTIALS = "Email ou mot de passe incorrect."


class AuthServiceError(Exception):
    """Authentication failure carrying the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def normalize_email(email) -> str:
    return str(email or "").strip().lower()


def normalize_password(password) -> str:
    return str(password or "")


def is_valid_email(email: str) -> bool:
    return bool(email) and "@" in email and "." in email


def is_valid_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


class AuthService:
    """
    Authentication service for user management and session handling.

    Provides:
    - Password hashing and verification
    - Registration and login, each issuing a fresh session
    - Logout and bearer-token resolution
    """

    # -------------------------------------------------------------------------
    # Password Hashing
    # -------------------------------------------------------------------------

    def hash_password(self, password: str, salt: Optional[str] = None) -> Tuple[str, str]:
        """
        Hash a password with PBKDF2.

        Args:
            password: Plain text password
            salt: Hex salt to reuse; a new random one is generated if omitted

        Returns:
            Tuple of (hash_hex, salt_hex)
        """
        if salt is None:
            salt = secrets.token_hex(SALT_BYTES)
        derived = hashlib.pbkdf2_hmac(
            PBKDF2_ALGORITHM,
            password.encode("utf-8"),
            salt.encode("utf-8"),
            PBKDF2_ITERATIONS,
            dklen=PBKDF2_KEY_LENGTH,
        )
        return derived.hex(), salt

    def verify_password(self, password: str, salt: str, expected_hash: str) -> bool:
        """
        Verify a password against a stored salt and hash.

        Returns False for a mismatch and for malformed stored values.
        """
        if not salt or not expected_hash:
            return False
        candidate, _ = self.hash_password(password, salt)
        return hmac.compare_digest(candidate, expected_hash.lower())

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def create_token(self) -> str:
        return secrets.token_hex(TOKEN_BYTES)

    def issue_session(self, user: UserRecord, storage: Storage) -> str:
        """Create a session for the user, invalidating any previous one."""
        token = self.create_token()
        storage.issue_session(user.id, token)
        logger.info(f"Issued session for user {user.id}")
        return token

    def authenticate_token(self, token: Optional[str], storage: Storage) -> Optional[UserRecord]:
        """
        Resolve a bearer token to its user.

        Returns None (never raises) for a missing or unknown token.
        """
        if not token:
            return None
        return storage.get_user_by_token(token)

    def logout(self, token: Optional[str], storage: Storage) -> bool:
        """Delete the session if it exists. Idempotent."""
        if not token:
            return False
        return storage.delete_session(token)

    # -------------------------------------------------------------------------
    # Registration & Login
    # -------------------------------------------------------------------------

    def register(self, email, password, storage: Storage) -> Tuple[UserRecord, str]:
        """
        Register a user and open a session.

        An existing row without a password gets the new password instead
        of being rejected.

        Returns:
            Tuple of (user, session_token)

        Raises:
            AuthServiceError: 400 on invalid input, 409 if the account exists
        """
        email = normalize_email(email)
        password = normalize_password(password)

        if not is_valid_email(email):
            raise AuthServiceError(MSG_INVALID_EMAIL, 400)
        if not is_valid_password(password):
            raise AuthServiceError(MSG_PASSWORD_TOO_SHORT, 400)

        existing = storage.get_user_by_email(email)
        if existing and existing.has_password:
            raise AuthServiceError(MSG_ACCOUNT_EXISTS, 409)

        password_hash, salt = self.hash_password(password)
        if existing:
            storage.set_password(existing.id, password_hash, salt)
            user = storage.get_user_by_email(email)
            logger.info(f"Password set on existing user {user.id}")
        else:
            try:
                user = storage.create_user(email, password_hash, salt)
            except StorageConflictError:
                # Concurrent registration won the race
                raise AuthServiceError(MSG_ACCOUNT_EXISTS, 409)

        token = self.issue_session(user, storage)
        return user, token

    def login(self, email, password, storage: Storage) -> Tuple[UserRecord, str]:
        """
        Check credentials and open a session, replacing any existing one.

        Raises:
            AuthServiceError: 400 invalid email, 404 unknown account,
                401 wrong password
        """
        email = normalize_email(email)
        password = normalize_password(password)

        if not is_valid_email(email):
            raise AuthServiceError(MSG_INVALID_EMAIL, 400)

        user = storage.get_user_by_email(email)
        if not user or not user.has_password:
            logger.debug("Login for unknown account")
            raise AuthServiceError(MSG_ACCOUNT_NOT_FOUND, 404)

        if not self.verify_password(password, user.password_salt, user.password_hash):
            logger.info(f"Invalid password for user {user.id}")
            raise AuthServiceError(MSG_BAD_CREDENTIALS, 401)

        token = self.issue_session(user, storage)
        return user, token

    def reset_password(self, email, new_password, storage: Storage) -> UserRecord:
        """
        Set a new password and revoke every session of the user.

        Used by the operator CLI (scripts/reset_password.py).
        """
        email = normalize_email(email)
        new_password = normalize_password(new_password)

        user = storage.get_user_by_email(email)
        if not user:
            raise AuthServiceError(MSG_ACCOUNT_NOT_FOUND, 404)
        if not is_valid_password(new_password):
            raise AuthServiceError(MSG_PASSWORD_TOO_SHORT, 400)

        password_hash, salt = self.hash_password(new_password)
        storage.set_password(user.id, password_hash, salt)
        revoked = storage.delete_user_sessions(user.id)
        logger.info(f"Password reset for user {user.id}, {revoked} session(s) revoked")
        return user


# Global service instance
auth_service = AuthService()
