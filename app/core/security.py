"""
Security and Authentication Module

Password hashing and JWT token management.
"""

import secrets
from typing import Any, Dict, Optional
from datetime import datetime, timedelta, timezone
from enum import Enum

import jwt
from passlib.context import CryptContext

from app.config.settings import settings
from app.core.exceptions import InvalidTokenError, TokenExpiredError
from app.core.logging import get_logger

logger = get_logger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.PASSWORD_BCRYPT_ROUNDS,
)


class TokenType(str, Enum):
    """Token type enumeration"""
    ACCESS = "access"


class PasswordManager:
    """Password hashing and verification"""

    @staticmethod
    def hash_password(password: str) -> str:
        return pwd_context.hash(password)

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        Returns:
            True if password matches, False otherwise
        """
        if not hashed_password:
            return False
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            logger.warning("Password verification failed: malformed hash")
            return False


class TokenManager:
    """JWT token management utilities"""

    @staticmethod
    def create_token(
        data: Dict[str, Any],
        token_type: TokenType = TokenType.ACCESS,
        expires_delta: Optional[timedelta] = None
    ) -> str:
        """
        Create JWT token with specified data and expiration.

        Args:
            data: Data to encode in token
            token_type: Type of token to create
            expires_delta: Custom expiration time

        Returns:
            Encoded JWT token
        """
        to_encode = data.copy()
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

        to_encode.update({
            "exp": expire,
            "iat": now,
            "type": token_type.value,
            "jti": secrets.token_urlsafe(16),
        })

        return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def verify_token(
        token: str,
        expected_type: Optional[TokenType] = TokenType.ACCESS
    ) -> Dict[str, Any]:
        """
        Verify and decode JWT token.

        Raises:
            InvalidTokenError: If token is invalid
            TokenExpiredError: If token has expired
        """
        try:
            payload = jwt.decode(
                token,
                settings.JWT_SECRET_KEY,
                algorithms=[settings.JWT_ALGORITHM]
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError()
        except jwt.InvalidTokenError as e:
            logger.info(f"Token verification failed: {type(e).__name__}")
            raise InvalidTokenError()

        if expected_type and payload.get("type") != expected_type.value:
            raise InvalidTokenError("Invalid token type")
        if not payload.get("sub"):
            raise InvalidTokenError("Invalid token payload")

        return payload


def hash_password(password: str) -> str:
    """Convenience function for password hashing"""
    return PasswordManager.hash_password(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Convenience function for password verification"""
    return PasswordManager.verify_password(plain_password, hashed_password)


def create_access_token(subject: str, role: str) -> str:
    """Convenience function for creating access token"""
    return TokenManager.create_token({"sub": subject, "role": role}, TokenType.ACCESS)


def verify_token(token: str) -> Dict[str, Any]:
    return TokenManager.verify_token(token, TokenType.ACCESS)


__all__ = [
    "TokenType",
    "PasswordManager",
    "TokenManager",
    "hash_password",
    "verify_password",
    "create_access_token",
    "verify_token",
]
