# SPDX-License-Identifier: Apache-2.0

"""
Authentication service for JWT token management and password hashing.

Tokens are signed with the configured secret (HS256 by default). Without a
secret, which settings only permit in development, an ephemeral RS256 key
pair is generated per process.
"""

import jwt
import bcrypt
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Tuple
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from opentelemetry import trace
import logging

from ..models.entities import User

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when authentication fails."""
    pass


class TokenValidationError(Exception):
    """Raised when token validation fails."""
    pass


class AuthService:
    """
    JWT authentication service with bcrypt password hashing.
    """

    def __init__(self, secret: Optional[str] = None, algorithm: str = "HS256",
                 expire_days: int = 7):
        """
        Initialize the authentication service.

        Args:
            secret: Shared signing secret; generates a dev key pair when empty
            algorithm: Signing algorithm used with the secret
            expire_days: Token lifetime in days
        """
        self.expire_days = expire_days

        if secret:
            self.algorithm = algorithm
            self.signing_key = secret
            self.verification_key = secret
        else:
            logger.warning("No JWT_SECRET configured, generating development key pair")
            self.algorithm = "RS256"
            self.signing_key, self.verification_key = self._generate_dev_key_pair()

    def _generate_dev_key_pair(self) -> Tuple[str, str]:
        """Generate RSA key pair for development use."""
        private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=2048
        )

        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption()
        ).decode('utf-8')

        public_pem = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo
        ).decode('utf-8')

        return private_pem, public_pem

    def hash_password(self, password: str) -> str:
        """
        Hash a password using bcrypt with salt.

        Args:
            password: Plain text password to hash

        Returns:
            Hashed password string
        """
        with tracer.start_as_current_span("auth.hash_password"):
            hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=10))
            return hashed.decode('utf-8')

    def verify_password(self, password: str, hashed_password: str) -> bool:
        """Verify a password against its hash; malformed hashes never match."""
        with tracer.start_as_current_span("auth.verify_password") as span:
            try:
                result = bcrypt.checkpw(
                    password.encode('utf-8'),
                    hashed_password.encode('utf-8')
                )
            except ValueError as e:
                logger.error(f"Password verification error: {str(e)}")
                result = False

            span.set_attribute("auth.verification_result", "success" if result else "failed")
            return result

    def generate_token(self, user: User) -> str:
        """
        Generate an access token for a user.

        Args:
            user: User entity to generate the token for

        Returns:
            Encoded JWT
        """
        with tracer.start_as_current_span("auth.generate_token") as span:
            span.set_attribute("user.id", user.id)

            now = datetime.now(timezone.utc)
            expires_at = now + timedelta(days=self.expire_days)
            payload = {
                "sub": user.id,
                "email": user.email,
                "name": user.name,
                "iat": now,
                "exp": expires_at
            }

            try:
                token = jwt.encode(payload, self.signing_key, algorithm=self.algorithm)
            except jwt.PyJWTError as e:
                logger.error(f"Token generation failed: {str(e)}")
                raise AuthenticationError(f"Failed to generate token: {str(e)}")

            logger.info(
                "JWT token generated",
                extra={"user_id": user.id, "expires_at": expires_at.isoformat()}
            )
            return token

    def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Validate and decode a JWT token.

        Raises:
            TokenValidationError: If token is invalid or expired
        """
        with tracer.start_as_current_span("auth.validate_token") as span:
            try:
                payload = jwt.decode(
                    token,
                    self.verification_key,
                    algorithms=[self.algorithm],
                    options={"require": ["sub", "exp"]}
                )
            except jwt.ExpiredSignatureError:
                span.set_attribute("auth.validation_result", "expired")
                logger.warning("Token validation failed: token expired")
                raise TokenValidationError("Token has expired")
            except jwt.InvalidTokenError as e:
                span.set_attribute("auth.validation_result", "invalid")
                logger.warning(f"Token validation failed: {str(e)}")
                raise TokenValidationError("Invalid token")

            span.set_attributes({
                "auth.validation_result": "success",
                "user.id": payload.get("sub")
            })
            return payload
