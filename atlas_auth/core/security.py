"""Password hashing and reset token generation."""

import secrets

import bcrypt

# Fixed bcrypt cost factor for all stored password hashes.
BCRYPT_ROUNDS = 10

# 32 random bytes -> 64 hex characters (256 bits of entropy).
RESET_TOKEN_BYTES = 32

# bcrypt only looks at the first 72 bytes of its input.
_BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a plaintext password with a fresh salt."""
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    Malformed hashes never match.
    """
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except ValueError:
        return False


def generate_reset_token() -> str:
    """Return a cryptographically random, URL-safe reset token."""
    return secrets.token_hex(RESET_TOKEN_BYTES)
