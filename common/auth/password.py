"""
bcrypt password hashing.

Passwords are pre-hashed with SHA-256 before bcrypt. This handles bcrypt's
72-byte input limit and gives consistent behavior across all password
lengths. Hashes written by older services that ran bcrypt directly on the
plaintext still verify.

Example:
    hasher = PasswordHasher(rounds=12)
    hashed = await hasher.hash_async("Sixchr!")
    assert await hasher.verify_async("Sixchr!", hashed)
"""

import asyncio
import base64
import hashlib

import bcrypt as bcrypt_lib


class PasswordHasher:
    """One-way salted password hashing and verification."""

    def __init__(self, rounds: int = 12):
        """
        Args:
            rounds: bcrypt cost factor (4-31)
        """
        self.rounds = rounds

    @staticmethod
    def _prehash_password(password: str) -> bytes:
        sha256_hash = hashlib.sha256(password.encode("utf-8")).digest()
        return base64.b64encode(sha256_hash)

    def hash(self, password: str) -> str:
        """Hash a non-empty password using bcrypt with SHA-256 pre-hashing."""
        salt = bcrypt_lib.gensalt(rounds=self.rounds)
        return bcrypt_lib.hashpw(self._prehash_password(password), salt).decode("utf-8")

    def verify(self, password: str, hashed: str) -> bool:
        """
        Verify a password against its hash.

        Supports both SHA-256 pre-hashed and legacy direct bcrypt hashes.
        A malformed stored hash never matches.
        """
        if not password or not hashed:
            return False

        hashed_bytes = hashed.encode("utf-8")

        try:
            if bcrypt_lib.checkpw(self._prehash_password(password), hashed_bytes):
                return True
        except ValueError:
            return False

        # Legacy direct bcrypt
        try:
            return bcrypt_lib.checkpw(password.encode("utf-8"), hashed_bytes)
        except ValueError:
            # Password too long for direct bcrypt - definitely not a match
            return False

    async def hash_async(self, password: str) -> str:
        """hash() on a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, hashed: str) -> bool:
        """verify() on a worker thread so the event loop keeps serving."""
        return await asyncio.to_thread(self.verify, password, hashed)
