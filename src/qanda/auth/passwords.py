"""Password hashing with bcrypt."""

from __future__ import annotations

import asyncio

import bcrypt


class PasswordHasher:
    """Slow, salted one-way hashing for user passwords.

    bcrypt is CPU-bound, so both operations run in a worker thread and can
    be awaited without stalling other requests on the event loop.
    """

    def __init__(self, rounds: int = 10):
        self.rounds = rounds

    async def hash(self, plaintext: str) -> str:
        return await asyncio.to_thread(self._hash_sync, plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        return await asyncio.to_thread(self._verify_sync, plaintext, digest)

    def _hash_sync(self, plaintext: str) -> str:
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(plaintext.encode(), salt).decode()

    @staticmethod
    def _verify_sync(plaintext: str, digest: str) -> bool:
        try:
            return bcrypt.checkpw(plaintext.encode(), digest.encode())
        except ValueError:
            # Stored value is not a bcrypt digest
            return False
