"""
Credential Hasher

Computes the one-way digest stored in place of a password.

DESIGN DECISION: The digest is a plain, unsalted SHA-256 hex string so that
accounts written by the browser version of the tracker keep working.
Hashing runs in a worker thread; callers await it like any other
suspending step.
"""

import asyncio
import hashlib
import hmac


class CredentialHasher:
    """SHA-256 password digests."""

    algorithm = "sha256"

    @staticmethod
    def _digest(plaintext: str) -> str:
        return hashlib.new(CredentialHasher.algorithm, plaintext.encode("utf-8")).hexdigest()

    async def hash(self, plaintext: str) -> str:
        """
        Digest a password.

        Deterministic: the same plaintext always gives the same 64-char
        lowercase hex string.
        """
        return await asyncio.to_thread(self._digest, plaintext)

    async def verify(self, plaintext: str, digest: str) -> bool:
        """Recompute the digest and compare in constant time."""
        candidate = await self.hash(plaintext)
        return hmac.compare_digest(candidate, digest)
