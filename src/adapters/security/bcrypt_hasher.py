"""
bcrypt hasher adapter - Implements CredentialHasher protocol.

Security Design - Timing Oracle Prevention:
------------------------------------------
verify() always runs bcrypt.checkpw(). When the account does not exist
(hashed is None) the comparison runs against a pre-computed dummy hash,
so response time does not reveal whether a login is registered.
"""

import bcrypt


class BcryptCredentialHasher:
    """
    Implements CredentialHasher protocol via bcrypt.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(self, cost: int = 10) -> None:
        """
        Initialize hasher with a work factor.

        Args:
            cost: bcrypt cost factor (log2 rounds, 4-31)
        """
        self._cost = cost
        # Same cost as real hashes so a dummy comparison takes as long.
        self._dummy_hash = self.hash("dummy_password_for_timing_safety")

    def hash(self, plaintext: str) -> str:
        """Return a bcrypt hash of the plaintext password."""
        return bcrypt.hashpw(plaintext.encode(), bcrypt.gensalt(rounds=self._cost)).decode()

    def verify(self, plaintext: str, hashed: str | None) -> bool:
        """
        Constant-time check of plaintext against a stored bcrypt hash.

        Returns False for a missing or malformed hash, after doing the
        same amount of bcrypt work as a real comparison.
        """
        if hashed is None:
            bcrypt.checkpw(plaintext.encode(), self._dummy_hash.encode())
            return False
        try:
            return bcrypt.checkpw(plaintext.encode(), hashed.encode())
        except ValueError:
            bcrypt.checkpw(plaintext.encode(), self._dummy_hash.encode())
            return False
