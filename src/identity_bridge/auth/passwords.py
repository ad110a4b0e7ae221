"""Password verification backed by bcrypt."""

from __future__ import annotations

import bcrypt


class BcryptPasswordVerifier:
    """Checks plaintext passwords against bcrypt hashes.

    Hashes produced by PHP (``$2y$``) are accepted as well as ``$2a$`` and
    ``$2b$``. An empty or malformed hash never verifies.
    """

    def check(self, plaintext: str, hashed: str) -> bool:
        if not plaintext or not hashed:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode(), hashed.encode())
        except ValueError:
            # Not a bcrypt hash
            return False

