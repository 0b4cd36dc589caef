"""Password hashing backed by passlib's bcrypt scheme."""

from passlib.context import CryptContext

from core.config import settings


class PasslibPasswordHasher:
    """Salted one-way password hashing."""

    def __init__(self, rounds: int = settings.bcrypt_rounds) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        """Return a salted bcrypt digest of ``password``."""
        return self._context.hash(password)

    def verify(self, password: str, digest: str) -> bool:
        """Check ``password`` against ``digest``; malformed digests never match."""
        try:
            return self._context.verify(password, digest)
        except (ValueError, TypeError):
            return False
