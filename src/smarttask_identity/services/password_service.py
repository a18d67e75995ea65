"""Password hashing service using argon2id.

Provides secure password hashing and verification with configurable
cost parameters and strength validation.
"""

import re

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError

from smarttask_identity.exceptions import WeakPasswordError

_SPECIAL_CHARS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


class PasswordHashingService:
    """Service for secure password hashing and verification.

    Uses argon2id (memory-hard) for password hashing. Also provides
    password strength validation.

    Examples
    --------
    >>> service = PasswordHashingService()
    >>> hash = service.hash("My_secure_passw0rd!")
    >>> service.verify("My_secure_passw0rd!", hash)
    True
    >>> service.verify("wrong_password", hash)
    False
    """

    # Password requirements
    MIN_LENGTH = 8
    MAX_LENGTH = 128

    DEFAULT_MEMORY_COST_KIB = 65536  # 64 MiB
    DEFAULT_TIME_COST = 3
    DEFAULT_PARALLELISM = 1

    def __init__(
        self,
        memory_cost_kib: int = DEFAULT_MEMORY_COST_KIB,
        time_cost: int = DEFAULT_TIME_COST,
        parallelism: int = DEFAULT_PARALLELISM,
    ):
        """Initialize the password hashing service.

        Parameters
        ----------
        memory_cost_kib
            Memory used per hash in KiB. Default is 65536 (64 MiB).
        time_cost
            Number of argon2 iterations. Default is 3.
        parallelism
            Degree of parallelism (lanes). Default is 1.
        """
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost_kib,
            parallelism=parallelism,
            type=Type.ID,
        )
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a plaintext password.

        Parameters
        ----------
        password
            The plaintext password to hash

        Returns
        -------
        The encoded argon2id hash

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        self.validate_strength(password)
        return self._hasher.hash(password)

    def rehash(self, password: str) -> str:
        """Hash an already accepted password with the current cost settings.

        Skips strength validation so accounts created under older rules can
        still be upgraded on login.
        """
        return self._hasher.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Parameters
        ----------
        password
            The plaintext password to check
        password_hash
            The argon2 hash to verify against

        Returns
        -------
        True if password matches, False otherwise
        """
        try:
            return self._hasher.verify(password_hash, password)
        except (VerifyMismatchError, VerificationError, InvalidHash):
            return False

    def verify_dummy(self, password: str) -> None:
        """Burn one verification against a throwaway hash.

        Called when no user matches an email, so the response time of an
        unknown address matches that of a wrong password.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash("smarttask_timing_dummy")
        self.verify(password, self._dummy_hash)

    def validate_strength(self, password: str) -> None:
        """Validate that a password meets strength requirements.

        Current requirements:
        - Between 8 and 128 characters
        - At least one lowercase letter, one uppercase letter and one digit
        - At least one special character

        Raises
        ------
        WeakPasswordError
            If password doesn't meet requirements
        """
        if not password:
            msg = "Password cannot be empty"
            raise WeakPasswordError(msg)

        if len(password) < self.MIN_LENGTH:
            msg = f"Password must be at least {self.MIN_LENGTH} characters"
            raise WeakPasswordError(msg)

        if len(password) > self.MAX_LENGTH:
            msg = f"Password cannot exceed {self.MAX_LENGTH} characters"
            raise WeakPasswordError(msg)

        if not (
            any(c.islower() for c in password)
            and any(c.isupper() for c in password)
            and any(c.isdigit() for c in password)
        ):
            msg = (
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number"
            )
            raise WeakPasswordError(msg)

        if not _SPECIAL_CHARS.search(password):
            msg = "Password must contain at least one special character"
            raise WeakPasswordError(msg)

    def needs_rehash(self, password_hash: str) -> bool:
        """Check if a password hash was made with other cost parameters.

        After changing the cost settings, existing hashes can be identified
        for rehashing on next successful login.
        """
        try:
            return self._hasher.check_needs_rehash(password_hash)
        except (InvalidHash, ValueError):
            return True
