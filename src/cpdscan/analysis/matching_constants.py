"""Constants for the match engine."""


class RollingHash:
    """Parameters of the polynomial window hash."""

    # Mersenne prime; window hashes of distinct runs practically never collide
    MODULUS = (1 << 61) - 1

    BASE = 1_000_003


class ExitCodes:
    """Process exit codes of the detect command."""

    OK = 0

    ERROR = 1

    # Run completed and at least one duplication was found
    DUPLICATIONS_FOUND = 4
