from postgrest.exceptions import APIError

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: Exception) -> bool:
    """True when the store rejected a write on a unique constraint"""
    if isinstance(exc, APIError) and exc.code == UNIQUE_VIOLATION:
        return True
    return "duplicate key" in str(exc).lower()
