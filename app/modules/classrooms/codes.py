import secrets
import string

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_classroom_code(length: int = 6) -> str:
    """Random uppercase alphanumeric join code. Collisions are not retried."""
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def normalize_classroom_code(code: str) -> str:
    return code.strip().upper()
