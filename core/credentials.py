# Temporary credential generation for newly provisioned accounts

import secrets
import string

UPPERCASE = string.ascii_uppercase
LOWERCASE = string.ascii_lowercase
DIGITS = string.digits
SYMBOLS = "!@#$%^&*"
ALPHABET = UPPERCASE + LOWERCASE + DIGITS + SYMBOLS

_REQUIRED_CLASSES = (UPPERCASE, LOWERCASE, DIGITS, SYMBOLS)

_random = secrets.SystemRandom()


def generate_temporary_password(length: int = 12) -> str:
    """
    Generate a random password with at least one uppercase letter, one
    lowercase letter, one digit and one symbol.

    The remaining characters are drawn uniformly from the full alphabet and
    the result is shuffled so the guaranteed characters have no fixed slots.
    """
    if length < len(_REQUIRED_CLASSES):
        raise ValueError(f"Password length must be at least {len(_REQUIRED_CLASSES)}")

    chars = [secrets.choice(charset) for charset in _REQUIRED_CLASSES]
    chars.extend(secrets.choice(ALPHABET) for _ in range(length - len(chars)))
    _random.shuffle(chars)
    return "".join(chars)


def is_policy_compliant(password: str) -> bool:
    """True when every required character class is present."""
    return all(any(c in charset for c in password) for charset in _REQUIRED_CLASSES)
