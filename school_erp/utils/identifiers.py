# school_erp/utils/identifiers.py
"""Username and school-code generation."""
import random
from typing import Optional

from ..models.enums import UserRole

ROLE_PREFIXES = {
    UserRole.TEACHER.value: "TC",
    UserRole.STUDENT.value: "ST",
    UserRole.PARENT.value: "PR",
}
ADMIN_PREFIX = "AD"

USERNAME_NUMBER_MIN = 10_000_000
USERNAME_NUMBER_MAX = 99_999_999


def role_prefix(role) -> str:
    value = role.value if isinstance(role, UserRole) else str(role)
    return ROLE_PREFIXES.get(value, ADMIN_PREFIX)


def generate_username(school_code: str, role, rng: Optional[random.Random] = None) -> str:
    """{SCHOOLCODE}-{ROLEPREFIX}-{8-digit number}; uniqueness is left to the database."""
    rng = rng or random
    number = rng.randint(USERNAME_NUMBER_MIN, USERNAME_NUMBER_MAX)
    return f"{school_code}-{role_prefix(role)}-{number}"


def sequential_username(school_code: str, role, existing_count: int) -> str:
    """Counter-based variant used for parent accounts."""
    return f"{school_code}-{role_prefix(role)}-{existing_count + 1:08d}"


def generate_school_code(school_name: str, rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    prefix = "".join(word[0] for word in school_name.split() if word).upper()[:4]
    return f"{prefix}{rng.randint(100, 999):03d}"
