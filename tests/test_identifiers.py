import random
import re

from school_erp.models.enums import UserRole
from school_erp.utils.identifiers import (
    generate_school_code,
    generate_username,
    role_prefix,
    sequential_username,
)


def test_role_prefixes():
    assert role_prefix(UserRole.TEACHER) == "TC"
    assert role_prefix(UserRole.STUDENT) == "ST"
    assert role_prefix(UserRole.PARENT) == "PR"
    assert role_prefix(UserRole.SCHOOL_ADMIN) == "AD"
    assert role_prefix("something_else") == "AD"


def test_generate_username_shape():
    rng = random.Random(7)
    for role, prefix in [(UserRole.TEACHER, "TC"), (UserRole.STUDENT, "ST")]:
        username = generate_username("NHS482", role, rng=rng)
        assert re.fullmatch(rf"NHS482-{prefix}-[1-9]\d{{7}}", username)


def test_sequential_username_is_zero_padded():
    assert sequential_username("NHS482", UserRole.PARENT, 0) == "NHS482-PR-00000001"
    assert sequential_username("NHS482", UserRole.PARENT, 41) == "NHS482-PR-00000042"


def test_school_code_uses_initials_and_three_digits():
    code = generate_school_code("Nairobi High School", rng=random.Random(1))
    assert re.fullmatch(r"NHS\d{3}", code)


def test_school_code_truncates_long_names_to_four_letters():
    code = generate_school_code("st mary's girls high school", rng=random.Random(3))
    assert code[:4] == "SMGH"
    assert 100 <= int(code[4:]) <= 999
