import pytest

from app.utils.password_policy import validate_password


def test_accepts_reasonable_password() -> None:
    assert validate_password("secret123") == []


@pytest.mark.parametrize(
    ("password", "fragment"),
    [
        ("", "required"),
        ("abc12", "at least 8"),
        ("abcdefghij", "number"),
        ("1234567890", "letter"),
        ("Password123", "too common"),
    ],
)
def test_rejects_weak_passwords(password: str, fragment: str) -> None:
    errors = validate_password(password)

    assert any(fragment in err for err in errors)
