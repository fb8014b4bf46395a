"""
Password Policy Utilities
Provides password validation rules.
"""

import re
from typing import List


MIN_PASSWORD_LENGTH = 8

COMMON_PASSWORDS = {
    "password",
    "password1",
    "password123",
    "12345678",
    "123456789",
    "admin123",
    "letmein1",
    "qwerty123",
    "welcome1",
    "changeme1",
}


def validate_password(password: str) -> List[str]:
    """
    Validate password strength and return a list of errors.
    """
    errors: List[str] = []

    if not password:
        return ["Password is required"]

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    if not re.search(r"[A-Za-z]", password):
        errors.append("Password must include a letter")

    if not re.search(r"\d", password):
        errors.append("Password must include a number")

    if password.lower() in COMMON_PASSWORDS:
        errors.append("Password is too common")

    return errors
