import string
from typing import Optional


def validate_name(name: Optional[str]) -> str:
    if name is None:
        raise ValueError("Name missing")
    name = name.strip()
    if len(name) < 1 or len(name) > 100:
        raise ValueError("Name must be 1-100 characters")
    return name


def validate_email(email: Optional[str]) -> str:
    if email is None:
        raise ValueError("Email missing")
    email = email.strip().lower()
    if len(email) < 3 or "@" not in email:
        raise ValueError("Invalid email")
    local, _, domain = email.rpartition("@")
    if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
        raise ValueError("Invalid email")
    if any(c in email for c in string.whitespace):
        raise ValueError("Invalid email")
    return email


def validate_password(password: Optional[str]) -> str:
    if password is None:
        raise ValueError("Password missing")
    # bcrypt only looks at the first 72 bytes
    if len(password) < 6 or len(password.encode()) > 72:
        raise ValueError("Password must be 6-72 characters")
    return password
