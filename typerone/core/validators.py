"""
Business-rule validation that the request schemas cannot express.

Schema validation (lengths, patterns, required fields) runs first when
FastAPI parses the body.  The dependencies here run next, before the
route handler, so a handler only ever sees a password that passed both
layers.  Complexity failures are collected, not reported one at a time.
"""

import re

from typerone.core.errors import AppError
from typerone.schemas import ChangePasswordRequest, RegisterRequest, ResetPasswordRequest

SPECIAL_CHARACTERS = r"""!@#$%^&*(),.?":{}|<>[]\/'`~_=;+-"""

# bcrypt only accepts the first 72 bytes; longer input is refused.
MAX_PASSWORD_BYTES = 72
PASSWORD_TOO_LONG = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"

_RULES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain at least one lowercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (
        re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]"),
        "Password must contain at least one special character",
    ),
]


def password_complexity_errors(password: str) -> list[str]:
    """Return every rule the password breaks (empty list → valid)."""
    errors = [message for pattern, message in _RULES if not pattern.search(password)]
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors.append(PASSWORD_TOO_LONG)
    return errors


def validate_password_complexity(password: str, field: str = "password") -> None:
    errors = password_complexity_errors(password)
    if errors:
        raise AppError.validation("Password validation failed", {field: errors})


def validate_password_match(password: str, confirm_password: str) -> None:
    if password != confirm_password:
        raise AppError.validation(
            "Validation failed", {"confirmPassword": ["Passwords don't match"]},
        )


def validate_new_password(password: str, confirm_password: str, field: str = "password") -> None:
    validate_password_complexity(password, field)
    validate_password_match(password, confirm_password)


# ── Pre-handler dependencies ─────────────────────────────────────────


async def validate_registration(body: RegisterRequest) -> RegisterRequest:
    validate_new_password(body.password, body.confirm_password)
    return body


async def validate_password_reset(body: ResetPasswordRequest) -> ResetPasswordRequest:
    validate_new_password(body.password, body.confirm_password)
    return body


async def validate_password_change(body: ChangePasswordRequest) -> ChangePasswordRequest:
    validate_new_password(body.new_password, body.confirm_password, field="newPassword")
    return body
