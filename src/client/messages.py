"""Firebase 错误码到用户提示的映射"""

GENERIC_ERROR = "Something went wrong. Please try again."

# 按顺序匹配，先命中先返回
AUTH_ERROR_MESSAGES = (
    ("auth/invalid-credential", "Incorrect email or password."),
    ("auth/user-not-found", "Account not found."),
    ("auth/wrong-password", "Incorrect password."),
    ("auth/email-already-in-use", "This email is already registered."),
    ("auth/too-many-requests", "Too many attempts. Please try again later."),
    ("auth/invalid-email", "Please enter a valid email address."),
)


def describe_auth_error(message: str) -> str:
    message = message or ""
    for needle, text in AUTH_ERROR_MESSAGES:
        if needle in message:
            return text
    return GENERIC_ERROR
