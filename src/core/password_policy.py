"""密码强度策略

前端表单和服务端重置密码接口共用同一套规则。
"""
import re
from typing import Optional

MIN_LENGTH = 12
MAX_LENGTH = 128
MIN_CHARACTER_CLASSES = 3

_REPEATED = re.compile(r"(.)\1\1")
_CHARACTER_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"\d", re.ASCII),
    re.compile(r"[^a-zA-Z0-9]"),
)


def has_sequential(password: str) -> bool:
    """是否包含 3 个连续递增字符（如 abc、123），不区分大小写"""
    s = password.lower()
    for i in range(len(s) - 2):
        c1, c2, c3 = ord(s[i]), ord(s[i + 1]), ord(s[i + 2])
        if c1 + 1 == c2 and c2 + 1 == c3:
            return True
    return False


def character_class_count(password: str) -> int:
    return sum(1 for pattern in _CHARACTER_CLASSES if pattern.search(password))


def get_password_error(password: str) -> Optional[str]:
    """返回第一条未通过的规则提示，全部通过时返回 None"""
    if len(password) < MIN_LENGTH:
        return f"Password must be at least {MIN_LENGTH} characters"
    if len(password) > MAX_LENGTH:
        return "Password is too long"
    if _REPEATED.search(password):
        return "Don't repeat characters 3+ times (e.g. 'aaa')"
    if has_sequential(password):
        return "Don't use sequences (e.g. 123, abc)"
    if character_class_count(password) < MIN_CHARACTER_CLASSES:
        return "Mix upper, lower, numbers, symbols (3+ types)"
    return None


def get_strength_class(password: str) -> str:
    if not password:
        return ""
    if get_password_error(password) is None:
        return "strength-strong"
    if len(password) >= 8:
        return "strength-medium"
    return "strength-weak"


def get_strength_label(password: str) -> str:
    if not password:
        return ""
    if get_password_error(password) is None:
        return "Strong"
    if len(password) >= 8:
        return "Medium"
    return "Weak"
