import pytest
from src.core.password_policy import (get_password_error, get_strength_class,
                                      get_strength_label, has_sequential)


def test_strong_password_passes():
    assert get_password_error("Uncertain829!") is None


@pytest.mark.parametrize("password, expected", [
    ("Sh0rt!", "Password must be at least 12 characters"),
    ("Aa1!" * 33, "Password is too long"),
    ("Uncertaaain8!", "Don't repeat characters 3+ times (e.g. 'aaa')"),
    ("Uncert9abc!X", "Don't use sequences (e.g. 123, abc)"),
    ("Uncert9ABC!x", "Don't use sequences (e.g. 123, abc)"),
    ("uncertain829", "Mix upper, lower, numbers, symbols (3+ types)"),
    ("UNCERTAINTY!!!", "Don't repeat characters 3+ times (e.g. 'aaa')"),
])
def test_password_rules(password, expected):
    assert get_password_error(password) == expected


def test_rules_checked_in_order():
    # 长度不足优先于其它规则
    assert get_password_error("aaa") == "Password must be at least 12 characters"


def test_boundary_lengths():
    assert get_password_error("Uncertain82!") is None
    assert get_password_error("Uncertain8!") is not None
    valid_128 = ("Ab1!" + "Xq9#") * 16
    assert len(valid_128) == 128
    assert get_password_error(valid_128) is None
    assert get_password_error(valid_128 + "Z") == "Password is too long"


def test_three_classes_are_enough():
    assert get_password_error("uncertain829!") is None
    assert get_password_error("UNCERTAIN829!") is None
    assert get_password_error("Uncertain!#@$") is None


def test_has_sequential():
    assert has_sequential("xx123")
    assert has_sequential("XyZ")
    assert not has_sequential("acegik")
    assert not has_sequential("321cba")


def test_strength_labels():
    assert get_strength_label("") == ""
    assert get_strength_class("") == ""
    assert get_strength_label("Uncertain829!") == "Strong"
    assert get_strength_class("Uncertain829!") == "strength-strong"
    assert get_strength_label("password") == "Medium"
    assert get_strength_class("password") == "strength-medium"
    assert get_strength_label("pw") == "Weak"
    assert get_strength_class("pw") == "strength-weak"
