"""メールアドレス判定・宛先正規化のテスト。"""

from __future__ import annotations

import pytest

from email_relay.shared.email_address import (
    is_valid_email,
    normalize_recipients,
    validate_recipients,
    validate_sender,
    validate_subject,
)


@pytest.mark.parametrize(
    "value",
    [
        "a.b+c@sub.example.co",
        "user@example.com",
        "o'brien@example.ie",
        "x_y^z&w-1@mail-host.example.org",
        "  padded@example.com  ",
    ],
)
def test_有効なアドレス(value: str) -> None:
    assert is_valid_email(value)


@pytest.mark.parametrize(
    "value",
    [
        "a@b",
        "a@@b.com",
        "",
        "not-an-email",
        ".a@example.com",
        "a.@example.com",
        "a..b@example.com",
        "a@example.c",
        "a@example.c0m",
        "a b@example.com",
        "a@exa_mple.com",
        "user@example.com,other@example.com",
    ],
)
def test_無効なアドレス(value: str) -> None:
    assert not is_valid_email(value)


def test_文字列以外は無効() -> None:
    assert not is_valid_email(None)


def test_カンマ区切りと配列で同じ宛先になる() -> None:
    from_string = normalize_recipients("a@x.com,b@x.com")
    from_list = normalize_recipients(["a@x.com", "b@x.com"])

    assert from_string == from_list == ["a@x.com", "b@x.com"]


def test_空白と空要素を除去する() -> None:
    assert normalize_recipients(" a@x.com , ,b@x.com,, ") == ["a@x.com", "b@x.com"]


def test_配列要素内のカンマも分割する() -> None:
    assert normalize_recipients(["a@x.com, b@x.com", "c@x.com"]) == [
        "a@x.com",
        "b@x.com",
        "c@x.com",
    ]


def test_重複は最初の出現のみ残す() -> None:
    assert normalize_recipients(["b@x.com", "a@x.com", "b@x.com"]) == ["b@x.com", "a@x.com"]


def test_文字列以外の要素は捨てる() -> None:
    assert normalize_recipients(["a@x.com", 1, None]) == ["a@x.com"]


def test_Noneは空リスト() -> None:
    assert normalize_recipients(None) == []


def test_正規化は構文チェックをしない() -> None:
    assert normalize_recipients("bad, a@x.com") == ["bad", "a@x.com"]


def test_送信元の検証() -> None:
    assert validate_sender("me@example.com").ok
    result = validate_sender("not-an-email")
    assert not result.ok
    assert "'from'" in result.reason
    assert not validate_sender("").ok


def test_宛先の検証() -> None:
    assert validate_recipients(["a@x.com"]).ok
    assert not validate_recipients([]).ok
    result = validate_recipients(["a@x.com", "bad"])
    assert not result.ok
    assert "'to'" in result.reason


def test_件名の検証() -> None:
    assert validate_subject("Hello").ok
    assert not validate_subject("   ").ok
    assert not validate_subject("").ok
