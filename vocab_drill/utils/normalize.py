from typing import Any


def normalize_answer(text: str | None) -> str:
    return (text or "").strip().lower()


def normalize_header(key: Any) -> str:
    return str(key).strip().upper()


def clean_cell(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()
