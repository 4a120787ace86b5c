from __future__ import annotations

import re

SEMANTIC_CLASS_KEYWORDS = (
    "submit",
    "cancel",
    "primary",
    "secondary",
    "login",
    "register",
    "search",
    "filter",
    "sort",
    "edit",
    "delete",
    "save",
    "close",
)

TEST_ID_ATTRS = ("data-testid", "data-test")
PLACEHOLDER_TAGS = {"input", "textarea"}
CSS_TEXT_TAGS = {"button", "a", "span"}
XPATH_TEXT_TAGS = {"button", "a", "span", "div"}
TEXT_PREDICATE_LIMIT = 50

_CSS_IDENT_CHAR = re.compile(r"[A-Za-z0-9_\-\u00a0-\uffff]")
_HAS_TEXT_PATTERN = re.compile(r'^(?P<base>.*):has-text\("(?P<text>(?:[^"\\]|\\.)*)"\)$', re.DOTALL)


def normalize_space(value: str | None, limit: int = 200) -> str:
    if not value:
        return ""
    compact = re.sub(r"\s+", " ", str(value)).strip()
    return compact[:limit] if compact else ""


def escape_css_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return escaped.replace("\r\n", "\\a ").replace("\n", "\\a ").replace("\r", "\\a ")


def unescape_css_string(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value.replace("\\a ", "\n"), flags=re.DOTALL)


def escape_css_identifier(value: str) -> str:
    escaped: list[str] = []
    for index, char in enumerate(value):
        if char in "\r\n\f":
            escaped.append(f"\\{ord(char):x} ")
        elif index == 0 and char.isdigit():
            escaped.append(f"\\{ord(char):x} ")
        elif index == 1 and char.isdigit() and value[0] == "-":
            escaped.append(f"\\{ord(char):x} ")
        elif _CSS_IDENT_CHAR.fullmatch(char):
            escaped.append(char)
        else:
            escaped.append(f"\\{char}")
    if value == "-":
        return "\\-"
    return "".join(escaped)


def xpath_literal(value: str) -> str:
    if "'" not in value:
        return f"'{value}'"
    if '"' not in value:
        return f'"{value}"'
    pieces = value.split("'")
    quoted = [f"'{piece}'" for piece in pieces]
    return "concat(" + ", \"'\", ".join(quoted) + ")"


def semantic_class(classes: list[str]) -> str | None:
    for cls in classes:
        if cls.lower() in SEMANTIC_CLASS_KEYWORDS:
            return cls
    return None


def split_has_text(selector: str) -> tuple[str, str] | None:
    match = _HAS_TEXT_PATTERN.match(selector.strip())
    if not match:
        return None
    base = match.group("base").strip() or "*"
    return base, unescape_css_string(match.group("text"))


def is_navigable_href(href: str | None) -> bool:
    value = (href or "").strip()
    if not value:
        return False
    if value.startswith("#"):
        return False
    return not value.lower().startswith("javascript:")


def contains_any(value: str | None, keywords: tuple[str, ...]) -> bool:
    lowered = (value or "").lower()
    return any(keyword in lowered for keyword in keywords)
