from __future__ import annotations

import re
from math import log2

TEST_ATTR_PRIORITY = (
    "data-testid",
    "data-test",
    "data-qa",
    "data-cy",
    "data-e2e",
)

SPECIAL_ATTR_PRIORITY = TEST_ATTR_PRIORITY + (
    "name",
    "for",
    "aria-label",
    "title",
    "type",
)

_DYNAMIC_CLASS_PATTERNS = (
    re.compile(r"^css-[a-z0-9_-]{4,}$", re.IGNORECASE),
    re.compile(r"^jss\d+$", re.IGNORECASE),
    re.compile(r"^sc-[a-z0-9]+$", re.IGNORECASE),
    re.compile(r"^[a-f0-9]{8,}$", re.IGNORECASE),
    re.compile(r"^[a-z]+__[a-z]+___[a-z0-9]{5,}$", re.IGNORECASE),
)

_DYNAMIC_VALUE_PATTERNS = (
    re.compile(r"^[0-9]{4,}$"),
    re.compile(r"^[a-f0-9]{8}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{4}-[a-f0-9]{12}$", re.IGNORECASE),
    re.compile(r"[a-f0-9]{10,}", re.IGNORECASE),
    re.compile(r"[_:-]\d{3,}$"),
)

# attributes whose values are free text or enumerations, not generated ids
_TEXT_ATTRS = {"aria-label", "title", "type"}


def shannon_entropy(value: str) -> float:
    text = value.strip()
    if not text:
        return 0.0
    total = len(text)
    frequencies: dict[str, int] = {}
    for char in text:
        frequencies[char] = frequencies.get(char, 0) + 1

    entropy = 0.0
    for count in frequencies.values():
        probability = count / total
        entropy -= probability * log2(probability)
    return entropy


def digit_ratio(value: str) -> float:
    text = value.strip()
    if not text:
        return 0.0
    digits = sum(1 for char in text if char.isdigit())
    return digits / len(text)


def is_dynamic_class_token(token: str) -> bool:
    value = token.strip()
    if not value:
        return True
    if any(pattern.match(value) for pattern in _DYNAMIC_CLASS_PATTERNS):
        return True
    if len(value) > 18 and re.search(r"\d", value):
        return True
    if value.count("-") >= 3 and re.search(r"\d", value):
        return True
    return False


def is_stable_attribute_value(attr: str, value: str) -> bool:
    text = value.strip()
    if not text or len(text) > 120:
        return False
    if attr.strip().lower() in _TEXT_ATTRS:
        return True
    if digit_ratio(text) > 0.4:
        return False
    if any(pattern.search(text) for pattern in _DYNAMIC_VALUE_PATTERNS):
        return False
    if len(text) >= 8 and shannon_entropy(text) >= 4.2:
        return False
    return True
