import math
import re

# Separators accepted between course names in free-text choice lists.
CHOICE_SEPARATORS = re.compile(r'[,\n;]+')
_WHITESPACE = re.compile(r'\s+')


def clean_name(raw) -> str | None:
    """
    Normalizes a course name or student id for registry lookup.
    Strips outer whitespace and collapses inner runs to a single space.
    Returns None for empty/blank/missing values.
    """
    if raw is None:
        return None
    if isinstance(raw, float) and math.isnan(raw):
        return None
    text = str(raw).strip()
    if not text:
        return None
    return _WHITESPACE.sub(" ", text)


def parse_choice_list(raw) -> list[str]:
    """
    Turns a ranked choice list into clean course names, preserving order.

    Accepts a list/tuple of names or a comma/newline/semicolon-separated
    string. Blank entries are dropped; duplicates are kept so the request
    validator can reject them.
    """
    if raw is None:
        return []
    if isinstance(raw, str):
        tokens = CHOICE_SEPARATORS.split(raw)
    else:
        tokens = list(raw)
    names = []
    for token in tokens:
        name = clean_name(token)
        if name is not None:
            names.append(name)
    return names


def parse_average(raw) -> float | None:
    """
    Parses a grade average. Handles numbers and strings such as '27.5'
    or '27,5'. Returns None when the value is missing or not finite.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip().replace(",", ".")
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value
