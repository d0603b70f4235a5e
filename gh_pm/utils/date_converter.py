"""Conversion of project-style date expressions into ISO dates.

GitHub Projects filters accept relative expressions such as ``@today-1w``;
the issue search API only understands absolute ``YYYY-MM-DD`` dates.
"""

import re
from datetime import date, timedelta

TODAY_OFFSET_PATTERN = re.compile(r"^@today([+-])(\d+)([dw])$")
ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
SEARCH_DATE_PATTERN = re.compile(r"\b(\w+):([-<>=]*@\w+(?:[+-]\d+[dw])?)")


def parse_date_expression(expression: str, base: date) -> str:
    """Convert a single date expression into an ISO date string.

    Supports:
    - @today
    - @today+Nd, @today-Nd, @today+Nw, @today-Nw
    - ISO dates (returned unchanged)

    Args:
        expression: Date expression without operators
        base: Date that ``@today`` refers to

    Returns:
        ISO formatted date string

    Raises:
        ValueError: If the expression is not recognized
    """
    if expression == "@today":
        return base.isoformat()

    match = TODAY_OFFSET_PATTERN.match(expression)
    if match:
        sign, amount, unit = match.groups()
        days = int(amount) * (7 if unit == "w" else 1)
        offset = timedelta(days=days)
        target = base - offset if sign == "-" else base + offset
        return target.isoformat()

    if ISO_DATE_PATTERN.match(expression):
        return expression

    raise ValueError(f"unsupported date format: {expression}")


def convert_projects_date(expression: str, base: date | None = None) -> str:
    """Convert a date expression with optional exclusion and comparison.

    Examples:
        >>> convert_projects_date(">@today-1w", date(2025, 9, 4))
        '>2025-08-28'
        >>> convert_projects_date("-@today", date(2025, 9, 4))
        '-2025-09-04'
    """
    base = base or date.today()
    expression = expression.replace(" ", "")

    prefix = ""
    if expression.startswith("-"):
        prefix = "-"
        expression = expression[1:]

    operator = ""
    for candidate in (">=", "<=", ">", "<"):
        if expression.startswith(candidate):
            operator = candidate
            expression = expression[len(candidate) :]
            break

    return prefix + operator + parse_date_expression(expression, base)


def convert_search_query(query: str, base: date | None = None) -> str:
    """Rewrite every ``field:<date expression>`` token in a search query.

    Tokens that fail to convert are left untouched.
    """

    def _replace(match: re.Match[str]) -> str:
        field, expression = match.group(1), match.group(2)
        try:
            return f"{field}:{convert_projects_date(expression, base)}"
        except ValueError:
            return match.group(0)

    return SEARCH_DATE_PATTERN.sub(_replace, query)
