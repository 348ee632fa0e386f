"""Free-text date normalisation.

The calendar shows dates as ``12-05-2025`` today, but older layouts used
``12/05/25`` and ``za 12 mei 2025``. ``normalize_date`` accepts all of them,
with or without surrounding words, and never raises.
"""

from __future__ import annotations

import re
from datetime import date, datetime

# Tried in this order; the first format that parses wins.
SUPPORTED_FORMATS = [
    "%d-%m-%Y",
    "%d/%m/%Y",
    "%d.%m.%Y",
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%d-%m-%y",
    "%d/%m/%y",
    "%d.%m.%y",
    "%d %B %Y",
    "%d %b %Y",
    "%d %B %y",
    "%d %b %y",
]

# Localised month names -> names strptime understands in the C locale
MONTH_NAMES: dict[str, dict[str, str]] = {
    "nl": {
        "januari": "January",
        "februari": "February",
        "maart": "March",
        "april": "April",
        "mei": "May",
        "juni": "June",
        "juli": "July",
        "augustus": "August",
        "september": "September",
        "oktober": "October",
        "november": "November",
        "december": "December",
        "jan": "Jan",
        "feb": "Feb",
        "mrt": "Mar",
        "apr": "Apr",
        "jun": "Jun",
        "jul": "Jul",
        "aug": "Aug",
        "sep": "Sep",
        "sept": "Sep",
        "okt": "Oct",
        "nov": "Nov",
        "dec": "Dec",
    },
    "en": {"sept": "Sep"},
}

ENGLISH_MONTHS = [
    "january", "february", "march", "april", "may", "june", "july",
    "august", "september", "october", "november", "december",
    "jan", "feb", "mar", "apr", "jun", "jul", "aug", "sep", "sept",
    "oct", "nov", "dec",
]


def _alternation(names) -> str:
    # longest first so "juni" wins over "jun"
    return "|".join(re.escape(n) for n in sorted(set(names), key=len, reverse=True))


_ALL_MONTHS = _alternation(
    ENGLISH_MONTHS + [n for table in MONTH_NAMES.values() for n in table]
)

_ISO_TOKEN = r"\d{4}[-/]\d{1,2}[-/]\d{1,2}"
_DMY_TOKEN = r"\d{1,2}[-/.]\d{1,2}[-/.](?:\d{4}|\d{2})"
_NAMED_TOKEN = r"\d{{1,2}}\s+(?:{months})\.?,?\s+(?:\d{{4}}|\d{{2}})"

# Anything shaped like a date, in any supported locale. Shared with the
# field heuristics and the free-text strategy.
DATE_LIKE_RE = re.compile(
    r"(?<!\d)(?:"
    + _ISO_TOKEN
    + "|"
    + _DMY_TOKEN
    + "|"
    + _NAMED_TOKEN.format(months=_ALL_MONTHS)
    + r")(?!\d)",
    re.IGNORECASE,
)

_WS_RE = re.compile(r"\s+")


def _locale_key(locale_hint: str | None) -> str:
    if not locale_hint:
        return "en"
    return re.split(r"[-_]", locale_hint.strip().lower())[0]


def _translate_months(text: str, locale_hint: str | None) -> str:
    table = MONTH_NAMES.get(_locale_key(locale_hint))
    if not table:
        return text
    pattern = re.compile(r"\b(" + _alternation(table) + r")\b", re.IGNORECASE)
    return pattern.sub(lambda m: table[m.group(1).lower()], text)


def _clean_token(token: str) -> str:
    """Drop the dot/comma after an abbreviated month: '12 Oct., 2025'."""
    token = re.sub(r"(?<=[A-Za-z])\.", "", token)
    token = token.replace(",", "")
    return _WS_RE.sub(" ", token).strip()


def _try_formats(token: str) -> date | None:
    for fmt in SUPPORTED_FORMATS:
        try:
            return datetime.strptime(token, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(text: str | None, locale_hint: str | None = "nl") -> date | None:
    """Parse the first date found in *text*; ``None`` if nothing parses."""
    if not text:
        return None
    cleaned = _WS_RE.sub(" ", text).strip()
    if not cleaned:
        return None
    translated = _translate_months(cleaned, locale_hint)

    parsed = _try_formats(_clean_token(translated))
    if parsed:
        return parsed

    for m in DATE_LIKE_RE.finditer(translated):
        parsed = _try_formats(_clean_token(m.group(0)))
        if parsed:
            return parsed
    return None
