"""
Rule-based extraction of reservation fields from a free-text guest message.

``extract_reservation_fields`` returns only the fields it found, keyed by
their draft names (``partySize``, ``date``, ``time``, ``customerName``,
``email``, ``phone``). Dates come back as ``YYYY-MM-DD`` and times as
``HH:MM``.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Any, Dict, Optional

NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6,
    "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12,
}

# Common misspellings; 'for', 'to' and 'too' are left out on purpose
NUMBER_WORD_VARIANTS = {
    "tw": 2, "thre": 3, "tree": 3, "thr": 3, "fou": 4, "fve": 5, "fi": 5,
    "sx": 6, "sev": 7, "sevn": 7, "ate": 8, "eigth": 8, "nien": 9, "nin": 9,
    "elevn": 11, "twelv": 12,
}

MONTHS = {
    "january": 1, "february": 2, "march": 3, "april": 4, "may": 5, "june": 6,
    "july": 7, "august": 8, "september": 9, "october": 10, "november": 11, "december": 12,
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "sept": 9, "oct": 10, "nov": 11, "dec": 12,
}

WEEKDAYS = {
    "monday": 0, "tuesday": 1, "wednesday": 2, "thursday": 3,
    "friday": 4, "saturday": 5, "sunday": 6,
}

_MONTH_ALT = "|".join(sorted(MONTHS, key=len, reverse=True))
_NUMBER_ALT = "|".join(NUMBER_WORDS)

PARTY_PATTERNS = [
    re.compile(rf"\b(?:party of|table for)\s*(?P<size>\d{{1,2}}|{_NUMBER_ALT})\b"),
    re.compile(rf"\bfor\s*(?P<size>\d{{1,2}})\b(?!\s*(?:[:/.-]\d|am\b|pm\b|(?:{_MONTH_ALT})\b))"),
    re.compile(r"\b(?P<size>\d{1,2})\s*(?:people|persons|person|guests|pp)\b"),
    re.compile(r"\b(?P<size>\d{1,2})\s*(?:please|pls|thanks|thank you)\b"),
]

TIME_PATTERNS = [
    re.compile(r"\b(?P<hour>\d{1,2}):(?P<minute>\d{2})(?!\d)\s*(?P<ampm>am|pm)?"),
    re.compile(r"(?<![\d:])\b(?P<hour>\d{1,2})\s*(?P<ampm>am|pm)\b"),
    re.compile(r"\bat\s*(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?(?![\d/-])\s*(?P<ampm>am|pm)?"),
]

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(\+?1[\s.-]?)?(\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4})")

CONFIRMATION_WORDS = {
    "yes", "yeah", "yep", "yup", "no", "nope", "sure", "ok", "okay", "confirm",
    "confirmed", "correct", "right", "absolutely", "please", "thanks", "thank",
    "hi", "hello", "hey",
}
DATE_TIME_WORDS = {
    "tomorrow", "tmrw", "tmr", "today", "tonight", "morning", "afternoon",
    "evening", "night", "noon", "midnight", "next", "this", "day", "after",
} | set(WEEKDAYS) | set(MONTHS)
PARTY_SIZE_WORDS = set(NUMBER_WORDS) | {str(n) for n in range(1, 13)}
INTENT_STOP_WORDS = {
    "i", "need", "want", "wanna", "would", "like", "to", "make", "book", "booking",
    "a", "an", "the", "table", "reservation", "res", "party", "of", "for", "fo", "at",
    "on", "pls", "you", "your", "and", "is", "are", "name", "names", "we", "us",
    "what", "when", "where", "how", "do", "does", "can", "could", "open", "hours",
    "menu", "looking", "trying", "hoping", "planning", "calling", "going", "here",
    "interested", "just", "not", "sorry", "good", "fine",
}

_NAME_STOP_WORDS = CONFIRMATION_WORDS | DATE_TIME_WORDS | PARTY_SIZE_WORDS | INTENT_STOP_WORDS


def _to_party_size(raw: str) -> Optional[int]:
    if raw.isdigit():
        size = int(raw)
    else:
        size = NUMBER_WORDS.get(raw, NUMBER_WORD_VARIANTS.get(raw))
    if size is not None and 0 < size < 100:
        return size
    return None


def extract_party_size(text: str) -> Optional[int]:
    """Party size from a lowercased message; the last match wins"""
    candidate = None
    for pattern in PARTY_PATTERNS:
        for match in pattern.finditer(text):
            size = _to_party_size(match.group("size"))
            if size is not None:
                candidate = size

    if candidate is None:
        for token in re.split(r"[^a-z0-9]+", text):
            if token in NUMBER_WORDS or token in NUMBER_WORD_VARIANTS:
                candidate = _to_party_size(token)

    if candidate is None:
        trimmed = text.strip()
        if re.fullmatch(r"\d{1,2}", trimmed):
            candidate = _to_party_size(trimmed)

    return candidate


def _safe_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _add_month(day_of: date) -> date:
    year, month = divmod(day_of.month, 12)
    return date(day_of.year + year, month + 1, 1)


def extract_date(text: str, today: date) -> Optional[date]:
    """Calendar date from a lowercased message, relative to ``today``"""
    iso = re.search(r"\b(\d{4})-(\d{2})-(\d{2})\b", text)
    if iso:
        parsed = _safe_date(int(iso.group(1)), int(iso.group(2)), int(iso.group(3)))
        if parsed:
            return parsed

    us = re.search(r"\b(\d{1,2})[/-](\d{1,2})[/-](\d{2,4})\b", text)
    if us:
        year = us.group(3)
        if len(year) == 2:
            year = "20" + year
        parsed = _safe_date(int(year), int(us.group(1)), int(us.group(2)))
        if parsed:
            return parsed

    if re.search(r"\bday after tomorrow\b", text):
        return today + timedelta(days=2)
    if re.search(r"\b(tom+o?r+o?w|tmrw|tmr)\b", text):
        return today + timedelta(days=1)
    if re.search(r"\b(today|tonight)\b", text):
        return today

    in_days = re.search(r"\bin\s+(\d{1,2})\s+days?\b", text)
    if in_days:
        return today + timedelta(days=int(in_days.group(1)))

    weekday = re.search(r"\b(?:(this|next)\s+)?(" + "|".join(WEEKDAYS) + r")\b", text)
    if weekday:
        qualifier, name = weekday.group(1), weekday.group(2)
        diff = WEEKDAYS[name] - today.weekday()
        if diff <= 0 or qualifier == "next":
            diff += 7
        if qualifier == "next" and diff < 7:
            diff += 7
        return today + timedelta(days=diff)

    month_day = re.search(rf"\b({_MONTH_ALT})\s+(\d{{1,2}})(?:st|nd|rd|th)?\b", text)
    if month_day:
        month = MONTHS[month_day.group(1)]
        day_num = int(month_day.group(2))
        parsed = _safe_date(today.year, month, day_num)
        if parsed and parsed < today:
            parsed = _safe_date(today.year + 1, month, day_num)
        if parsed:
            return parsed

    ordinal = re.search(r"\b(?:on\s+)?(?:the\s+)?(\d{1,2})(?:st|nd|rd|th)\b", text)
    if ordinal:
        day_num = int(ordinal.group(1))
        base = today if day_num >= today.day else _add_month(today)
        if day_num <= calendar.monthrange(base.year, base.month)[1]:
            return base.replace(day=day_num)

    return None


def extract_time(text: str) -> Optional[str]:
    """Time of day as HH:MM from a lowercased message; the last match wins"""
    result = None
    if re.search(r"\bnoon\b", text):
        result = "12:00"
    if re.search(r"\b(midnight|12am)\b", text):
        result = "00:00"

    candidate = None
    for pattern in TIME_PATTERNS:
        for match in pattern.finditer(text):
            hour = int(match.group("hour"))
            minute = int(match.group("minute") or 0) if "minute" in pattern.groupindex else 0
            ampm = match.group("ampm")
            if not ampm:
                # Dining-hours heuristic
                if hour in (9, 11):
                    ampm = "am"
                elif 1 <= hour <= 8 or hour in (10, 12):
                    ampm = "pm"
            candidate = (hour, minute, ampm)

    if candidate:
        hour, minute, ampm = candidate
        if ampm == "pm" and hour < 12:
            hour += 12
        elif ampm == "am" and hour == 12:
            hour = 0
        if 0 <= hour <= 23 and 0 <= minute <= 59:
            result = f"{hour:02d}:{minute:02d}"

    return result


def _sanitize_name(raw: str) -> Optional[str]:
    kept = []
    for token in raw.lstrip(", ").split():
        cleaned = re.sub(r"[^A-Za-z\-']", "", token)
        lowered = cleaned.lower()
        if not cleaned or lowered in _NAME_STOP_WORDS:
            break
        if not re.fullmatch(r"[a-z][a-z\-']*", lowered):
            break
        kept.append(cleaned[0].upper() + cleaned[1:])
        if len(kept) == 3:
            break
    candidate = " ".join(kept)
    return candidate if len(candidate) >= 2 else None


def extract_name(original: str) -> Optional[str]:
    """Guest name from the raw (not lowercased) message"""
    match = (
        re.search(r"\bmy name'?s?\s+(?:is\s+)?([a-zA-Z\s\-']{2,})", original, re.IGNORECASE)
        or re.search(r"(?:^|[\s,])name\s*is\s+([a-zA-Z\s\-']{2,})", original, re.IGNORECASE)
    )
    if match:
        return _sanitize_name(match.group(1).strip())

    match = (
        re.search(r"\bi\s*(?:am|'m)\s+([^,\n]{1,60})", original, re.IGNORECASE)
        or re.search(r"\bim\s+([^,\n]{1,60})", original, re.IGNORECASE)
    )
    if match:
        candidate = _sanitize_name(match.group(1).strip())
        if candidate:
            return candidate

    simple = original.strip()
    if re.fullmatch(r"[a-zA-Z][a-zA-Z\s\-']{1,40}", simple):
        tokens = simple.lower().split()
        if len(tokens) <= 3 and not any(token in _NAME_STOP_WORDS for token in tokens):
            return " ".join(simple.split())

    return None


def extract_reservation_fields(message: str, today: date) -> Dict[str, Any]:
    """Extract every reservation field present in ``message``"""
    lower = message.lower()
    found: Dict[str, Any] = {}

    party_size = extract_party_size(lower)
    if party_size is not None:
        found["partySize"] = party_size

    parsed_date = extract_date(lower, today)
    if parsed_date:
        found["date"] = parsed_date.isoformat()

    parsed_time = extract_time(lower)
    if parsed_time:
        found["time"] = parsed_time

    name = extract_name(message)
    if name:
        found["customerName"] = name

    email = EMAIL_PATTERN.search(message)
    if email:
        found["email"] = email.group(0)

    phone = PHONE_PATTERN.search(message)
    if phone:
        found["phone"] = phone.group(0).strip()

    return found
