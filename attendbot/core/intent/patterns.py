"""Ordered pattern tables for attendbot intent classification.

Each portal gets a table of (category, regex) entries. Classification walks
the table top to bottom and the first category whose pattern matches wins;
later entries are never evaluated. Modifier patterns (details, credentials,
count, ...) are not categories on their own in every table but refine what a
category handler returns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .taxonomy import IntentCategory, Portal

# Modifier patterns shared by the handlers
DETAILS = r"\b(details?|information|info|profile|complete|full)\b"
CREDENTIALS = r"\b(passwords?|login|credentials?|access|emails?|id)\b"
SPECIFIC = r"\b(show|tell|give|provide)\b"
COUNT = r"\b(how\s+many|total|count|number\s+of)\b"
LIST_ALL = r"\b(all|total|everyone|list)\b"
SEARCH = r"\b(find|search(?:\s+for)?|look\s+for|show\s+me|tell\s+me\s+about)\b"

# Student portal quick-reply payloads: key -> button label
STUDENT_PAYLOADS: dict[str, str] = {
    "subject_attendance": "Subject Breakdown",
    "attendance_history": "Attendance History",
    "faculty_list": "Faculty List",
    "office_hours": "Office Hours",
    "faculty_contact": "Contact Info",
    "tech_support": "Technical Support",
    "academic_support": "Academic Support",
}


def _payload_pattern() -> str:
    options = sorted(
        {re.escape(k) for k in STUDENT_PAYLOADS}
        | {re.escape(v.lower()) for v in STUDENT_PAYLOADS.values()},
        key=len,
        reverse=True,
    )
    return r"^\s*(" + "|".join(options) + r")\s*$"


HOD_TABLE: list[tuple[IntentCategory, str]] = [
    (IntentCategory.GREETING, r"\b(hello|hi|hey|good\s+morning|good\s+afternoon|good\s+evening)\b"),
    (IntentCategory.FACULTY, r"\b(faculty|faculties|teachers?|professors?|staff|instructors?)\b"),
    (IntentCategory.SUBJECT, r"\b(subjects?|courses?|class|modules?)\b"),
    (IntentCategory.ATTENDANCE, r"\b(attendance|present|absent|class\s+records?|teaching\s+hours)\b"),
    (
        IntentCategory.STATS,
        r"\b(stats|statistics|overview|dashboard|summary|reports?"
        r"|performance|analytics|metrics|progress)\b",
    ),
    (IntentCategory.HELP, r"\b(help|assist|support|guide|how\s+(?:do|can|to|does))\b"),
    (IntentCategory.SEARCH, SEARCH),
    (IntentCategory.COUNT, COUNT),
    (IntentCategory.CREDENTIALS, CREDENTIALS),
    (IntentCategory.DETAILS, DETAILS),
]

FACULTY_TABLE: list[tuple[IntentCategory, str]] = [
    (IntentCategory.GREETING, r"\b(hello|hi|hey|good\s+morning|good\s+afternoon|good\s+evening)\b"),
    (IntentCategory.SUBJECT, r"\b(subjects?|class|classes|courses?)\b"),
    (IntentCategory.ATTENDANCE, r"\b(attendance|percentage)\b"),
    (
        IntentCategory.STUDENTS,
        r"\bstudents?\b.*\b(total|count|how\s+many|number)\b"
        r"|\b(total|count|how\s+many|number)\b.*\bstudents?\b",
    ),
    (IntentCategory.HELP, r"\b(help|assist|support|guide)\b"),
]

STUDENT_TABLE: list[tuple[IntentCategory, str]] = [
    (IntentCategory.PAYLOAD, _payload_pattern()),
    (IntentCategory.GREETING, r"^\s*(hi|hello|hey|good\s+morning|good\s+afternoon|good\s+evening)\b"),
    (IntentCategory.ATTENDANCE, r"\b(attendance|present|absent)\b"),
    (IntentCategory.FACULTY, r"\b(faculty|teachers?|professors?)\b"),
    (IntentCategory.HELP, r"\b(help|support)\b"),
]

PORTAL_TABLES: dict[Portal, list[tuple[IntentCategory, str]]] = {
    Portal.HOD: HOD_TABLE,
    Portal.FACULTY: FACULTY_TABLE,
    Portal.STUDENT: STUDENT_TABLE,
}


@dataclass
class PatternTable:
    """Compiled, ordered category patterns for one portal.

    Attributes:
        entries: (category, compiled pattern) pairs in priority order
    """

    entries: list[tuple[IntentCategory, re.Pattern[str]]] = field(default_factory=list)

    @classmethod
    def compile(cls, table: list[tuple[IntentCategory, str]]) -> "PatternTable":
        """Compile a raw table, case-insensitively."""
        return cls([(category, re.compile(pattern, re.IGNORECASE)) for category, pattern in table])

    @classmethod
    def for_portal(cls, portal: Portal) -> "PatternTable":
        return cls.compile(PORTAL_TABLES[Portal(portal)])

    @property
    def categories(self) -> list[IntentCategory]:
        return [category for category, _ in self.entries]

    def classify(self, text: str) -> IntentCategory | None:
        """Return the first category whose pattern matches, or None."""
        for category, pattern in self.entries:
            if pattern.search(text):
                return category
        return None


class QueryModifiers:
    """Precompiled modifier checks used by the category handlers."""

    def __init__(self) -> None:
        self._details = re.compile(DETAILS, re.IGNORECASE)
        self._credentials = re.compile(CREDENTIALS, re.IGNORECASE)
        self._specific = re.compile(SPECIFIC, re.IGNORECASE)
        self._count = re.compile(COUNT, re.IGNORECASE)
        self._list_all = re.compile(LIST_ALL, re.IGNORECASE)
        self._search = re.compile(SEARCH, re.IGNORECASE)

    def wants_details(self, text: str) -> bool:
        return bool(self._details.search(text))

    def wants_credentials(self, text: str) -> bool:
        return bool(self._credentials.search(text))

    def wants_sensitive(self, text: str) -> bool:
        """Detail, credential or show/give/provide wording."""
        return (
            self.wants_details(text)
            or self.wants_credentials(text)
            or bool(self._specific.search(text))
        )

    def wants_count(self, text: str) -> bool:
        return bool(self._count.search(text))

    def wants_listing(self, text: str) -> bool:
        """Count wording or all/total/everyone/list."""
        return self.wants_count(text) or bool(self._list_all.search(text))

    def strip_search_words(self, text: str) -> str:
        return self._search.sub(" ", text)


def payload_key(text: str) -> str | None:
    """Map a quick-reply payload key or button label to its payload key."""
    needle = text.strip().lower()
    for key, label in STUDENT_PAYLOADS.items():
        if needle in (key, label.lower()):
            return key
    return None
