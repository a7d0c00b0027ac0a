"""Entity extraction and directory matching for attendbot queries.

Identifier tokens (USNs, faculty IDs, subject codes, emails) are unambiguous
and resolve before any category keyword is considered. Name matching is
fuzzier and only runs inside the faculty/subject handlers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from ..models import FacultyRecord, StudentRecord, SubjectRecord

# USN shape: 10 alphanumerics with at least one letter and one digit, so
# ten-letter words ("attendance", "percentage") never look like a USN.
USN_PATTERN = re.compile(r"\b(?=[A-Z0-9]*\d)(?=[A-Z0-9]*[A-Z])[A-Z0-9]{10}\b", re.IGNORECASE)
USN_PREFIXED = re.compile(r"\busn[:\s]*([A-Z0-9]{10})\b", re.IGNORECASE)
EMAIL_PATTERN = re.compile(r"[\w.+-]+@[\w-]+(?:\.[\w-]+)+")
TOKEN_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9_-]*")

SEARCH_STOPWORDS = {"a", "an", "the", "me", "for", "about", "of", "all", "any", "please", "is", "who"}


@dataclass
class IdentifierTokens:
    """Identifier-shaped tokens found in a query.

    Attributes:
        usns: Upper-cased USN-shaped tokens in query order
        emails: Lower-cased email tokens in query order
        words: Lower-cased plain tokens (for faculty ID / code equality)
    """

    usns: list[str] = field(default_factory=list)
    emails: list[str] = field(default_factory=list)
    words: list[str] = field(default_factory=list)


@dataclass
class DirectMatch:
    """Result of a direct identifier lookup.

    Exactly one of the record fields is set when ``found`` is True. When a
    USN-shaped token matched nothing, ``missing_usn`` carries it.
    """

    faculty: FacultyRecord | None = None
    subject: SubjectRecord | None = None
    student: StudentRecord | None = None
    missing_usn: str | None = None

    @property
    def found(self) -> bool:
        return any((self.faculty, self.subject, self.student))


def extract_identifiers(text: str) -> IdentifierTokens:
    """Pull identifier-shaped tokens out of a query."""
    tokens = IdentifierTokens()
    tokens.emails = [m.group(0).lower() for m in EMAIL_PATTERN.finditer(text)]
    without_emails = EMAIL_PATTERN.sub(" ", text)

    for match in USN_PREFIXED.finditer(without_emails):
        usn = match.group(1).upper()
        if usn not in tokens.usns:
            tokens.usns.append(usn)
    for match in USN_PATTERN.finditer(without_emails):
        usn = match.group(0).upper()
        if usn not in tokens.usns:
            tokens.usns.append(usn)

    tokens.words = [m.group(0).lower() for m in TOKEN_PATTERN.finditer(without_emails)]
    return tokens


def find_direct_match(
    text: str,
    faculty: list[FacultyRecord],
    subjects: list[SubjectRecord],
    students: list[StudentRecord],
) -> DirectMatch:
    """Resolve identifier tokens against the directory.

    Lookup order per token kind: USN (students, then faculty IDs, then
    subject codes), email (faculty), plain tokens (faculty IDs, then subject
    codes). The first hit wins.

    Args:
        text: Raw query
        faculty: Faculty snapshot
        subjects: Subject snapshot
        students: Student snapshot

    Returns:
        DirectMatch; ``found`` is False when nothing matched
    """
    tokens = extract_identifiers(text)

    for usn in tokens.usns:
        for student in students:
            if student.usn.upper() == usn:
                return DirectMatch(student=student)
        for record in faculty:
            if record.faculty_id.upper() == usn:
                return DirectMatch(faculty=record)
        for subject in subjects:
            if subject.code.upper() == usn:
                return DirectMatch(subject=subject)

    for email in tokens.emails:
        for record in faculty:
            if record.email.lower() == email:
                return DirectMatch(faculty=record)

    for word in tokens.words:
        for record in faculty:
            if record.faculty_id.lower() == word:
                return DirectMatch(faculty=record)
        for subject in subjects:
            if subject.code.lower() == word:
                return DirectMatch(subject=subject)

    if tokens.usns:
        return DirectMatch(missing_usn=tokens.usns[0])
    return DirectMatch()


def _contains_word(text: str, word: str) -> bool:
    return re.search(rf"(?<![\w]){re.escape(word)}(?![\w])", text) is not None


def match_faculty(text: str, faculty: list[FacultyRecord]) -> FacultyRecord | None:
    """Find the first faculty member the query refers to.

    A record matches when the query contains its full name, faculty ID or
    email, or any of its (non-honorific) name words as a whole word.
    """
    lower = text.lower().strip()
    if not lower:
        return None
    for record in faculty:
        if record.name.lower() in lower or lower in record.name.lower():
            return record
        if _contains_word(lower, record.faculty_id.lower()) or record.email.lower() in lower:
            return record
        if any(_contains_word(lower, part) for part in record.name_parts):
            return record
    return None


def match_subject(text: str, subjects: list[SubjectRecord]) -> SubjectRecord | None:
    """Find the first subject whose code or name the query mentions."""
    lower = text.lower().strip()
    if not lower:
        return None
    for subject in subjects:
        if _contains_word(lower, subject.code.lower()):
            return subject
        if subject.name.lower() in lower or lower in subject.name.lower():
            return subject
    return None


def search_term(text: str) -> str:
    """Reduce a search query to the words being searched for."""
    words = [w for w in re.findall(r"[\w@.+-]+", text.lower()) if w not in SEARCH_STOPWORDS]
    return " ".join(words).strip(" .")


def search_directory(
    term: str,
    faculty: list[FacultyRecord],
    subjects: list[SubjectRecord],
) -> tuple[list[FacultyRecord], list[SubjectRecord]]:
    """Substring search across faculty and subjects, directory order kept.

    Faculty match on name, email, faculty ID or an assigned subject code;
    subjects match on name or code.
    """
    term = term.lower().strip()
    if not term:
        return [], []
    faculty_hits = [
        f
        for f in faculty
        if term in f.name.lower()
        or term in f.email.lower()
        or term in f.faculty_id.lower()
        or any(term in code.lower() for code in f.assigned_subjects)
    ]
    subject_hits = [s for s in subjects if term in s.name.lower() or term in s.code.lower()]
    return faculty_hits, subject_hits
