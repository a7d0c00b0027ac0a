"""Intent taxonomy for the attendbot assistants.

Defines the portals, the query categories, the tagged response payloads and
the resolver's input/output containers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Literal, Union

from ..models import (
    AttendanceStats,
    FacultyRecord,
    StudentAttendance,
    StudentRecord,
    SubjectRecord,
)


class Portal(str, Enum):
    """Front-end a chat widget is embedded in."""

    HOD = "hod"
    FACULTY = "faculty"
    STUDENT = "student"


class IntentCategory(str, Enum):
    """Query categories, named after what the user asks about."""

    LOOKUP = "lookup"  # Direct identifier match (USN, faculty ID, code, email)
    GREETING = "greeting"
    FACULTY = "faculty"
    SUBJECT = "subject"
    STUDENTS = "students"  # Roster size (faculty portal)
    ATTENDANCE = "attendance"
    STATS = "stats"  # Stats and performance analytics
    HELP = "help"
    SEARCH = "search"
    COUNT = "count"
    CREDENTIALS = "credentials"
    DETAILS = "details"
    PAYLOAD = "payload"  # Quick-reply payload (student portal)
    DEFAULT = "default"
    ERROR = "error"


# =============================================================================
# Payloads
# =============================================================================


@dataclass(frozen=True)
class NoPayload:
    kind: Literal["none"] = "none"


@dataclass(frozen=True)
class FacultyPayload:
    record: FacultyRecord
    stats: AttendanceStats | None = None
    kind: Literal["faculty"] = "faculty"


@dataclass(frozen=True)
class FacultyListPayload:
    records: tuple[FacultyRecord, ...]
    kind: Literal["faculty_list"] = "faculty_list"


@dataclass(frozen=True)
class SubjectPayload:
    record: SubjectRecord
    kind: Literal["subject"] = "subject"


@dataclass(frozen=True)
class SubjectListPayload:
    records: tuple[SubjectRecord, ...]
    kind: Literal["subject_list"] = "subject_list"


@dataclass(frozen=True)
class StudentPayload:
    record: StudentRecord
    attendance: StudentAttendance | None = None
    kind: Literal["student"] = "student"


@dataclass(frozen=True)
class SearchPayload:
    faculty: tuple[FacultyRecord, ...]
    subjects: tuple[SubjectRecord, ...]
    kind: Literal["search"] = "search"


Payload = Union[
    NoPayload,
    FacultyPayload,
    FacultyListPayload,
    SubjectPayload,
    SubjectListPayload,
    StudentPayload,
    SearchPayload,
]


# =============================================================================
# Resolver input/output
# =============================================================================

StatsProvider = Callable[[str], Awaitable[AttendanceStats]]
StudentAttendanceProvider = Callable[[str], Awaitable[StudentAttendance]]


@dataclass(frozen=True)
class QuickReply:
    """A suggested follow-up button.

    Attributes:
        text: Button label, also sent as the next query
        payload: Stable key for the follow-up answer
    """

    text: str
    payload: str


@dataclass
class ResolverContext:
    """Read-only snapshot the resolver answers from.

    Attributes:
        faculty: Faculty directory in insertion order
        subjects: Subject directory in insertion order
        students: Student roster in insertion order
        stats_provider: Attendance aggregates by faculty record id
        student_attendance_provider: Attendance totals by USN
        usn: Signed-in student (student portal only)
        faculty_id: Internal id of the signed-in faculty (faculty portal only)
    """

    faculty: list[FacultyRecord] = field(default_factory=list)
    subjects: list[SubjectRecord] = field(default_factory=list)
    students: list[StudentRecord] = field(default_factory=list)
    stats_provider: StatsProvider | None = None
    student_attendance_provider: StudentAttendanceProvider | None = None
    usn: str | None = None
    faculty_id: str | None = None


@dataclass
class ResolverResponse:
    """One assistant answer.

    Attributes:
        message: Non-empty display text (Markdown-style bold, bullets)
        category: Category that produced the answer
        data: Tagged payload for programmatic consumers
        quick_replies: Suggested follow-up buttons
    """

    message: str
    category: IntentCategory = IntentCategory.DEFAULT
    data: Payload = field(default_factory=NoPayload)
    quick_replies: list[QuickReply] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.category is not IntentCategory.ERROR
