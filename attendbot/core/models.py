"""Directory and attendance models for attendbot.

Records mirror what the department backend hands the chat widgets:
- FacultyRecord / SubjectRecord: the HOD's department directory
- StudentRecord: the roster a faculty member teaches
- AttendanceRecord: one taught class, optionally with per-student marks

Derived views (never stored):
- AttendanceStats: per-faculty aggregates used by the HOD assistant
- StudentAttendance: per-student totals used by the faculty/student assistants
"""

from __future__ import annotations

import math
import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, computed_field, field_validator

ClassType = Literal["lecture", "practical", "tutorial"]
MarkStatus = Literal["present", "absent"]


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (74.5 -> 75)."""
    return math.floor(value + 0.5)


class FacultyRecord(BaseModel):
    """A faculty member in a department directory.

    Attributes:
        id: Internal record id
        name: Display name (e.g., "Dr. Alice Smith")
        email: Login email, unique per directory
        password: Login password as issued by the HOD
        faculty_id: Staff identifier, unique per directory
        hod_id: Owning head of department
        assigned_subjects: Subject codes in assignment order
        created_at: When the record was created
    """

    id: str = Field(default_factory=_new_id)
    name: str
    email: str
    password: str = ""
    faculty_id: str
    hod_id: str | None = None
    assigned_subjects: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def name_parts(self) -> list[str]:
        """Lower-cased name words without honorifics."""
        honorifics = {"dr", "dr.", "prof", "prof.", "mr", "mr.", "ms", "ms.", "mrs", "mrs."}
        return [p for p in self.name.lower().split() if p not in honorifics and len(p) > 1]


class SubjectRecord(BaseModel):
    """A subject offered by a department.

    Attributes:
        id: Internal record id
        name: Subject title
        code: Subject code, unique per directory (e.g., "CS101")
        faculty_id: Internal id of the assigned faculty, if any
        faculty_name: Display name of the assigned faculty, if any
        semester: Semester number 1-8
        credits: Credit weight
        hod_id: Owning head of department
        created_at: When the record was created
    """

    id: str = Field(default_factory=_new_id)
    name: str
    code: str
    faculty_id: str | None = None
    faculty_name: str | None = None
    semester: int = Field(ge=1, le=8)
    credits: int = Field(gt=0)
    hod_id: str | None = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_assigned(self) -> bool:
        return bool(self.faculty_id)


class StudentRecord(BaseModel):
    """A student on a faculty member's roster."""

    usn: str = Field(min_length=10, max_length=10)
    name: str
    email: str = ""
    phone: str = ""
    semester: int | None = Field(default=None, ge=1, le=8)
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("usn")
    @classmethod
    def _normalize_usn(cls, value: str) -> str:
        if not value.isalnum():
            raise ValueError(f"USN must be alphanumeric: {value!r}")
        return value.upper()


class AttendanceRecord(BaseModel):
    """One class taught by a faculty member.

    Attributes:
        id: Internal record id
        faculty_id: Internal id of the faculty who taught the class
        subject_id: Internal id of the subject
        subject_code: Subject code (used for per-subject stats)
        subject_name: Subject title
        date: When the class was held
        class_type: lecture, practical or tutorial
        duration: Length of the class in minutes
        students_present: Headcount present
        total_students: Headcount enrolled
        notes: Free-form notes
        marks: Per-student status keyed by USN (may be empty)
    """

    id: str = Field(default_factory=_new_id)
    faculty_id: str
    subject_id: str
    subject_code: str
    subject_name: str
    date: datetime
    class_type: ClassType = "lecture"
    duration: int = Field(default=60, gt=0)
    students_present: int = Field(default=0, ge=0)
    total_students: int = Field(default=0, ge=0)
    notes: str | None = None
    marks: dict[str, MarkStatus] = Field(default_factory=dict)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def attendance_percentage(self) -> float:
        if self.total_students == 0:
            return 0.0
        return self.students_present / self.total_students * 100

    @property
    def hours(self) -> float:
        return self.duration / 60


class SubjectStats(BaseModel):
    """Per-subject aggregate inside AttendanceStats."""

    classes: int = 0
    hours: float = 0.0
    avg_attendance: float = 0.0


class AttendanceStats(BaseModel):
    """Aggregate teaching statistics for one faculty member."""

    total_classes: int = 0
    total_hours: float = 0.0
    average_attendance: float = 0.0
    classes_this_month: int = 0
    hours_this_month: float = 0.0
    subject_wise: dict[str, SubjectStats] = Field(default_factory=dict)

    @classmethod
    def from_records(
        cls,
        records: list[AttendanceRecord],
        today: datetime | None = None,
    ) -> "AttendanceStats":
        """Aggregate a faculty member's class records.

        Args:
            records: Records belonging to one faculty member
            today: Reference date for the "this month" counters

        Returns:
            AttendanceStats; averages are 0 when there are no records
        """
        today = today or datetime.now()
        this_month = [
            r for r in records if r.date.month == today.month and r.date.year == today.year
        ]

        by_subject: dict[str, list[AttendanceRecord]] = {}
        for record in records:
            by_subject.setdefault(record.subject_code, []).append(record)

        subject_wise = {
            code: SubjectStats(
                classes=len(group),
                hours=sum(r.hours for r in group),
                avg_attendance=sum(r.attendance_percentage for r in group) / len(group),
            )
            for code, group in by_subject.items()
        }

        average = 0.0
        if records:
            average = sum(r.attendance_percentage for r in records) / len(records)

        return cls(
            total_classes=len(records),
            total_hours=sum(r.hours for r in records),
            average_attendance=average,
            classes_this_month=len(this_month),
            hours_this_month=sum(r.hours for r in this_month),
            subject_wise=subject_wise,
        )


class StudentAttendance(BaseModel):
    """Attendance totals for one student across marked classes."""

    usn: str
    total_classes: int = 0
    attended: int = 0
    subject_wise: dict[str, tuple[int, int]] = Field(default_factory=dict)

    @property
    def percentage(self) -> float:
        if self.total_classes == 0:
            return 0.0
        return self.attended / self.total_classes * 100

    def classes_needed(self, threshold: int = 75) -> int:
        """Consecutive classes to attend before reaching the threshold.

        Args:
            threshold: Required attendance percentage (0-99)

        Returns:
            0 when the student is already at or above the threshold
        """
        deficit = threshold * self.total_classes - 100 * self.attended
        if deficit <= 0:
            return 0
        return math.ceil(deficit / (100 - threshold))

    @classmethod
    def from_records(cls, usn: str, records: list[AttendanceRecord]) -> "StudentAttendance":
        """Count marked classes for a student.

        Only records that carry a mark for the USN are counted.
        """
        usn = usn.upper()
        total = 0
        attended = 0
        subject_wise: dict[str, tuple[int, int]] = {}
        for record in records:
            status = record.marks.get(usn)
            if status is None:
                continue
            present = 1 if status == "present" else 0
            total += 1
            attended += present
            seen, hit = subject_wise.get(record.subject_code, (0, 0))
            subject_wise[record.subject_code] = (seen + 1, hit + present)
        return cls(usn=usn, total_classes=total, attended=attended, subject_wise=subject_wise)


__all__ = [
    "AttendanceRecord",
    "AttendanceStats",
    "ClassType",
    "FacultyRecord",
    "MarkStatus",
    "StudentAttendance",
    "StudentRecord",
    "SubjectRecord",
    "SubjectStats",
    "round_half_up",
]
