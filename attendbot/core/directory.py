"""Department directory repositories for attendbot.

The chat assistants only ever read snapshots of these repositories. Writes
(create, delete, assign) belong to the management screens and enforce the
directory invariants:
- faculty email and faculty_id are unique
- subject code is unique
- student USN is unique

Repositories are async so a backend-backed implementation can replace the
in-memory one without touching callers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from .models import (
    AttendanceRecord,
    AttendanceStats,
    FacultyRecord,
    StudentAttendance,
    StudentRecord,
    SubjectRecord,
)

logger = logging.getLogger(__name__)


class DirectoryError(Exception):
    """Base error for directory operations."""


class DuplicateRecordError(DirectoryError):
    """A record would break a uniqueness invariant."""


class RecordNotFoundError(DirectoryError):
    """The requested record does not exist."""


class SeedFileError(DirectoryError):
    """A seed file could not be read or validated."""


class CreateFacultyData(BaseModel):
    """Input for FacultyRepository.create."""

    name: str
    email: str
    password: str
    faculty_id: str


class CreateSubjectData(BaseModel):
    """Input for SubjectRepository.create."""

    name: str
    code: str
    faculty_id: str | None = None
    faculty_name: str | None = None
    semester: int = Field(ge=1, le=8)
    credits: int = Field(gt=0)


# =============================================================================
# Interfaces
# =============================================================================


class FacultyRepository(ABC):
    """Read/write access to faculty records."""

    @abstractmethod
    async def list(self, hod_id: str | None = None) -> list[FacultyRecord]:
        """Faculty in insertion order, optionally filtered by HOD."""
        ...

    @abstractmethod
    async def get(self, record_id: str) -> FacultyRecord | None: ...

    @abstractmethod
    async def create(self, data: CreateFacultyData, hod_id: str | None = None) -> FacultyRecord:
        """Create a faculty record.

        Raises:
            DuplicateRecordError: If the email or faculty_id is taken
        """
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> None: ...

    @abstractmethod
    async def update_subjects(self, record_id: str, codes: list[str]) -> FacultyRecord: ...


class SubjectRepository(ABC):
    """Read/write access to subject records."""

    @abstractmethod
    async def list(self, hod_id: str | None = None) -> list[SubjectRecord]: ...

    @abstractmethod
    async def get(self, record_id: str) -> SubjectRecord | None: ...

    @abstractmethod
    async def create(self, data: CreateSubjectData, hod_id: str | None = None) -> SubjectRecord:
        """Create a subject record.

        Raises:
            DuplicateRecordError: If the code is taken
        """
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> None: ...

    @abstractmethod
    async def assign_faculty(
        self,
        record_id: str,
        faculty_id: str | None,
        faculty_name: str | None = None,
    ) -> SubjectRecord: ...

    async def by_semester(self, hod_id: str | None = None) -> dict[int, list[SubjectRecord]]:
        """Group subjects by semester, keeping insertion order within a group."""
        grouped: dict[int, list[SubjectRecord]] = {}
        for subject in await self.list(hod_id):
            grouped.setdefault(subject.semester, []).append(subject)
        return grouped


class StudentRepository(ABC):
    """Read/write access to the student roster."""

    @abstractmethod
    async def list(self) -> list[StudentRecord]: ...

    @abstractmethod
    async def get(self, usn: str) -> StudentRecord | None: ...

    @abstractmethod
    async def create(self, record: StudentRecord) -> StudentRecord: ...


class AttendanceRepository(ABC):
    """Class attendance records and their aggregates."""

    @abstractmethod
    async def add(self, record: AttendanceRecord) -> AttendanceRecord: ...

    @abstractmethod
    async def by_faculty(self, faculty_id: str) -> list[AttendanceRecord]: ...

    @abstractmethod
    async def by_subject(self, subject_id: str) -> list[AttendanceRecord]: ...

    async def stats(self, faculty_id: str, today: datetime | None = None) -> AttendanceStats:
        """Aggregate statistics for one faculty member."""
        return AttendanceStats.from_records(await self.by_faculty(faculty_id), today)

    @abstractmethod
    async def student_summary(self, usn: str) -> StudentAttendance: ...


# =============================================================================
# In-memory implementations
# =============================================================================


class InMemoryFacultyRepository(FacultyRepository):
    """Faculty records held in a list."""

    def __init__(self, records: list[FacultyRecord] | None = None) -> None:
        self._records: list[FacultyRecord] = []
        for record in records or []:
            self._insert(record)

    def _insert(self, record: FacultyRecord) -> FacultyRecord:
        for existing in self._records:
            if existing.email.lower() == record.email.lower():
                raise DuplicateRecordError(f"Faculty with email {record.email} already exists")
            if existing.faculty_id.lower() == record.faculty_id.lower():
                raise DuplicateRecordError(
                    f"Faculty with ID {record.faculty_id} already exists"
                )
        self._records.append(record)
        return record

    def _require(self, record_id: str) -> FacultyRecord:
        for record in self._records:
            if record.id == record_id:
                return record
        raise RecordNotFoundError(f"Faculty not found: {record_id}")

    async def list(self, hod_id: str | None = None) -> list[FacultyRecord]:
        return [
            r.model_copy(deep=True)
            for r in self._records
            if hod_id is None or r.hod_id == hod_id
        ]

    async def get(self, record_id: str) -> FacultyRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record.model_copy(deep=True)
        return None

    async def create(self, data: CreateFacultyData, hod_id: str | None = None) -> FacultyRecord:
        record = self._insert(FacultyRecord(**data.model_dump(), hod_id=hod_id))
        logger.info(f"Created faculty {record.faculty_id} ({record.name})")
        return record.model_copy(deep=True)

    async def delete(self, record_id: str) -> None:
        record = self._require(record_id)
        self._records.remove(record)
        logger.info(f"Deleted faculty {record.faculty_id}")

    async def update_subjects(self, record_id: str, codes: list[str]) -> FacultyRecord:
        record = self._require(record_id)
        record.assigned_subjects = list(codes)
        return record.model_copy(deep=True)


class InMemorySubjectRepository(SubjectRepository):
    """Subject records held in a list."""

    def __init__(self, records: list[SubjectRecord] | None = None) -> None:
        self._records: list[SubjectRecord] = []
        for record in records or []:
            self._insert(record)

    def _insert(self, record: SubjectRecord) -> SubjectRecord:
        if any(s.code.lower() == record.code.lower() for s in self._records):
            raise DuplicateRecordError(f"Subject with code {record.code} already exists")
        self._records.append(record)
        return record

    def _require(self, record_id: str) -> SubjectRecord:
        for record in self._records:
            if record.id == record_id:
                return record
        raise RecordNotFoundError(f"Subject not found: {record_id}")

    async def list(self, hod_id: str | None = None) -> list[SubjectRecord]:
        return [
            r.model_copy(deep=True)
            for r in self._records
            if hod_id is None or r.hod_id == hod_id
        ]

    async def get(self, record_id: str) -> SubjectRecord | None:
        for record in self._records:
            if record.id == record_id:
                return record.model_copy(deep=True)
        return None

    async def create(self, data: CreateSubjectData, hod_id: str | None = None) -> SubjectRecord:
        record = self._insert(SubjectRecord(**data.model_dump(), hod_id=hod_id))
        logger.info(f"Created subject {record.code} ({record.name})")
        return record.model_copy(deep=True)

    async def delete(self, record_id: str) -> None:
        record = self._require(record_id)
        self._records.remove(record)
        logger.info(f"Deleted subject {record.code}")

    async def assign_faculty(
        self,
        record_id: str,
        faculty_id: str | None,
        faculty_name: str | None = None,
    ) -> SubjectRecord:
        record = self._require(record_id)
        record.faculty_id = faculty_id
        record.faculty_name = faculty_name if faculty_id else None
        return record.model_copy(deep=True)


class InMemoryStudentRepository(StudentRepository):
    """Student roster keyed by USN."""

    def __init__(self, records: list[StudentRecord] | None = None) -> None:
        self._records: dict[str, StudentRecord] = {}
        for record in records or []:
            self._insert(record)

    def _insert(self, record: StudentRecord) -> StudentRecord:
        if record.usn in self._records:
            raise DuplicateRecordError(f"Student with USN {record.usn} already exists")
        self._records[record.usn] = record
        return record

    async def list(self) -> list[StudentRecord]:
        return [r.model_copy(deep=True) for r in self._records.values()]

    async def get(self, usn: str) -> StudentRecord | None:
        record = self._records.get(usn.upper())
        return record.model_copy(deep=True) if record else None

    async def create(self, record: StudentRecord) -> StudentRecord:
        return self._insert(record).model_copy(deep=True)


class InMemoryAttendanceRepository(AttendanceRepository):
    """Attendance records held in a list."""

    def __init__(self, records: list[AttendanceRecord] | None = None) -> None:
        self._records: list[AttendanceRecord] = list(records or [])

    async def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._records.append(record)
        logger.debug(f"Recorded {record.class_type} for {record.subject_code}")
        return record

    async def by_faculty(self, faculty_id: str) -> list[AttendanceRecord]:
        return [r for r in self._records if r.faculty_id == faculty_id]

    async def by_subject(self, subject_id: str) -> list[AttendanceRecord]:
        return [r for r in self._records if r.subject_id == subject_id]

    async def student_summary(self, usn: str) -> StudentAttendance:
        return StudentAttendance.from_records(usn, self._records)


@dataclass
class Directory:
    """The repositories one chat session reads from."""

    faculty: FacultyRepository = field(default_factory=InMemoryFacultyRepository)
    subjects: SubjectRepository = field(default_factory=InMemorySubjectRepository)
    students: StudentRepository = field(default_factory=InMemoryStudentRepository)
    attendance: AttendanceRepository = field(default_factory=InMemoryAttendanceRepository)


# =============================================================================
# Seed files
# =============================================================================


def _parse_section(data: dict[str, Any], key: str, model: type[BaseModel]) -> list[Any]:
    items = data.get(key) or []
    if not isinstance(items, list):
        raise SeedFileError(f"'{key}' must be a list")
    try:
        return [model.model_validate(dict(item)) for item in items]
    except (ValidationError, TypeError, ValueError) as e:
        raise SeedFileError(f"Invalid {key} entry: {e}") from e


def load_directory(path: Path) -> Directory:
    """Build in-memory repositories from a YAML seed file.

    The file may contain ``faculty``, ``subjects``, ``students`` and
    ``attendance`` lists. Nothing is ever written back.

    Args:
        path: Seed file path

    Returns:
        Directory backed by in-memory repositories

    Raises:
        SeedFileError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise SeedFileError(f"Seed file not found: {path}")

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f) or {}
    except YAMLError as e:
        raise SeedFileError(f"Failed to parse seed file {path}: {e}") from e

    if not isinstance(data, dict):
        raise SeedFileError(f"Seed file {path} must contain a mapping")

    faculty = _parse_section(data, "faculty", FacultyRecord)
    subjects = _parse_section(data, "subjects", SubjectRecord)
    students = _parse_section(data, "students", StudentRecord)
    attendance = _parse_section(data, "attendance", AttendanceRecord)

    try:
        directory = Directory(
            faculty=InMemoryFacultyRepository(faculty),
            subjects=InMemorySubjectRepository(subjects),
            students=InMemoryStudentRepository(students),
            attendance=InMemoryAttendanceRepository(attendance),
        )
    except DuplicateRecordError as e:
        raise SeedFileError(f"Seed file {path} has duplicates: {e}") from e
    logger.info(
        f"Loaded seed {path.name}: {len(faculty)} faculty, {len(subjects)} subjects, "
        f"{len(students)} students, {len(attendance)} classes"
    )
    return directory


__all__ = [
    "AttendanceRepository",
    "CreateFacultyData",
    "CreateSubjectData",
    "Directory",
    "DirectoryError",
    "DuplicateRecordError",
    "FacultyRepository",
    "InMemoryAttendanceRepository",
    "InMemoryFacultyRepository",
    "InMemoryStudentRepository",
    "InMemorySubjectRepository",
    "RecordNotFoundError",
    "SeedFileError",
    "StudentRepository",
    "SubjectRepository",
    "load_directory",
]
