"""Shared fixtures: a small department directory and a fixed clock."""

from __future__ import annotations

from datetime import datetime

import pytest

from attendbot.core.directory import (
    Directory,
    InMemoryAttendanceRepository,
    InMemoryFacultyRepository,
    InMemoryStudentRepository,
    InMemorySubjectRepository,
)
from attendbot.core.intent import ResolverContext
from attendbot.core.models import (
    AttendanceRecord,
    FacultyRecord,
    StudentRecord,
    SubjectRecord,
)


@pytest.fixture
def faculty() -> list[FacultyRecord]:
    return [
        FacultyRecord(
            id="f1",
            name="Dr. Alice Smith",
            email="alice@college.edu",
            password="alice123",
            faculty_id="FAC001",
            hod_id="hod-1",
            assigned_subjects=["CS101", "CS202"],
            created_at=datetime(2025, 1, 10),
        ),
        FacultyRecord(
            id="f2",
            name="Prof. Bob Jones",
            email="bob@college.edu",
            password="bob456",
            faculty_id="FAC002",
            hod_id="hod-1",
            created_at=datetime(2025, 2, 1),
        ),
    ]


@pytest.fixture
def subjects() -> list[SubjectRecord]:
    return [
        SubjectRecord(
            id="s1",
            name="Data Structures",
            code="CS101",
            faculty_id="f1",
            faculty_name="Dr. Alice Smith",
            semester=3,
            credits=4,
            hod_id="hod-1",
        ),
        SubjectRecord(
            id="s2",
            name="Database Systems",
            code="CS202",
            faculty_id="f1",
            faculty_name="Dr. Alice Smith",
            semester=4,
            credits=3,
            hod_id="hod-1",
        ),
        SubjectRecord(
            id="s3",
            name="Computer Networks",
            code="CS303",
            semester=5,
            credits=3,
            hod_id="hod-1",
        ),
    ]


@pytest.fixture
def students() -> list[StudentRecord]:
    return [
        StudentRecord(
            usn="1MS21CS001",
            name="Ravi Kumar",
            email="ravi@student.edu",
            phone="9876543210",
        ),
        StudentRecord(usn="1MS21CS002", name="Priya Rao"),
    ]


@pytest.fixture
def attendance_records() -> list[AttendanceRecord]:
    return [
        AttendanceRecord(
            faculty_id="f1",
            subject_id="s1",
            subject_code="CS101",
            subject_name="Data Structures",
            date=datetime(2025, 3, 3, 10),
            duration=60,
            students_present=45,
            total_students=50,
            marks={"1MS21CS001": "present", "1MS21CS002": "absent"},
        ),
        AttendanceRecord(
            faculty_id="f1",
            subject_id="s2",
            subject_code="CS202",
            subject_name="Database Systems",
            date=datetime(2025, 2, 20, 14),
            class_type="practical",
            duration=120,
            students_present=40,
            total_students=50,
            marks={"1MS21CS001": "absent"},
        ),
    ]


@pytest.fixture
def context(faculty, subjects, students) -> ResolverContext:
    return ResolverContext(faculty=faculty, subjects=subjects, students=students)


@pytest.fixture
def directory(faculty, subjects, students, attendance_records) -> Directory:
    return Directory(
        faculty=InMemoryFacultyRepository(faculty),
        subjects=InMemorySubjectRepository(subjects),
        students=InMemoryStudentRepository(students),
        attendance=InMemoryAttendanceRepository(attendance_records),
    )
