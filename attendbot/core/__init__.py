"""Core components for attendbot."""

from __future__ import annotations

from .directory import (
    CreateFacultyData,
    CreateSubjectData,
    Directory,
    DirectoryError,
    DuplicateRecordError,
    RecordNotFoundError,
    SeedFileError,
    load_directory,
)
from .models import (
    AttendanceRecord,
    AttendanceStats,
    FacultyRecord,
    StudentAttendance,
    StudentRecord,
    SubjectRecord,
    round_half_up,
)
from .session import (
    ChatMessage,
    ChatSession,
    SessionBusyError,
    format_message_time,
)

__all__ = [
    # Models
    "AttendanceRecord",
    "AttendanceStats",
    "FacultyRecord",
    "StudentAttendance",
    "StudentRecord",
    "SubjectRecord",
    "round_half_up",
    # Directory
    "CreateFacultyData",
    "CreateSubjectData",
    "Directory",
    "DirectoryError",
    "DuplicateRecordError",
    "RecordNotFoundError",
    "SeedFileError",
    "load_directory",
    # Session
    "ChatMessage",
    "ChatSession",
    "SessionBusyError",
    "format_message_time",
]
