"""Tests for the HOD intent resolver.

Tests cover:
- Default fallback and empty input
- Direct identifier lookup and its precedence over categories
- First-match-wins category ordering
- Category handlers (faculty, subject, attendance, stats, search, count,
  credentials, details)
- Rounding, idempotence and provider failures
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from attendbot.config import ResolverSettings
from attendbot.core.intent import (
    DEFAULT_MESSAGES,
    ERROR_MESSAGE,
    IntentCategory,
    IntentResolver,
    Portal,
    ResolverContext,
)
from attendbot.core.intent import templates
from attendbot.core.models import (
    AttendanceStats,
    FacultyRecord,
    StudentAttendance,
    round_half_up,
)

MORNING = datetime(2025, 3, 10, 9, 30)


@pytest.fixture
def resolver() -> IntentResolver:
    return IntentResolver(Portal.HOD, clock=lambda: MORNING)


# =============================================================================
# Default fallback
# =============================================================================


class TestDefaultFallback:
    """Tests for empty and unmatched queries."""

    @pytest.mark.asyncio
    async def test_empty_query_returns_default(self, resolver, context) -> None:
        """Empty input falls through to the fixed help menu."""
        response = await resolver.resolve("", context)
        assert response.message == DEFAULT_MESSAGES[Portal.HOD]
        assert response.category == IntentCategory.DEFAULT

    @pytest.mark.asyncio
    async def test_whitespace_query_returns_default(self, resolver, context) -> None:
        """Whitespace-only input is treated as empty."""
        response = await resolver.resolve("   \n", context)
        assert response.message == templates.HOD_DEFAULT_MESSAGE

    @pytest.mark.asyncio
    async def test_gibberish_returns_default(self, resolver, context) -> None:
        """Unmatched input returns the default menu."""
        response = await resolver.resolve("asdkjasd", context)
        assert response.message == templates.HOD_DEFAULT_MESSAGE
        assert response.data.kind == "none"

    @pytest.mark.asyncio
    async def test_no_context_is_allowed(self, resolver) -> None:
        """A missing context behaves like empty directories."""
        response = await resolver.resolve("show all faculty")
        assert response.message == templates.FACULTY_EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_long_input_is_truncated(self, context) -> None:
        """Input beyond max_input_length is cut before matching."""
        settings = ResolverSettings(max_input_length=10)
        resolver = IntentResolver(Portal.HOD, settings=settings)
        response = await resolver.resolve("asdfghjklq show all faculty", context)
        assert response.category == IntentCategory.DEFAULT


# =============================================================================
# Direct lookup
# =============================================================================


class TestDirectLookup:
    """Tests for identifier tokens resolving before categories."""

    @pytest.mark.asyncio
    async def test_usn_resolves_student(self, resolver, context) -> None:
        """A USN token returns the student's detail view."""
        response = await resolver.resolve("1MS21CS001", context)
        assert response.category == IntentCategory.LOOKUP
        assert "Ravi Kumar" in response.message
        assert response.data.kind == "student"
        assert response.data.record.usn == "1MS21CS001"

    @pytest.mark.asyncio
    async def test_usn_beats_category_keywords(self, resolver, context) -> None:
        """'help 1MS21CS001' is a lookup, not help."""
        response = await resolver.resolve("help 1MS21CS001", context)
        assert response.category == IntentCategory.LOOKUP
        assert "Ravi Kumar" in response.message

    @pytest.mark.asyncio
    async def test_usn_shaped_faculty_id(self, resolver) -> None:
        """A faculty whose ID has USN shape is found directly."""
        record = FacultyRecord(
            name="Dr. Meera Iyer",
            email="meera@college.edu",
            password="pw",
            faculty_id="1MS21CS001",
        )
        stats = AttendanceStats(total_classes=4, average_attendance=74.5)
        context = ResolverContext(
            faculty=[record],
            stats_provider=AsyncMock(return_value=stats),
        )
        response = await resolver.resolve("1MS21CS001", context)

        assert "Dr. Meera Iyer" in response.message
        assert "Average Attendance: 75%" in response.message
        assert response.data.kind == "faculty"
        assert response.data.stats == stats
        context.stats_provider.assert_awaited_once_with(record.id)

    @pytest.mark.asyncio
    async def test_student_attendance_percentage(self, resolver, context) -> None:
        """Student lookups include a rounded percentage when a provider is given."""
        context.student_attendance_provider = AsyncMock(
            return_value=StudentAttendance(usn="1MS21CS001", total_classes=8, attended=5)
        )
        response = await resolver.resolve("check 1ms21cs001", context)

        assert "Attendance Percentage: 63%" in response.message
        assert "Below Required (75%)" in response.message
        assert "needs to attend 4 more classes" in response.message

    @pytest.mark.asyncio
    async def test_student_good_standing(self, resolver, context) -> None:
        """Students at or above the threshold get no alert."""
        context.student_attendance_provider = AsyncMock(
            return_value=StudentAttendance(usn="1MS21CS001", total_classes=4, attended=3)
        )
        response = await resolver.resolve("1MS21CS001", context)
        assert "Attendance Percentage: 75%" in response.message
        assert "Good Standing" in response.message
        assert "Alert" not in response.message

    @pytest.mark.asyncio
    async def test_unknown_usn_reports_not_found(self, resolver, context) -> None:
        """A well-formed USN with no record gets a not-found message."""
        response = await resolver.resolve("help 1MS21CS999", context)
        assert response.category == IntentCategory.LOOKUP
        assert "1MS21CS999" in response.message
        assert "check the identifier" in response.message

    @pytest.mark.asyncio
    async def test_faculty_id_brief_has_no_password(self, resolver, context) -> None:
        """A bare faculty ID returns the brief view without credentials."""
        response = await resolver.resolve("FAC001", context)
        assert "Faculty Found" in response.message
        assert "alice123" not in response.message
        assert response.data.record.faculty_id == "FAC001"

    @pytest.mark.asyncio
    async def test_faculty_id_with_show_reveals_password(self, resolver, context) -> None:
        """Detail/show wording adds the credentials."""
        response = await resolver.resolve("show FAC001", context)
        assert "Complete Faculty Profile" in response.message
        assert "alice123" in response.message

    @pytest.mark.asyncio
    async def test_email_lookup(self, resolver, context) -> None:
        """An email token resolves the faculty directly."""
        response = await resolver.resolve("who is bob@college.edu", context)
        assert response.data.kind == "faculty"
        assert response.data.record.name == "Prof. Bob Jones"

    @pytest.mark.asyncio
    async def test_subject_code_lookup(self, resolver, context) -> None:
        """A subject code resolves to the subject detail view."""
        response = await resolver.resolve("Details for CS303", context)
        assert response.data.kind == "subject"
        assert "Computer Networks" in response.message
        assert "Not assigned" in response.message


# =============================================================================
# Category ordering
# =============================================================================


class TestCategoryOrdering:
    """Tests for first-match-wins classification."""

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("hello there", IntentCategory.GREETING),
            ("hi, show faculty", IntentCategory.GREETING),
            ("faculty help", IntentCategory.FACULTY),
            ("subject help", IntentCategory.SUBJECT),
            ("attendance report", IntentCategory.ATTENDANCE),
            ("performance help", IntentCategory.STATS),
            ("help me find something", IntentCategory.HELP),
            ("find alice", IntentCategory.SEARCH),
            ("how many are there", IntentCategory.COUNT),
            ("what is my password", IntentCategory.CREDENTIALS),
            ("full info please", IntentCategory.DETAILS),
            ("asdkjasd", None),
        ],
    )
    def test_classify(self, resolver: IntentResolver, query: str, expected) -> None:
        """Each query lands in the first matching category."""
        assert resolver.classify(query) == expected

    @pytest.mark.asyncio
    async def test_faculty_beats_help(self, resolver, context) -> None:
        """A query with faculty and help words resolves as faculty."""
        response = await resolver.resolve("faculty help", context)
        assert response.category == IntentCategory.FACULTY
        assert response.message == templates.FACULTY_SEARCH_HELP


# =============================================================================
# Greeting
# =============================================================================


class TestGreeting:
    """Tests for the time-aware greeting."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "hour,expected",
        [(9, "Good morning"), (15, "Good afternoon"), (20, "Good evening")],
    )
    async def test_time_of_day(self, context, hour: int, expected: str) -> None:
        """The greeting follows the injected clock."""
        resolver = IntentResolver(Portal.HOD, clock=lambda: datetime(2025, 3, 10, hour))
        response = await resolver.resolve("hello", context)
        assert response.message.startswith(expected)


# =============================================================================
# Faculty
# =============================================================================


class TestFacultyCategory:
    """Tests for the faculty handler."""

    @pytest.mark.asyncio
    async def test_empty_directory_onboarding(self, resolver) -> None:
        """'show all faculty' with no faculty returns onboarding, not a count."""
        response = await resolver.resolve("show all faculty", ResolverContext())
        assert response.message == templates.FACULTY_EMPTY_MESSAGE
        assert "Total Faculty" not in response.message

    @pytest.mark.asyncio
    async def test_credentials_in_directory_order(self, resolver, context) -> None:
        """'faculty credentials' lists every email and password in order."""
        response = await resolver.resolve("faculty credentials", context)
        message = response.message

        for value in ("alice@college.edu", "alice123", "bob@college.edu", "bob456"):
            assert value in message
        assert message.index("alice@college.edu") < message.index("bob@college.edu")
        assert response.data.kind == "faculty_list"
        assert [r.faculty_id for r in response.data.records] == ["FAC001", "FAC002"]

    @pytest.mark.asyncio
    async def test_masked_credentials(self, context) -> None:
        """Passwords are masked when credentials are not exposed."""
        resolver = IntentResolver(
            Portal.HOD, settings=ResolverSettings(expose_credentials=False)
        )
        response = await resolver.resolve("faculty credentials", context)
        assert "alice123" not in response.message
        assert templates.MASK in response.message

    @pytest.mark.asyncio
    async def test_overview(self, resolver, context) -> None:
        """'show all faculty' gives totals and a plain list."""
        response = await resolver.resolve("show all faculty", context)
        assert "**Total Faculty:** 2" in response.message
        assert "**With Assignments:** 1" in response.message
        assert "**Unassigned:** 1" in response.message
        assert "• Dr. Alice Smith (FAC001) - 2 subjects" in response.message
        assert "alice123" not in response.message

    @pytest.mark.asyncio
    async def test_overview_with_details(self, resolver, context) -> None:
        """Detail wording switches the list to the detailed form."""
        response = await resolver.resolve("all faculty full details", context)
        assert "alice123" in response.message

    @pytest.mark.asyncio
    async def test_name_match(self, resolver, context) -> None:
        """A faculty name word finds that faculty member."""
        response = await resolver.resolve("faculty smith", context)
        assert response.category == IntentCategory.FACULTY
        assert response.data.record.faculty_id == "FAC001"
        assert "alice123" not in response.message

    @pytest.mark.asyncio
    async def test_name_match_with_details(self, resolver, context) -> None:
        """Name match plus 'details' returns the complete profile."""
        response = await resolver.resolve("faculty details for bob", context)
        assert "Complete Faculty Profile" in response.message
        assert "bob456" in response.message

    @pytest.mark.asyncio
    async def test_honorific_does_not_match(self, resolver, context) -> None:
        """'Dr.' alone does not pick a faculty member."""
        response = await resolver.resolve("which dr teaches here faculty", context)
        assert response.message == templates.FACULTY_SEARCH_HELP


# =============================================================================
# Subjects
# =============================================================================


class TestSubjectCategory:
    """Tests for the subject handler."""

    @pytest.mark.asyncio
    async def test_empty_directory_onboarding(self, resolver, faculty) -> None:
        """No subjects returns the onboarding message."""
        response = await resolver.resolve("show all subjects", ResolverContext(faculty=faculty))
        assert response.message == templates.SUBJECT_EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_overview(self, resolver, context) -> None:
        """Listing wording returns totals and per-semester counts."""
        response = await resolver.resolve("show all subjects", context)
        assert "**Total Subjects:** 3" in response.message
        assert "**Assigned:** 2" in response.message
        assert "**Unassigned:** 1" in response.message
        assert "• Semester 3: 1 subjects" in response.message
        assert response.message.index("Semester 3") < response.message.index("Semester 5")
        assert response.data.kind == "subject_list"

    @pytest.mark.asyncio
    async def test_name_match(self, resolver, context) -> None:
        """A subject name finds the subject."""
        response = await resolver.resolve("subject data structures", context)
        assert response.data.kind == "subject"
        assert response.data.record.code == "CS101"

    @pytest.mark.asyncio
    async def test_search_help(self, resolver, context) -> None:
        """Unmatched subject queries return the subject help."""
        response = await resolver.resolve("subject quantum", context)
        assert response.message == templates.SUBJECT_SEARCH_HELP


# =============================================================================
# Attendance and stats
# =============================================================================


class TestAttendanceAndStats:
    """Tests for attendance summaries and department analytics."""

    @pytest.mark.asyncio
    async def test_attendance_without_provider(self, resolver, context) -> None:
        """Without a stats provider the HOD gets a hint."""
        response = await resolver.resolve("attendance report", context)
        assert response.message == templates.HOD_ATTENDANCE_HINT

    @pytest.mark.asyncio
    async def test_attendance_with_provider(self, resolver, context) -> None:
        """Each faculty member gets a rounded summary line, in order."""
        stats = {
            "f1": AttendanceStats(total_classes=3, total_hours=4.5, average_attendance=74.5),
            "f2": AttendanceStats(),
        }
        context.stats_provider = AsyncMock(side_effect=lambda fid: stats[fid])
        response = await resolver.resolve("attendance report", context)

        assert "Dr. Alice Smith (FAC001): 3 classes, 5 hrs, 75% avg attendance" in response.message
        assert "Prof. Bob Jones (FAC002): 0 classes, 0 hrs, 0% avg attendance" in response.message
        assert response.message.index("Alice") < response.message.index("Bob")

    @pytest.mark.asyncio
    async def test_department_analytics(self, resolver, context) -> None:
        """Rates are rounded half-up."""
        response = await resolver.resolve("department overview", context)
        assert response.category == IntentCategory.STATS
        assert "Utilization Rate: 50%" in response.message
        assert "Assignment Rate: 67%" in response.message
        assert "Some subjects need faculty assignment" in response.message

    @pytest.mark.asyncio
    async def test_analytics_empty(self, resolver) -> None:
        """Empty directories report 0% rather than failing."""
        response = await resolver.resolve("dashboard stats", ResolverContext())
        assert "Utilization Rate: 0%" in response.message
        assert "Assignment Rate: 0%" in response.message

    def test_round_half_up(self) -> None:
        """74.5 displays as 75; Python's round would give 74."""
        assert round_half_up(74.5) == 75
        assert round_half_up(74.4) == 74
        assert round(74.5) == 74


# =============================================================================
# Search, count, credentials, details
# =============================================================================


class TestSearchCategory:
    """Tests for combined directory search."""

    @pytest.mark.asyncio
    async def test_faculty_then_subjects(self, resolver, context) -> None:
        """Faculty results come before subject results, in directory order."""
        response = await resolver.resolve("search cs", context)
        message = response.message

        assert "**Faculty (1):**" in message
        assert "**Subjects (3):**" in message
        assert message.index("Faculty (1)") < message.index("Subjects (3)")
        assert message.index("CS101") < message.index("CS202") < message.index("CS303")
        assert [s.code for s in response.data.subjects] == ["CS101", "CS202", "CS303"]

    @pytest.mark.asyncio
    async def test_faculty_only(self, resolver, context) -> None:
        """Searching a name returns only that faculty."""
        response = await resolver.resolve("find alice", context)
        assert response.data.kind == "search"
        assert [f.name for f in response.data.faculty] == ["Dr. Alice Smith"]
        assert response.data.subjects == ()

    @pytest.mark.asyncio
    async def test_no_results(self, resolver, context) -> None:
        """No hits returns the no-results message."""
        response = await resolver.resolve("find zzz", context)
        assert response.message == templates.NO_SEARCH_RESULTS


class TestCountCategory:
    """Tests for totals."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [0, 1, 2, 5])
    async def test_count_equals_directory_length(self, resolver, size: int) -> None:
        """Reported totals always equal the directory sizes."""
        faculty = [
            FacultyRecord(
                name=f"Member {i}",
                email=f"m{i}@college.edu",
                faculty_id=f"M{i:03d}",
            )
            for i in range(size)
        ]
        response = await resolver.resolve("how many are there", ResolverContext(faculty=faculty))
        assert f"• **Faculty:** {size}" in response.message
        assert "• **Subjects:** 0" in response.message


class TestCredentialsAndDetails:
    """Tests for the standalone credentials and details categories."""

    @pytest.mark.asyncio
    async def test_credentials_empty(self, resolver) -> None:
        """No faculty means nothing to reveal."""
        response = await resolver.resolve("passwords", ResolverContext())
        assert response.message == templates.FACULTY_EMPTY_MESSAGE

    @pytest.mark.asyncio
    async def test_credentials_listing(self, resolver, context) -> None:
        """Credential wording lists all faculty credentials."""
        response = await resolver.resolve("login passwords", context)
        assert response.category == IntentCategory.CREDENTIALS
        assert "alice123" in response.message and "bob456" in response.message

    @pytest.mark.asyncio
    async def test_details_by_name(self, resolver, context) -> None:
        """Details wording with a name returns the full profile."""
        response = await resolver.resolve("give me the details of alice", context)
        assert response.category == IntentCategory.DETAILS
        assert "alice123" in response.message

    @pytest.mark.asyncio
    async def test_details_prompt(self, resolver, context) -> None:
        """Details wording without a target asks which record."""
        response = await resolver.resolve("full info please", context)
        assert response.message == templates.DETAILS_PROMPT

    @pytest.mark.asyncio
    async def test_unknown_email_is_not_reported_as_usn(self, resolver, context) -> None:
        """An unknown email does not turn into a missing-USN answer."""
        response = await resolver.resolve("details for alice2024x@college.edu", context)
        assert response.category != IntentCategory.LOOKUP
        assert "ALICE2024X" not in response.message


# =============================================================================
# Purity and failures
# =============================================================================


class TestResolverContract:
    """Tests for idempotence and failure handling."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        ["", "hello", "show all faculty", "faculty credentials", "search cs", "1MS21CS001"],
    )
    async def test_idempotent(self, resolver, context, query: str) -> None:
        """Same query and directories give the same text."""
        first = await resolver.resolve(query, context)
        second = await resolver.resolve(query, context)
        assert first.message == second.message
        assert first.message

    @pytest.mark.asyncio
    async def test_directory_not_mutated(self, resolver, context, faculty) -> None:
        """Resolving never changes the snapshots."""
        before = [f.model_dump() for f in context.faculty]
        await resolver.resolve("faculty credentials", context)
        await resolver.resolve("show all faculty", context)
        assert [f.model_dump() for f in context.faculty] == before

    @pytest.mark.asyncio
    async def test_provider_failure_returns_error_message(self, resolver, context) -> None:
        """A rejecting provider becomes the fixed apology, not an exception."""
        context.stats_provider = AsyncMock(side_effect=RuntimeError("backend down"))
        response = await resolver.resolve("FAC001", context)
        assert response.message == ERROR_MESSAGE
        assert response.category == IntentCategory.ERROR
        assert response.success is False
