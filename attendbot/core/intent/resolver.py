"""Intent resolver for the attendbot chat assistants.

The resolver maps one free-text query to exactly one response:
1. Direct lookup - identifier tokens (USN, faculty ID, email, subject code)
2. Category classification - the portal's ordered pattern table
3. Category handler - per-category sub-logic and templating
4. Default fallback - the portal's fixed help menu

It is stateless: every answer is a function of the query, the directory
snapshot in the ResolverContext and the injected clock.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Awaitable, Callable

from ...config import ResolverSettings
from ..models import FacultyRecord, StudentRecord, SubjectRecord, round_half_up
from . import templates
from .entities import (
    DirectMatch,
    find_direct_match,
    match_faculty,
    match_subject,
    search_directory,
    search_term,
)
from .patterns import PatternTable, QueryModifiers, payload_key
from .taxonomy import (
    FacultyListPayload,
    FacultyPayload,
    IntentCategory,
    Portal,
    QuickReply,
    ResolverContext,
    ResolverResponse,
    SearchPayload,
    StudentPayload,
    SubjectListPayload,
    SubjectPayload,
)

logger = logging.getLogger(__name__)

Handler = Callable[[str, ResolverContext], Awaitable[ResolverResponse]]

STUDENT_MENU = [
    QuickReply("Check Attendance", "attendance"),
    QuickReply("Faculty Info", "faculty"),
    QuickReply("Help", "help"),
]
STUDENT_ATTENDANCE_REPLIES = [
    QuickReply("Subject Breakdown", "subject_attendance"),
    QuickReply("Attendance History", "attendance_history"),
]
STUDENT_FACULTY_REPLIES = [
    QuickReply("Faculty List", "faculty_list"),
    QuickReply("Office Hours", "office_hours"),
    QuickReply("Contact Info", "faculty_contact"),
]
STUDENT_HELP_REPLIES = [
    QuickReply("Technical Support", "tech_support"),
    QuickReply("Academic Support", "academic_support"),
]


class IntentResolver:
    """Resolve chat queries for one portal.

    Attributes:
        portal: Portal whose pattern table and templates are used
        settings: Resolver settings (threshold, credential masking, limits)
        table: Compiled, ordered pattern table
    """

    def __init__(
        self,
        portal: Portal | str = Portal.HOD,
        settings: ResolverSettings | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            portal: hod, faculty or student
            settings: Resolver settings (defaults if omitted)
            clock: Returns "now" for time-aware greetings
        """
        self.portal = Portal(portal)
        self.settings = settings or ResolverSettings()
        self.table = PatternTable.for_portal(self.portal)
        self._clock = clock or datetime.now
        self._modifiers = QueryModifiers()
        self._handlers: dict[IntentCategory, Handler] = {
            IntentCategory.GREETING: self._greeting,
            IntentCategory.FACULTY: self._faculty,
            IntentCategory.SUBJECT: self._subject,
            IntentCategory.STUDENTS: self._students,
            IntentCategory.ATTENDANCE: self._attendance,
            IntentCategory.STATS: self._stats,
            IntentCategory.HELP: self._help,
            IntentCategory.SEARCH: self._search,
            IntentCategory.COUNT: self._count,
            IntentCategory.CREDENTIALS: self._credentials,
            IntentCategory.DETAILS: self._details,
            IntentCategory.PAYLOAD: self._payload,
        }

    @property
    def default_message(self) -> str:
        return templates.DEFAULT_MESSAGES[self.portal]

    async def resolve(
        self,
        query: str,
        context: ResolverContext | None = None,
    ) -> ResolverResponse:
        """Answer a query from a directory snapshot.

        Never raises: provider failures become the fixed error message.

        Args:
            query: Free-text user query (empty falls through to the default)
            context: Directory snapshot and optional providers

        Returns:
            ResolverResponse with a non-empty message
        """
        context = context or ResolverContext()
        try:
            return await self._resolve(query or "", context)
        except Exception as e:
            logger.warning(f"Resolution failed for {self.portal.value} query: {e}")
            return ResolverResponse(templates.ERROR_MESSAGE, IntentCategory.ERROR)

    def classify(self, query: str) -> IntentCategory | None:
        """Category the pattern table assigns to a query (no direct lookup)."""
        return self.table.classify(query.strip().lower())

    async def _resolve(self, query: str, context: ResolverContext) -> ResolverResponse:
        text = query.strip()
        limit = self.settings.max_input_length
        if len(text) > limit:
            logger.warning(f"Input truncated from {len(text)} to {limit} chars")
            text = text[:limit]

        if not text:
            return self._default()

        lower = text.lower()

        if self.portal is not Portal.STUDENT:
            direct = find_direct_match(text, context.faculty, context.subjects, context.students)
            if direct.found:
                logger.debug("Direct identifier match")
                return await self._direct(direct, lower, context)
            if direct.missing_usn:
                return self._not_found(direct.missing_usn)

        category = self.table.classify(lower)
        if category is None:
            return self._default()

        logger.debug(f"Query classified as {category.value}")
        return await self._handlers[category](lower, context)

    # =========================================================================
    # Shared helpers
    # =========================================================================

    def _default(self) -> ResolverResponse:
        replies = list(STUDENT_MENU) if self.portal is Portal.STUDENT else []
        return ResolverResponse(self.default_message, IntentCategory.DEFAULT, quick_replies=replies)

    def _not_found(self, identifier: str) -> ResolverResponse:
        if self.portal is Portal.FACULTY:
            message = templates.student_not_found(identifier)
        else:
            message = (
                f"🔍 No record found for {identifier}. "
                "Please check the identifier and try again."
            )
        return ResolverResponse(message, IntentCategory.LOOKUP)

    def _password(self, record: FacultyRecord) -> str:
        return record.password if self.settings.expose_credentials else templates.MASK

    def _log_reveal(self, count: int) -> None:
        if self.settings.expose_credentials and count:
            logger.warning(f"Revealing login credentials for {count} faculty record(s)")

    async def _direct(
        self,
        match: DirectMatch,
        lower: str,
        context: ResolverContext,
    ) -> ResolverResponse:
        if match.faculty is not None:
            return await self._faculty_detail(match.faculty, lower, context)
        if match.subject is not None:
            return self._subject_detail(match.subject)
        return await self._student_detail(match.student, context)

    async def _faculty_detail(
        self,
        record: FacultyRecord,
        lower: str,
        context: ResolverContext,
    ) -> ResolverResponse:
        if self._modifiers.wants_sensitive(lower):
            self._log_reveal(1)
            message = templates.faculty_profile(record, self._password(record))
        else:
            message = templates.faculty_brief(record)

        stats = None
        if context.stats_provider is not None:
            stats = await context.stats_provider(record.id)
            message += templates.faculty_stats_block(stats, round_half_up(stats.average_attendance))

        return ResolverResponse(
            message,
            IntentCategory.LOOKUP,
            data=FacultyPayload(record=record, stats=stats),
        )

    def _subject_detail(self, subject: SubjectRecord) -> ResolverResponse:
        return ResolverResponse(
            templates.subject_detail(subject),
            IntentCategory.LOOKUP,
            data=SubjectPayload(record=subject),
        )

    async def _student_detail(
        self,
        student: StudentRecord,
        context: ResolverContext,
    ) -> ResolverResponse:
        attendance = None
        percentage = 0
        if context.student_attendance_provider is not None:
            attendance = await context.student_attendance_provider(student.usn)
            percentage = round_half_up(attendance.percentage)

        message = templates.student_info(
            student, attendance, percentage, self.settings.attendance_threshold
        )
        return ResolverResponse(
            message,
            IntentCategory.LOOKUP,
            data=StudentPayload(record=student, attendance=attendance),
        )

    def _credential_listing(self, faculty: list[FacultyRecord]) -> ResolverResponse:
        self._log_reveal(len(faculty))
        entries = [templates.credential_entry(f, self._password(f)) for f in faculty]
        return ResolverResponse(
            templates.all_credentials(entries),
            IntentCategory.CREDENTIALS,
            data=FacultyListPayload(records=tuple(faculty)),
        )

    # =========================================================================
    # Category handlers
    # =========================================================================

    async def _greeting(self, lower: str, context: ResolverContext) -> ResolverResponse:
        now = self._clock()
        if self.portal is Portal.HOD:
            return ResolverResponse(templates.hod_greeting(now), IntentCategory.GREETING)
        if self.portal is Portal.FACULTY:
            return ResolverResponse(templates.faculty_greeting(now), IntentCategory.GREETING)
        return ResolverResponse(
            templates.student_greeting(now),
            IntentCategory.GREETING,
            quick_replies=list(STUDENT_MENU),
        )

    async def _faculty(self, lower: str, context: ResolverContext) -> ResolverResponse:
        if self.portal is Portal.STUDENT:
            return ResolverResponse(
                "Here's faculty information for your subjects:",
                IntentCategory.FACULTY,
                quick_replies=list(STUDENT_FACULTY_REPLIES),
            )

        faculty = context.faculty
        if not faculty:
            return ResolverResponse(templates.FACULTY_EMPTY_MESSAGE, IntentCategory.FACULTY)

        record = match_faculty(lower, faculty)
        if record is not None:
            response = await self._faculty_detail(record, lower, context)
            response.category = IntentCategory.FACULTY
            return response

        if self._modifiers.wants_credentials(lower):
            response = self._credential_listing(faculty)
            response.category = IntentCategory.FACULTY
            return response

        if self._modifiers.wants_listing(lower):
            assigned = [f for f in faculty if f.assigned_subjects]
            if self._modifiers.wants_details(lower):
                self._log_reveal(len(faculty))
                listing = "\n\n".join(
                    templates.faculty_detail_line(f, self._password(f)) for f in faculty
                )
            else:
                listing = "\n".join(templates.faculty_line(f) for f in faculty)
            return ResolverResponse(
                templates.faculty_overview(
                    len(faculty), len(assigned), len(faculty) - len(assigned), listing
                ),
                IntentCategory.FACULTY,
                data=FacultyListPayload(records=tuple(faculty)),
            )

        return ResolverResponse(templates.FACULTY_SEARCH_HELP, IntentCategory.FACULTY)

    def _taught_subjects(self, context: ResolverContext) -> list[SubjectRecord]:
        """Subjects of the signed-in faculty, or all subjects when nobody is signed in."""
        if context.faculty_id is None:
            return context.subjects
        codes: set[str] = set()
        for record in context.faculty:
            if record.id == context.faculty_id:
                codes = {code.lower() for code in record.assigned_subjects}
                break
        return [
            s
            for s in context.subjects
            if s.faculty_id == context.faculty_id or s.code.lower() in codes
        ]

    async def _subject(self, lower: str, context: ResolverContext) -> ResolverResponse:
        subjects = context.subjects

        if self.portal is Portal.FACULTY:
            subjects = self._taught_subjects(context)
            subject = match_subject(lower, subjects)
            if subject is not None:
                response = self._subject_detail(subject)
                response.category = IntentCategory.SUBJECT
                return response
            return ResolverResponse(
                templates.teaching_subjects(subjects),
                IntentCategory.SUBJECT,
                data=SubjectListPayload(records=tuple(subjects)),
            )

        if not subjects:
            return ResolverResponse(templates.SUBJECT_EMPTY_MESSAGE, IntentCategory.SUBJECT)

        if self._modifiers.wants_listing(lower):
            semester_counts: dict[int, int] = {}
            for subject in subjects:
                semester_counts[subject.semester] = semester_counts.get(subject.semester, 0) + 1
            assigned = sum(1 for s in subjects if s.is_assigned)
            return ResolverResponse(
                templates.subject_overview(len(subjects), assigned, semester_counts),
                IntentCategory.SUBJECT,
                data=SubjectListPayload(records=tuple(subjects)),
            )

        subject = match_subject(lower, subjects)
        if subject is not None:
            response = self._subject_detail(subject)
            response.category = IntentCategory.SUBJECT
            return response

        return ResolverResponse(templates.SUBJECT_SEARCH_HELP, IntentCategory.SUBJECT)

    async def _students(self, lower: str, context: ResolverContext) -> ResolverResponse:
        return ResolverResponse(templates.roster_size(len(context.students)), IntentCategory.STUDENTS)

    async def _attendance(self, lower: str, context: ResolverContext) -> ResolverResponse:
        if self.portal is Portal.FACULTY:
            return ResolverResponse(templates.ASK_FOR_USN, IntentCategory.ATTENDANCE)

        if self.portal is Portal.STUDENT:
            return await self._own_attendance(context)

        if context.stats_provider is None or not context.faculty:
            return ResolverResponse(templates.HOD_ATTENDANCE_HINT, IntentCategory.ATTENDANCE)

        lines = []
        for record in context.faculty:
            stats = await context.stats_provider(record.id)
            lines.append(
                f"• {record.name} ({record.faculty_id}): {stats.total_classes} classes, "
                f"{round_half_up(stats.total_hours)} hrs, "
                f"{round_half_up(stats.average_attendance)}% avg attendance"
            )
        return ResolverResponse(
            templates.attendance_overview(lines),
            IntentCategory.ATTENDANCE,
            data=FacultyListPayload(records=tuple(context.faculty)),
        )

    async def _own_attendance(self, context: ResolverContext) -> ResolverResponse:
        if context.usn is None or context.student_attendance_provider is None:
            return ResolverResponse(
                "I couldn't find your attendance records yet. Please check back later.",
                IntentCategory.ATTENDANCE,
            )
        attendance = await context.student_attendance_provider(context.usn)
        return ResolverResponse(
            templates.own_attendance(attendance, round_half_up(attendance.percentage)),
            IntentCategory.ATTENDANCE,
            quick_replies=list(STUDENT_ATTENDANCE_REPLIES),
        )

    async def _stats(self, lower: str, context: ResolverContext) -> ResolverResponse:
        faculty = context.faculty
        subjects = context.subjects
        active = sum(1 for f in faculty if f.assigned_subjects)
        assigned = sum(1 for s in subjects if s.is_assigned)
        utilization = round_half_up(active / len(faculty) * 100) if faculty else 0
        assignment_rate = round_half_up(assigned / len(subjects) * 100) if subjects else 0
        return ResolverResponse(
            templates.department_analytics(
                len(faculty), active, utilization, len(subjects), assigned, assignment_rate
            ),
            IntentCategory.STATS,
        )

    async def _help(self, lower: str, context: ResolverContext) -> ResolverResponse:
        if self.portal is Portal.FACULTY:
            return ResolverResponse(templates.FACULTY_HELP_MESSAGE, IntentCategory.HELP)
        if self.portal is Portal.STUDENT:
            return ResolverResponse(
                templates.STUDENT_HELP_MESSAGE,
                IntentCategory.HELP,
                quick_replies=list(STUDENT_HELP_REPLIES),
            )
        return ResolverResponse(templates.HOD_HELP_MESSAGE, IntentCategory.HELP)

    async def _search(self, lower: str, context: ResolverContext) -> ResolverResponse:
        term = search_term(self._modifiers.strip_search_words(lower))
        faculty_hits, subject_hits = search_directory(term, context.faculty, context.subjects)

        if not faculty_hits and not subject_hits:
            return ResolverResponse(templates.NO_SEARCH_RESULTS, IntentCategory.SEARCH)

        faculty_block = None
        if faculty_hits:
            if self._modifiers.wants_credentials(lower) or self._modifiers.wants_details(lower):
                self._log_reveal(len(faculty_hits))
                body = "\n\n".join(
                    templates.faculty_detail_line(f, self._password(f)) for f in faculty_hits
                )
            else:
                body = "\n".join(templates.faculty_line(f) for f in faculty_hits)
            faculty_block = f"👥 **Faculty ({len(faculty_hits)}):**\n{body}"

        subject_block = None
        if subject_hits:
            body = "\n".join(
                f"• {s.code}: {s.name} - {s.faculty_name or 'Unassigned'}" for s in subject_hits
            )
            subject_block = f"📚 **Subjects ({len(subject_hits)}):**\n{body}"

        return ResolverResponse(
            templates.search_results(faculty_block, subject_block),
            IntentCategory.SEARCH,
            data=SearchPayload(faculty=tuple(faculty_hits), subjects=tuple(subject_hits)),
        )

    async def _count(self, lower: str, context: ResolverContext) -> ResolverResponse:
        return ResolverResponse(
            templates.department_totals(
                len(context.faculty), len(context.subjects), len(context.students)
            ),
            IntentCategory.COUNT,
        )

    async def _credentials(self, lower: str, context: ResolverContext) -> ResolverResponse:
        if not context.faculty:
            return ResolverResponse(templates.FACULTY_EMPTY_MESSAGE, IntentCategory.CREDENTIALS)
        return self._credential_listing(context.faculty)

    async def _details(self, lower: str, context: ResolverContext) -> ResolverResponse:
        record = match_faculty(lower, context.faculty)
        if record is not None:
            response = await self._faculty_detail(record, lower, context)
            response.category = IntentCategory.DETAILS
            return response
        subject = match_subject(lower, context.subjects)
        if subject is not None:
            response = self._subject_detail(subject)
            response.category = IntentCategory.DETAILS
            return response
        return ResolverResponse(templates.DETAILS_PROMPT, IntentCategory.DETAILS)

    async def _payload(self, lower: str, context: ResolverContext) -> ResolverResponse:
        key = payload_key(lower)

        if key == "subject_attendance":
            if context.usn is None or context.student_attendance_provider is None:
                return ResolverResponse(templates.subject_breakdown([]), IntentCategory.PAYLOAD)
            attendance = await context.student_attendance_provider(context.usn)
            names = {s.code: s.name for s in context.subjects}
            rows = [
                (names.get(code, code), round_half_up(hit / seen * 100), hit, seen)
                for code, (seen, hit) in attendance.subject_wise.items()
            ]
            return ResolverResponse(templates.subject_breakdown(rows), IntentCategory.PAYLOAD)

        if key == "faculty_list":
            codes = None
            if context.usn is not None and context.student_attendance_provider is not None:
                attendance = await context.student_attendance_provider(context.usn)
                codes = {code.lower() for code in attendance.subject_wise}
            return ResolverResponse(
                templates.faculty_directory(context.faculty, context.subjects, codes),
                IntentCategory.PAYLOAD,
            )

        return ResolverResponse(
            templates.STUDENT_STATIC_REPLIES.get(key or "", self.default_message),
            IntentCategory.PAYLOAD,
        )


def create_resolver(
    portal: Portal | str = Portal.HOD,
    settings: ResolverSettings | None = None,
) -> IntentResolver:
    """Factory function to create an IntentResolver.

    Args:
        portal: hod, faculty or student
        settings: Optional resolver settings

    Returns:
        Configured IntentResolver instance
    """
    return IntentResolver(portal=portal, settings=settings)
