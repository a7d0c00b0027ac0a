"""Chat session management for attendbot.

A ChatSession is what one chat widget owns:
- an append-only transcript of ChatMessage entries
- a busy flag that refuses a second submission while one is outstanding
- the glue that snapshots the directory, calls the resolver and appends
  the answer

The transcript lives only as long as the session; starting over means
creating a new session.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .directory import Directory
from .intent.resolver import IntentResolver
from .intent.taxonomy import (
    IntentCategory,
    Portal,
    QuickReply,
    ResolverContext,
    ResolverResponse,
)
from .intent.templates import ERROR_MESSAGE, WELCOME_MESSAGES
from .models import FacultyRecord

logger = logging.getLogger(__name__)

# Quick-action buttons shown under the input: label -> query sent
QUICK_ACTIONS: dict[Portal, dict[str, str]] = {
    Portal.HOD: {
        "Show Faculty": "Show all faculty members",
        "List Subjects": "Show all subjects",
        "Dashboard Stats": "Show dashboard overview",
        "Help": "Help me get started",
    },
    Portal.FACULTY: {
        "My Subjects": "Show my subjects",
        "Student Count": "How many students do I have?",
        "Help": "help",
    },
    Portal.STUDENT: {
        "Attendance": "attendance",
        "Faculty": "faculty",
        "Help": "help",
    },
}


class SessionBusyError(RuntimeError):
    """A query is already being resolved for this session."""


@dataclass(frozen=True)
class ChatMessage:
    """A single message in a chat transcript.

    Attributes:
        content: Text content of the message
        is_user: True for user input, False for assistant answers
        id: Unique message identifier
        timestamp: When the message was created
        quick_replies: Suggested follow-ups (assistant only)
        metadata: Additional information (e.g., category)
    """

    content: str
    is_user: bool
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: datetime = field(default_factory=datetime.now)
    quick_replies: tuple[QuickReply, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "id": self.id,
            "content": self.content,
            "is_user": self.is_user,
            "timestamp": self.timestamp.isoformat(),
            "quick_replies": [{"text": q.text, "payload": q.payload} for q in self.quick_replies],
            "metadata": dict(self.metadata),
        }


def format_message_time(timestamp: datetime) -> str:
    """Format a message timestamp as HH:MM."""
    return timestamp.strftime("%H:%M")


class ChatSession:
    """One chat widget's transcript and resolution loop.

    Example:
        >>> session = ChatSession(IntentResolver("hod"), directory, hod_id="hod-1")
        >>> reply = await session.submit("show all faculty")
        >>> reply.content.startswith("👥")
        True
    """

    def __init__(
        self,
        resolver: IntentResolver,
        directory: Directory | None = None,
        *,
        hod_id: str | None = None,
        usn: str | None = None,
        faculty_id: str | None = None,
    ) -> None:
        """Initialize the session with the portal's welcome message.

        Args:
            resolver: Resolver for this portal
            directory: Repositories to snapshot for each query
            hod_id: Restrict faculty/subject snapshots to one department
            usn: Signed-in student (student portal)
            faculty_id: Signed-in faculty, by faculty ID or record id (faculty portal)
        """
        self.resolver = resolver
        self.directory = directory or Directory()
        self.hod_id = hod_id
        self.usn = usn.upper() if usn else None
        self.faculty_id = faculty_id
        self._messages: list[ChatMessage] = []
        self._busy = False

        self._append(ChatMessage(content=WELCOME_MESSAGES[resolver.portal], is_user=False))

    @property
    def portal(self) -> Portal:
        return self.resolver.portal

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        """The transcript, oldest first (read-only view)."""
        return tuple(self._messages)

    @property
    def is_busy(self) -> bool:
        """True while a submission is being resolved (send disabled)."""
        return self._busy

    @property
    def quick_actions(self) -> dict[str, str]:
        return dict(QUICK_ACTIONS[self.portal])

    def _append(self, message: ChatMessage) -> ChatMessage:
        self._messages.append(message)
        return message

    async def snapshot(self) -> ResolverContext:
        """Read the directory into a resolver context.

        On the faculty portal with a signed-in faculty member, the roster is
        narrowed to students marked in that member's classes.
        """
        faculty = await self.directory.faculty.list(self.hod_id)
        subjects = await self.directory.subjects.list(self.hod_id)
        students = await self.directory.students.list()

        faculty_id = None
        if self.portal is Portal.FACULTY and self.faculty_id:
            faculty_id = self._faculty_record_id(faculty)
            marked: set[str] = set()
            for record in await self.directory.attendance.by_faculty(faculty_id):
                marked.update(usn.upper() for usn in record.marks)
            students = [s for s in students if s.usn.upper() in marked]

        return ResolverContext(
            faculty=faculty,
            subjects=subjects,
            students=students,
            stats_provider=self.directory.attendance.stats,
            student_attendance_provider=self.directory.attendance.student_summary,
            usn=self.usn,
            faculty_id=faculty_id,
        )

    def _faculty_record_id(self, faculty: list[FacultyRecord]) -> str:
        wanted = self.faculty_id.lower()
        for record in faculty:
            if record.faculty_id.lower() == wanted or record.id == self.faculty_id:
                return record.id
        logger.warning(f"Signed-in faculty {self.faculty_id} is not in the directory")
        return self.faculty_id

    async def submit(self, text: str) -> ChatMessage | None:
        """Append a user message, resolve it and append the answer.

        Args:
            text: Raw user input

        Returns:
            The assistant message, or None when the input was blank

        Raises:
            SessionBusyError: If a previous submission is still outstanding
        """
        if not text.strip():
            return None
        if self._busy:
            raise SessionBusyError("A query is already being processed")

        self._busy = True
        try:
            self._append(ChatMessage(content=text.strip(), is_user=True))
            try:
                context = await self.snapshot()
            except Exception as e:
                logger.warning(f"Directory snapshot failed: {e}")
                response = ResolverResponse(ERROR_MESSAGE, IntentCategory.ERROR)
            else:
                response = await self.resolver.resolve(text, context)

            return self._append(
                ChatMessage(
                    content=response.message,
                    is_user=False,
                    quick_replies=tuple(response.quick_replies),
                    metadata={"category": response.category.value},
                )
            )
        finally:
            self._busy = False

    async def quick_action(self, label: str) -> ChatMessage | None:
        """Submit the query bound to a quick-action button.

        Raises:
            KeyError: If the label is not a quick action for this portal
        """
        return await self.submit(QUICK_ACTIONS[self.portal][label])

    async def quick_reply(self, reply: QuickReply) -> ChatMessage | None:
        """Submit a suggested follow-up by its payload."""
        return await self.submit(reply.payload)
