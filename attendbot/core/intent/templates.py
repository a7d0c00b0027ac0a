"""Message templates for the attendbot assistants.

Fixed texts are module constants; templates that embed records are small
functions. Percentages arrive here already rounded.
"""

from __future__ import annotations

from datetime import datetime

from ..models import AttendanceStats, FacultyRecord, StudentAttendance, StudentRecord, SubjectRecord
from .taxonomy import Portal

MASK = "********"

ERROR_MESSAGE = (
    "🚨 I encountered an error while processing your request. "
    "Please try again or contact support if the issue persists."
)

HOD_DEFAULT_MESSAGE = (
    "🤖 **I'm here to help!**\n\n"
    "I didn't quite understand that, but I can assist you with:\n\n"
    "🧑‍🏫 **Faculty Management:**\n"
    "• View faculty details and analytics\n"
    "• Check teaching assignments\n"
    "• Track performance metrics\n\n"
    "📚 **Subject Organization:**\n"
    "• Browse subjects by semester\n"
    "• Check faculty assignments\n"
    "• View subject details\n\n"
    "📊 **Analytics & Insights:**\n"
    "• Department performance overview\n"
    "• Faculty utilization rates\n"
    "• Assignment statistics\n\n"
    "💬 **Try asking:**\n"
    '• "Show me all faculty"\n'
    '• "How many subjects do we have?"\n'
    '• "Department overview"\n'
    '• "Help me with faculty management"'
)

FACULTY_DEFAULT_MESSAGE = (
    "I can help you with student attendance queries. Please provide a student USN "
    "(like 1MS21CS001) or ask about subjects, attendance percentages, or student information."
)

STUDENT_DEFAULT_MESSAGE = (
    "I understand you're asking about that. Let me help you find the right information. "
    "You can also try asking about attendance, faculty, or general help."
)

DEFAULT_MESSAGES: dict[Portal, str] = {
    Portal.HOD: HOD_DEFAULT_MESSAGE,
    Portal.FACULTY: FACULTY_DEFAULT_MESSAGE,
    Portal.STUDENT: STUDENT_DEFAULT_MESSAGE,
}

WELCOME_MESSAGES: dict[Portal, str] = {
    Portal.HOD: (
        "👋 Hello! I'm your HOD Dashboard assistant. Ask me about faculty, subjects, "
        "attendance or department analytics."
    ),
    Portal.FACULTY: (
        "Hello! I'm your Faculty AI Assistant. I can help you with:\n"
        "• Student attendance lookup by USN\n"
        "• Attendance percentages and statistics\n"
        "• Class information and student details\n"
        "• General queries about your subjects\n\n"
        "How can I assist you today?"
    ),
    Portal.STUDENT: "Hi! I'm your virtual assistant. How can I help you today?",
}

FACULTY_EMPTY_MESSAGE = (
    "📋 No faculty members found in your department yet.\n\n"
    "💡 **Quick Actions:**\n"
    "• Click 'Create Faculty' to add your first faculty member\n"
    "• Import faculty data from existing systems\n"
    "• Set up faculty profiles with subjects and schedules\n\n"
    "Would you like me to guide you through adding faculty?"
)

SUBJECT_EMPTY_MESSAGE = (
    "📚 No subjects found in your department yet.\n\n"
    "💡 **Quick Actions:**\n"
    "• Click 'Create Subject' to add your first subject\n"
    "• Set up semester-wise subject organization\n"
    "• Assign faculty to subjects\n\n"
    "Would you like me to guide you through adding subjects?"
)

FACULTY_SEARCH_HELP = (
    "🔍 **Faculty Search Help:**\n\n"
    "I can help you find faculty information. Try:\n"
    "• 'Show all faculty'\n"
    "• 'Faculty details for Dr. Smith'\n"
    "• 'Faculty credentials'\n"
    "• 'How many faculty do we have?'"
)

SUBJECT_SEARCH_HELP = (
    "🔍 **Subject Search Help:**\n\n"
    "I can help you find subject information. Try:\n"
    "• 'Show all subjects'\n"
    "• 'Details for CS101'\n"
    "• 'How many subjects do we have?'"
)

NO_SEARCH_RESULTS = (
    "🔍 **No results found.**\n\n"
    "Try searching for:\n"
    "• Faculty names or IDs\n"
    "• Subject codes or names\n"
    "• Email addresses\n\n"
    "💡 **Tip:** Use partial names or codes for better results!"
)

HOD_HELP_MESSAGE = (
    "🤖 **Assistant Capabilities:**\n\n"
    "📋 **What I can help with:**\n"
    "• Faculty management and analytics\n"
    "• Subject organization and assignments\n"
    "• Attendance tracking and reports\n"
    "• Performance metrics and insights\n\n"
    "💬 **Try asking:**\n"
    '• "Show me faculty performance"\n'
    '• "Show all subjects"\n'
    '• "Find Computer Science"\n'
    '• "Details for FAC001"'
)

FACULTY_HELP_MESSAGE = (
    "I can help you with:\n"
    "• Student attendance lookup (provide USN)\n"
    "• Attendance statistics and percentages\n"
    "• Subject and class information\n"
    "• Student details and performance\n\n"
    "Just ask me anything!"
)

STUDENT_HELP_MESSAGE = (
    "I can help you with:\n"
    "• Attendance queries and statistics\n"
    "• Faculty information and office hours\n"
    "• Absence request status\n"
    "• General college information"
)

DETAILS_PROMPT = (
    "🔎 **Which record do you mean?**\n\n"
    "Include one of these in your question:\n"
    "• A faculty name, faculty ID or email\n"
    "• A subject code (e.g. CS101)\n"
    "• A student USN (e.g. 1MS21CS001)"
)

ASK_FOR_USN = "Please provide a student USN (e.g., 1MS21CS001) to check their attendance details."

HOD_ATTENDANCE_HINT = (
    "📊 Attendance records are tracked per faculty member.\n\n"
    "💡 Click on a faculty card to view detailed teaching analytics and class records."
)

STUDENT_STATIC_REPLIES: dict[str, str] = {
    "attendance_history": (
        "You can view your complete attendance history in the 'Attendance History' section "
        "of your dashboard. It shows all your records with dates and times."
    ),
    "office_hours": (
        "Faculty office hours are typically 2:00 PM - 4:00 PM on weekdays. Please check with "
        "individual faculty for specific timings and availability."
    ),
    "faculty_contact": (
        "You can contact faculty through the college portal or visit them during office hours. "
        "For urgent matters, contact the department office."
    ),
    "tech_support": (
        "For technical issues with the portal, please contact IT support or visit the IT help "
        "desk in the main building."
    ),
    "academic_support": (
        "For academic queries, you can contact your respective faculty during office hours or "
        "reach out to the academic office."
    ),
}


def time_greeting(now: datetime) -> str:
    if now.hour < 12:
        return "Good morning"
    if now.hour < 17:
        return "Good afternoon"
    return "Good evening"


def hod_greeting(now: datetime) -> str:
    return (
        f"{time_greeting(now)}! 🎓 I'm your HOD Dashboard assistant. I can help you with:\n\n"
        "🧑‍🏫 Faculty Management & Analytics\n"
        "📚 Subject Information & Assignments\n"
        "📊 Attendance Tracking & Reports\n"
        "📈 Performance Analytics\n"
        "🔍 Smart Search & Insights\n\n"
        "What would you like to explore today?"
    )


def faculty_greeting(now: datetime) -> str:
    return f"{time_greeting(now)}! How can I help you with attendance management today?"


def student_greeting(now: datetime) -> str:
    return (
        f"{time_greeting(now)}! I'm your virtual assistant. I can help you with attendance, "
        "faculty information and general queries. How can I assist you today?"
    )


def _subjects_text(record: FacultyRecord) -> str:
    return ", ".join(record.assigned_subjects) if record.assigned_subjects else "None assigned"


def _date(value: datetime) -> str:
    return value.strftime("%d/%m/%Y")


def faculty_profile(record: FacultyRecord, password: str) -> str:
    """Full profile including login credentials."""
    return (
        "👨‍🏫 **Complete Faculty Profile:**\n\n"
        "🆔 **Personal Information:**\n"
        f"• **Name:** {record.name}\n"
        f"• **Faculty ID:** {record.faculty_id}\n"
        f"• **Email:** {record.email}\n"
        f"• **Joined Date:** {_date(record.created_at)}\n\n"
        "📚 **Academic Details:**\n"
        f"• **Assigned Subjects:** {_subjects_text(record)}\n"
        f"• **Total Subjects:** {len(record.assigned_subjects)}\n\n"
        "🔐 **Login Credentials:**\n"
        f"• **Username/Email:** {record.email}\n"
        f"• **Password:** {password}\n"
        f"• **Faculty ID:** {record.faculty_id}\n\n"
        "💡 **Security Note:** Keep login credentials secure and share only when necessary."
    )


def faculty_brief(record: FacultyRecord) -> str:
    """Profile without credentials."""
    return (
        "👨‍🏫 **Faculty Found:**\n\n"
        f"**Name:** {record.name}\n"
        f"**ID:** {record.faculty_id}\n"
        f"**Email:** {record.email}\n"
        f"**Subjects:** {_subjects_text(record)}\n"
        f"**Joined:** {_date(record.created_at)}\n\n"
        f'💬 **Ask for more:** Try "show complete details for {record.name}" '
        "for full profile information."
    )


def faculty_stats_block(stats: AttendanceStats, average: int) -> str:
    return (
        "\n\n📊 **Teaching Summary:**\n"
        f"• Total Classes: {stats.total_classes}\n"
        f"• Classes This Month: {stats.classes_this_month}\n"
        f"• Average Attendance: {average}%"
    )


def credential_entry(record: FacultyRecord, password: str) -> str:
    subjects = ", ".join(record.assigned_subjects) or "None"
    return (
        f"👤 **{record.name}**\n"
        f"• ID: {record.faculty_id}\n"
        f"• Email: {record.email}\n"
        f"• Password: {password}\n"
        f"• Subjects: {subjects}"
    )


def all_credentials(entries: list[str]) -> str:
    return (
        "🔐 **All Faculty Credentials:**\n\n"
        + "\n\n".join(entries)
        + "\n\n⚠️ **Security Reminder:** Keep this information confidential and secure."
    )


def faculty_line(record: FacultyRecord) -> str:
    return f"• {record.name} ({record.faculty_id}) - {len(record.assigned_subjects)} subjects"


def faculty_detail_line(record: FacultyRecord, password: str) -> str:
    subjects = ", ".join(record.assigned_subjects) or "None"
    return (
        f"• **{record.name}** ({record.faculty_id})\n"
        f"  📧 {record.email} | 🔑 {password}\n"
        f"  📚 {len(record.assigned_subjects)} subjects: {subjects}"
    )


def faculty_overview(total: int, assigned: int, unassigned: int, listing: str) -> str:
    return (
        "👥 **Faculty Overview:**\n\n"
        "📊 **Statistics:**\n"
        f"• **Total Faculty:** {total}\n"
        f"• **With Assignments:** {assigned}\n"
        f"• **Unassigned:** {unassigned}\n\n"
        f"📋 **Faculty List:**\n{listing}"
    )


def subject_overview(total: int, assigned: int, semester_counts: dict[int, int]) -> str:
    by_semester = "\n".join(
        f"• Semester {sem}: {count} subjects" for sem, count in sorted(semester_counts.items())
    )
    return (
        "📚 **Subject Overview:**\n\n"
        f"📊 **Total Subjects:** {total}\n"
        f"✅ **Assigned:** {assigned}\n"
        f"⚠️ **Unassigned:** {total - assigned}\n\n"
        f"📋 **By Semester:**\n{by_semester}"
    )


def subject_detail(subject: SubjectRecord) -> str:
    return (
        "📖 **Subject Details:**\n\n"
        f"**Code:** {subject.code}\n"
        f"**Name:** {subject.name}\n"
        f"**Semester:** {subject.semester}\n"
        f"**Credits:** {subject.credits}\n"
        f"**Faculty:** {subject.faculty_name or 'Not assigned'}\n"
        f"**Created:** {_date(subject.created_at)}"
    )


def department_analytics(
    faculty_total: int,
    faculty_active: int,
    utilization: int,
    subject_total: int,
    subject_assigned: int,
    assignment_rate: int,
) -> str:
    faculty_insight = (
        "• Consider assigning subjects to faculty members"
        if faculty_active == 0
        else "• Faculty assignment is progressing well"
    )
    subject_insight = (
        "• Some subjects need faculty assignment"
        if subject_assigned < subject_total
        else "• All subjects have been assigned"
    )
    return (
        "📈 **Department Analytics:**\n\n"
        "👥 **Faculty Metrics:**\n"
        f"• Total Faculty: {faculty_total}\n"
        f"• Active Faculty: {faculty_active}\n"
        f"• Utilization Rate: {utilization}%\n\n"
        "📚 **Subject Metrics:**\n"
        f"• Total Subjects: {subject_total}\n"
        f"• Assigned Subjects: {subject_assigned}\n"
        f"• Assignment Rate: {assignment_rate}%\n\n"
        f"💡 **Insights:**\n{faculty_insight}\n{subject_insight}"
    )


def department_totals(faculty: int, subjects: int, students: int) -> str:
    return (
        "📊 **Department Totals:**\n\n"
        f"• **Faculty:** {faculty}\n"
        f"• **Subjects:** {subjects}\n"
        f"• **Students:** {students}"
    )


def search_results(faculty_block: str | None, subject_block: str | None) -> str:
    parts = ["🔍 **Search Results:**"]
    if faculty_block:
        parts.append(faculty_block)
    if subject_block:
        parts.append(subject_block)
    return "\n\n".join(parts)


def attendance_overview(lines: list[str]) -> str:
    return "📊 **Faculty Attendance Summary:**\n\n" + "\n".join(lines)


def student_not_found(usn: str) -> str:
    return f"Student with USN {usn} not found in your classes. Please check the USN and try again."


def student_info(
    student: StudentRecord,
    attendance: StudentAttendance | None,
    percentage: int,
    threshold: int,
) -> str:
    lines = [
        "📊 **Student Information**",
        "",
        f"**Name:** {student.name}",
        f"**USN:** {student.usn}",
        f"**Email:** {student.email or '-'}",
        f"**Phone:** {student.phone or '-'}",
    ]
    if attendance is None:
        return "\n".join(lines)

    standing = "✅ Good Standing" if percentage >= threshold else f"⚠️ Below Required ({threshold}%)"
    lines += [
        "",
        "**Attendance Summary:**",
        f"• Total Classes: {attendance.total_classes}",
        f"• Classes Attended: {attendance.attended}",
        f"• Attendance Percentage: {percentage}%",
        f"• Status: {standing}",
    ]
    needed = attendance.classes_needed(threshold)
    if percentage < threshold and needed > 0:
        lines += [
            "",
            f"⚠️ **Alert:** Student needs to attend {needed} more classes "
            f"to reach {threshold}% attendance.",
        ]
    return "\n".join(lines)


def own_attendance(attendance: StudentAttendance, percentage: int) -> str:
    return (
        f"Your current overall attendance is {percentage}%. You've attended "
        f"{attendance.attended} out of {attendance.total_classes} classes this semester. "
        "Would you like to see subject-wise breakdown?"
    )


def subject_breakdown(rows: list[tuple[str, int, int, int]]) -> str:
    """Rows of (subject, percentage, attended, total)."""
    if not rows:
        return "No attendance has been recorded for you yet."
    lines = [f"• {name}: {pct}% ({hit}/{seen})" for name, pct, hit, seen in rows]
    return "Here's your subject-wise attendance:\n" + "\n".join(lines)


def teaching_subjects(subjects: list[SubjectRecord]) -> str:
    if not subjects:
        return "You don't have any subjects assigned yet."
    lines = [f"• {s.name} ({s.code}) - Semester {s.semester}" for s in subjects]
    return f"You are currently teaching {len(subjects)} subjects:\n" + "\n".join(lines)


def roster_size(count: int) -> str:
    return f"You have a total of {count} students across all your subjects."


def faculty_directory(
    faculty: list[FacultyRecord],
    subjects: list[SubjectRecord],
    codes: set[str] | None = None,
) -> str:
    """List faculty with the subjects they teach.

    With ``codes`` (lower-cased subject codes) only those subjects are shown
    and faculty teaching none of them are left out.
    """
    names = {s.code.lower(): s.name for s in subjects}
    lines = []
    for record in faculty:
        taught = [code.lower() for code in record.assigned_subjects]
        taught += [s.code.lower() for s in subjects if s.faculty_id == record.id]
        taught = list(dict.fromkeys(taught))
        if codes is not None:
            taught = [code for code in taught if code in codes]
            if not taught:
                continue
        listing = ", ".join(names.get(code, code.upper()) for code in taught)
        lines.append(f"• {record.name} - {listing or 'No subjects assigned'}")

    if codes is not None:
        if not lines:
            return "No faculty are listed for your subjects yet."
        return "Faculty for your subjects:\n" + "\n".join(lines)
    if not lines:
        return "No faculty information is available yet."
    return "Faculty in your department:\n" + "\n".join(lines)
