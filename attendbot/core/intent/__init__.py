"""Intent resolution for the attendbot chat assistants.

Routes a free-text query to exactly one templated answer:
1. Direct lookup - identifier tokens (USN, faculty ID, email, subject code)
2. Category classification - first match in the portal's ordered pattern table
3. Category handler - per-category sub-logic
4. Default fallback - the portal's help menu

Example usage:
    ```python
    from attendbot.core.intent import IntentResolver, ResolverContext

    resolver = IntentResolver("hod")
    response = await resolver.resolve(
        "show all faculty",
        ResolverContext(faculty=faculty, subjects=subjects),
    )
    print(response.message)
    if response.data.kind == "faculty_list":
        ...
    ```
"""

from .entities import (
    DirectMatch,
    IdentifierTokens,
    extract_identifiers,
    find_direct_match,
    match_faculty,
    match_subject,
    search_directory,
    search_term,
)
from .patterns import (
    PORTAL_TABLES,
    STUDENT_PAYLOADS,
    PatternTable,
    QueryModifiers,
)
from .resolver import (
    IntentResolver,
    create_resolver,
)
from .taxonomy import (
    FacultyListPayload,
    FacultyPayload,
    IntentCategory,
    NoPayload,
    Payload,
    Portal,
    QuickReply,
    ResolverContext,
    ResolverResponse,
    SearchPayload,
    StudentPayload,
    SubjectListPayload,
    SubjectPayload,
)
from .templates import DEFAULT_MESSAGES, ERROR_MESSAGE

__all__ = [
    # Resolver
    "IntentResolver",
    "create_resolver",
    # Pattern tables
    "PatternTable",
    "QueryModifiers",
    "PORTAL_TABLES",
    "STUDENT_PAYLOADS",
    # Taxonomy
    "IntentCategory",
    "Portal",
    "QuickReply",
    "ResolverContext",
    "ResolverResponse",
    # Payloads
    "Payload",
    "NoPayload",
    "FacultyPayload",
    "FacultyListPayload",
    "SubjectPayload",
    "SubjectListPayload",
    "StudentPayload",
    "SearchPayload",
    # Entities
    "DirectMatch",
    "IdentifierTokens",
    "extract_identifiers",
    "find_direct_match",
    "match_faculty",
    "match_subject",
    "search_directory",
    "search_term",
    # Messages
    "DEFAULT_MESSAGES",
    "ERROR_MESSAGE",
]
