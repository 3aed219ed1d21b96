"""
Bot comment kinds and their marker tags.

Every comment the bot writes carries exactly one marker tag. Markers are
matched by case-sensitive substring containment, so a later cycle can
re-detect what a comment was written for.
"""

from enum import Enum


class CommentKind(Enum):
    """Purpose of a bot comment."""

    REPORT = "report"
    REMINDER = "reminder"
    TITLE_WARNING = "title_warning"
    BRANCH_NAME_WARNING = "branch_name_warning"

    @property
    def marker(self) -> str:
        return MARKERS[self]

    def matches(self, body: str) -> bool:
        """Return True if ``body`` carries this kind's marker."""
        return self.marker in body


MARKERS: dict[CommentKind, str] = {
    CommentKind.REPORT: "[report]",
    CommentKind.REMINDER: "[reminder]",
    CommentKind.TITLE_WARNING: "[title_warning]",
    CommentKind.BRANCH_NAME_WARNING: "[branch_name_warning]",
}


__all__ = ["CommentKind", "MARKERS"]
