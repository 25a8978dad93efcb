from enum import Enum
from typing import NamedTuple

__all__ = ["FormatCode", "FormatDescriptor", "BLANK_FORMAT"]


class FormatCode(str, Enum):
    """One header/footer slot. The value is the "fff" character."""
    PAGE_OF_PAGES = "/"
    CHAPTER_PAGE_OF_PAGES = ":"
    PAGE_ARABIC = "1"
    PAGE_LOWER_ALPHA = "a"
    PAGE_UPPER_ALPHA = "A"
    CHAPTER = "c"
    CHAPTER_PAGE = "C"
    DATE = "d"
    DATE_TIME = "D"
    HEADING = "h"
    PAGE_LOWER_ROMAN = "i"
    PAGE_UPPER_ROMAN = "I"
    LOGO_IMAGE = "l"
    LETTERHEAD = "L"
    TITLE = "t"
    TIME = "T"
    URL = "u"

    @property
    def template(self) -> str:
        """Token string understood by the page renderer."""
        return _TEMPLATES[self]


_TEMPLATES: dict[FormatCode, str] = {
    FormatCode.PAGE_OF_PAGES: "$PAGE(1)/$PAGES",
    FormatCode.CHAPTER_PAGE_OF_PAGES: "$CHAPTERPAGE(1)/$CHAPTERPAGES",
    FormatCode.PAGE_ARABIC: "$PAGE(1)",
    FormatCode.PAGE_LOWER_ALPHA: "$PAGE(a)",
    FormatCode.PAGE_UPPER_ALPHA: "$PAGE(A)",
    FormatCode.CHAPTER: "$CHAPTER",
    FormatCode.CHAPTER_PAGE: "$CHAPTERPAGE(1)",
    FormatCode.DATE: "$DATE",
    FormatCode.DATE_TIME: "$DATE $TIME",
    FormatCode.HEADING: "$HEADING",
    FormatCode.PAGE_LOWER_ROMAN: "$PAGE(i)",
    FormatCode.PAGE_UPPER_ROMAN: "$PAGE(I)",
    FormatCode.LOGO_IMAGE: "$LOGOIMAGE",
    FormatCode.LETTERHEAD: "$LETTERHEAD",
    FormatCode.TITLE: "$TITLE",
    FormatCode.TIME: "$TIME",
    FormatCode.URL: "$URL",
}


class FormatDescriptor(NamedTuple):
    """Left/center/right slots of a header or footer. None is a blank slot."""
    left: FormatCode | None = None
    center: FormatCode | None = None
    right: FormatCode | None = None

    @property
    def is_blank(self) -> bool:
        return all(slot is None for slot in self)

    def templates(self) -> tuple[str, str, str]:
        return tuple(slot.template if slot else "" for slot in self)

    def __str__(self) -> str:
        """The "fff" string; blank slots are written as '.'."""
        return "".join(slot.value if slot else "." for slot in self)


BLANK_FORMAT = FormatDescriptor()
