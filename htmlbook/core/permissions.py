"""
Parses --permissions keyword lists into the PDF permission mask.
"""
import logging

from ..utils.config import (
    Configuration, PERM_ALL, PERM_ANNOTATE, PERM_COPY, PERM_MODIFY, PERM_NONE, PERM_PRINT,
)


log = logging.getLogger("htmlbook")

PERMISSION_BITS = {
    "print": PERM_PRINT,
    "modify": PERM_MODIFY,
    "copy": PERM_COPY,
    "annotate": PERM_ANNOTATE,
}


def parse_permissions(text: str, mask: int = PERM_ALL) -> int:
    """
    Applies comma-separated keywords to `mask`, left to right.

    "all" and "none" reset the whole mask; "print", "no-print" and friends
    set or clear a single bit. Unknown keywords are ignored.
    """
    for keyword in text.split(","):
        keyword = keyword.strip().lower()
        if keyword == "all":
            mask = PERM_ALL
        elif keyword == "none":
            mask = PERM_NONE
        elif keyword in PERMISSION_BITS:
            mask |= PERMISSION_BITS[keyword]
        elif keyword.startswith("no-") and keyword[3:] in PERMISSION_BITS:
            mask &= ~PERMISSION_BITS[keyword[3:]]
        elif keyword:
            log.debug(f"Ignoring unknown permission '{keyword}'")
    return mask


def set_permissions(config: Configuration, text: str):
    """Updates config.permissions; anything short of "all" turns encryption on."""
    if not text:
        return
    config.permissions = parse_permissions(text, config.permissions)
    if config.permissions != PERM_ALL:
        config.encryption = True
