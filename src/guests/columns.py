"""Spreadsheet header aliases for the guest-record fields.

Guest lists arrive from whatever spreadsheet the organizer already keeps, so
each logical field accepts a few common header spellings.
"""

from collections.abc import Collection, Mapping

NAME_ALIASES = frozenset({"name", "full name", "guest name"})
EMAIL_ALIASES = frozenset({"email", "e-mail", "mail"})
PHONE_ALIASES = frozenset({"phone", "mobile", "contact", "cell"})
ALLOWED_GUESTS_ALIASES = frozenset({"guests", "guest", "allowed", "count", "number of guests"})


def find_value(row: Mapping[str, str | None], aliases: Collection[str]) -> str | None:
    """Return the cell under the first header (in the row's own order) matching an alias.

    Headers are compared trimmed and lowercased. Returns None when no header matches.
    """
    for header, value in row.items():
        if header is None:
            continue
        if header.strip().lower() in aliases:
            return value
    return None
