import re

_NON_SLUG = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """Turn an event name into an invite-link slug.

    >>> slugify("Summer Gala 2024!")
    'summer-gala-2024'
    """
    return _NON_SLUG.sub("-", name.lower()).strip("-")
