"""Text helpers shared by parameter, property and operation naming."""

import re

_SNAKE_SPLIT = re.compile(r"_+")


def to_camel_case(name: str) -> str:
    """Lower-camel-case ``name``.

    ``snake_case`` names are joined (``user_id`` -> ``userId``); otherwise
    the leading run of capitals is lowered (``URLValue`` -> ``urlValue``).
    Hyphenated wire names keep their hyphens (``X-Request-Id`` -> ``x-Request-Id``).
    """
    if not name:
        return name
    if "_" in name.strip("_"):
        head, *rest = [p for p in _SNAKE_SPLIT.split(name) if p]
        return to_camel_case(head) + "".join(to_title_case(p) for p in rest)
    if not name[0].isupper():
        return name

    chars = list(name)
    for i, ch in enumerate(chars):
        has_next = i + 1 < len(chars)
        if i > 0 and has_next and not chars[i + 1].isupper():
            break
        if not ch.isupper():
            break
        chars[i] = ch.lower()
    return "".join(chars)


def to_title_case(name: str) -> str:
    return name[:1].upper() + name[1:]
