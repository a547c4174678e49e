from __future__ import annotations

# Lyricify Syllable line properties: alignment plus background-vocal flag
UNSET = 0
LEFT = 1
RIGHT = 2
NO_BACK_LEFT = 4
NO_BACK_RIGHT = 5
BACK_UNSET = 6
BACK_LEFT = 7
BACK_RIGHT = 8

CATEGORY_LEFT = "left"
CATEGORY_RIGHT = "right"
CATEGORY_BACKGROUND = "background"
CATEGORY_OTHER = "other"

# first word of the ASS Name field
LEFT_NAMES = frozenset({"左", "v1", "合", "v1000"})
RIGHT_NAMES = frozenset({"右", "v2", "x-duet", "x-anti"})
BACKGROUND_NAMES = frozenset({"背", "x-bg"})
SPECIAL_NAMES = LEFT_NAMES | RIGHT_NAMES | BACKGROUND_NAMES


def _first_word(name: str | None) -> str:
    words = (name or "").split()
    return words[0] if words else ""


def is_special_name(name: str | None) -> bool:
    return _first_word(name) in SPECIAL_NAMES


def name_category(name: str | None) -> str:
    """Empty names count as the main (left) singer."""
    word = _first_word(name)
    if not word or word in LEFT_NAMES:
        return CATEGORY_LEFT
    if word in RIGHT_NAMES:
        return CATEGORY_RIGHT
    if word in BACKGROUND_NAMES:
        return CATEGORY_BACKGROUND
    return CATEGORY_OTHER


def property_for(category: str, previous_category: str | None, last_property: int) -> int:
    """
    Background lines take their side from the line before them; a run of
    background lines keeps the side of its first line.
    """
    if category == CATEGORY_LEFT:
        return NO_BACK_LEFT
    if category == CATEGORY_RIGHT:
        return NO_BACK_RIGHT
    if category == CATEGORY_BACKGROUND:
        if previous_category == CATEGORY_LEFT:
            return BACK_LEFT
        if previous_category == CATEGORY_RIGHT:
            return BACK_RIGHT
        if previous_category == CATEGORY_BACKGROUND:
            return last_property
        return BACK_UNSET
    return UNSET


def name_for(prop: int) -> str:
    """ASS Name for a property; every background property maps back to 背."""
    if prop in (BACK_UNSET, BACK_LEFT, BACK_RIGHT):
        return "背"
    if prop in (LEFT, NO_BACK_LEFT):
        return "左"
    if prop in (RIGHT, NO_BACK_RIGHT):
        return "右"
    return ""
