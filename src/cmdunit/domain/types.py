"""Command naming vocabulary.

Commands are named ``<Verb>-<Noun>``. The verb should come from the
approved list below so that command names stay predictable for callers.
"""

from __future__ import annotations

from enum import StrEnum


class Verb(StrEnum):
    """Approved command verbs."""

    ADD = "Add"
    CLEAR = "Clear"
    CLOSE = "Close"
    COPY = "Copy"
    ENTER = "Enter"
    EXIT = "Exit"
    FIND = "Find"
    FORMAT = "Format"
    GET = "Get"
    HIDE = "Hide"
    JOIN = "Join"
    LOCK = "Lock"
    MOVE = "Move"
    NEW = "New"
    OPEN = "Open"
    POP = "Pop"
    PUSH = "Push"
    REDO = "Redo"
    REMOVE = "Remove"
    RENAME = "Rename"
    RESET = "Reset"
    SEARCH = "Search"
    SELECT = "Select"
    SET = "Set"
    SHOW = "Show"
    SKIP = "Skip"
    SPLIT = "Split"
    STEP = "Step"
    SWITCH = "Switch"
    UNDO = "Undo"
    UNLOCK = "Unlock"
    WATCH = "Watch"
    CONVERT = "Convert"
    INVOKE = "Invoke"
    MEASURE = "Measure"
    START = "Start"
    STOP = "Stop"
    TEST = "Test"
    WRITE = "Write"
    READ = "Read"


def is_approved_verb(verb: str) -> bool:
    """Return True if *verb* matches an approved verb, ignoring case."""
    folded = verb.casefold()
    return any(v.value.casefold() == folded for v in Verb)


class BindingSource(StrEnum):
    """How a value reached its parameter."""

    NAME = "name"
    POSITION = "position"
    PIPELINE = "pipeline"
