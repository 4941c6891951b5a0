"""Edge-triggered checks over a commit's ``ready`` and ``loading`` flags.

Each predicate compares two snapshots of the same commit taken before and
after a mutation. They only look at the two flags, so any object carrying
``ready`` and ``loading`` attributes works.
"""

from __future__ import annotations


def just_became_ready(before, after) -> bool:
    return not before.ready and bool(after.ready)


def just_finished_loading(before, after) -> bool:
    return bool(before.loading) and not after.loading


def ready_changed(before, after) -> bool:
    """True on either direction of the ``ready`` flip."""
    return bool(before.ready) != bool(after.ready)


def loading_changed(before, after) -> bool:
    """True on either direction of the ``loading`` flip."""
    return bool(before.loading) != bool(after.loading)
