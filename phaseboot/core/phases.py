"""Phase name lists and the anchor-based merge used by ``add_phases``."""
from __future__ import annotations

from typing import List, Sequence

from .errors import InvalidConfiguration, PhaseOrderingError

BUILTIN_PHASES = ("load", "compile", "starting", "start", "started")


def merge_phase_name_lists(current: Sequence[str], names_to_merge: Sequence[str]) -> List[str]:
    """Merge *names_to_merge* into *current* and return the new list.

    Names that already exist are anchors: they are never duplicated and fix
    where their neighbours go. A new name is placed right after the name that
    precedes it in *names_to_merge*; new names ahead of the first anchor are
    placed right before that anchor. When none of the names exist yet they are
    appended in order.
    """

    target = list(current)
    names: List[str] = []
    for name in names_to_merge:
        if name not in names:
            names.append(name)
    if not names:
        return target

    first_anchor = next((index for index, name in enumerate(names) if name in target), None)
    if first_anchor is None:
        target.extend(names)
        return target

    # Leading names slot in ahead of the first anchor
    cursor = target.index(names[first_anchor])
    for name in names[:first_anchor]:
        target.insert(cursor, name)
        cursor += 1

    for position in range(first_anchor + 1, len(names)):
        name = names[position]
        previous = names[position - 1]
        if name in target:
            existing = target.index(name)
            if existing < cursor:
                raise PhaseOrderingError(
                    f"Phase ordering conflict: cannot add '{name}' after '{previous}', "
                    "because the opposite order was already specified"
                )
            cursor = existing
            continue
        cursor = target.index(previous) + 1
        target.insert(cursor, name)
    return target


def ensure_phase_list(phases: object) -> List[str]:
    """Return *phases* as a list of names, rejecting unordered containers."""

    if not isinstance(phases, (list, tuple)):
        raise InvalidConfiguration(f"Invalid phases: {phases!r}")
    for name in phases:
        if not isinstance(name, str) or not name:
            raise InvalidConfiguration(f"Invalid phase name: {name!r}")
    return list(phases)


__all__ = ["BUILTIN_PHASES", "ensure_phase_list", "merge_phase_name_lists"]
