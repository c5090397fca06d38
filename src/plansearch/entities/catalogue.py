"""Lot types and parishes/settlements offered by the registry search form.

Ids are 1-based and match the ``lotTypeRefId`` / ``parishRefId`` option
values on the search form.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

LOT_TYPES: Tuple[str, ...] = (
    "Group Lot",
    "Lake Lot",
    "Outer Two Mile",
    "Park Lot",
    "River Lot",
    "Settlement Lot",
    "Wood Lot",
    "Indian Reserve",
)

PARISHES: Tuple[str, ...] = (
    "Baie Saint Paul",
    "Big Eddy",
    "Brokenhead",
    "Cross Lake",
    "Duck Bay North",
    "Duck Bay South",
    "Fairford",
    "Fairford Mission",
    "Fisher Bay",
    "Fort Alexander",
    "Grand Rapids",
    "Grande Pointe",
    "Headingley",
    "High Bluff",
    "Kildonan",
    "Lorette",
    "Manigotagan River",
    "Manitoba House",
    "Norway House",
    "Oak Island",
    "Oak Point",
    "Pasquia",
    "Pine Creek",
    "Poplar Point",
    "Portage La Prairie",
    "Rat River",
    "Riding Mountain National Park",
    "Roman Catholic Mission Property",
    "Saint Andrews",
    "Saint Boniface",
    "Saint Charles",
    "Saint Clements",
    "Saint Francois Xavier",
    "Saint James",
    "Saint John",
    "Saint Laurent",
    "Saint Malo",
    "Saint Norbert",
    "Saint Paul",
    "Saint Peter",
    "Saint Vital",
    "Sainte Agathe",
    "Sainte Anne",
    "The Pas",
    "Umfreville",
    "Westbourne",
)


def _lookup(names: Sequence[str], name: str, kind: str) -> int:
    wanted = " ".join(name.split()).casefold()
    for index, candidate in enumerate(names, start=1):
        if candidate.casefold() == wanted:
            return index
    raise KeyError(f"Unknown {kind}: {name!r}")


def lot_type_id(name: str) -> int:
    """Return the form id for a lot type name (case-insensitive)."""

    return _lookup(LOT_TYPES, name, "lot type")


def parish_id(name: str) -> int:
    """Return the form id for a parish/settlement name (case-insensitive)."""

    return _lookup(PARISHES, name, "parish")


def lot_type_name(identifier: int) -> str:
    if not 1 <= identifier <= len(LOT_TYPES):
        raise KeyError(f"Unknown lot type id: {identifier}")
    return LOT_TYPES[identifier - 1]


def parish_name(identifier: int) -> str:
    if not 1 <= identifier <= len(PARISHES):
        raise KeyError(f"Unknown parish id: {identifier}")
    return PARISHES[identifier - 1]


def resolve_names(names: Iterable[str] | None, *, kind: str) -> List[str]:
    """Return canonical spellings for ``names``; ``None`` selects every entry."""

    table = LOT_TYPES if kind == "lot type" else PARISHES
    if names is None:
        return list(table)
    return [table[_lookup(table, name, kind) - 1] for name in names]


__all__ = [
    "LOT_TYPES",
    "PARISHES",
    "lot_type_id",
    "lot_type_name",
    "parish_id",
    "parish_name",
    "resolve_names",
]
