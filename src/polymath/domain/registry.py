"""Static registry of the five tracked business units."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Business:
    """Identity of a business unit."""

    id: str
    name: str
    color: str


BUSINESSES: tuple[Business, ...] = (
    Business(id="iclean", name="iClean", color="iclean"),
    Business(id="icandy", name="iCandy Factory", color="icandy"),
    Business(id="apl", name="Angry Panda Logistics", color="apl"),
    Business(id="apmg", name="Angry Panda Music Group", color="apmg"),
    Business(id="instafund", name="Insta Fund", color="instafund"),
)

BUSINESS_IDS: tuple[str, ...] = tuple(b.id for b in BUSINESSES)

_BY_ID = {b.id: b for b in BUSINESSES}


def get_business(business_id: str) -> Optional[Business]:
    """Look up a registry entry by id."""
    return _BY_ID.get(business_id)


def is_registered(business_id: str) -> bool:
    return business_id in _BY_ID
