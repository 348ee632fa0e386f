from __future__ import annotations

from hondenwedstrijd.schemas import RegistrationStatus

# Case-insensitive substring keywords, checked in this order.
# Announcements of a future opening ("Inschrijving opent 1 april") come
# first because they also contain "open".
NOT_YET_KEYWORDS = (
    "opent",
    "opening",
    "nog niet",
)
OPEN_KEYWORDS = (
    "inschrijven",
    "inschrijving open",
    "aanmelden",
    "registration open",
    "open",
)
# Bare "vol" is left out: it would match "Volendam".
CLOSED_KEYWORDS = (
    "gesloten",
    "volgeboekt",
    "volzet",
    "uitverkocht",
    "closed",
    "full",
)


def classify_status(text: str | None) -> RegistrationStatus:
    """Map free-text registration status to a RegistrationStatus.

    A not-yet-open announcement beats Open, Open beats Closed; anything
    unrecognised (or empty) is NOT_YET_AVAILABLE.
    """
    lowered = (text or "").lower()
    if any(kw in lowered for kw in NOT_YET_KEYWORDS):
        return RegistrationStatus.NOT_YET_AVAILABLE
    if any(kw in lowered for kw in OPEN_KEYWORDS):
        return RegistrationStatus.OPEN
    if any(kw in lowered for kw in CLOSED_KEYWORDS):
        return RegistrationStatus.CLOSED
    return RegistrationStatus.NOT_YET_AVAILABLE


def has_status_keyword(text: str | None) -> bool:
    lowered = (text or "").lower()
    return any(kw in lowered for kw in NOT_YET_KEYWORDS + OPEN_KEYWORDS + CLOSED_KEYWORDS)
