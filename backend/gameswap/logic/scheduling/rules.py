import re
from collections.abc import Iterable
from datetime import date

from gameswap.models.db.slot import Slot, SlotInsertable, SlotStatus
from gameswap.utils.id_types import SlotId

_TIME_PATTERN = re.compile(r"^([0-9]{2}):([0-9]{2})$")
_DATE_PATTERN = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")


class SlotValidationError(ValueError):
    pass


def overlaps(a_start: int, a_end: int, b_start: int, b_end: int) -> bool:
    # Half-open intervals: [10:00, 11:00) and [11:00, 12:00) do not collide.
    return a_start < b_end and b_start < a_end


def parse_minutes(value: str | None) -> int | None:
    match = _TIME_PATTERN.fullmatch(str(value or "").strip())
    if match is None:
        return None

    hours, minutes = int(match.group(1)), int(match.group(2))
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def is_valid_game_date(value: str | None) -> bool:
    normalized = str(value or "").strip()
    if _DATE_PATTERN.fullmatch(normalized) is None:
        return False
    try:
        date.fromisoformat(normalized)
    except ValueError:
        return False
    return True


def validate_time_range(start_time: str, end_time: str) -> tuple[int, int]:
    start_minutes = parse_minutes(start_time)
    end_minutes = parse_minutes(end_time)
    if start_minutes is None or end_minutes is None:
        raise SlotValidationError("Invalid time format. Expected HH:mm (24-hour).")

    if start_minutes >= end_minutes:
        raise SlotValidationError("startTime must be before endTime.")

    return start_minutes, end_minutes


def find_conflicts(
    candidate: SlotInsertable, existing: Iterable[Slot], ignore_slot_id: SlotId | None = None
) -> list[Slot]:
    """
    Existing slots on the same division, field and date whose time range collides with
    the candidate. Cancelled slots never block, and the slot identified by
    ``ignore_slot_id`` (the one being edited or re-imported) is skipped.
    """
    conflicts: list[Slot] = []
    for slot in existing:
        if ignore_slot_id is not None and slot.id == ignore_slot_id:
            continue
        if slot.status == SlotStatus.Cancelled:
            continue
        if (
            slot.division.lower() != candidate.division.lower()
            or slot.field_key != candidate.field_key
            or slot.game_date != candidate.game_date
        ):
            continue
        if overlaps(
            candidate.start_minutes, candidate.end_minutes, slot.start_minutes, slot.end_minutes
        ):
            conflicts.append(slot)
    return conflicts
