#Purpose: The ordering rule shared by every weight tier and by the tier selector.
#Higher priority first, then higher destination, then arrival order.
#Python's sort is stable (also with reverse=True), so arrival order among
#full ties is kept without storing it in the key.

from typing import Iterable, List, Tuple, Any

from .models import JobRecord


def precedence(record: JobRecord) -> Tuple[int, Any]:
    return (record.priority, record.destination)


def rank(records: Iterable[JobRecord]) -> List[JobRecord]:
    """
    Returns the records ordered highest precedence first.
    Full ties keep the order they were passed in.
    """
    return sorted(records, key=precedence, reverse=True)


def sort_in_place(records: List[JobRecord]) -> None:
    records.sort(key=precedence, reverse=True)


def outranks(first: JobRecord, second: JobRecord) -> bool:
    # strict: a full tie never outranks
    return precedence(first) > precedence(second)
