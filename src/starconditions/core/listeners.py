import logging
import weakref
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListenerRecord:
    event: str
    handler: Callable
    options: Optional[Any] = None


class ListenerRegistry:
    """
    Side table of event listeners attached by the engine, keyed weakly by element.

    Elements that cannot be weakly referenced fall back to an identity-keyed
    table that lives until `release()` is called for them.
    """

    def __init__(self):
        self._records: "weakref.WeakKeyDictionary[Any, List[ListenerRecord]]" = weakref.WeakKeyDictionary()
        self._strong: dict = {}

    def _bucket(self, element, create: bool = False) -> Optional[List[ListenerRecord]]:
        try:
            records = self._records.get(element)
            if records is None and create:
                records = self._records[element] = []
            return records
        except TypeError:
            entry = self._strong.get(id(element))
            if entry is None and create:
                entry = self._strong[id(element)] = (element, [])
            return entry[1] if entry else None

    def record(self, element, event: str, handler: Callable, options: Any = None) -> None:
        self._bucket(element, create=True).append(ListenerRecord(event, handler, options))

    def listeners_for(self, element) -> List[ListenerRecord]:
        return list(self._bucket(element) or [])

    def count(self, element, event: Optional[str] = None) -> int:
        records = self._bucket(element) or []
        return sum(1 for r in records if event is None or r.event == event)

    def release(self, element) -> int:
        """Detach every recorded listener from `element` and forget them."""
        records = self._bucket(element)
        if not records:
            return 0
        released = 0
        for rec in list(records):
            try:
                element.removeEventListener(rec.event, rec.handler, rec.options)
                released += 1
            except Exception as e:
                logger.warning(f"Failed to remove '{rec.event}' listener: {e}")
        records.clear()
        self._strong.pop(id(element), None)
        return released
