# habit_tracker/utils/models.py
import logging
from dataclasses import dataclass, field, fields
from datetime import date
from typing import Any, Dict, Iterable, List

from habit_tracker.utils.core_utils import format_date, parse_date
from habit_tracker.utils.error_handler import InvalidDate

logger = logging.getLogger(__name__)


class BaseModel:
    def to_dict(self) -> dict:
        """
        Convert dataclass to JSON-serializable dict:
         - date fields → YYYY-MM-DD strings
         - Lists of dates → lists of YYYY-MM-DD strings
        """
        result = {}
        for f in fields(self.__class__):
            name = f.name
            val = getattr(self, name)
            if isinstance(val, date):
                result[name] = format_date(val)
            elif isinstance(val, list):
                result[name] = [format_date(item) if isinstance(item, date) else item
                                for item in val]
            else:
                result[name] = val
        return result

    def __repr__(self):
        cname = self.__class__.__name__
        fields_str = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"{cname}({fields_str})"


@dataclass(repr=False)
class Habit(BaseModel):
    name: str = ""
    streak: int = 0
    history: List[date] = field(default_factory=list)

    @property
    def last_entry(self):
        return self.history[-1] if self.history else None


def normalize_history(dates: Iterable[date]) -> List[date]:
    """Deduplicate and sort ascending."""
    return sorted(set(dates))


def habit_from_row(row: Dict[str, Any]) -> Habit:
    """
    Build a Habit from one persisted JSON object.
    Unknown keys are ignored; unparseable dates are dropped with a warning.
    """
    name = str(row.get("name", "") or "")

    streak = row.get("streak", 0)
    if isinstance(streak, bool) or not isinstance(streak, int) or streak < 0:
        logger.warning(
            f"Habit '{name}' has invalid streak {streak!r}; resetting to 0")
        streak = 0

    raw_history = row.get("history") or []
    if not isinstance(raw_history, list):
        logger.warning(f"Habit '{name}' history is not a list; ignoring it")
        raw_history = []

    history = []
    for raw in raw_history:
        try:
            history.append(parse_date(raw))
        except InvalidDate as e:
            logger.warning(f"Habit '{name}': skipping history entry. {e}")

    return Habit(name=name, streak=streak, history=normalize_history(history))
