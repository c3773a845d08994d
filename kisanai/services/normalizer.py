"""
Field-level normalization of parsed LLM output.

Each domain declares its schema once as a tree of rules (``Record``,
``Text``, ``Choice``...). ``normalize`` walks that tree alongside the
domain's default record: parsed values that pass a rule are kept, anything
else is silently replaced by the default value for that field. Nothing in
this module raises on bad input.
"""
import copy
import math
from typing import Any, Dict, Iterable, Optional


def is_number(value: Any) -> bool:
    """True for real, finite numbers. JSON booleans do not count."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints too large for a float
        return False


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class Rule:
    def coerce(self, value: Any, default: Any) -> Any:
        raise NotImplementedError


class Text(Rule):
    def coerce(self, value: Any, default: Any) -> Any:
        return value if isinstance(value, str) else default


class Choice(Rule):
    """Closed enum of string members."""

    def __init__(self, members: Iterable[str]):
        self.members = frozenset(members)

    def coerce(self, value: Any, default: Any) -> Any:
        if isinstance(value, str) and value in self.members:
            return value
        return default


class Number(Rule):
    def __init__(self, lo: Optional[float] = None, hi: Optional[float] = None):
        self.lo = lo
        self.hi = hi

    def coerce(self, value: Any, default: Any) -> Any:
        if not is_number(value):
            return default
        if self.lo is not None and value < self.lo:
            return default
        if self.hi is not None and value > self.hi:
            return default
        return value


class RiskPercent(Rule):
    """0-100 integer score; fractions below 1 are read as decimals and scaled up."""

    def coerce(self, value: Any, default: Any) -> Any:
        score = value if is_number(value) else default
        if score < 1:
            score = score * 100
        return max(0, min(100, round_half_up(score)))


class StringList(Rule):
    """List of strings. With ``exact`` set, shorter lists fall back to the default."""

    def __init__(self, exact: Optional[int] = None):
        self.exact = exact

    def coerce(self, value: Any, default: Any) -> Any:
        if not isinstance(value, list):
            return list(default)
        items = [item for item in value if isinstance(item, str)]
        if self.exact is None:
            return items
        if len(items) < self.exact:
            return list(default)
        return items[:self.exact]


class Record(Rule):
    def __init__(self, fields: Dict[str, Rule]):
        self.fields = fields

    def coerce(self, value: Any, default: Any) -> Any:
        if not isinstance(value, dict):
            return copy.deepcopy(default)
        result = {}
        for key, rule in self.fields.items():
            field_default = default[key]
            if key in value:
                result[key] = rule.coerce(value[key], field_default)
            else:
                result[key] = copy.deepcopy(field_default)
        return result


class RecordList(Rule):
    """List of records; each object entry is validated against ``item_default``."""

    def __init__(self, item: Record, item_default: Dict[str, Any]):
        self.item = item
        self.item_default = item_default

    def coerce(self, value: Any, default: Any) -> Any:
        if not isinstance(value, list):
            return copy.deepcopy(default)
        return [
            self.item.coerce(entry, self.item_default)
            for entry in value
            if isinstance(entry, dict)
        ]


def normalize(schema: Record, parsed: Any, default: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``parsed`` over ``default`` field by field, enforcing ``schema``."""
    return schema.coerce(parsed, default)
