"""Policy constants for due-date evaluation."""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class DuePolicy:
    """Thresholds and defaults used when evaluating service intervals."""

    warning_days: int = 14
    warning_distance: int = 1000
    default_interval_months: int = 6
    default_interval_km: int = 10000

    @classmethod
    def from_dict(cls, dct: Optional[Dict[str, Any]]) -> "DuePolicy":
        """
        Build a policy from a fleet file 'settings' section.

        Keys are camelCase (warningDays, warningDistance, ...). Missing keys
        keep their defaults, unknown keys are ignored.
        """
        if not dct:
            return cls()
        kwargs = {}
        for f in fields(cls):
            key = _camel(f.name)
            if dct.get(key) is not None:
                kwargs[f.name] = int(dct[key])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, int]:
        return {_camel(f.name): getattr(self, f.name) for f in fields(self)}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


DEFAULT_POLICY = DuePolicy()
