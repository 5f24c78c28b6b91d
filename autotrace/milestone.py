"""Milestone class for preventive schedule entries."""

from dataclasses import dataclass
from typing import List, Tuple


@dataclass(frozen=True)
class Milestone:
    """A target odometer reading and the services due when it is reached."""

    km_mark: int
    checklist: Tuple[str, ...]

    def checklist_copy(self) -> List[str]:
        """Fresh list of checklist items, safe for callers to mutate."""
        return list(self.checklist)
