"""
Grouping Registry
=================
Named, coloured partitions. The default grouping "(None)" always exists.
"""
from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple

from dsmanalysis.config import DEFAULT_GROUP_NAME, DEFAULT_GROUP_COLOR
from dsmanalysis.model.entities import Grouping


class GroupingRegistry:
    def __init__(self) -> None:
        self._groupings: Dict[str, Grouping] = {
            DEFAULT_GROUP_NAME: Grouping(DEFAULT_GROUP_NAME, DEFAULT_GROUP_COLOR)
        }

    @property
    def default(self) -> Grouping:
        return self._groupings[DEFAULT_GROUP_NAME]

    def add(self, grouping: Grouping) -> None:
        if grouping.name in self._groupings:
            raise ValueError(f"Grouping '{grouping.name}' already exists.")
        self._groupings[grouping.name] = grouping

    def remove(self, name: str) -> Grouping:
        if name == DEFAULT_GROUP_NAME:
            raise ValueError("The default grouping cannot be removed.")
        return self._groupings.pop(name)

    def set_color(self, name: str, color: Tuple[float, float, float]) -> None:
        self._groupings[name].color = color

    def reset(self) -> List[Grouping]:
        """Drop every grouping except the default one; returns what was dropped (in order)."""
        dropped = [g for name, g in self._groupings.items() if name != DEFAULT_GROUP_NAME]
        self._groupings = {DEFAULT_GROUP_NAME: self.default}
        return dropped

    def get(self, name: str) -> Optional[Grouping]:
        return self._groupings.get(name)

    def names(self) -> List[str]:
        return list(self._groupings)

    def __contains__(self, name: str) -> bool:
        return name in self._groupings

    def __iter__(self) -> Iterator[Grouping]:
        return iter(list(self._groupings.values()))

    def __len__(self) -> int:
        return len(self._groupings)

    def copy(self) -> GroupingRegistry:
        other = GroupingRegistry()
        other._groupings = {name: g.copy() for name, g in self._groupings.items()}
        return other
