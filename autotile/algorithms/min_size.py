"""
Minimum Size Post-Pass

Nudges zone boundaries so windows with a minimum size fit their zone.

Algorithms already try to honor minimum sizes while distributing space, but
some layouts (nested BSP splits, Fibonacci's dwindle) can leave a zone a few
pixels short. This pass moves the boundary between an undersized zone and its
neighbours, taking space from zones that have some to spare.
"""

from __future__ import annotations
import logging
from typing import List, Sequence, Set

from ..geometry import Rect, Size

log = logging.getLogger(__name__)

# Edges this close are the same boundary (rounding in nested splits)
EDGE_TOLERANCE_PX = 1

HORIZONTAL = 0
VERTICAL = 1


def enforce_window_min_sizes(
    zones: Sequence[Rect], min_sizes: Sequence[Size], gap_threshold: int
) -> List[Rect]:
    """
    Grow undersized zones by moving shared boundaries.

    Widths are fixed first, then heights. For each zone that is narrower
    than its minimum, the boundary on its right is moved first, then the one
    on its left. All zones sharing that boundary move with it, so gaps and
    column alignment are kept. Neighbours give up their surplus; a neighbour
    without enough surplus pulls the rest from its own neighbour further
    along. No zone is shrunk below its own minimum (or 1px).

    Args:
        zones: Zones as returned by an algorithm
        min_sizes: One minimum per zone; empty disables the pass
        gap_threshold: Largest distance between two edges that still makes
                       the zones neighbours

    Returns:
        A new list of zones. The input is returned unchanged (as a copy) if
        min_sizes is empty or doesn't match zones.
    """
    result = list(zones)
    if not min_sizes or len(min_sizes) != len(zones):
        return result

    boxes = [[z.x, z.y, z.width, z.height] for z in zones]
    mins = [(max(0, s.width), max(0, s.height)) for s in min_sizes]

    for axis in (HORIZONTAL, VERTICAL):
        solver = _AxisSolver(boxes, mins, axis, max(0, gap_threshold))
        for i in range(len(boxes)):
            deficit = mins[i][axis] - boxes[i][2 + axis]
            if deficit <= 0:
                continue
            moved = solver.grow(i, deficit, forward=True, depth=0)
            if moved < deficit:
                moved += solver.grow(i, deficit - moved, forward=False, depth=0)
            if moved < deficit:
                log.debug(
                    "Zone %d still %dpx short of its minimum %s",
                    i,
                    deficit - moved,
                    "width" if axis == HORIZONTAL else "height",
                )

    return [Rect(*box) for box in boxes]


class _AxisSolver:
    """Moves boundaries along one axis of a zone list, in place."""

    def __init__(self, boxes, mins, axis: int, threshold: int):
        self.boxes = boxes
        self.mins = mins
        self.axis = axis
        self.threshold = threshold
        self.max_depth = len(boxes)

    # Edge accessors along the working axis and across it
    def _start(self, i: int) -> int:
        return self.boxes[i][self.axis]

    def _end(self, i: int) -> int:
        return self.boxes[i][self.axis] + self.boxes[i][2 + self.axis]

    def _size(self, i: int) -> int:
        return self.boxes[i][2 + self.axis]

    def _cross_span(self, i: int):
        cross = 1 - self.axis
        start = self.boxes[i][cross]
        return start, start + self.boxes[i][2 + cross]

    def _cross_overlaps(self, i: int, j: int) -> bool:
        a0, a1 = self._cross_span(i)
        b0, b1 = self._cross_span(j)
        return a0 < b1 and b0 < a1

    def _cross_touches(self, i: int, j: int) -> bool:
        """Overlapping, or separated by no more than the gap threshold."""
        a0, a1 = self._cross_span(i)
        b0, b1 = self._cross_span(j)
        return a0 <= b1 + self.threshold and b0 <= a1 + self.threshold

    def _surplus(self, i: int) -> int:
        return self._size(i) - max(self.mins[i][self.axis], 1)

    def _groups(self, index: int, forward: bool):
        """
        Zones moving with the boundary of index, and zones across it.

        Returns:
            (growing, shrinking) index sets
        """
        boundary = self._end(index) if forward else self._start(index)
        growing: Set[int] = {index}
        shrinking: Set[int] = set()

        changed = True
        while changed:
            changed = False
            for k in range(len(self.boxes)):
                if k in growing or k in shrinking:
                    continue
                if not any(self._cross_touches(k, m) for m in growing | shrinking):
                    continue
                near = self._start(k) if forward else self._end(k)
                own = self._end(k) if forward else self._start(k)
                distance = near - boundary if forward else boundary - near
                if 0 <= distance <= self.threshold:
                    shrinking.add(k)
                    changed = True
                elif abs(own - boundary) <= EDGE_TOLERANCE_PX:
                    growing.add(k)
                    changed = True

        return growing, shrinking

    def _collision_cap(self, growing: Set[int], shrinking: Set[int], forward: bool) -> int:
        """How far the boundary may move before a growing zone hits a bystander."""
        cap = None
        for k in range(len(self.boxes)):
            if k in growing or k in shrinking:
                continue
            for g in growing:
                if not self._cross_overlaps(k, g):
                    continue
                if forward and self._start(k) >= self._end(g):
                    room = self._start(k) - self._end(g)
                elif not forward and self._end(k) <= self._start(g):
                    room = self._start(g) - self._end(k)
                else:
                    continue
                cap = room if cap is None else min(cap, room)
        return cap

    def grow(self, index: int, amount: int, forward: bool, depth: int) -> int:
        """
        Move the far (forward) or near edge of index outward by up to amount.

        Returns:
            Pixels actually moved
        """
        if amount <= 0 or depth > self.max_depth:
            return 0

        growing, shrinking = self._groups(index, forward)
        if not shrinking:
            return 0

        # Neighbours short on surplus push their own far boundary first
        for k in sorted(shrinking):
            need = amount - self._surplus(k)
            if need > 0:
                self.grow(k, need, forward, depth + 1)

        shift = min([amount] + [self._surplus(k) for k in shrinking])
        cap = self._collision_cap(growing, shrinking, forward)
        if cap is not None:
            shift = min(shift, cap)
        if shift <= 0:
            return 0

        pos, size = self.axis, 2 + self.axis
        for g in growing:
            if forward:
                self.boxes[g][size] += shift
            else:
                self.boxes[g][pos] -= shift
                self.boxes[g][size] += shift
        for k in shrinking:
            if forward:
                self.boxes[k][pos] += shift
            self.boxes[k][size] -= shift
        return shift
