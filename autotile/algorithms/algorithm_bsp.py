"""
BSP Algorithm

Binary space partitioning over a split tree that survives between calls.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .algorithm_base import TilingAlgorithm, TilingParams, stack_horizontally
from ..constants import MAX_SPLIT_RATIO, MIN_SPLIT_RATIO
from ..geometry import Rect, Size

# Reference area used when the tree is built without a usable screen
FALLBACK_BUILD_RECT = Rect(0, 0, 1920, 1080)
MAX_BUILD_ITERATIONS = 1000


@dataclass(eq=False)
class BSPNode:
    """Node of the split tree. Leaves map 1:1 to windows, left to right."""

    parent: Optional["BSPNode"] = field(default=None, repr=False)
    first: Optional["BSPNode"] = None
    second: Optional["BSPNode"] = None
    split_horizontal: bool = False  # True: first on top, second below
    split_ratio: float = 0.5
    geometry: Rect = Rect()

    def is_leaf(self) -> bool:
        return self.first is None and self.second is None


class BSPAlgorithm(TilingAlgorithm):
    """
    Binary space partitioning layout.

    The tree is kept between calls: adding a window splits the largest leaf,
    removing one collapses the most recently split leaf. Existing windows
    keep their regions as far as possible, which avoids whole-screen
    reshuffles on every open or close.

    The current split ratio applies to every node, clamped so that each
    subtree can hold the minimum sizes of its windows.
    """

    def __init__(self):
        self._root: Optional[BSPNode] = None
        self._leaf_count = 0

    @property
    def name(self) -> str:
        return "BSP"

    @property
    def description(self) -> str:
        return "Binary space partitioning - persistent tree layout"

    @property
    def icon(self) -> str:
        return "view-grid-symbolic"

    def master_zone_index(self) -> int:
        return -1

    def supports_split_ratio(self) -> bool:
        return True

    def default_split_ratio(self) -> float:
        return 0.5

    @property
    def leaf_count(self) -> int:
        return self._leaf_count

    def reset(self):
        """Drop the persisted tree; the next calculation builds a fresh one."""
        self._root = None
        self._leaf_count = 0

    def calculate_zones(self, params: TilingParams) -> List[Rect]:
        count = params.window_count
        if count <= 0 or not params.screen.is_valid() or params.state is None:
            return []

        area = self.inner_rect(params.screen, params.outer_gap)

        # Keep the tree so ratios survive while only one window is open
        if count == 1:
            return [area]

        ratio = max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, params.state.split_ratio))

        self.ensure_tree_size(count, ratio, area)
        self.apply_geometry(
            self._root, area, params.inner_gap, params.min_sizes, 0, ratio
        )

        zones: List[Rect] = []
        self._collect_leaves(self._root, zones)

        if len(zones) != count or not all(z.is_valid() for z in zones):
            widths = self.distribute_with_gaps(area.width, count, params.inner_gap)
            return stack_horizontally(
                area.x, area.y, widths, area.height, params.inner_gap
            )
        return zones

    # Tree size management
    def ensure_tree_size(self, window_count: int, ratio: float, ref_rect: Rect):
        if self._root is None or self._leaf_count <= 0:
            self.build_tree(window_count, ratio, ref_rect)
            return

        max_iterations = window_count + self._leaf_count + 1
        iterations = 0
        while self._leaf_count < window_count and iterations < max_iterations:
            iterations += 1
            if not self.grow_tree(ratio):
                self.build_tree(window_count, ratio, ref_rect)
                return

        iterations = 0
        while self._leaf_count > window_count and iterations < max_iterations:
            iterations += 1
            if not self.shrink_tree():
                self.build_tree(window_count, ratio, ref_rect)
                return

    def build_tree(self, window_count: int, ratio: float, ref_rect: Rect):
        self._root = None
        self._leaf_count = 0
        if window_count <= 0:
            return

        self._root = BSPNode()
        self._leaf_count = 1
        build_rect = ref_rect if ref_rect.is_valid() else FALLBACK_BUILD_RECT

        iterations = 0
        while self._leaf_count < window_count and iterations < MAX_BUILD_ITERATIONS:
            iterations += 1
            # Leaf geometry lets largest_leaf pick the best split candidate
            self.apply_geometry(self._root, build_rect, 0, [], 0, ratio)
            if not self.grow_tree(ratio):
                break

    def grow_tree(self, ratio: float) -> bool:
        """Split the largest leaf; the new window gets the second half."""
        if self._root is None:
            return False

        leaf = self.largest_leaf(self._root)
        if leaf is None or not leaf.is_leaf():
            return False

        leaf.first = BSPNode(parent=leaf)
        leaf.second = BSPNode(parent=leaf)

        if leaf.geometry.is_valid():
            leaf.split_horizontal = self.choose_split_direction(leaf.geometry)
        else:
            depth = 0
            node = leaf.parent
            while node is not None:
                depth += 1
                node = node.parent
            leaf.split_horizontal = depth % 2 != 0

        leaf.split_ratio = ratio
        self._leaf_count += 1
        return True

    def shrink_tree(self) -> bool:
        """Remove the most recently added leaf and promote its sibling."""
        if self._root is None or self._leaf_count <= 1:
            return False

        leaf = self.deepest_leaf(self._root)
        if leaf is None or leaf.parent is None:
            return False

        parent = leaf.parent
        sibling = parent.second if parent.first is leaf else parent.first
        if sibling is None:
            return False

        grandparent = parent.parent
        sibling.parent = grandparent
        if grandparent is None:
            self._root = sibling
        elif grandparent.first is parent:
            grandparent.first = sibling
        else:
            grandparent.second = sibling

        self._leaf_count -= 1
        return True

    # Geometry
    def compute_subtree_min_dims(
        self, node: Optional[BSPNode], min_sizes: Sequence[Size], leaf_start: int, gap: int
    ) -> Tuple[Size, int]:
        """
        Minimum size a subtree needs to hold its windows.

        Returns:
            (minimum size, number of leaves in the subtree)
        """
        if node is None:
            return Size(0, 0), 0

        if node.is_leaf():
            return (
                Size(
                    self.min_width_at(min_sizes, leaf_start),
                    self.min_height_at(min_sizes, leaf_start),
                ),
                1,
            )

        first_min, first_leaves = self.compute_subtree_min_dims(
            node.first, min_sizes, leaf_start, gap
        )
        second_min, second_leaves = self.compute_subtree_min_dims(
            node.second, min_sizes, leaf_start + first_leaves, gap
        )
        leaves = first_leaves + second_leaves

        if node.split_horizontal:
            size = Size(
                max(first_min.width, second_min.width),
                first_min.height + gap + second_min.height,
            )
        else:
            size = Size(
                first_min.width + gap + second_min.width,
                max(first_min.height, second_min.height),
            )
        return size, leaves

    def apply_geometry(
        self,
        node: Optional[BSPNode],
        rect: Rect,
        gap: int,
        min_sizes: Sequence[Size],
        leaf_start: int,
        ratio: float,
    ):
        """Lay out a subtree top-down inside rect, gap pixels between siblings."""
        if node is None:
            return

        node.geometry = rect
        if node.is_leaf():
            return

        ratio = max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, ratio))
        if min_sizes:
            ratio = self._clamp_ratio_to_min_dims(node, rect, gap, min_sizes, leaf_start, ratio)

        first_leaves = self.count_leaves(node.first)

        if node.split_horizontal:
            content = rect.height - gap
            first_size = int(content * ratio)
            first_rect = Rect(rect.x, rect.y, rect.width, first_size)
            second_rect = Rect(
                rect.x, rect.y + first_size + gap, rect.width, content - first_size
            )
        else:
            content = rect.width - gap
            first_size = int(content * ratio)
            first_rect = Rect(rect.x, rect.y, first_size, rect.height)
            second_rect = Rect(
                rect.x + first_size + gap, rect.y, content - first_size, rect.height
            )

        if content <= 0 or not first_rect.is_valid() or not second_rect.is_valid():
            # No room to split: mark the subtree degenerate so the caller falls back
            self._invalidate(node.first)
            self._invalidate(node.second)
            return

        self.apply_geometry(node.first, first_rect, gap, min_sizes, leaf_start, ratio)
        self.apply_geometry(
            node.second, second_rect, gap, min_sizes, leaf_start + first_leaves, ratio
        )

    def _clamp_ratio_to_min_dims(self, node, rect, gap, min_sizes, leaf_start, ratio):
        first_min, first_leaves = self.compute_subtree_min_dims(
            node.first, min_sizes, leaf_start, gap
        )
        second_min, _ = self.compute_subtree_min_dims(
            node.second, min_sizes, leaf_start + first_leaves, gap
        )

        if node.split_horizontal:
            content = rect.height - gap
            need_first, need_second = first_min.height, second_min.height
        else:
            content = rect.width - gap
            need_first, need_second = first_min.width, second_min.width

        if content <= 0 or (need_first <= 0 and need_second <= 0):
            return ratio

        low = need_first / content if need_first > 0 else MIN_SPLIT_RATIO
        high = 1.0 - need_second / content if need_second > 0 else MAX_SPLIT_RATIO
        low = max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, low))
        high = max(MIN_SPLIT_RATIO, min(MAX_SPLIT_RATIO, high))
        if low <= high:
            ratio = max(low, min(high, ratio))
        return ratio

    def _invalidate(self, node: Optional[BSPNode]):
        if node is None:
            return
        node.geometry = Rect()
        self._invalidate(node.first)
        self._invalidate(node.second)

    def _collect_leaves(self, node: Optional[BSPNode], zones: List[Rect]):
        if node is None:
            return
        if node.is_leaf():
            zones.append(node.geometry)
        else:
            self._collect_leaves(node.first, zones)
            self._collect_leaves(node.second, zones)

    # Tree traversal helpers
    @staticmethod
    def count_leaves(node: Optional[BSPNode]) -> int:
        if node is None:
            return 0
        if node.is_leaf():
            return 1
        return BSPAlgorithm.count_leaves(node.first) + BSPAlgorithm.count_leaves(
            node.second
        )

    @staticmethod
    def largest_leaf(node: Optional[BSPNode]) -> Optional[BSPNode]:
        if node is None:
            return None
        if node.is_leaf():
            return node

        left = BSPAlgorithm.largest_leaf(node.first)
        right = BSPAlgorithm.largest_leaf(node.second)
        if left is None:
            return right
        if right is None:
            return left

        left_area = left.geometry.area()
        right_area = right.geometry.area()
        # Without geometry prefer the newest (second) leaf
        if left_area == 0 and right_area == 0:
            return right
        return left if left_area >= right_area else right

    @staticmethod
    def deepest_leaf(node: Optional[BSPNode]) -> Optional[BSPNode]:
        """Last leaf in order, found by always following the second child."""
        if node is None:
            return None
        if node.is_leaf():
            return node
        leaf = BSPAlgorithm.deepest_leaf(node.second)
        if leaf is not None:
            return leaf
        return BSPAlgorithm.deepest_leaf(node.first)

    @staticmethod
    def choose_split_direction(geometry: Rect) -> bool:
        """Split across the longer axis. Returns True for a top/bottom split."""
        return geometry.height > geometry.width
