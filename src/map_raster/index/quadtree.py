"""Region quadtree over any item that can say whether it fits a rectangle.

Items are routed by their ``fits_into(bbox)`` predicate. Point-like items
fit exactly one quadrant (unless they sit on a seam); shape-like items fit
every quadrant their bounding box overlaps and are stored in all of them,
so a range query finds a shape from whichever side it approaches.

Leaves split once they hold ``SPLIT_THRESHOLD`` items, unless they are
already ``MAX_DEPTH`` levels deep, in which case they keep growing.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar

from map_raster.geometry import Bbox, Point

SPLIT_THRESHOLD = 10
MAX_DEPTH = 40


class Indexable(Protocol):
    """Anything the quadtree can hold."""

    def fits_into(self, bbox: Bbox) -> bool: ...


class HeightBearing(Indexable, Protocol):
    """Indexable item carrying an integer elevation."""

    height: int


T = TypeVar("T", bound=Indexable)


@dataclass
class Leaf(Generic[T]):
    """A node that stores items directly."""

    bbox: Bbox
    items: list[T] = field(default_factory=list)


@dataclass
class Interior(Generic[T]):
    """A node whose four children quarter its bbox (see ``Bbox.split``)."""

    bbox: Bbox
    children: list[Leaf[T] | Interior[T]]


Node = Leaf[T] | Interior[T]


def _is_exclusive(item: Indexable) -> bool:
    # Point items set ``exclusive = True`` so a point on a quadrant seam is
    # stored in the first matching child only.
    return getattr(item, "exclusive", False)


def insert(node: Node[T], item: T, depth: int = 0) -> Node[T]:
    """Insert ``item`` under ``node`` and return the node that replaces it.

    The caller is responsible for ``item.fits_into(node.bbox)``. A leaf that
    reaches ``SPLIT_THRESHOLD`` items below ``MAX_DEPTH`` is returned as a
    new interior node with all of its items redistributed one level down.
    """
    if isinstance(node, Interior):
        exclusive = _is_exclusive(item)
        for i, child in enumerate(node.children):
            if item.fits_into(child.bbox):
                node.children[i] = insert(child, item, depth + 1)
                if exclusive:
                    break
        return node

    node.items.append(item)
    if len(node.items) < SPLIT_THRESHOLD or depth >= MAX_DEPTH:
        return node

    interior: Node[T] = Interior(
        bbox=node.bbox,
        children=[Leaf(bbox=quadrant) for quadrant in node.bbox.split()],
    )
    for held in node.items:
        interior = insert(interior, held, depth)
    return interior


def find_boxes_overlapping(node: Node[T], query: Bbox) -> list[Leaf[T]]:
    """All leaves whose bbox overlaps ``query``."""
    if not node.bbox.overlaps(query):
        return []
    if isinstance(node, Leaf):
        return [node]

    leaves: list[Leaf[T]] = []
    for child in node.children:
        leaves.extend(find_boxes_overlapping(child, query))
    return leaves


def find_box_for(node: Node[T], point: Point) -> Leaf[T] | None:
    """First leaf (in child order) whose bbox contains ``point``."""
    if not node.bbox.contains(point):
        return None
    if isinstance(node, Leaf):
        return node

    for child in node.children:
        found = find_box_for(child, point)
        if found is not None:
            return found
    return None


def iter_leaves(node: Node[T], depth: int = 0) -> Iterator[tuple[int, Leaf[T]]]:
    """Yield ``(depth, leaf)`` for every leaf, depth-first in child order."""
    if isinstance(node, Leaf):
        yield depth, node
        return
    for child in node.children:
        yield from iter_leaves(child, depth + 1)


def count_points(node: Node[T]) -> int:
    if isinstance(node, Leaf):
        return len(node.items)
    return sum(count_points(child) for child in node.children)


def max_height(node: Node[HeightBearing]) -> int:
    """Highest elevation in the subtree; 0 for empty leaves.

    Interior nodes take the max over their four children, so a subtree
    with only negative elevations and at least one empty leaf reports 0.
    """
    if isinstance(node, Leaf):
        return max((item.height for item in node.items), default=0)
    return max(max_height(child) for child in node.children)


def average_height(node: Node[HeightBearing]) -> int:
    """Quadrant-weighted elevation estimate.

    A leaf gives the integer mean of its items (0 when empty). An interior
    node adds up its children's averages that are positive and always
    divides by four, whatever the number of children that had data.
    """
    if isinstance(node, Leaf):
        if not node.items:
            return 0
        return trunc_div(sum(item.height for item in node.items), len(node.items))

    positive = [avg for avg in (average_height(child) for child in node.children) if avg > 0]
    return trunc_div(sum(positive), 4)


def trunc_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


class Quadtree(Generic[T]):
    """A region quadtree rooted at a fixed bbox.

    Wraps the node functions above and keeps the current root, so callers
    never deal with the root being replaced when it splits.
    """

    def __init__(self, bbox: Bbox) -> None:
        self.root: Node[T] = Leaf(bbox=bbox)

    @property
    def bbox(self) -> Bbox:
        return self.root.bbox

    def insert(self, item: T) -> bool:
        """Add ``item``; returns False (and stores nothing) if it misses the root."""
        if not item.fits_into(self.root.bbox):
            return False
        self.root = insert(self.root, item, 0)
        return True

    def extend(self, items: Iterable[T]) -> int:
        """Insert every item; returns how many were stored."""
        return sum(1 for item in items if self.insert(item))

    def find_boxes_overlapping(self, query: Bbox) -> list[Leaf[T]]:
        return find_boxes_overlapping(self.root, query)

    def find_box_for(self, point: Point) -> Leaf[T] | None:
        return find_box_for(self.root, point)

    def items_overlapping(self, query: Bbox) -> list[T]:
        """Items of every leaf overlapping ``query``.

        Not filtered against ``query`` itself: a leaf's whole content is
        returned as soon as the leaf touches the window.
        """
        return [item for leaf in self.find_boxes_overlapping(query) for item in leaf.items]

    def count_points(self) -> int:
        return count_points(self.root)

    def leaves(self) -> Iterator[tuple[int, Leaf[T]]]:
        return iter_leaves(self.root)

    def stats(self) -> dict[str, int]:
        """Leaf count, deepest leaf and stored item count."""
        leaf_count = 0
        deepest = 0
        for depth, _leaf in iter_leaves(self.root):
            leaf_count += 1
            deepest = max(deepest, depth)
        return {
            "leaves": leaf_count,
            "max_depth": deepest,
            "items": count_points(self.root),
        }
