"""Bounding box hierarchy over the elements of a path component.

The hierarchy is an implicit complete binary tree stored in a flat list:
node `i` has children `2i + 1` and `2i + 2`. With N elements there are N - 1
internal nodes followed by N leaves. The tree shape depends only on N; the
leaf boxes come from the elements and each internal box is the union of its
children.

Leaves are laid out so that an in-order walk visits elements in ascending
order, which means every subtree covers a contiguous range of elements.
"""

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass

from bezierbool.domain.box import BoundingBox


def round_up_power_of_two(value: int) -> int:
    """Smallest power of two greater than or equal to `value`."""
    result = 1
    while result < value:
        result <<= 1
    return result


def _left(index: int) -> int:
    return 2 * index + 1


def _right(index: int) -> int:
    return 2 * index + 2


def _parent(index: int) -> int:
    return (index - 1) // 2


@dataclass(frozen=True, slots=True)
class BVHNode:
    """A node handed to `BoundingBoxHierarchy.visit` callbacks.

    Attributes:
        bounding_box: Box of the node
        is_leaf: Whether the node holds a single element
        start_element_index: First element covered by the node
        end_element_index: Last element covered by the node (equal to the
            start for leaves)
    """

    bounding_box: BoundingBox
    is_leaf: bool
    start_element_index: int
    end_element_index: int

    @property
    def element_index(self) -> int:
        return self.start_element_index


class BoundingBoxHierarchy:
    """Static bounding volume hierarchy for overlap queries.

    Example:
        bvh = BoundingBoxHierarchy([curve.bounding_box for curve in curves])
        for i, j in bvh.enumerate_self_overlaps():
            ...
    """

    def __init__(self, boxes: Sequence[BoundingBox]) -> None:
        """Build the hierarchy.

        Args:
            boxes: One box per element, in element order

        Raises:
            ValueError: If no boxes are given
        """
        if not boxes:
            raise ValueError("A bounding box hierarchy needs at least one element")

        element_count = len(boxes)
        internal_count = element_count - 1

        last_row_index = 0
        while last_row_index < internal_count:
            last_row_index = _left(last_row_index)

        self._element_count = element_count
        self._last_row_index = last_row_index

        nodes: list[BoundingBox] = [BoundingBox.empty()] * (element_count + internal_count)
        for i in range(element_count):
            node_index = i + internal_count
            nodes[node_index] = boxes[self._element_index(node_index)]
        for i in range(internal_count - 1, -1, -1):
            nodes[i] = nodes[_left(i)].union(nodes[_right(i)])
        self._boxes = nodes

    @property
    def element_count(self) -> int:
        return self._element_count

    @property
    def node_count(self) -> int:
        return len(self._boxes)

    @property
    def bounding_box(self) -> BoundingBox:
        """Box of the whole hierarchy (the root)."""
        return self._boxes[0]

    def is_leaf(self, node_index: int) -> bool:
        return node_index >= self._element_count - 1

    def _element_index(self, node_index: int) -> int:
        element_index = node_index - self._last_row_index
        if element_index < 0:
            element_index += self._element_count
        return element_index

    def _node_index(self, element_index: int) -> int:
        node_index = element_index + self._last_row_index
        if node_index >= 2 * self._element_count - 1:
            node_index -= self._element_count
        return node_index

    def bounding_box_for_element(self, element_index: int) -> BoundingBox:
        """Leaf box of an element.

        Raises:
            IndexError: If the element index is out of range
        """
        if not 0 <= element_index < self._element_count:
            raise IndexError(f"element index {element_index} out of range")
        return self._boxes[self._node_index(element_index)]

    def visit(self, callback: Callable[[BVHNode, int], bool]) -> None:
        """Depth-first walk of the tree.

        Args:
            callback: Called with each node and its depth. Returning False
                skips the node's children.
        """
        node_count = len(self._boxes)

        def visit_node(index: int, depth: int, max_leaves_in_subtree: int) -> None:
            if self.is_leaf(index):
                element_index = self._element_index(index)
                node = BVHNode(self._boxes[index], True, element_index, element_index)
            else:
                # Leaf range of the subtree if the bottom row were full.
                start_index = max_leaves_in_subtree * (index + 1) - 1
                end_index = start_index + max_leaves_in_subtree - 1
                if end_index >= node_count:
                    end_index = _parent(end_index)
                if start_index >= node_count:
                    start_index = _parent(start_index)
                node = BVHNode(
                    self._boxes[index],
                    False,
                    self._element_index(start_index),
                    self._element_index(end_index),
                )
            if not callback(node, depth):
                return
            if not node.is_leaf:
                half = max_leaves_in_subtree // 2
                visit_node(_left(index), depth + 1, half)
                visit_node(_right(index), depth + 1, half)

        visit_node(0, 0, round_up_power_of_two(self._element_count))

    def enumerate_self_overlaps(self) -> Iterator[tuple[int, int]]:
        """Pairs of elements whose boxes overlap, including every (i, i).

        Yields:
            Tuples (i, j) with i <= j
        """
        yield from self._self_overlaps(0)

    def _self_overlaps(self, index: int) -> Iterator[tuple[int, int]]:
        if self.is_leaf(index):
            element_index = self._element_index(index)
            yield element_index, element_index
            return
        left = _left(index)
        right = _right(index)
        yield from self._self_overlaps(left)
        yield from self._overlaps(self, left, right)
        yield from self._self_overlaps(right)

    def enumerate_overlaps(self, other: "BoundingBoxHierarchy") -> Iterator[tuple[int, int]]:
        """Pairs (element of self, element of other) whose boxes overlap."""
        if other is self:
            yield from self.enumerate_self_overlaps()
            return
        yield from self._overlaps(other, 0, 0)

    def _overlaps(
        self, other: "BoundingBoxHierarchy", index1: int, index2: int
    ) -> Iterator[tuple[int, int]]:
        if not self._boxes[index1].overlaps(other._boxes[index2]):
            return
        leaf1 = self.is_leaf(index1)
        leaf2 = other.is_leaf(index2)
        if leaf1 and leaf2:
            yield self._element_index(index1), other._element_index(index2)
        elif leaf1:
            yield from self._overlaps(other, index1, _left(index2))
            yield from self._overlaps(other, index1, _right(index2))
        elif leaf2:
            yield from self._overlaps(other, _left(index1), index2)
            yield from self._overlaps(other, _right(index1), index2)
        else:
            yield from self._overlaps(other, _left(index1), _left(index2))
            yield from self._overlaps(other, _left(index1), _right(index2))
            yield from self._overlaps(other, _right(index1), _left(index2))
            yield from self._overlaps(other, _right(index1), _right(index2))
