"""
Binary min-heap used as the A* open set
Elements are ordered by a caller-supplied score function and can be
rescored in place
"""

from typing import Callable, Dict, Generic, Hashable, List, TypeVar


E = TypeVar("E", bound=Hashable)


class BinaryHeap(Generic[E]):
    """
    Binary min-heap keyed by score_function(element)

    A position map (element -> slot) is kept up to date on every move, so
    remove() and rescore() find their element in O(1). Elements must be
    hashable and unique within the heap.

    Only strict '<' comparisons move elements; equal scores are never
    swapped, and the order among ties is whatever the swaps produce.
    """

    def __init__(self, score_function: Callable[[E], float]):
        self.content: List[E] = []
        self.score_function = score_function
        self._positions: Dict[E, int] = {}

    def push(self, element: E):
        """Add element and sift it up to its place"""
        if element in self._positions:
            raise ValueError(f"{element!r} is already in the heap")
        self.content.append(element)
        self._positions[element] = len(self.content) - 1
        self._sift_up(len(self.content) - 1)

    def pop(self) -> E:
        """Remove and return the element with the lowest score"""
        if not self.content:
            raise IndexError("pop from empty heap")
        result = self.content[0]
        end = self.content.pop()
        del self._positions[result]

        # Move the last element into the root slot and let it bubble down
        if self.content:
            self.content[0] = end
            self._positions[end] = 0
            self._bubble_down(0)
        return result

    def peek(self) -> E:
        if not self.content:
            raise IndexError("peek at empty heap")
        return self.content[0]

    def remove(self, element: E):
        """Remove an arbitrary element, keeping heap order"""
        n = self._position_of(element)
        removed_score = self.score_function(element)
        end = self.content.pop()
        del self._positions[element]

        if n == len(self.content):
            # The removed element was the last one, no hole to fill
            return

        self.content[n] = end
        self._positions[end] = n
        if self.score_function(end) < removed_score:
            self._sift_up(n)
        else:
            self._bubble_down(n)

    def rescore(self, element: E):
        """
        Restore heap order after element's score decreased

        Increases are not handled; A* only ever lowers the score of an
        element already in the open set.
        """
        self._sift_up(self._position_of(element))

    def size(self) -> int:
        return len(self.content)

    def __len__(self):
        return len(self.content)

    def __bool__(self):
        return bool(self.content)

    def __contains__(self, element):
        return element in self._positions

    def _position_of(self, element: E) -> int:
        try:
            return self._positions[element]
        except KeyError:
            raise ValueError(f"{element!r} is not in the heap") from None

    def _place(self, element: E, n: int):
        self.content[n] = element
        self._positions[element] = n

    def _sift_up(self, n: int):
        element = self.content[n]
        score = self.score_function(element)

        # At the root an element can not rise any further
        while n > 0:
            parent_n = ((n + 1) >> 1) - 1
            parent = self.content[parent_n]
            if score < self.score_function(parent):
                self._place(parent, n)
                n = parent_n
            else:
                break

        self._place(element, n)

    def _bubble_down(self, n: int):
        length = len(self.content)
        element = self.content[n]
        score = self.score_function(element)

        while True:
            child2_n = (n + 1) << 1
            child1_n = child2_n - 1
            swap = None

            if child1_n < length:
                child1_score = self.score_function(self.content[child1_n])
                if child1_score < score:
                    swap = child1_n

            if child2_n < length:
                child2_score = self.score_function(self.content[child2_n])
                if child2_score < (score if swap is None else child1_score):
                    swap = child2_n

            if swap is None:
                break

            self._place(self.content[swap], n)
            n = swap

        self._place(element, n)
