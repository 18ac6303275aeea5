"""An intrusive doubly linked deque over cache nodes.

Nodes carry their own links: ``prev``/``next`` for the access order, or
``prev_exp``/``next_exp`` for the expiration order.
"""

from collections.abc import Iterator


class LinkedDeque:
    """A doubly linked list whose links live in the nodes themselves."""

    def __init__(self, is_exp: bool = False) -> None:
        self._head = None
        self._tail = None
        self._len = 0
        self._prev_attr = "prev_exp" if is_exp else "prev"
        self._next_attr = "next_exp" if is_exp else "next"

    def next_of(self, n):
        """Return the node after ``n`` in this deque's link order."""
        return getattr(n, self._next_attr)

    def prev_of(self, n):
        """Return the node before ``n`` in this deque's link order."""
        return getattr(n, self._prev_attr)

    def _set_next(self, to, n) -> None:
        setattr(to, self._next_attr, n)

    def _set_prev(self, to, n) -> None:
        setattr(to, self._prev_attr, n)

    def push_back(self, n) -> None:
        if self.is_empty():
            self._head = n
            self._tail = n
        else:
            self._set_prev(n, self._tail)
            self._set_next(self._tail, n)
            self._tail = n
        self._len += 1

    def push_front(self, n) -> None:
        if self.is_empty():
            self._head = n
            self._tail = n
        else:
            self._set_next(n, self._head)
            self._set_prev(self._head, n)
            self._head = n
        self._len += 1

    def update_node(self, n, old) -> None:
        """Put ``n`` in the position held by ``old``."""
        old_next = self.next_of(old)
        if old_next is None:
            if self._tail is old:
                self._tail = n
        else:
            self._set_prev(old_next, n)
            self._set_next(n, old_next)
            self._set_next(old, None)

        old_prev = self.prev_of(old)
        if old_prev is None:
            if self._head is old:
                self._head = n
        else:
            self._set_prev(n, old_prev)
            self._set_next(old_prev, n)
            self._set_prev(old, None)

    def pop_front(self):
        """Remove and return the head, or None when empty."""
        if self.is_empty():
            return None
        result = self._head
        self.delete(result)
        return result

    def contains(self, n) -> bool:
        return self.prev_of(n) is not None or self.next_of(n) is not None or self._head is n

    def move_to_back(self, n) -> None:
        if n is not self._tail:
            self.delete(n)
            self.push_back(n)

    def move_to_front(self, n) -> None:
        if n is not self._head:
            self.delete(n)
            self.push_front(n)

    def delete(self, n) -> None:
        """Unlink ``n``; a node that is not linked is left alone."""
        next_node = self.next_of(n)
        prev_node = self.prev_of(n)

        if prev_node is None:
            if next_node is None and self._head is not n:
                return
            self._head = next_node
        else:
            self._set_next(prev_node, next_node)
            self._set_prev(n, None)

        if next_node is None:
            self._tail = prev_node
        else:
            self._set_prev(next_node, prev_node)
            self._set_next(n, None)

        self._len -= 1

    def clear(self) -> None:
        while not self.is_empty():
            self.pop_front()

    def is_empty(self) -> bool:
        return self._len == 0

    def head(self):
        return self._head

    def tail(self):
        return self._tail

    def backward(self) -> Iterator:
        """Iterate from tail to head."""
        cursor = self._tail
        while cursor is not None:
            yield cursor
            cursor = self.prev_of(cursor)

    def __iter__(self) -> Iterator:
        cursor = self._head
        while cursor is not None:
            yield cursor
            cursor = self.next_of(cursor)

    def __len__(self) -> int:
        return self._len