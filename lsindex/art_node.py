"""Inner nodes and leaves of an adaptive radix tree."""

from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_left
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar, Optional, Union

# Key bytes (8) + offset bytes (8) + 1, the default for 64-bit keys.
DEFAULT_MAX_PREFIX_LENGTH = 17
EMPTY_MARKER = 48
_POINTER_BYTES = 8


@dataclass(frozen=True)
class Leaf:
    """A leaf holding the offset of a key in the indexed data."""

    value: int


Child = Union[Leaf, "InnerNode"]


def _check_byte(key_byte: int) -> None:
    if not 0 <= key_byte <= 0xFF:
        raise ValueError(f"key byte must be in [0, 255], got {key_byte}")


def _align(size: int, alignment: int) -> int:
    return (size + alignment - 1) // alignment * alignment


class InnerNode(ABC):
    """Shared header of all inner nodes: a compressed path prefix."""

    NODE_TYPE: ClassVar[int]
    CAPACITY: ClassVar[int]
    _KEY_BYTES: ClassVar[int]
    _POINTER_SLOTS: ClassVar[int]

    def __init__(self, max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH) -> None:
        if max_prefix_length < 0:
            raise ValueError("max_prefix_length must not be negative")
        self.max_prefix_length = max_prefix_length
        self.prefix_length = 0
        self.prefix = bytearray(max_prefix_length)

    @property
    @abstractmethod
    def count(self) -> int:
        """Number of children."""

    def __len__(self) -> int:
        return self.count

    def stored_prefix(self) -> bytes:
        """The prefix bytes kept in the node itself."""
        return bytes(self.prefix[: min(self.prefix_length, self.max_prefix_length)])

    def copy_prefix_from(self, other: InnerNode) -> None:
        """Take over the prefix of ``other``."""
        self.prefix_length = other.prefix_length
        n = min(other.prefix_length, self.max_prefix_length, other.max_prefix_length)
        self.prefix[:n] = other.prefix[:n]

    @abstractmethod
    def find_child(self, key_byte: int) -> Optional[Child]:
        """The child stored under ``key_byte``, or None."""

    @abstractmethod
    def set_child(self, key_byte: int, child: Child) -> None:
        """Replace the existing child stored under ``key_byte``."""

    @abstractmethod
    def insert_child(self, key_byte: int, child: Child) -> InnerNode:
        """Add a child; returns the node now holding it (grown if full)."""

    @abstractmethod
    def erase_child(self, key_byte: int) -> Child:
        """Remove a child; returns the node that replaces this one."""

    @abstractmethod
    def children(self) -> Iterator[tuple[int, Child]]:
        """Yield ``(key_byte, child)`` pairs in ascending key order."""

    @abstractmethod
    def byte_size(self) -> int:
        """Memory footprint of this node alone, in bytes."""

    def _layout_size(self) -> int:
        header = _align(4 + 2 + 1 + self.max_prefix_length, 4)
        body = _align(header + self._KEY_BYTES, _POINTER_BYTES)
        return body + _POINTER_BYTES * self._POINTER_SLOTS

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(count={self.count}, "
            f"prefix_length={self.prefix_length})"
        )


class _SortedNode(InnerNode):
    """Node keeping key bytes and children in two sorted parallel lists."""

    def __init__(self, max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH) -> None:
        super().__init__(max_prefix_length)
        self._keys: list[int] = []
        self._children: list[Child] = []

    @classmethod
    def _from_items(cls, source: InnerNode, items) -> _SortedNode:
        node = cls(source.max_prefix_length)
        node.copy_prefix_from(source)
        for key_byte, child in items:
            node._keys.append(key_byte)
            node._children.append(child)
        return node

    @property
    def count(self) -> int:
        return len(self._keys)

    def _position(self, key_byte: int) -> int:
        _check_byte(key_byte)
        return bisect_left(self._keys, key_byte)

    def _has(self, i: int, key_byte: int) -> bool:
        return i < len(self._keys) and self._keys[i] == key_byte

    def _sorted_find(self, key_byte: int) -> Optional[Child]:
        i = self._position(key_byte)
        return self._children[i] if self._has(i, key_byte) else None

    def _sorted_set(self, key_byte: int, child: Child) -> None:
        i = self._position(key_byte)
        if not self._has(i, key_byte):
            raise KeyError(key_byte)
        self._children[i] = child

    def _sorted_insert(self, key_byte: int, child: Child) -> InnerNode:
        i = self._position(key_byte)
        if self._has(i, key_byte):
            raise ValueError(f"key byte {key_byte} already present")
        if len(self._keys) < self.CAPACITY:
            self._keys.insert(i, key_byte)
            self._children.insert(i, child)
            return self
        return self._grow().insert_child(key_byte, child)

    def _remove(self, key_byte: int) -> None:
        i = self._position(key_byte)
        if not self._has(i, key_byte):
            raise KeyError(key_byte)
        del self._keys[i]
        del self._children[i]

    def _sorted_children(self) -> Iterator[tuple[int, Child]]:
        yield from zip(list(self._keys), list(self._children))

    @abstractmethod
    def _grow(self) -> InnerNode:
        """A larger node holding the same children and prefix."""


class Node4(_SortedNode):
    """Inner node with up to 4 children."""

    NODE_TYPE = 0
    CAPACITY = 4
    _KEY_BYTES = 4
    _POINTER_SLOTS = 4

    def find_child(self, key_byte: int) -> Optional[Child]:
        return self._sorted_find(key_byte)

    def set_child(self, key_byte: int, child: Child) -> None:
        self._sorted_set(key_byte, child)

    def insert_child(self, key_byte: int, child: Child) -> InnerNode:
        return self._sorted_insert(key_byte, child)

    def children(self) -> Iterator[tuple[int, Child]]:
        return self._sorted_children()

    def byte_size(self) -> int:
        return self._layout_size()

    def _grow(self) -> InnerNode:
        return Node16._from_items(self, self.children())

    def erase_child(self, key_byte: int) -> Child:
        self._remove(key_byte)
        if self.count != 1:
            return self
        # Collapse the one-way node into its only child.
        only_key, child = self._keys[0], self._children[0]
        if isinstance(child, InnerNode):
            limit = self.max_prefix_length
            combined = bytearray(self.prefix)
            length = self.prefix_length
            if length < limit:
                combined[length] = only_key
                length += 1
            if length < limit:
                extra = min(child.prefix_length, limit - length)
                combined[length:length + extra] = child.prefix[:extra]
                length += extra
            n = min(length, limit, child.max_prefix_length)
            child.prefix[:n] = combined[:n]
            child.prefix_length += self.prefix_length + 1
        return child


class Node16(_SortedNode):
    """Inner node with up to 16 children."""

    NODE_TYPE = 1
    CAPACITY = 16
    _KEY_BYTES = 16
    _POINTER_SLOTS = 16

    def find_child(self, key_byte: int) -> Optional[Child]:
        return self._sorted_find(key_byte)

    def set_child(self, key_byte: int, child: Child) -> None:
        self._sorted_set(key_byte, child)

    def insert_child(self, key_byte: int, child: Child) -> InnerNode:
        return self._sorted_insert(key_byte, child)

    def children(self) -> Iterator[tuple[int, Child]]:
        return self._sorted_children()

    def byte_size(self) -> int:
        return self._layout_size()

    def _grow(self) -> InnerNode:
        grown = Node48(self.max_prefix_length)
        grown.copy_prefix_from(self)
        for key_byte, child in self.children():
            grown.insert_child(key_byte, child)
        return grown

    def erase_child(self, key_byte: int) -> Child:
        self._remove(key_byte)
        if self.count == 3:
            return Node4._from_items(self, self.children())
        return self


class Node48(InnerNode):
    """Inner node with up to 48 children, indexed by a 256-entry table."""

    NODE_TYPE = 2
    CAPACITY = 48
    _KEY_BYTES = 256
    _POINTER_SLOTS = 48

    def __init__(self, max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH) -> None:
        super().__init__(max_prefix_length)
        self._child_index = bytearray([EMPTY_MARKER]) * 256
        self._slots: list[Optional[Child]] = [None] * self.CAPACITY
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def find_child(self, key_byte: int) -> Optional[Child]:
        _check_byte(key_byte)
        slot = self._child_index[key_byte]
        return None if slot == EMPTY_MARKER else self._slots[slot]

    def set_child(self, key_byte: int, child: Child) -> None:
        _check_byte(key_byte)
        slot = self._child_index[key_byte]
        if slot == EMPTY_MARKER:
            raise KeyError(key_byte)
        self._slots[slot] = child

    def insert_child(self, key_byte: int, child: Child) -> InnerNode:
        _check_byte(key_byte)
        if self._child_index[key_byte] != EMPTY_MARKER:
            raise ValueError(f"key byte {key_byte} already present")
        if self._count < self.CAPACITY:
            pos = self._count
            if self._slots[pos] is not None:
                pos = self._slots.index(None)
            self._slots[pos] = child
            self._child_index[key_byte] = pos
            self._count += 1
            return self
        grown = Node256(self.max_prefix_length)
        grown.copy_prefix_from(self)
        for existing_key, existing_child in self.children():
            grown.insert_child(existing_key, existing_child)
        return grown.insert_child(key_byte, child)

    def erase_child(self, key_byte: int) -> Child:
        _check_byte(key_byte)
        slot = self._child_index[key_byte]
        if slot == EMPTY_MARKER:
            raise KeyError(key_byte)
        self._slots[slot] = None
        self._child_index[key_byte] = EMPTY_MARKER
        self._count -= 1
        if self._count == 12:
            return Node16._from_items(self, self.children())
        return self

    def children(self) -> Iterator[tuple[int, Child]]:
        for key_byte, slot in enumerate(bytes(self._child_index)):
            if slot != EMPTY_MARKER:
                yield key_byte, self._slots[slot]

    def byte_size(self) -> int:
        return self._layout_size()


class Node256(InnerNode):
    """Inner node with a direct slot for every key byte."""

    NODE_TYPE = 3
    CAPACITY = 256
    _KEY_BYTES = 0
    _POINTER_SLOTS = 256

    def __init__(self, max_prefix_length: int = DEFAULT_MAX_PREFIX_LENGTH) -> None:
        super().__init__(max_prefix_length)
        self._slots: list[Optional[Child]] = [None] * 256
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def find_child(self, key_byte: int) -> Optional[Child]:
        _check_byte(key_byte)
        return self._slots[key_byte]

    def set_child(self, key_byte: int, child: Child) -> None:
        _check_byte(key_byte)
        if self._slots[key_byte] is None:
            raise KeyError(key_byte)
        self._slots[key_byte] = child

    def insert_child(self, key_byte: int, child: Child) -> InnerNode:
        _check_byte(key_byte)
        if self._slots[key_byte] is not None:
            raise ValueError(f"key byte {key_byte} already present")
        self._slots[key_byte] = child
        self._count += 1
        return self

    def erase_child(self, key_byte: int) -> Child:
        _check_byte(key_byte)
        if self._slots[key_byte] is None:
            raise KeyError(key_byte)
        self._slots[key_byte] = None
        self._count -= 1
        if self._count == 37:
            shrunk = Node48(self.max_prefix_length)
            shrunk.copy_prefix_from(self)
            for existing_key, existing_child in self.children():
                shrunk.insert_child(existing_key, existing_child)
            return shrunk
        return self

    def children(self) -> Iterator[tuple[int, Child]]:
        for key_byte, child in enumerate(list(self._slots)):
            if child is not None:
                yield key_byte, child

    def byte_size(self) -> int:
        return self._layout_size()