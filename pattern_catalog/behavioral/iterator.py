r"""Iterator.

Collections hand out cursor objects with an explicit protocol:

  - `has_next()` tells whether `next()` would succeed,
  - `next()` returns the element and advances (raises `Exhausted` past the end),
  - `reset()` rewinds the cursor.

Every cursor also speaks the Python iteration protocol, so ``for x in it``
works and stops where `has_next` says it stops. Filtered cursors skip
non-matching elements in both `has_next` and `next`, which keeps the two in
agreement.

Several cursors may walk one collection at the same time. Mutating the
collection while a cursor is live is not detected.
"""

from __future__ import annotations

import logging
import sys
from collections import deque
from typing import Callable, Deque, Generic, Iterable, Iterator, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ConfigDict

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Exhausted, Narrator

__all__ = [
    "Book",
    "Student",
    "CollectionIterator",
    "ArrayIterator",
    "ReverseIterator",
    "FilterIterator",
    "BookCollection",
    "Classroom",
    "TreeNode",
    "Tree",
    "DepthFirstIterator",
    "BreadthFirstIterator",
    "filtered",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")


# -----------------------------------------------------------------------------
# Elements
# -----------------------------------------------------------------------------


class Book(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    author: str
    year: int

    def __str__(self) -> str:
        return f'"{self.title}" by {self.author} ({self.year})'


class Student(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    grade: int
    subject: str

    def __str__(self) -> str:
        return f"{self.name} (Grade: {self.grade}, Subject: {self.subject})"


# -----------------------------------------------------------------------------
# Cursor Protocol
# -----------------------------------------------------------------------------


class CollectionIterator(Generic[T]):
    """Explicit cursor that also implements ``__iter__``/``__next__``."""

    def has_next(self) -> bool:
        raise NotImplementedError

    def next(self) -> T:
        raise NotImplementedError

    def reset(self) -> None:
        raise NotImplementedError

    def _exhausted(self) -> Exhausted:
        return Exhausted(
            "No more elements",
            ["Check has_next() before calling next()", "Call reset() to walk again"],
            {"participant": type(self).__name__, "operation": "next"},
        )

    def __iter__(self) -> "CollectionIterator[T]":
        return self

    def __next__(self) -> T:
        if not self.has_next():
            raise StopIteration
        return self.next()


class ArrayIterator(CollectionIterator[T]):
    """Forward cursor over a sequence."""

    def __init__(self, items: Sequence[T]):
        self._items = items
        self._position = 0

    def has_next(self) -> bool:
        return self._position < len(self._items)

    def next(self) -> T:
        if not self.has_next():
            raise self._exhausted()
        item = self._items[self._position]
        self._position += 1
        return item

    def reset(self) -> None:
        self._position = 0

    def current(self) -> T:
        """Element most recently returned by `next`."""
        if self._position == 0:
            raise Exhausted(
                "Iterator has not started",
                ["Call next() before current()"],
                {"participant": type(self).__name__, "operation": "current"},
            )
        return self._items[self._position - 1]


class ReverseIterator(CollectionIterator[T]):
    def __init__(self, items: Sequence[T]):
        self._items = items
        self._position = len(items)

    def has_next(self) -> bool:
        return self._position > 0

    def next(self) -> T:
        if not self.has_next():
            raise self._exhausted()
        self._position -= 1
        return self._items[self._position]

    def reset(self) -> None:
        self._position = len(self._items)


class FilterIterator(CollectionIterator[T]):
    """Forward cursor that only yields elements matching `predicate`."""

    def __init__(self, items: Sequence[T], predicate: Callable[[T], bool]):
        self._items = items
        self._predicate = predicate
        self._position = 0

    def _skip(self) -> None:
        while self._position < len(self._items) and not self._predicate(self._items[self._position]):
            self._position += 1

    def has_next(self) -> bool:
        self._skip()
        return self._position < len(self._items)

    def next(self) -> T:
        self._skip()
        if self._position >= len(self._items):
            raise self._exhausted()
        item = self._items[self._position]
        self._position += 1
        return item

    def reset(self) -> None:
        self._position = 0


def filtered(items: Iterable[T], predicate: Callable[[T], bool]) -> Iterator[T]:
    """Lazy filtered range."""
    for item in items:
        if predicate(item):
            yield item


# -----------------------------------------------------------------------------
# Aggregates
# -----------------------------------------------------------------------------


class BookCollection:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._books: List[Book] = []

    def add_book(self, book: Book) -> None:
        self._books.append(book)
        self.narrator.say(f"📚 Added: {book}")

    def remove_book(self, title: str) -> bool:
        for index, book in enumerate(self._books):
            if book.title == title:
                del self._books[index]
                self.narrator.say(f"🗑️ Removed: {book}")
                return True
        self.narrator.say(f"❌ Book not found: {title}")
        return False

    def create_iterator(self) -> ArrayIterator[Book]:
        return ArrayIterator(self._books)

    def __len__(self) -> int:
        return len(self._books)


class Classroom:
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._students: List[Student] = []

    def add_student(self, student: Student) -> None:
        self._students.append(student)
        self.narrator.say(f"👨‍🎓 Added student: {student}")

    def forward(self) -> ArrayIterator[Student]:
        return ArrayIterator(self._students)

    def reverse(self) -> ReverseIterator[Student]:
        return ReverseIterator(self._students)

    def high_grades(self, threshold: int = 90) -> FilterIterator[Student]:
        return FilterIterator(self._students, lambda s: s.grade >= threshold)

    def by_subject(self, subject: str) -> FilterIterator[Student]:
        return FilterIterator(self._students, lambda s: s.subject == subject)


class TreeNode(Generic[T]):
    def __init__(self, data: T):
        self.data = data
        self.children: List["TreeNode[T]"] = []

    def add_child(self, child: "TreeNode[T]") -> "TreeNode[T]":
        self.children.append(child)
        return child


class DepthFirstIterator(CollectionIterator[T]):
    """Pre-order walk, children left to right."""

    def __init__(self, root: Optional[TreeNode[T]]):
        self._root = root
        self._stack: List[TreeNode[T]] = []
        self.reset()

    def has_next(self) -> bool:
        return bool(self._stack)

    def next(self) -> T:
        if not self._stack:
            raise self._exhausted()
        node = self._stack.pop()
        self._stack.extend(reversed(node.children))
        return node.data

    def reset(self) -> None:
        self._stack = [self._root] if self._root is not None else []


class BreadthFirstIterator(CollectionIterator[T]):
    """Level-order walk."""

    def __init__(self, root: Optional[TreeNode[T]]):
        self._root = root
        self._queue: Deque[TreeNode[T]] = deque()
        self.reset()

    def has_next(self) -> bool:
        return bool(self._queue)

    def next(self) -> T:
        if not self._queue:
            raise self._exhausted()
        node = self._queue.popleft()
        self._queue.extend(node.children)
        return node.data

    def reset(self) -> None:
        self._queue = deque([self._root] if self._root is not None else [])


class Tree(Generic[T]):
    def __init__(self, root: Optional[TreeNode[T]] = None):
        self.root = root

    def depth_first(self) -> DepthFirstIterator[T]:
        return DepthFirstIterator(self.root)

    def breadth_first(self) -> BreadthFirstIterator[T]:
        return BreadthFirstIterator(self.root)


def sample_tree() -> Tree[int]:
    root = TreeNode(1)
    two = root.add_child(TreeNode(2))
    three = root.add_child(TreeNode(3))
    two.add_child(TreeNode(5))
    two.add_child(TreeNode(6))
    three.add_child(TreeNode(4)).add_child(TreeNode(7))
    return Tree(root)


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


def _joined(values: Iterable[object]) -> str:
    return " ".join(str(v) for v in values)


@register_demo("iterator", "Iterator Pattern", "behavioral", "Book collection, classroom cursors, tree walks")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Iterator Pattern Demo ===")

    say("\n1. Traditional Iterator Pattern - Book Collection:")
    say("=" * 60)
    library = BookCollection(narrator)
    library.add_book(Book(title="1984", author="George Orwell", year=1949))
    library.add_book(Book(title="To Kill a Mockingbird", author="Harper Lee", year=1960))
    library.add_book(Book(title="The Great Gatsby", author="F. Scott Fitzgerald", year=1925))
    library.add_book(Book(title="Pride and Prejudice", author="Jane Austen", year=1813))

    say("\nIterating through books:")
    cursor = library.create_iterator()
    while cursor.has_next():
        say(f"📖 {cursor.next()}")
    say(f"\nTotal books: {len(library)}")
    library.remove_book("The Great Gatsby")
    library.remove_book("Moby Dick")

    say("\n\n2. Different Iterator Types - Classroom:")
    say("=" * 60)
    classroom = Classroom(narrator)
    for name, grade, subject in (
        ("Alice", 95, "Math"),
        ("Bob", 87, "Science"),
        ("Charlie", 92, "Math"),
        ("Diana", 78, "English"),
        ("Eve", 96, "Science"),
    ):
        classroom.add_student(Student(name=name, grade=grade, subject=subject))

    say("\nForward iteration:")
    for student in classroom.forward():
        say(f"👨‍🎓 {student}")
    say("\nReverse iteration:")
    for student in classroom.reverse():
        say(f"👩‍🎓 {student}")
    say("\nHigh grade students (>=90):")
    for student in classroom.high_grades():
        say(f"🏆 {student}")
    say("\nMath students only:")
    for student in classroom.by_subject("Math"):
        say(f"📐 {student}")

    say("\n\n3. Tree Traversal Iterators:")
    say("=" * 60)
    tree = sample_tree()
    say("Tree structure:")
    say("    1\n   / \\\n  2   3\n / \\   \\\n5   6   4\n         \\\n          7")
    say(f"\nDepth-First Traversal: {_joined(tree.depth_first())}")
    say(f"Breadth-First Traversal: {_joined(tree.breadth_first())}")

    say("\n\n4. Python Iteration Protocol:")
    say("=" * 60)
    squares = [i * i for i in range(1, 11)]
    say(f"Numbers using a for loop: {_joined(ArrayIterator(squares))}")
    say("Numbers using builtins:")
    say(f"Sum: {sum(ArrayIterator(squares))}")
    say(f"Count > 25: {sum(1 for n in ArrayIterator(squares) if n > 25)}")

    say("\n\n5. Custom Filtered Range:")
    say("=" * 60)
    numbers = list(range(1, 11))
    say(f"Original numbers: {_joined(numbers)}")
    say(f"Even numbers only: {_joined(filtered(numbers, lambda n: n % 2 == 0))}")
    say(f"Numbers > 5: {_joined(filtered(numbers, lambda n: n > 5))}")

    say("\n\n6. Walking Past the End:")
    say("=" * 60)
    cursor = ArrayIterator(["apple", "banana"])
    while cursor.has_next():
        say(f"🍎 {cursor.next()}")
    try:
        cursor.next()
    except Exhausted as exc:
        say(f"⚠️ {exc.message}")
    cursor.reset()
    say(f"After reset, first element: {cursor.next()}")


if __name__ == "__main__":
    sys.exit(run_standalone("iterator"))
