r"""Visitor.

Elements expose `accept(visitor)` and call back the visitor method named for
their own concrete type (double dispatch). Adding an operation over a
hierarchy is a new visitor class; the elements do not change. Visitors may
carry state across visits (totals, counters, an evaluation stack).

\dot
digraph Visitor {
    rankdir=LR;
    node [shape=rectangle];
    "Circle.accept(v)" -> "v.visit_circle(self)";
    "Directory.accept(v)" -> "v.visit_directory(self)" -> "child.accept(v)";
}
\enddot
"""

from __future__ import annotations

import logging
import math
import sys
from abc import ABC, abstractmethod
from typing import List

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, InvalidArgument, Narrator

__all__ = [
    "PI",
    "Shape",
    "Circle",
    "Rectangle",
    "Triangle",
    "ShapeVisitor",
    "AreaCalculator",
    "PerimeterCalculator",
    "DrawingVisitor",
    "FileSystemNode",
    "File",
    "Directory",
    "FileSystemVisitor",
    "SizeCalculator",
    "SearchVisitor",
    "Expression",
    "Number",
    "BinaryOperation",
    "Add",
    "Subtract",
    "Multiply",
    "ExpressionVisitor",
    "Evaluator",
    "Printer",
]

logger = logging.getLogger(__name__)

PI = 3.14159


def _num(value: float) -> str:
    return f"{value:g}"


# -----------------------------------------------------------------------------
# Shapes
# -----------------------------------------------------------------------------


class Shape(ABC):
    @abstractmethod
    def accept(self, visitor: "ShapeVisitor") -> None: ...


class Circle(Shape):
    def __init__(self, radius: float, x: float = 0, y: float = 0):
        self.radius, self.x, self.y = radius, x, y

    def accept(self, visitor: "ShapeVisitor") -> None:
        visitor.visit_circle(self)


class Rectangle(Shape):
    def __init__(self, width: float, height: float, x: float = 0, y: float = 0):
        self.width, self.height, self.x, self.y = width, height, x, y

    def accept(self, visitor: "ShapeVisitor") -> None:
        visitor.visit_rectangle(self)


class Triangle(Shape):
    def __init__(self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float):
        self.vertices = ((x1, y1), (x2, y2), (x3, y3))

    def accept(self, visitor: "ShapeVisitor") -> None:
        visitor.visit_triangle(self)


class ShapeVisitor(ABC):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    @abstractmethod
    def visit_circle(self, circle: Circle) -> None: ...

    @abstractmethod
    def visit_rectangle(self, rectangle: Rectangle) -> None: ...

    @abstractmethod
    def visit_triangle(self, triangle: Triangle) -> None: ...


class AreaCalculator(ShapeVisitor):
    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.total_area = 0.0

    def _add(self, kind: str, area: float) -> None:
        self.narrator.say(f"{kind} area: {_num(area)}")
        self.total_area += area

    def visit_circle(self, circle: Circle) -> None:
        self._add("Circle", PI * circle.radius * circle.radius)

    def visit_rectangle(self, rectangle: Rectangle) -> None:
        self._add("Rectangle", rectangle.width * rectangle.height)

    def visit_triangle(self, triangle: Triangle) -> None:
        # shoelace formula
        (x1, y1), (x2, y2), (x3, y3) = triangle.vertices
        self._add("Triangle", 0.5 * abs(x1 * (y2 - y3) + x2 * (y3 - y1) + x3 * (y1 - y2)))

    def reset(self) -> None:
        self.total_area = 0.0


class PerimeterCalculator(ShapeVisitor):
    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.total_perimeter = 0.0

    def _add(self, kind: str, perimeter: float) -> None:
        self.narrator.say(f"{kind} perimeter: {_num(perimeter)}")
        self.total_perimeter += perimeter

    def visit_circle(self, circle: Circle) -> None:
        self._add("Circle", 2 * PI * circle.radius)

    def visit_rectangle(self, rectangle: Rectangle) -> None:
        self._add("Rectangle", 2 * (rectangle.width + rectangle.height))

    def visit_triangle(self, triangle: Triangle) -> None:
        a, b, c = triangle.vertices
        self._add("Triangle", math.dist(a, b) + math.dist(b, c) + math.dist(c, a))

    def reset(self) -> None:
        self.total_perimeter = 0.0


class DrawingVisitor(ShapeVisitor):
    """Draws each shape and keeps the drawing instructions."""

    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.instructions: List[str] = []

    def visit_circle(self, circle: Circle) -> None:
        self.instructions.append(f"Drawing Circle: radius={_num(circle.radius)} at ({_num(circle.x)},{_num(circle.y)})")
        self.narrator.say(f"🔴 Circle drawn at ({_num(circle.x)},{_num(circle.y)}) with radius {_num(circle.radius)}")

    def visit_rectangle(self, rectangle: Rectangle) -> None:
        size = f"{_num(rectangle.width)}x{_num(rectangle.height)}"
        self.instructions.append(f"Drawing Rectangle: {size} at ({_num(rectangle.x)},{_num(rectangle.y)})")
        self.narrator.say(f"🟦 Rectangle drawn at ({_num(rectangle.x)},{_num(rectangle.y)}) size {size}")

    def visit_triangle(self, triangle: Triangle) -> None:
        points = ", ".join(f"({_num(x)},{_num(y)})" for x, y in triangle.vertices)
        self.instructions.append(f"Drawing Triangle: vertices {points}")
        self.narrator.say(f"🔺 Triangle drawn with vertices {points}")


# -----------------------------------------------------------------------------
# File System
# -----------------------------------------------------------------------------


class FileSystemNode(ABC):
    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def accept(self, visitor: "FileSystemVisitor") -> None: ...


class File(FileSystemNode):
    def __init__(self, name: str, size: int, extension: str):
        super().__init__(name)
        self.size = size
        self.extension = extension

    @property
    def full_name(self) -> str:
        return f"{self.name}.{self.extension}"

    def accept(self, visitor: "FileSystemVisitor") -> None:
        visitor.visit_file(self)


class Directory(FileSystemNode):
    def __init__(self, name: str):
        super().__init__(name)
        self.children: List[FileSystemNode] = []

    def add(self, child: FileSystemNode) -> FileSystemNode:
        self.children.append(child)
        return child

    def accept(self, visitor: "FileSystemVisitor") -> None:
        # the directory is visited before its contents
        visitor.visit_directory(self)
        for child in self.children:
            child.accept(visitor)


class FileSystemVisitor(ABC):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    @abstractmethod
    def visit_file(self, file: File) -> None: ...

    @abstractmethod
    def visit_directory(self, directory: Directory) -> None: ...


class SizeCalculator(FileSystemVisitor):
    def __init__(self, narrator: Narrator):
        super().__init__(narrator)
        self.total_size = 0
        self.file_count = 0
        self.directory_count = 0

    def visit_file(self, file: File) -> None:
        self.total_size += file.size
        self.file_count += 1
        self.narrator.say(f"📄 {file.full_name} ({file.size} bytes)")

    def visit_directory(self, directory: Directory) -> None:
        self.directory_count += 1
        self.narrator.say(f"📁 {directory.name}/")


class SearchVisitor(FileSystemVisitor):
    """Collects files and directories whose name (or extension) contains a term."""

    def __init__(self, term: str, narrator: Narrator):
        super().__init__(narrator)
        self.term = term
        self.results: List[str] = []

    def _found(self, result: str) -> None:
        self.results.append(result)
        self.narrator.say(f"Found: {result}")

    def visit_file(self, file: File) -> None:
        if self.term in file.name or self.term in file.extension:
            self._found(f"📄 {file.full_name}")

    def visit_directory(self, directory: Directory) -> None:
        if self.term in directory.name:
            self._found(f"📁 {directory.name}/")

    def reset(self, term: str = "") -> None:
        if term:
            self.term = term
        self.results.clear()


# -----------------------------------------------------------------------------
# Expressions
# -----------------------------------------------------------------------------


class Expression(ABC):
    @abstractmethod
    def accept(self, visitor: "ExpressionVisitor") -> None: ...


class Number(Expression):
    def __init__(self, value: float):
        self.value = value

    def accept(self, visitor: "ExpressionVisitor") -> None:
        visitor.visit_number(self)


class BinaryOperation(Expression):
    """Post-order: both operands are visited before the operation itself."""

    symbol = "?"

    def __init__(self, left: Expression, right: Expression):
        self.left = left
        self.right = right

    def apply(self, left: float, right: float) -> float:
        raise NotImplementedError

    def accept(self, visitor: "ExpressionVisitor") -> None:
        self.left.accept(visitor)
        self.right.accept(visitor)
        visitor.visit_operation(self)


class Add(BinaryOperation):
    symbol = "+"

    def apply(self, left: float, right: float) -> float:
        return left + right


class Subtract(BinaryOperation):
    symbol = "-"

    def apply(self, left: float, right: float) -> float:
        return left - right


class Multiply(BinaryOperation):
    symbol = "*"

    def apply(self, left: float, right: float) -> float:
        return left * right


class ExpressionVisitor(ABC):
    @abstractmethod
    def visit_number(self, number: Number) -> None: ...

    @abstractmethod
    def visit_operation(self, operation: BinaryOperation) -> None: ...


class _StackVisitor(ExpressionVisitor):
    def __init__(self):
        self._stack: list = []

    def _pop_pair(self):
        if len(self._stack) < 2:
            raise InvalidArgument(
                "Invalid expression",
                ["Every operation needs two operands"],
                {"participant": type(self).__name__, "operation": "visit_operation"},
            )
        right = self._stack.pop()
        return self._stack.pop(), right

    @property
    def result(self):
        if len(self._stack) != 1:
            raise InvalidArgument(
                "Invalid expression evaluation",
                ["Visit exactly one complete expression before reading the result"],
                {"participant": type(self).__name__, "operation": "result"},
            )
        return self._stack[-1]

    def reset(self) -> None:
        self._stack.clear()


class Evaluator(_StackVisitor):
    def __init__(self, narrator: Narrator):
        super().__init__()
        self.narrator = narrator

    def visit_number(self, number: Number) -> None:
        self._stack.append(number.value)
        self.narrator.say(f"Push {_num(number.value)}")

    def visit_operation(self, operation: BinaryOperation) -> None:
        left, right = self._pop_pair()
        value = operation.apply(left, right)
        self.narrator.say(f"{_num(left)} {operation.symbol} {_num(right)} = {_num(value)}")
        self._stack.append(value)


class Printer(_StackVisitor):
    """Renders a fully parenthesised infix form."""

    def visit_number(self, number: Number) -> None:
        self._stack.append(_num(number.value))

    def visit_operation(self, operation: BinaryOperation) -> None:
        left, right = self._pop_pair()
        self._stack.append(f"({left} {operation.symbol} {right})")


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("visitor", "Visitor Pattern", "behavioral", "Shapes, file system and expression visitors")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Visitor Pattern Demo ===")

    say("\n1. Shape Processing with Visitor Pattern:")
    say("=" * 50)
    shapes: List[Shape] = [Circle(5.0, 10, 10), Rectangle(4.0, 6.0, 0, 0), Triangle(0, 0, 3, 4, 0, 4)]

    say("\nCalculating areas:")
    areas = AreaCalculator(narrator)
    for shape in shapes:
        shape.accept(areas)
    say(f"Total area: {_num(areas.total_area)}")

    say("\nCalculating perimeters:")
    perimeters = PerimeterCalculator(narrator)
    for shape in shapes:
        shape.accept(perimeters)
    say(f"Total perimeter: {_num(perimeters.total_perimeter)}")

    say("\nDrawing shapes:")
    drawing = DrawingVisitor(narrator)
    for shape in shapes:
        shape.accept(drawing)

    say("\n\n2. File System Processing:")
    say("=" * 50)
    root = Directory("root")
    documents = root.add(Directory("documents"))
    photos = root.add(Directory("photos"))
    documents.add(File("resume", 1024, "pdf"))
    documents.add(File("letter", 512, "txt"))
    photos.add(File("vacation1", 2048000, "jpg"))
    photos.add(File("vacation2", 1856000, "jpg"))
    root.add(File("readme", 256, "txt"))

    say("\nCalculating file system size:")
    sizes = SizeCalculator(narrator)
    root.accept(sizes)
    say(f"\nTotal size: {sizes.total_size} bytes")
    say(f"Files: {sizes.file_count}")
    say(f"Directories: {sizes.directory_count}")

    say("\nSearching for 'vacation':")
    search = SearchVisitor("vacation", narrator)
    root.accept(search)
    say("\nSearching for 'txt' files:")
    search.reset("txt")
    root.accept(search)

    say("\n\n3. Expression Tree Processing:")
    say("=" * 50)
    expression = Multiply(Add(Number(3), Number(4)), Subtract(Number(2), Number(1)))

    say("\nExpression structure:")
    printer = Printer()
    expression.accept(printer)
    say(f"Expression: {printer.result}")

    say("\nEvaluating expression:")
    evaluator = Evaluator(narrator)
    expression.accept(evaluator)
    say(f"Result: {_num(evaluator.result)}")

    say("\n\n4. Visitor Pattern Benefits:")
    say("=" * 50)
    say("✓ Separates algorithms from object structure")
    say("✓ Easy to add new operations without modifying classes")
    say("✓ Can accumulate state during traversal")

    say("\n5. Visitor Pattern Drawbacks:")
    say("=" * 50)
    say("⚠️ Hard to add new element types (breaks existing visitors)")
    say("⚠️ Circular dependency between visitors and elements")


if __name__ == "__main__":
    sys.exit(run_standalone("visitor"))
