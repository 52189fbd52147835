import pytest

from pattern_catalog.behavioral.visitor import (
    PI,
    Add,
    AreaCalculator,
    Circle,
    Directory,
    DrawingVisitor,
    Evaluator,
    File,
    Multiply,
    Number,
    PerimeterCalculator,
    Printer,
    Rectangle,
    SearchVisitor,
    SizeCalculator,
    Subtract,
    Triangle,
)
from pattern_catalog.core import InvalidArgument


@pytest.fixture
def shapes():
    return [Circle(5.0, 10, 10), Rectangle(4.0, 6.0), Triangle(0, 0, 3, 4, 0, 4)]


class TestShapeVisitors:
    def test_area(self, narrator, shapes):
        areas = AreaCalculator(narrator)
        for shape in shapes:
            shape.accept(areas)
        assert areas.total_area == pytest.approx(PI * 25 + 24 + 6)
        areas.reset()
        assert areas.total_area == 0.0

    def test_perimeter(self, narrator, shapes):
        perimeters = PerimeterCalculator(narrator)
        for shape in shapes:
            shape.accept(perimeters)
        assert perimeters.total_perimeter == pytest.approx(2 * PI * 5 + 20 + 12)

    def test_drawing_keeps_instructions(self, narrator, shapes):
        drawing = DrawingVisitor(narrator)
        for shape in shapes:
            shape.accept(drawing)
        assert drawing.instructions[0] == "Drawing Circle: radius=5 at (10,10)"
        assert drawing.instructions[1] == "Drawing Rectangle: 4x6 at (0,0)"
        assert len(narrator) == 3


@pytest.fixture
def project():
    root = Directory("project")
    src = root.add(Directory("src"))
    src.add(File("main", 1200, "py"))
    src.add(File("utils", 800, "py"))
    root.add(File("README", 300, "md"))
    return root


class TestFileSystemVisitors:
    def test_sizes(self, narrator, project):
        sizes = SizeCalculator(narrator)
        project.accept(sizes)
        assert sizes.total_size == 2300
        assert sizes.file_count == 3
        assert sizes.directory_count == 2

    def test_directory_visited_before_contents(self, narrator, project):
        project.accept(SizeCalculator(narrator))
        assert narrator.lines[:3] == ["📁 project/", "📁 src/", "📄 main.py (1200 bytes)"]

    def test_search_matches_name_or_extension(self, narrator, project):
        search = SearchVisitor("py", narrator)
        project.accept(search)
        assert search.results == ["📄 main.py", "📄 utils.py"]
        search.reset("src")
        project.accept(search)
        assert search.results == ["📁 src/"]


class TestExpressionVisitors:
    def test_evaluate_and_print(self, narrator):
        expression = Multiply(Add(Number(5), Number(3)), Subtract(Number(10), Number(4)))
        evaluator = Evaluator(narrator)
        expression.accept(evaluator)
        assert evaluator.result == 48

        printer = Printer()
        expression.accept(printer)
        assert printer.result == "((5 + 3) * (10 - 4))"

    def test_result_requires_one_complete_expression(self, narrator):
        evaluator = Evaluator(narrator)
        with pytest.raises(InvalidArgument):
            evaluator.result
        Number(1).accept(evaluator)
        Number(2).accept(evaluator)
        with pytest.raises(InvalidArgument):
            evaluator.result
