import pytest

from pattern_catalog.structural.composite import (
    Button,
    Directory,
    File,
    IndividualEmployee,
    Label,
    Manager,
    Panel,
)
from pattern_catalog.core import PreconditionFailed


@pytest.fixture
def tree(narrator):
    root = Directory("root", narrator)
    home = root.add(Directory("home", narrator))
    home.add(File("notes.txt", 100, narrator))
    home.add(File("photo.jpg", 2048, narrator))
    root.add(File("boot.cfg", 52, narrator))
    return root


class TestFileTree:
    def test_size_is_recursive(self, tree):
        assert tree.size == 2200

    def test_find_is_depth_first(self, tree):
        assert tree.find("photo.jpg").size == 2048
        assert tree.find("home").is_composite
        assert tree.find("missing") is None

    def test_leaf_rejects_children(self, narrator):
        leaf = File("a.txt", 1, narrator)
        with pytest.raises(PreconditionFailed) as info:
            leaf.add(File("b.txt", 1, narrator))
        assert info.value.message == "Operation not supported"

    def test_remove_and_resize(self, tree):
        home = tree.find("home")
        home.find("notes.txt").set_content("héllo")
        assert tree.size == 2048 + 6 + 52
        assert home.remove("photo.jpg")
        assert not home.remove("photo.jpg")
        assert tree.size == 58

    def test_display_indents_by_depth(self, tree, narrator):
        tree.display()
        assert narrator.lines[:3] == ["📁 root/", "  📁 home/", "    📄 notes.txt (100 bytes)"]


class TestPanels:
    def test_click_dispatches_by_bounds(self, narrator):
        panel = Panel(narrator, "Main", 0, 0, 400, 300)
        ok = panel.add(Button(narrator, "OK", 10, 10, 80, 30))
        panel.add(Button(narrator, "Cancel", 100, 10, 80, 30))
        panel.add(Label(narrator, "Hello", 10, 50))
        assert panel.click(20, 20) == ["OK"]
        assert ok.clicks == 1
        assert panel.click(15, 55) == []
        assert "Label 'Hello' is not clickable" in narrator

    def test_nested_panels(self, narrator):
        outer = Panel(narrator, "Outer", 0, 0, 500, 500)
        inner = outer.add(Panel(narrator, "Inner", 100, 100, 200, 200))
        inner.add(Button(narrator, "Deep", 150, 150, 20, 20))
        assert outer.click(160, 160) == ["Deep"]

    def test_leaf_components_reject_children(self, narrator):
        with pytest.raises(PreconditionFailed):
            Button(narrator, "X", 0, 0, 1, 1).add(Label(narrator, "y", 0, 0))


def test_org_chart_aggregates(narrator):
    ceo = Manager("Ada", "CEO", 200000, narrator)
    cto = ceo.add_subordinate(Manager("Grace", "CTO", 150000, narrator))
    cto.add_subordinate(IndividualEmployee("Linus", "Engineer", 100000, narrator))
    ceo.add_subordinate(IndividualEmployee("Tim", "Analyst", 80000, narrator))
    assert ceo.team_size == 4
    assert ceo.payroll == 530000
    ceo.show()
    assert narrator.lines[0] == "Manager: Ada (CEO) - $200,000 [Team size: 4]"
    with pytest.raises(PreconditionFailed):
        IndividualEmployee("Solo", "Dev", 1, narrator).add_subordinate(ceo)
