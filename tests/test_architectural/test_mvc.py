import pytest

from pattern_catalog.architectural.mvc import (
    ConsoleUserView,
    JsonUserView,
    User,
    UserController,
    UserModel,
    UserView,
)
from pattern_catalog.core import PreconditionFailed


@pytest.fixture
def controller(narrator):
    return UserController(UserModel(), UserView(narrator))


def test_add_and_show(controller, narrator):
    assert controller.add_user(1, "Alice", "alice@example.com")
    controller.show_user(1)
    assert narrator.lines == [
        "Message: User added successfully",
        "User ID: 1",
        "Name: Alice",
        "Email: alice@example.com",
        "---",
    ]


@pytest.mark.parametrize("name, email", [("", "x@example.com"), ("Bob", ""), ("   ", "x@example.com")])
def test_blank_fields_are_rejected(controller, narrator, name, email):
    assert not controller.add_user(4, name, email)
    assert narrator.lines == ["Error: Name and email cannot be empty"]
    assert len(controller.model) == 0


def test_duplicate_id(controller, narrator):
    controller.add_user(1, "Alice", "a@example.com")
    assert not controller.add_user(1, "Dup", "d@example.com")
    assert narrator.lines[-1] == "Error: User with ID 1 already exists"
    assert controller.model.get_user(1).name == "Alice"


def test_remove_twice(controller, narrator):
    controller.add_user(2, "Bob", "b@example.com")
    assert controller.remove_user(2)
    assert not controller.remove_user(2)
    assert narrator.lines[-1] == "User with ID 2 not found"
    controller.show_user_count()
    assert narrator.lines[-1] == "Message: Total users: 0"


def test_show_all_when_empty(controller, narrator):
    controller.show_all_users()
    assert narrator.lines == ["Message: No users found"]


def test_model_refuses_duplicate_insert():
    model = UserModel()
    model.add_user(User(id=1, name="A", email="a@example.com"))
    with pytest.raises(PreconditionFailed):
        model.add_user(User(id=1, name="B", email="b@example.com"))


def test_all_users_keeps_insertion_order(controller):
    for user_id, name in ((3, "C"), (1, "A"), (2, "B")):
        controller.add_user(user_id, name, f"{name.lower()}@example.com")
    assert [u.id for u in controller.model.all_users()] == [3, 1, 2]


def test_views_are_interchangeable(narrator):
    console = UserController(UserModel(), ConsoleUserView(narrator))
    console.add_user(1, "Alice", "a@example.com")
    mark = len(narrator)
    console.show_user(1)
    assert narrator.since(mark)[1] == "│ User ID: 1"

    json_view = UserController(UserModel(), JsonUserView(narrator))
    json_view.add_user(1, "John Doe", "john@example.com")
    mark = len(narrator)
    json_view.show_user(1)
    assert narrator.since(mark) == [
        "{",
        '  "id": 1,',
        '  "name": "John Doe",',
        '  "email": "john@example.com"',
        "}",
    ]
