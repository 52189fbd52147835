r"""Model-View-Controller.

`UserModel` owns the users, a `UserView` renders them and `UserController`
turns requests into model updates and view calls. The controller is the
only place that validates input; swapping the console view for the JSON
view changes nothing else.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Dict, List, MutableMapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator
from ..mixin import MappingMutatorMixin

__all__ = ["User", "UserModel", "UserView", "ConsoleUserView", "JsonUserView", "UserController"]

logger = logging.getLogger(__name__)


class User(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    id: int
    name: str = Field(min_length=1)
    email: str = Field(min_length=1)


# -----------------------------------------------------------------------------
# Model
# -----------------------------------------------------------------------------


class UserModel(MappingMutatorMixin[int, User]):
    def __init__(self):
        self._users: Dict[int, User] = {}

    def _get_mapping(self) -> MutableMapping[int, User]:
        return self._users

    def add_user(self, user: User) -> None:
        self._set_artifact(user.id, user)

    def get_user(self, user_id: int) -> Optional[User]:
        return self._get_artifact(user_id) if self._has_identifier(user_id) else None

    def has_user(self, user_id: int) -> bool:
        return self._has_identifier(user_id)

    def all_users(self) -> List[User]:
        return [self._get_artifact(key) for key in self._iter_mapping()]

    def remove_user(self, user_id: int) -> bool:
        if not self._has_identifier(user_id):
            return False
        self._del_artifact(user_id)
        return True

    def __len__(self) -> int:
        return self._len_mapping()


# -----------------------------------------------------------------------------
# Views
# -----------------------------------------------------------------------------


class UserView:
    """Plain rendering; subclasses override `display_user`."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def display_user(self, user: User) -> None:
        say = self.narrator.say
        say(f"User ID: {user.id}")
        say(f"Name: {user.name}")
        say(f"Email: {user.email}")
        say("---")

    def display_all_users(self, users: List[User]) -> None:
        self.narrator.say("=== All Users ===")
        for user in users:
            self.display_user(user)

    def display_message(self, message: str) -> None:
        self.narrator.say(f"Message: {message}")

    def display_error(self, error: str) -> None:
        self.narrator.say(f"Error: {error}")

    def display_user_not_found(self, user_id: int) -> None:
        self.narrator.say(f"User with ID {user_id} not found")


class ConsoleUserView(UserView):
    def display_user(self, user: User) -> None:
        say = self.narrator.say
        say("┌" + "─" * 25)
        say(f"│ User ID: {user.id}")
        say(f"│ Name: {user.name}")
        say(f"│ Email: {user.email}")
        say("└" + "─" * 25)


class JsonUserView(UserView):
    def display_user(self, user: User) -> None:
        for line in json.dumps(user.model_dump(), indent=2).splitlines():
            self.narrator.say(line)


# -----------------------------------------------------------------------------
# Controller
# -----------------------------------------------------------------------------


class UserController:
    def __init__(self, model: UserModel, view: UserView):
        self.model = model
        self.view = view

    def add_user(self, user_id: int, name: str, email: str) -> bool:
        try:
            user = User(id=user_id, name=name, email=email)
        except PydanticValidationError:
            self.view.display_error("Name and email cannot be empty")
            return False
        if self.model.has_user(user_id):
            self.view.display_error(f"User with ID {user_id} already exists")
            return False
        self.model.add_user(user)
        self.view.display_message("User added successfully")
        return True

    def show_user(self, user_id: int) -> None:
        user = self.model.get_user(user_id)
        if user is None:
            self.view.display_user_not_found(user_id)
        else:
            self.view.display_user(user)

    def show_all_users(self) -> None:
        users = self.model.all_users()
        if not users:
            self.view.display_message("No users found")
        else:
            self.view.display_all_users(users)

    def remove_user(self, user_id: int) -> bool:
        if self.model.remove_user(user_id):
            self.view.display_message("User removed successfully")
            return True
        self.view.display_user_not_found(user_id)
        return False

    def show_user_count(self) -> None:
        self.view.display_message(f"Total users: {len(self.model)}")


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("mvc", "MVC Pattern", "architectural", "User model with console and JSON views")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== MVC Pattern Demo ===\n")

    controller = UserController(UserModel(), ConsoleUserView(narrator))
    controller.show_all_users()
    controller.add_user(1, "Alice Johnson", "alice@example.com")
    controller.add_user(2, "Bob Smith", "bob@example.com")
    controller.add_user(3, "Charlie Brown", "charlie@example.com")
    say()
    controller.show_user_count()

    say("\nShowing user with ID 2:")
    controller.show_user(2)
    say("\nShowing all users:")
    controller.show_all_users()
    say("\nTrying to show user with ID 999:")
    controller.show_user(999)

    say("\nTesting error handling:")
    controller.add_user(4, "", "invalid@example.com")
    controller.add_user(1, "Duplicate", "duplicate@example.com")

    say("\nRemoving user with ID 2:")
    controller.remove_user(2)
    controller.remove_user(2)
    controller.show_user_count()

    say("\n=== Using JSON View ===")
    json_controller = UserController(UserModel(), JsonUserView(narrator))
    json_controller.add_user(1, "John Doe", "john@example.com")
    json_controller.show_user(1)


if __name__ == "__main__":
    sys.exit(run_standalone("mvc"))
