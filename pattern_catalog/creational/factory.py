r"""Factory.

`VehicleFactory` maps a type name to a creator callable and builds
vehicles from `(type, param)` pairs or from order dictionaries validated
with pydantic. New types are added at runtime with `register_creator`.
`SimpleVehicleFactory` is the closed variant: a static method switching
on an enum.

\dot
digraph Factory {
    rankdir=LR;
    node [shape=rectangle];
    "create_vehicle('truck', '25')" -> "creators['truck']" -> "Truck(25)";
}
\enddot
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, MutableMapping

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, InvalidArgument, Narrator
from ..mixin import MappingMutatorMixin

__all__ = [
    "Vehicle",
    "Car",
    "Motorcycle",
    "Truck",
    "ElectricCar",
    "VehicleOrder",
    "VehicleFactory",
    "VehicleType",
    "SimpleVehicleFactory",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Products
# -----------------------------------------------------------------------------


class Vehicle(ABC):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @property
    @abstractmethod
    def kind(self) -> str: ...


class Car(Vehicle):
    def __init__(self, narrator: Narrator, model: str):
        super().__init__(narrator)
        self.model = model

    def start(self) -> None:
        self.narrator.say(f"Car {self.model} engine started with key ignition")

    def stop(self) -> None:
        self.narrator.say(f"Car {self.model} engine stopped")

    @property
    def kind(self) -> str:
        return f"Car ({self.model})"


class Motorcycle(Vehicle):
    def __init__(self, narrator: Narrator, brand: str):
        super().__init__(narrator)
        self.brand = brand

    def start(self) -> None:
        self.narrator.say(f"Motorcycle {self.brand} engine started with kick start")

    def stop(self) -> None:
        self.narrator.say(f"Motorcycle {self.brand} engine stopped")

    @property
    def kind(self) -> str:
        return f"Motorcycle ({self.brand})"


class Truck(Vehicle):
    def __init__(self, narrator: Narrator, capacity: int):
        super().__init__(narrator)
        if capacity <= 0:
            raise InvalidArgument(
                f"Truck capacity must be positive, got {capacity}",
                ["Pass the capacity in tonnes, e.g. '25'"],
                {"participant": "Truck", "operation": "__init__"},
            )
        self.capacity = capacity

    def start(self) -> None:
        self.narrator.say(f"Truck with {self.capacity}T capacity engine started")

    def stop(self) -> None:
        self.narrator.say("Truck engine stopped")

    @property
    def kind(self) -> str:
        return f"Truck ({self.capacity}T)"


class ElectricCar(Vehicle):
    def __init__(self, narrator: Narrator, model: str):
        super().__init__(narrator)
        self.model = model

    def start(self) -> None:
        self.narrator.say(f"Electric car {self.model} started silently")

    def stop(self) -> None:
        self.narrator.say(f"Electric car {self.model} stopped")

    @property
    def kind(self) -> str:
        return f"Electric Car ({self.model})"


def _capacity(param: str, default: int) -> int:
    if not param:
        return default
    try:
        return int(param)
    except ValueError:
        raise InvalidArgument(
            f"Truck capacity must be an integer, got '{param}'",
            ["Pass the capacity in tonnes, e.g. '25'"],
            {"participant": "VehicleFactory", "operation": "create_vehicle"},
        ) from None


# -----------------------------------------------------------------------------
# Registry Factory
# -----------------------------------------------------------------------------

Creator = Callable[[Narrator, str], Vehicle]


class VehicleOrder(BaseModel):
    """Declarative request, e.g. ``{"type": "truck", "param": "25"}``."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: str
    param: str = ""


class VehicleFactory(MappingMutatorMixin[str, Creator]):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._creators: Dict[str, Creator] = {
            "car": lambda n, p: Car(n, p or "Generic Car"),
            "motorcycle": lambda n, p: Motorcycle(n, p or "Generic Bike"),
            "truck": lambda n, p: Truck(n, _capacity(p, 10)),
        }

    def _get_mapping(self) -> MutableMapping[str, Creator]:
        return self._creators

    def register_creator(self, kind: str, creator: Creator) -> None:
        """Add or replace the creator for `kind`."""
        self._put_artifact(kind, creator)
        logger.debug("registered creator %s", kind)

    def create_vehicle(self, kind: str, param: str = "") -> Vehicle:
        if not self._has_identifier(kind):
            raise InvalidArgument(
                f"Unknown vehicle type: {kind}",
                [f"Available types: {', '.join(self.available_types)}"],
                {"participant": "VehicleFactory", "operation": "create_vehicle"},
            )
        return self._get_artifact(kind)(self.narrator, param)

    def create_from_order(self, order: Mapping[str, Any]) -> Vehicle:
        try:
            parsed = VehicleOrder.model_validate(dict(order))
        except PydanticValidationError as exc:
            raise InvalidArgument(
                "Malformed vehicle order",
                [f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors()],
                {"participant": "VehicleFactory", "operation": "create_from_order"},
            ) from exc
        return self.create_vehicle(parsed.type, parsed.param)

    @property
    def available_types(self) -> List[str]:
        return list(self._iter_mapping())


# -----------------------------------------------------------------------------
# Simple Factory
# -----------------------------------------------------------------------------


class VehicleType(str, Enum):
    CAR = "car"
    MOTORCYCLE = "motorcycle"
    TRUCK = "truck"


class SimpleVehicleFactory:
    @staticmethod
    def create_vehicle(narrator: Narrator, kind: VehicleType, param: str = "") -> Vehicle:
        if kind is VehicleType.CAR:
            return Car(narrator, param or "Default Car")
        if kind is VehicleType.MOTORCYCLE:
            return Motorcycle(narrator, param or "Default Bike")
        if kind is VehicleType.TRUCK:
            return Truck(narrator, _capacity(param, 15))
        raise InvalidArgument(
            f"Unknown vehicle type: {kind}",
            [f"Use one of: {', '.join(t.value for t in VehicleType)}"],
            {"participant": "SimpleVehicleFactory", "operation": "create_vehicle"},
        )


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


def _drive(say, vehicle: Vehicle) -> None:
    say(f"Created: {vehicle.kind}")
    vehicle.start()
    vehicle.stop()
    say("---")


@register_demo("factory", "Factory Pattern", "creational", "Vehicle factory with runtime registration")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Factory Pattern Demo ===")

    factory = VehicleFactory(narrator)
    say(f"Available vehicle types: {' '.join(factory.available_types)}")
    say()

    _drive(say, factory.create_vehicle("car", "Toyota Camry"))
    _drive(say, factory.create_vehicle("motorcycle", "Harley Davidson"))
    _drive(say, factory.create_vehicle("truck", "25"))

    factory.register_creator("electric_car", lambda n, p: ElectricCar(n, p or "Tesla Model 3"))
    _drive(say, factory.create_vehicle("electric_car", "Tesla Model S"))
    _drive(say, factory.create_vehicle("car"))

    say("\nBuilding from order dictionaries:")
    for order in ({"type": "truck", "param": "40"}, {"type": "car", "colour": "red"}):
        try:
            _drive(say, factory.create_from_order(order))
        except CatalogError as exc:
            say(f"Error: {exc.message}")

    say("\nRejected requests:")
    for kind, param in (("spaceship", ""), ("truck", "heavy")):
        try:
            factory.create_vehicle(kind, param)
        except CatalogError as exc:
            say(f"Error: {exc.message}")

    say("\nUsing Simple Factory:")
    _drive(say, SimpleVehicleFactory.create_vehicle(narrator, VehicleType.CAR, "BMW X5"))
    _drive(say, SimpleVehicleFactory.create_vehicle(narrator, VehicleType.MOTORCYCLE, "Yamaha R1"))
    _drive(say, SimpleVehicleFactory.create_vehicle(narrator, VehicleType.TRUCK))


if __name__ == "__main__":
    sys.exit(run_standalone("factory"))
