import pytest

from pattern_catalog.core import InvalidArgument
from pattern_catalog.creational.factory import (
    Car,
    ElectricCar,
    SimpleVehicleFactory,
    Truck,
    VehicleFactory,
    VehicleType,
)


class TestVehicleFactory:
    def test_builtin_types(self, narrator):
        factory = VehicleFactory(narrator)
        assert factory.available_types == ["car", "motorcycle", "truck"]
        assert factory.create_vehicle("car", "Toyota Camry").kind == "Car (Toyota Camry)"
        assert factory.create_vehicle("motorcycle").kind == "Motorcycle (Generic Bike)"
        assert factory.create_vehicle("truck", "25").kind == "Truck (25T)"
        assert factory.create_vehicle("truck").capacity == 10

    def test_vehicle_narrates_through_shared_narrator(self, narrator):
        car = VehicleFactory(narrator).create_vehicle("car", "Mini")
        car.start()
        car.stop()
        assert narrator.lines == ["Car Mini engine started with key ignition", "Car Mini engine stopped"]

    def test_register_creator_at_runtime(self, narrator):
        factory = VehicleFactory(narrator)
        factory.register_creator("electric_car", lambda n, p: ElectricCar(n, p or "Tesla Model 3"))
        vehicle = factory.create_vehicle("electric_car")
        assert isinstance(vehicle, ElectricCar)
        assert vehicle.kind == "Electric Car (Tesla Model 3)"
        assert "electric_car" in factory.available_types

    def test_register_replaces_existing_creator(self, narrator):
        factory = VehicleFactory(narrator)
        factory.register_creator("car", lambda n, p: ElectricCar(n, "Leaf"))
        assert factory.create_vehicle("car").kind == "Electric Car (Leaf)"

    def test_unknown_type_lists_available(self, narrator):
        with pytest.raises(InvalidArgument) as info:
            VehicleFactory(narrator).create_vehicle("spaceship")
        assert info.value.message == "Unknown vehicle type: spaceship"
        assert info.value.suggestions == ["Available types: car, motorcycle, truck"]

    @pytest.mark.parametrize("param", ["heavy", "0", "-4"])
    def test_bad_truck_capacity(self, narrator, param):
        with pytest.raises(InvalidArgument):
            VehicleFactory(narrator).create_vehicle("truck", param)

    def test_create_from_order(self, narrator):
        truck = VehicleFactory(narrator).create_from_order({"type": "truck", "param": "40"})
        assert isinstance(truck, Truck)
        assert truck.capacity == 40

    def test_malformed_order(self, narrator):
        with pytest.raises(InvalidArgument) as info:
            VehicleFactory(narrator).create_from_order({"type": "car", "colour": "red"})
        assert info.value.message == "Malformed vehicle order"
        assert any(s.startswith("colour") for s in info.value.suggestions)


class TestSimpleFactory:
    def test_defaults(self, narrator):
        assert SimpleVehicleFactory.create_vehicle(narrator, VehicleType.CAR).kind == "Car (Default Car)"
        assert (
            SimpleVehicleFactory.create_vehicle(narrator, VehicleType.MOTORCYCLE).kind
            == "Motorcycle (Default Bike)"
        )
        assert SimpleVehicleFactory.create_vehicle(narrator, VehicleType.TRUCK).capacity == 15

    def test_given_param(self, narrator):
        car = SimpleVehicleFactory.create_vehicle(narrator, VehicleType.CAR, "BMW X5")
        assert isinstance(car, Car)
        assert car.model == "BMW X5"

    def test_unknown_kind(self, narrator):
        with pytest.raises(InvalidArgument):
            SimpleVehicleFactory.create_vehicle(narrator, "boat")
