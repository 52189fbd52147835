import pytest
from pydantic import ValidationError

from pattern_catalog.core import InvalidArgument
from pattern_catalog.creational.builder import (
    ComputerBuilder,
    ComputerDirector,
    GamingComputerBuilder,
    ModernComputerBuilder,
    OfficeComputerBuilder,
)


def test_chained_setters_produce_the_computer():
    computer = (
        ComputerBuilder()
        .set_cpu("Intel i7")
        .set_ram(16)
        .set_storage(512, "SSD")
        .add_peripheral("Mouse")
        .enable_wifi()
        .build()
    )
    assert computer.cpu == "Intel i7"
    assert computer.ram_gb == 16
    assert [str(s) for s in computer.storage] == ["512 GB SSD"]
    assert computer.peripherals == ["Mouse"]
    assert computer.wifi and not computer.bluetooth


def test_build_resets_the_builder():
    builder = GamingComputerBuilder()
    first = builder.build_high_end_gaming().build()
    assert first.gpu == "NVIDIA RTX 4090"
    with pytest.raises(InvalidArgument) as info:
        builder.build()
    assert info.value.message == (
        "Cannot build computer: CPU must not be empty; RAM must be greater than 0 GB"
    )


def test_failed_build_keeps_parts():
    builder = ComputerBuilder().set_cpu("Intel i3").set_ram(0)
    with pytest.raises(InvalidArgument) as info:
        builder.build()
    assert info.value.message == "Cannot build computer: RAM must be greater than 0 GB"
    assert builder.set_ram(8).build().cpu == "Intel i3"


def test_peripherals_are_not_shared_between_builds():
    builder = ComputerBuilder()
    first = builder.set_cpu("A").set_ram(4).add_peripheral("Keyboard").build()
    second = builder.set_cpu("B").set_ram(4).build()
    assert first.peripherals == ["Keyboard"]
    assert second.peripherals == []


def test_director_recipes():
    director = ComputerDirector()
    budget = director.build_budget_gaming(GamingComputerBuilder())
    workstation = director.build_workstation(OfficeComputerBuilder())
    assert budget.cpu == "AMD Ryzen 5 5600X"
    assert not budget.bluetooth
    assert workstation.ram_gb == 64
    assert workstation.operating_system == "Windows 11 Pro"


def test_office_recipe_specifications():
    lines = OfficeComputerBuilder().build_standard_office().build().specifications()
    assert lines[0] == "Computer Specifications:"
    assert "  Storage: 512 GB SSD" in lines
    assert "  OS: Windows 11 Pro" in lines
    assert lines[-1] == "  Peripherals: Standard Keyboard, Optical Mouse, 24-inch Monitor"


def test_specifications_skip_optional_parts():
    lines = ComputerBuilder().set_cpu("X").set_ram(2).build().specifications()
    assert not any(line.startswith("  OS:") for line in lines)
    assert not any(line.startswith("  Peripherals:") for line in lines)
    assert "  WiFi: Disabled" in lines


def test_modern_builder_accumulates_storage():
    computer = (
        ModernComputerBuilder().cpu("Ryzen").ram(32).storage(1000, "NVMe SSD").storage(4000, "HDD").build()
    )
    assert "  Storage: 1000 GB NVMe SSD + 4000 GB HDD" in computer.specifications()


def test_computer_is_immutable():
    computer = ComputerBuilder().set_cpu("X").set_ram(2).build()
    with pytest.raises(ValidationError):
        computer.cpu = "Y"
