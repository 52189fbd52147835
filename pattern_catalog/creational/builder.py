r"""Builder.

Step-by-step construction of a `Computer`. Builders collect parts through
chained setters and `build()` validates the result with pydantic, hands
it over, and resets the builder for the next machine. A director encodes
reusable recipes on top of any builder.

Validation:
  - the CPU must be non-empty
  - RAM must be positive

Both failures surface as `InvalidArgument` and leave the builder's parts
in place so the caller can fix them.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from typing_extensions import Self

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, InvalidArgument

__all__ = [
    "StorageDevice",
    "Computer",
    "ComputerBuilder",
    "GamingComputerBuilder",
    "OfficeComputerBuilder",
    "ComputerDirector",
    "ModernComputerBuilder",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Product
# -----------------------------------------------------------------------------


class StorageDevice(BaseModel):
    model_config = ConfigDict(frozen=True)

    size_gb: int = Field(gt=0)
    kind: str

    def __str__(self) -> str:
        return f"{self.size_gb} GB {self.kind}"


class Computer(BaseModel):
    model_config = ConfigDict(frozen=True)

    cpu: str
    gpu: str = ""
    ram_gb: int
    storage: List[StorageDevice] = Field(default_factory=list)
    motherboard: str = ""
    power_supply: str = ""
    peripherals: List[str] = Field(default_factory=list)
    operating_system: Optional[str] = None
    wifi: bool = False
    bluetooth: bool = False

    @field_validator("cpu")
    @classmethod
    def _cpu_present(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("CPU must not be empty")
        return value

    @field_validator("ram_gb")
    @classmethod
    def _ram_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("RAM must be greater than 0 GB")
        return value

    def specifications(self) -> List[str]:
        def on_off(flag: bool) -> str:
            return "Enabled" if flag else "Disabled"

        lines = [
            "Computer Specifications:",
            f"  CPU: {self.cpu}",
            f"  GPU: {self.gpu}",
            f"  RAM: {self.ram_gb} GB",
            f"  Storage: {' + '.join(str(s) for s in self.storage)}",
            f"  Motherboard: {self.motherboard}",
            f"  Power Supply: {self.power_supply}",
        ]
        if self.operating_system is not None:
            lines.append(f"  OS: {self.operating_system}")
        lines.append(f"  WiFi: {on_off(self.wifi)}")
        lines.append(f"  Bluetooth: {on_off(self.bluetooth)}")
        if self.peripherals:
            lines.append(f"  Peripherals: {', '.join(self.peripherals)}")
        return lines


def _validated(parts: Dict[str, Any], operation: str) -> Computer:
    try:
        return Computer.model_validate(parts)
    except PydanticValidationError as exc:
        raise InvalidArgument(
            "Cannot build computer: " + "; ".join(e["msg"].removeprefix("Value error, ") for e in exc.errors()),
            ["Set a CPU and a positive amount of RAM before building"],
            {"participant": "ComputerBuilder", "operation": operation},
        ) from exc


# -----------------------------------------------------------------------------
# Classic Builders
# -----------------------------------------------------------------------------


class ComputerBuilder:
    """Collects parts; `build()` validates, returns the computer and resets."""

    def __init__(self):
        self._parts: Dict[str, Any] = {}
        self.reset()

    def reset(self) -> Self:
        self._parts = {"cpu": "", "ram_gb": 0, "storage": [], "peripherals": []}
        return self

    def set_cpu(self, cpu: str) -> Self:
        self._parts["cpu"] = cpu
        return self

    def set_gpu(self, gpu: str) -> Self:
        self._parts["gpu"] = gpu
        return self

    def set_ram(self, gb: int) -> Self:
        self._parts["ram_gb"] = gb
        return self

    def set_storage(self, gb: int, kind: str) -> Self:
        self._parts["storage"] = [StorageDevice(size_gb=gb, kind=kind)]
        return self

    def set_motherboard(self, motherboard: str) -> Self:
        self._parts["motherboard"] = motherboard
        return self

    def set_power_supply(self, power_supply: str) -> Self:
        self._parts["power_supply"] = power_supply
        return self

    def add_peripheral(self, peripheral: str) -> Self:
        self._parts["peripherals"].append(peripheral)
        return self

    def set_operating_system(self, name: str) -> Self:
        self._parts["operating_system"] = name
        return self

    def enable_wifi(self, enable: bool = True) -> Self:
        self._parts["wifi"] = enable
        return self

    def enable_bluetooth(self, enable: bool = True) -> Self:
        self._parts["bluetooth"] = enable
        return self

    def build(self) -> Computer:
        computer = _validated(self._parts, "build")
        self.reset()
        return computer


class GamingComputerBuilder(ComputerBuilder):
    def build_high_end_gaming(self) -> Self:
        return (
            self.set_cpu("Intel i9-13900K")
            .set_gpu("NVIDIA RTX 4090")
            .set_ram(32)
            .set_storage(2000, "NVMe SSD")
            .set_motherboard("ASUS ROG Maximus Z790")
            .set_power_supply("850W 80+ Gold")
            .add_peripheral("Gaming Keyboard")
            .add_peripheral("Gaming Mouse")
            .add_peripheral("144Hz Monitor")
            .set_operating_system("Windows 11")
            .enable_wifi()
            .enable_bluetooth()
        )


class OfficeComputerBuilder(ComputerBuilder):
    def build_standard_office(self) -> Self:
        return (
            self.set_cpu("Intel i5-12400")
            .set_gpu("Integrated Graphics")
            .set_ram(16)
            .set_storage(512, "SSD")
            .set_motherboard("Standard ATX")
            .set_power_supply("500W 80+ Bronze")
            .add_peripheral("Standard Keyboard")
            .add_peripheral("Optical Mouse")
            .add_peripheral("24-inch Monitor")
            .set_operating_system("Windows 11 Pro")
            .enable_wifi()
            .enable_bluetooth()
        )


class ComputerDirector:
    def build_budget_gaming(self, builder: ComputerBuilder) -> Computer:
        return (
            builder.reset()
            .set_cpu("AMD Ryzen 5 5600X")
            .set_gpu("NVIDIA RTX 3060")
            .set_ram(16)
            .set_storage(1000, "NVMe SSD")
            .set_motherboard("MSI B550M Pro")
            .set_power_supply("650W 80+ Bronze")
            .add_peripheral("Gaming Keyboard")
            .add_peripheral("Gaming Mouse")
            .set_operating_system("Windows 11")
            .enable_wifi()
            .build()
        )

    def build_workstation(self, builder: ComputerBuilder) -> Computer:
        return (
            builder.reset()
            .set_cpu("Intel Xeon W-2295")
            .set_gpu("NVIDIA Quadro RTX 4000")
            .set_ram(64)
            .set_storage(2000, "NVMe SSD")
            .set_motherboard("Workstation Motherboard")
            .set_power_supply("1000W 80+ Platinum")
            .add_peripheral("Professional Keyboard")
            .add_peripheral("Precision Mouse")
            .add_peripheral("4K Monitor")
            .set_operating_system("Windows 11 Pro")
            .enable_wifi()
            .enable_bluetooth()
            .build()
        )


# -----------------------------------------------------------------------------
# Fluent Builder
# -----------------------------------------------------------------------------


class ModernComputerBuilder:
    """Short fluent names; `storage()` may be called once per drive."""

    def __init__(self):
        self._parts: Dict[str, Any] = {}
        self._reset()

    def _reset(self) -> None:
        self._parts = {"cpu": "", "ram_gb": 0, "storage": [], "peripherals": []}

    def cpu(self, cpu: str) -> Self:
        self._parts["cpu"] = cpu
        return self

    def gpu(self, gpu: str) -> Self:
        self._parts["gpu"] = gpu
        return self

    def ram(self, gb: int) -> Self:
        self._parts["ram_gb"] = gb
        return self

    def storage(self, gb: int, kind: str = "SSD") -> Self:
        self._parts["storage"].append(StorageDevice(size_gb=gb, kind=kind))
        return self

    def motherboard(self, motherboard: str) -> Self:
        self._parts["motherboard"] = motherboard
        return self

    def power_supply(self, power_supply: str) -> Self:
        self._parts["power_supply"] = power_supply
        return self

    def peripheral(self, peripheral: str) -> Self:
        self._parts["peripherals"].append(peripheral)
        return self

    def os(self, name: str) -> Self:
        self._parts["operating_system"] = name
        return self

    def wifi(self, enable: bool = True) -> Self:
        self._parts["wifi"] = enable
        return self

    def bluetooth(self, enable: bool = True) -> Self:
        self._parts["bluetooth"] = enable
        return self

    def build(self) -> Computer:
        computer = _validated(self._parts, "build")
        self._reset()
        return computer


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("builder", "Builder Pattern", "creational", "Computer builders, director and fluent builder")
def demo(ctx: DemoContext) -> None:
    say = ctx.say
    say("=== Builder Pattern Demo ===")

    def show(computer: Computer) -> None:
        for line in computer.specifications():
            say(line)

    say("\n1. Gaming Computer (High-End):")
    say("-" * 40)
    gaming = GamingComputerBuilder()
    show(gaming.build_high_end_gaming().build())

    director = ComputerDirector()
    say("\n2. Budget Gaming Computer (using Director):")
    say("-" * 40)
    show(director.build_budget_gaming(GamingComputerBuilder()))

    say("\n3. Office Computer:")
    say("-" * 40)
    show(OfficeComputerBuilder().build_standard_office().build())

    say("\n4. Workstation (using Director):")
    say("-" * 40)
    show(director.build_workstation(OfficeComputerBuilder()))

    say("\n5. Custom Computer (Modern Builder):")
    say("-" * 40)
    show(
        ModernComputerBuilder()
        .cpu("AMD Ryzen 9 7950X")
        .gpu("NVIDIA RTX 4080")
        .ram(32)
        .storage(1000, "NVMe SSD")
        .storage(4000, "HDD")
        .motherboard("ASUS X670E")
        .power_supply("750W 80+ Gold")
        .peripheral("Mechanical Keyboard")
        .peripheral("Wireless Mouse")
        .peripheral("Ultrawide Monitor")
        .peripheral("Webcam")
        .os("Linux Ubuntu 22.04")
        .wifi()
        .bluetooth()
        .build()
    )

    say("\n6. Validation:")
    say("-" * 40)
    say("Building right after a build (builder was reset):")
    try:
        gaming.build()
    except CatalogError as exc:
        say(f"Error: {exc.message}")
    say("Building with 0 GB RAM:")
    try:
        ModernComputerBuilder().cpu("Intel i3-12100").ram(0).build()
    except CatalogError as exc:
        say(f"Error: {exc.message}")


if __name__ == "__main__":
    sys.exit(run_standalone("builder"))
