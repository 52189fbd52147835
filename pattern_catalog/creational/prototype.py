r"""Prototype.

New objects are made by cloning registered exemplars rather than by
calling constructors. `clone()` is a deep copy, so lists of abilities or
enchantments and an equipped weapon are never shared between a prototype
and its copies.

`PrototypeRegistry.create(key)` returns ``None`` on a miss; the game
factory adds per-copy stat jitter drawn from the run's seeded RNG.
"""

from __future__ import annotations

import copy
import logging
import random
import sys
from abc import ABC, abstractmethod
from typing import Dict, List, MutableMapping, Optional, Type, TypeVar

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator
from ..mixin import MappingMutatorMixin

__all__ = [
    "Prototype",
    "Enemy",
    "Weapon",
    "Character",
    "PrototypeRegistry",
    "GameObjectFactory",
]

logger = logging.getLogger(__name__)

P = TypeVar("P", bound="Prototype")


class Prototype(ABC):
    kind = ""

    def clone(self: P) -> P:
        return copy.deepcopy(self)

    @abstractmethod
    def describe(self) -> str: ...


# -----------------------------------------------------------------------------
# Concrete Prototypes
# -----------------------------------------------------------------------------


class Enemy(Prototype):
    kind = "Enemy"

    def __init__(self, name: str, health: int, attack: int, defense: int):
        self.name = name
        self.health = health
        self.attack = attack
        self.defense = defense
        self.abilities: List[str] = []

    def add_ability(self, ability: str) -> "Enemy":
        self.abilities.append(ability)
        return self

    def modify_stats(self, health: int, attack: int, defense: int) -> None:
        self.health += health
        self.attack += attack
        self.defense += defense

    def describe(self) -> str:
        text = f"Enemy: {self.name} (HP: {self.health}, ATK: {self.attack}, DEF: {self.defense})"
        if self.abilities:
            text += f" - Abilities: {', '.join(self.abilities)}"
        return text


class Weapon(Prototype):
    kind = "Weapon"
    UPGRADE_FACTOR = 1.5

    def __init__(self, name: str, damage: int, weapon_type: str):
        self.name = name
        self.damage = damage
        self.weapon_type = weapon_type
        self.enchantments: List[str] = []
        self.upgraded = False

    def add_enchantment(self, enchantment: str) -> "Weapon":
        self.enchantments.append(enchantment)
        return self

    def upgrade(self) -> None:
        self.upgraded = True
        self.damage = int(self.damage * self.UPGRADE_FACTOR)

    def describe(self) -> str:
        text = f"Weapon: {self.name} ({self.weapon_type}) - Damage: {self.damage}"
        if self.upgraded:
            text += " [UPGRADED]"
        if self.enchantments:
            text += f" - Enchantments: {', '.join(self.enchantments)}"
        return text


class Character(Prototype):
    kind = "Character"

    def __init__(self, name: str, character_class: str, level: int):
        self.name = name
        self.character_class = character_class
        self.level = level
        self.weapon: Optional[Weapon] = None
        self.skills: List[str] = []

    def equip(self, weapon: Weapon) -> None:
        self.weapon = weapon

    def add_skill(self, skill: str) -> "Character":
        self.skills.append(skill)
        return self

    def level_up(self) -> None:
        self.level += 1

    def describe(self) -> str:
        lines = [f"Character: {self.name} (Class: {self.character_class}, Level: {self.level})"]
        if self.weapon is not None:
            lines.append(f"  Equipped: {self.weapon.describe()}")
        if self.skills:
            lines.append(f"  Skills: {', '.join(self.skills)}")
        return "\n".join(lines)


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------


class PrototypeRegistry(MappingMutatorMixin[str, Prototype]):
    def __init__(self):
        self._prototypes: Dict[str, Prototype] = {}

    def _get_mapping(self) -> MutableMapping[str, Prototype]:
        return self._prototypes

    def register(self, key: str, prototype: Prototype) -> None:
        self._put_artifact(key, prototype)

    def unregister(self, key: str) -> Prototype:
        return self._del_artifact(key)

    def create(self, key: str) -> Optional[Prototype]:
        if not self._has_identifier(key):
            logger.debug("no prototype registered under %s", key)
            return None
        return self._get_artifact(key).clone()

    def create_as(self, key: str, kind: Type[P]) -> Optional[P]:
        """Clone `key` only when the prototype is a `kind`."""
        clone = self.create(key)
        return clone if isinstance(clone, kind) else None

    def keys(self) -> List[str]:
        return list(self._iter_mapping())

    def list_prototypes(self, narrator: Narrator) -> None:
        narrator.say("Registered prototypes:")
        for key in self._iter_mapping():
            narrator.say(f"  {key} ({self._get_artifact(key).kind})")


class GameObjectFactory:
    JITTER = 5

    def __init__(self, rng: random.Random):
        self.rng = rng
        self.registry = PrototypeRegistry()
        self._initialize()

    def _initialize(self) -> None:
        register = self.registry.register
        register("goblin", Enemy("Goblin", 30, 8, 3).add_ability("Stealth"))
        register("orc", Enemy("Orc", 80, 15, 8).add_ability("Rage").add_ability("Intimidate"))
        register(
            "dragon",
            Enemy("Dragon", 500, 50, 25)
            .add_ability("Fire Breath")
            .add_ability("Flight")
            .add_ability("Magic Resistance"),
        )
        register("iron_sword", Weapon("Iron Sword", 20, "Sword"))
        register("elven_bow", Weapon("Elven Bow", 18, "Bow").add_enchantment("Precision"))
        register(
            "magic_staff",
            Weapon("Magic Staff", 25, "Staff").add_enchantment("Mana Boost").add_enchantment("Spell Power"),
        )
        register("warrior", Character("Template Warrior", "Warrior", 1).add_skill("Sword Mastery").add_skill("Shield Block"))
        register("mage", Character("Template Mage", "Mage", 1).add_skill("Fireball").add_skill("Magic Shield"))

    def _jitter(self) -> int:
        return self.rng.randint(-self.JITTER, self.JITTER)

    def create_enemy(self, key: str) -> Optional[Enemy]:
        enemy = self.registry.create_as(key, Enemy)
        if enemy is not None:
            enemy.modify_stats(self._jitter(), self._jitter(), self._jitter())
        return enemy

    def create_weapon(self, key: str) -> Optional[Weapon]:
        return self.registry.create_as(key, Weapon)

    def create_character(self, key: str, name: str) -> Optional[Character]:
        character = self.registry.create_as(key, Character)
        if character is not None:
            character.name = name
        return character


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("prototype", "Prototype Pattern", "creational", "Cloning enemies, weapons and characters")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Prototype Pattern Demo ===")

    factory = GameObjectFactory(ctx.rng)
    say("\nAvailable prototypes:")
    factory.registry.list_prototypes(narrator)

    say("\n" + "=" * 50)
    say("Creating enemies using prototypes:")
    enemies: List[Enemy] = []
    for key, count, label in (("goblin", 3, "Goblin #{}"), ("orc", 2, "Orc Warrior #{}"), ("dragon", 1, "Ancient Red Dragon")):
        for number in range(1, count + 1):
            enemy = factory.create_enemy(key)
            if enemy is not None:
                enemy.name = label.format(number)
                enemies.append(enemy)
    say("\nGenerated enemies:")
    for enemy in enemies:
        say(enemy.describe())

    say("\n" + "=" * 50)
    say("Creating weapons using prototypes:")
    sword1 = factory.create_weapon("iron_sword")
    sword2 = factory.create_weapon("iron_sword")
    if sword1 is not None and sword2 is not None:
        sword1.name = "Knight's Sword"
        sword2.name = "Rusty Sword"
        sword2.add_enchantment("Poison")
        say("Original and modified swords:")
        say(sword1.describe())
        say(sword2.describe())
    staff = factory.create_weapon("magic_staff")
    if staff is not None:
        staff.upgrade()
        staff.name = "Archmage's Staff"
        say("\nUpgraded staff:")
        say(staff.describe())
    say("\nPrototype after all that:")
    say(factory.create_weapon("magic_staff").describe())

    say("\n" + "=" * 50)
    say("Creating characters using prototypes:")
    warrior = factory.create_character("warrior", "Sir Galahad")
    if warrior is not None:
        excalibur = factory.create_weapon("iron_sword")
        excalibur.name = "Excalibur"
        excalibur.add_enchantment("Holy Strike")
        warrior.equip(excalibur)
        warrior.level_up()
        warrior.add_skill("Battle Cry")
        say("\nCustomized warrior:")
        say(warrior.describe())

    mage = factory.create_character("mage", "Merlin")
    if mage is not None:
        staff_copy = factory.create_weapon("magic_staff")
        staff_copy.name = "Staff of Wisdom"
        mage.equip(staff_copy)
        mage.level_up()
        mage.level_up()
        mage.add_skill("Teleport")
        mage.add_skill("Lightning Bolt")
        say("\nCustomized mage:")
        say(mage.describe())

        twin = mage.clone()
        twin.name = "Merlin's Twin"
        twin.weapon.add_enchantment("Shadow")
        say("\nCloned mage with its own weapon copy:")
        say(twin.describe())
        say(f"Original mage weapon untouched: {mage.weapon.describe()}")

    say("\nLooking up an unknown prototype:")
    say(f"create('lich') -> {factory.registry.create('lich')}")
    say(f"create_weapon('goblin') -> {factory.create_weapon('goblin')}")


if __name__ == "__main__":
    sys.exit(run_standalone("prototype"))
