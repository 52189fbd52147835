import random

import pytest

from pattern_catalog.core import NotFound
from pattern_catalog.creational.prototype import (
    Character,
    Enemy,
    GameObjectFactory,
    PrototypeRegistry,
    Weapon,
)


@pytest.fixture
def factory():
    return GameObjectFactory(random.Random(1234))


def test_clone_is_deep():
    sword = Weapon("Iron Sword", 20, "Sword")
    hero = Character("Hero", "Warrior", 1)
    hero.equip(sword)
    twin = hero.clone()
    twin.weapon.add_enchantment("Shadow")
    twin.add_skill("Dodge")
    assert sword.enchantments == []
    assert hero.skills == []
    assert twin.weapon is not hero.weapon


def test_registry_create_returns_copies():
    registry = PrototypeRegistry()
    registry.register("orc", Enemy("Orc", 80, 15, 8).add_ability("Rage"))
    copy = registry.create("orc")
    copy.add_ability("Intimidate")
    assert registry.create("orc").abilities == ["Rage"]
    assert registry.create("lich") is None


def test_registry_unregister(narrator):
    registry = PrototypeRegistry()
    registry.register("bow", Weapon("Bow", 10, "Bow"))
    registry.list_prototypes(narrator)
    assert narrator.lines == ["Registered prototypes:", "  bow (Weapon)"]
    assert isinstance(registry.unregister("bow"), Weapon)
    assert registry.keys() == []
    with pytest.raises(NotFound):
        registry.unregister("bow")


def test_enemy_jitter_stays_in_bounds(factory):
    for _ in range(20):
        goblin = factory.create_enemy("goblin")
        assert 25 <= goblin.health <= 35
        assert 3 <= goblin.attack <= 13
        assert goblin.abilities == ["Stealth"]


def test_jitter_is_reproducible():
    first = GameObjectFactory(random.Random(7)).create_enemy("dragon")
    second = GameObjectFactory(random.Random(7)).create_enemy("dragon")
    assert (first.health, first.attack, first.defense) == (second.health, second.attack, second.defense)


def test_typed_lookups_reject_wrong_kind(factory):
    assert factory.create_weapon("goblin") is None
    assert factory.create_enemy("iron_sword") is None
    assert factory.create_character("dragon", "Smaug") is None


def test_weapon_upgrade_leaves_prototype_alone(factory):
    staff = factory.create_weapon("magic_staff")
    staff.upgrade()
    assert staff.damage == 37
    assert staff.describe() == (
        "Weapon: Magic Staff (Staff) - Damage: 37 [UPGRADED] - Enchantments: Mana Boost, Spell Power"
    )
    assert factory.create_weapon("magic_staff").damage == 25


def test_character_describe(factory):
    mage = factory.create_character("mage", "Merlin")
    mage.level_up()
    mage.equip(factory.create_weapon("iron_sword"))
    assert mage.describe().splitlines() == [
        "Character: Merlin (Class: Mage, Level: 2)",
        "  Equipped: Weapon: Iron Sword (Sword) - Damage: 20",
        "  Skills: Fireball, Magic Shield",
    ]
