import random

import pytest

from pattern_catalog.structural.flyweight import (
    CharacterFactory,
    Document,
    Forest,
    ParticleFactory,
    ParticleSystem,
    TreeTypeFactory,
)
from pattern_catalog.core import InvalidArgument


class TestDocument:
    def test_glyphs_are_shared_per_character_and_font(self, narrator):
        factory = CharacterFactory(narrator)
        document = Document(factory, narrator)
        document.add_text("banana", "Arial")
        stats = document.stats()
        assert stats.flyweights == 3
        assert stats.contexts == 6
        assert document.characters[1].glyph is document.characters[3].glyph
        assert document.text == "banana"

    def test_font_is_part_of_the_key(self, narrator):
        factory = CharacterFactory(narrator)
        assert factory.get_glyph("a", "Arial") is not factory.get_glyph("a", "Times")
        assert len(factory) == 2
        assert "Reusing existing flyweight for 'a' (Arial)" not in narrator
        factory.get_glyph("a", "Arial")
        assert "Reusing existing flyweight for 'a' (Arial)" in narrator

    def test_layout_advances_after_existing_text(self, narrator):
        document = Document(CharacterFactory(narrator), narrator)
        document.add_text("ab", "Arial")
        document.add_text("c", "Arial")
        assert [c.x for c in document.characters] == [0, 10, 20]

    def test_extrinsic_state_is_per_context(self, narrator):
        document = Document(CharacterFactory(narrator), narrator)
        first = document.add_character("x", "Arial", 0, 0, 12, "red")
        second = document.add_character("x", "Arial", 5, 5, 20, "blue")
        second.move(50, 60)
        assert first.render() == "Rendering 'x' at (0,0) size=12 color=red font=Arial"
        assert second.render() == "Rendering 'x' at (50,60) size=20 color=blue font=Arial"


class TestParticles:
    def test_emission_reuses_types(self, narrator):
        system = ParticleSystem(ParticleFactory(narrator), narrator, random.Random(7))
        system.emit("Fire", 10, 0, 0)
        system.emit("Fire", 5, 1, 1)
        system.emit("Smoke", 4, 2, 2)
        stats = system.stats()
        assert stats.flyweights == 2
        assert stats.contexts == 19

    def test_dead_particles_are_dropped(self, narrator):
        system = ParticleSystem(ParticleFactory(narrator), narrator, random.Random(7))
        system.emit("Spark", 3, 0, 0)
        system.update(5.0)
        assert system.particles == []

    def test_unknown_type(self, narrator):
        with pytest.raises(InvalidArgument):
            ParticleFactory(narrator).get_type("Plasma")


class TestForest:
    def test_random_planting_is_seeded(self, narrator):
        first = Forest(TreeTypeFactory(narrator), narrator)
        second = Forest(TreeTypeFactory(narrator), narrator)
        first.plant_random(20, random.Random(3))
        second.plant_random(20, random.Random(3))
        assert first.species_count() == second.species_count()
        assert sum(first.species_count().values()) == 20
        assert len(first.factory) <= 3

    def test_unknown_species(self, narrator):
        with pytest.raises(InvalidArgument):
            Forest(TreeTypeFactory(narrator), narrator).plant_tree("Palm", 0, 0, 1)
