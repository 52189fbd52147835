r"""Flyweight.

Intrinsic state lives in small immutable objects that a factory hands
out and shares; extrinsic state stays with each context and is passed in
on every call. The factories report how many flyweights exist against how
many contexts reference them, which is the whole point of the pattern.

\dot
digraph Flyweight {
    rankdir=LR;
    node [shape=rectangle];
    "TextCharacter (x, y, size, color)" -> "CharacterGlyph ('l', Arial)";
    "TextCharacter (x', y', size', color')" -> "CharacterGlyph ('l', Arial)";
}
\enddot
"""

from __future__ import annotations

import logging
import random
import sys
from collections import Counter
from typing import Dict, List, MutableMapping, Tuple

from pydantic import BaseModel, ConfigDict

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, InvalidArgument, Narrator
from ..mixin import MappingMutatorMixin

__all__ = [
    "FlyweightStats",
    "CharacterGlyph",
    "CharacterFactory",
    "TextCharacter",
    "Document",
    "ParticleType",
    "ParticleFactory",
    "Particle",
    "ParticleSystem",
    "TreeType",
    "TreeTypeFactory",
    "Tree",
    "Forest",
]

logger = logging.getLogger(__name__)


class FlyweightStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    flyweights: int
    contexts: int


# -----------------------------------------------------------------------------
# Text Document
# -----------------------------------------------------------------------------


class CharacterGlyph(BaseModel):
    """Intrinsic state of one character in one font."""

    model_config = ConfigDict(frozen=True)

    character: str
    font: str

    def render(self, x: int, y: int, size: int, color: str) -> str:
        return f"Rendering '{self.character}' at ({x},{y}) size={size} color={color} font={self.font}"


class CharacterFactory(MappingMutatorMixin[Tuple[str, str], CharacterGlyph]):
    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._glyphs: Dict[Tuple[str, str], CharacterGlyph] = {}

    def _get_mapping(self) -> MutableMapping[Tuple[str, str], CharacterGlyph]:
        return self._glyphs

    def get_glyph(self, character: str, font: str) -> CharacterGlyph:
        key = (character, font)
        if self._has_identifier(key):
            self.narrator.say(f"Reusing existing flyweight for '{character}' ({font})")
            return self._get_artifact(key)
        self.narrator.say(f"Creating new flyweight for '{character}' ({font})")
        glyph = CharacterGlyph(character=character, font=font)
        self._set_artifact(key, glyph)
        return glyph

    def __len__(self) -> int:
        return self._len_mapping()

    def list_glyphs(self) -> None:
        self.narrator.say(f"Total flyweights created: {len(self)}")
        for character, font in sorted(self._iter_mapping()):
            self.narrator.say(f"  {character}_{font}")


class TextCharacter:
    """Context: a shared glyph plus its own position, size and color."""

    def __init__(self, glyph: CharacterGlyph, x: int, y: int, size: int, color: str):
        self.glyph = glyph
        self.x, self.y = x, y
        self.size = size
        self.color = color

    def render(self) -> str:
        return self.glyph.render(self.x, self.y, self.size, self.color)

    def move(self, x: int, y: int) -> None:
        self.x, self.y = x, y

    @property
    def character(self) -> str:
        return self.glyph.character


class Document:
    ADVANCE = 10

    def __init__(self, factory: CharacterFactory, narrator: Narrator):
        self.factory = factory
        self.narrator = narrator
        self.characters: List[TextCharacter] = []

    def add_character(self, character: str, font: str, x: int, y: int, size: int, color: str) -> TextCharacter:
        context = TextCharacter(self.factory.get_glyph(character, font), x, y, size, color)
        self.characters.append(context)
        return context

    def add_text(self, text: str, font: str, y: int = 10, size: int = 12, color: str = "black") -> None:
        """Lay `text` out on one line after the characters already placed."""
        start = len(self.characters) * self.ADVANCE
        for offset, character in enumerate(text):
            self.add_character(character, font, start + offset * self.ADVANCE, y, size, color)

    @property
    def text(self) -> str:
        return "".join(c.character for c in self.characters)

    def render(self, limit: int = 0) -> None:
        shown = self.characters[:limit] if limit else self.characters
        self.narrator.say(f"\nRendering document with {len(self.characters)} characters:")
        for character in shown:
            self.narrator.say(character.render())

    def stats(self) -> FlyweightStats:
        return FlyweightStats(flyweights=len(self.factory), contexts=len(self.characters))


# -----------------------------------------------------------------------------
# Particle System
# -----------------------------------------------------------------------------


class ParticleType(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: str
    icon: str

    def render(self, x: float, y: float, vx: float, vy: float, life: float) -> str:
        return (
            f"{self.icon} {self.kind} particle at ({x:.2f},{y:.2f}) "
            f"vel=({vx:.2f},{vy:.2f}) life={life:.2f}"
        )


class ParticleFactory(MappingMutatorMixin[str, ParticleType]):
    ICONS = {"Fire": "🔥", "Smoke": "💨", "Spark": "✨"}

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._types: Dict[str, ParticleType] = {}

    def _get_mapping(self) -> MutableMapping[str, ParticleType]:
        return self._types

    def get_type(self, kind: str) -> ParticleType:
        if self._has_identifier(kind):
            return self._get_artifact(kind)
        if kind not in self.ICONS:
            raise InvalidArgument(
                f"Unknown particle type: {kind}",
                [f"Known particle types: {', '.join(self.ICONS)}"],
                {"participant": "ParticleFactory", "operation": "get_type"},
            )
        particle_type = ParticleType(kind=kind, icon=self.ICONS[kind])
        self._set_artifact(kind, particle_type)
        self.narrator.say(f"Created new {kind} particle flyweight")
        return particle_type

    def __len__(self) -> int:
        return self._len_mapping()


class Particle:
    def __init__(self, kind: ParticleType, x: float, y: float, vx: float, vy: float, life: float):
        self.kind = kind
        self.x, self.y = x, y
        self.vx, self.vy = vx, vy
        self.life = life

    def update(self, dt: float) -> str:
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.life -= dt
        return self.kind.render(self.x, self.y, self.vx, self.vy, self.life)

    @property
    def alive(self) -> bool:
        return self.life > 0


class ParticleSystem:
    def __init__(self, factory: ParticleFactory, narrator: Narrator, rng: random.Random):
        self.factory = factory
        self.narrator = narrator
        self.rng = rng
        self.particles: List[Particle] = []

    def emit(self, kind: str, count: int, x: float, y: float) -> None:
        particle_type = self.factory.get_type(kind)
        for _ in range(count):
            self.particles.append(
                Particle(
                    particle_type,
                    x,
                    y,
                    self.rng.uniform(-5.0, 5.0),
                    self.rng.uniform(-5.0, 5.0),
                    self.rng.uniform(1.0, 3.0),
                )
            )

    def update(self, dt: float) -> None:
        """Advance every particle by `dt` seconds and drop the dead ones."""
        self.narrator.say(f"\nUpdating {len(self.particles)} particles:")
        for particle in self.particles:
            self.narrator.say(particle.update(dt))
        self.particles = [p for p in self.particles if p.alive]

    def stats(self) -> FlyweightStats:
        return FlyweightStats(flyweights=len(self.factory), contexts=len(self.particles))


# -----------------------------------------------------------------------------
# Forest
# -----------------------------------------------------------------------------


class TreeType(BaseModel):
    model_config = ConfigDict(frozen=True)

    species: str
    icon: str

    def render(self, x: float, y: float, scale: float, season: str) -> str:
        return f"{self.icon} {self.species} tree at ({x:.1f},{y:.1f}) scale={scale:.2f} season={season}"


class TreeTypeFactory(MappingMutatorMixin[str, TreeType]):
    ICONS = {"Oak": "🌳", "Pine": "🌲", "Birch": "🌿"}

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self._types: Dict[str, TreeType] = {}

    def _get_mapping(self) -> MutableMapping[str, TreeType]:
        return self._types

    def get_type(self, species: str) -> TreeType:
        if self._has_identifier(species):
            return self._get_artifact(species)
        if species not in self.ICONS:
            raise InvalidArgument(
                f"Unknown tree species: {species}",
                [f"Known species: {', '.join(self.ICONS)}"],
                {"participant": "TreeTypeFactory", "operation": "get_type"},
            )
        tree_type = TreeType(species=species, icon=self.ICONS[species])
        self._set_artifact(species, tree_type)
        self.narrator.say(f"Created new {species} tree type flyweight")
        return tree_type

    def __len__(self) -> int:
        return self._len_mapping()


class Tree:
    def __init__(self, kind: TreeType, x: float, y: float, scale: float):
        self.kind = kind
        self.x, self.y = x, y
        self.scale = scale

    def render(self, season: str) -> str:
        return self.kind.render(self.x, self.y, self.scale, season)


class Forest:
    def __init__(self, factory: TreeTypeFactory, narrator: Narrator):
        self.factory = factory
        self.narrator = narrator
        self.trees: List[Tree] = []

    def plant_tree(self, species: str, x: float, y: float, scale: float) -> Tree:
        tree = Tree(self.factory.get_type(species), x, y, scale)
        self.trees.append(tree)
        return tree

    def plant_random(self, count: int, rng: random.Random) -> None:
        species = sorted(self.factory.ICONS)
        for _ in range(count):
            self.plant_tree(rng.choice(species), rng.uniform(0, 100), rng.uniform(0, 100), rng.uniform(0.5, 2.0))

    def render(self, season: str) -> None:
        self.narrator.say(f"\nRendering forest in {season} with {len(self.trees)} trees:")
        for tree in self.trees:
            self.narrator.say(tree.render(season))

    def species_count(self) -> Dict[str, int]:
        return dict(Counter(tree.kind.species for tree in self.trees))

    def show_statistics(self) -> None:
        say = self.narrator.say
        say("\nForest Statistics:")
        say(f"Total trees: {len(self.trees)}")
        say(f"Tree types (flyweights): {len(self.factory)}")
        say("Species distribution:")
        for species, count in sorted(self.species_count().items()):
            say(f"  {species}: {count} trees")

    def stats(self) -> FlyweightStats:
        return FlyweightStats(flyweights=len(self.factory), contexts=len(self.trees))


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("flyweight", "Flyweight Pattern", "structural", "Shared glyphs, particles and tree types")
def demo(ctx: DemoContext) -> None:
    say, narrator, rng = ctx.say, ctx.narrator, ctx.rng
    say("=== Flyweight Pattern Demo ===")

    say("\n1. Text Document System:")
    say("=" * 50)
    glyphs = CharacterFactory(narrator)
    document = Document(glyphs, narrator)
    fonts = ["Arial", "Times", "Courier"]
    colors = ["red", "blue", "green", "black"]
    for index, character in enumerate("Hello World!"):
        document.add_character(
            character, rng.choice(fonts), index * Document.ADVANCE, 10, rng.randint(12, 24), rng.choice(colors)
        )
    say(f"\nDocument created with {len(document.characters)} characters")
    glyphs.list_glyphs()
    document.render(limit=5)

    say("\nAppending 'lol' in Arial:")
    document.add_text("lol", "Arial")
    stats = document.stats()
    say(f"Document text: {document.text}")
    say(f"{stats.flyweights} flyweights shared by {stats.contexts} characters")

    say("\n\n2. Game Particle System:")
    say("=" * 50)
    particles = ParticleSystem(ParticleFactory(narrator), narrator, rng)
    particles.emit("Fire", 3, 100.0, 50.0)
    particles.emit("Smoke", 2, 110.0, 60.0)
    particles.emit("Spark", 4, 90.0, 40.0)
    particles.emit("Fire", 2, 105.0, 55.0)
    stats = particles.stats()
    say(f"\nParticle system created with {stats.contexts} particles using {stats.flyweights} flyweights")
    particles.update(0.5)
    particles.update(1.5)
    say(f"\n{len(particles.particles)} particles still alive")

    say("\n\n3. Forest Simulation:")
    say("=" * 50)
    forest = Forest(TreeTypeFactory(narrator), narrator)
    forest.plant_random(20, rng)
    forest.show_statistics()
    forest.render("Spring")

    say("\n\n4. Memory Efficiency Demonstration:")
    say("=" * 50)
    doc_stats = document.stats()
    say("Without Flyweight Pattern:")
    say("- Each character object would store font family, character, position, size, color")
    say(f"- For {doc_stats.contexts} characters: ~{doc_stats.contexts * 50} bytes (estimated)")
    say("\nWith Flyweight Pattern:")
    say(f"- Character flyweights: {doc_stats.flyweights} objects")
    say(f"- Context objects: {doc_stats.contexts} objects")
    say("\nSame principle applies to:")
    say(f"- Particle system: {stats.flyweights} flyweights for {stats.contexts} particles")
    forest_stats = forest.stats()
    say(f"- Forest simulation: {forest_stats.flyweights} tree types for {forest_stats.contexts} trees")


if __name__ == "__main__":
    sys.exit(run_standalone("flyweight"))
