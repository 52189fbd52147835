r"""Template Method.

A base class fixes the order of the steps in `process`, `play` or `cook`;
subclasses fill in the abstract steps and may override the hooks. Hooks
have a default so subclasses only override what differs.
"""

from __future__ import annotations

import json
import logging
import random
import sys
from abc import ABC, abstractmethod
from typing import List, Optional

from ..catalog import register_demo, run_standalone
from ..core import DemoContext, Narrator

__all__ = [
    "DataProcessor",
    "CSVDataProcessor",
    "JSONDataProcessor",
    "GameLevel",
    "TutorialLevel",
    "BossLevel",
    "Recipe",
    "PastaRecipe",
    "SteakRecipe",
]

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Data Processing
# -----------------------------------------------------------------------------


class DataProcessor(ABC):
    processor_type = "Data Processor"

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.saved = False

    def process(self) -> bool:
        """Run the fixed pipeline; returns whether the data was saved."""
        say = self.narrator.say
        say("Starting data processing...")
        self.load()
        if self.validate():
            self.transform()
            if self.has_additional_processing():
                self.perform_additional_processing()
            self.save()
            self.saved = True
        else:
            say("Data validation failed!")
            self.handle_validation_error()
        self.cleanup()
        say("Data processing completed.\n")
        return self.saved

    @abstractmethod
    def load(self) -> None: ...

    @abstractmethod
    def validate(self) -> bool: ...

    @abstractmethod
    def transform(self) -> None: ...

    @abstractmethod
    def save(self) -> None: ...

    # hooks

    def has_additional_processing(self) -> bool:
        return False

    def perform_additional_processing(self) -> None:
        self.narrator.say("No additional processing needed")

    def handle_validation_error(self) -> None:
        self.narrator.say("Default validation error handling")

    def cleanup(self) -> None:
        self.narrator.say("Performing default cleanup")


class CSVDataProcessor(DataProcessor):
    processor_type = "CSV Data Processor"

    SAMPLE = ["header1,header2,header3", "value1,value2,value3", "value4,value5,value6"]

    def __init__(self, filename: str, narrator: Narrator, rows: Optional[List[str]] = None):
        super().__init__(narrator)
        self.filename = filename
        self._source = list(self.SAMPLE if rows is None else rows)
        self.rows: List[str] = []

    def load(self) -> None:
        self.narrator.say(f"Loading CSV data from: {self.filename}")
        self.rows = list(self._source)
        self.narrator.pause(500)
        self.narrator.say(f"Loaded {len(self.rows)} rows")

    def validate(self) -> bool:
        self.narrator.say("Validating CSV data...")
        if not self.rows:
            self.narrator.say("No data to validate")
            return False
        columns = self.rows[0].count(",") + 1
        for index, row in enumerate(self.rows[1:], start=1):
            if row.count(",") + 1 != columns:
                self.narrator.say(f"Row {index} has inconsistent number of columns")
                return False
        self.narrator.say("CSV data validation successful")
        return True

    def transform(self) -> None:
        self.narrator.say("Transforming CSV data...")
        self.rows = [row.upper() for row in self.rows]
        self.narrator.say("CSV transformation completed")

    def has_additional_processing(self) -> bool:
        return True

    def perform_additional_processing(self) -> None:
        self.narrator.say("Performing CSV-specific formatting...")
        for row in self.rows:
            self.narrator.say(f'  Formatted: "{row}"')

    def save(self) -> None:
        target = self.filename.rsplit(".", 1)[0] + "_processed.csv"
        self.narrator.say(f"Saving processed CSV data to: {target}")
        for row in self.rows:
            self.narrator.say(f"  {row}")
        self.narrator.pause(300)
        self.narrator.say("CSV data saved successfully")


class JSONDataProcessor(DataProcessor):
    processor_type = "JSON Data Processor"

    SAMPLE = '{"users": [{"name": "John", "age": 30}, {"name": "Jane", "age": 25}]}'

    def __init__(self, endpoint: str, narrator: Narrator, payload: str = SAMPLE):
        super().__init__(narrator)
        self.endpoint = endpoint
        self._payload = payload
        self.document: Optional[dict] = None
        self.raw = ""

    def load(self) -> None:
        self.narrator.say(f"Loading JSON data from API: {self.endpoint}")
        self.narrator.pause(800)
        self.raw = self._payload
        self.narrator.say("JSON data loaded")

    def validate(self) -> bool:
        self.narrator.say("Validating JSON data...")
        try:
            document = json.loads(self.raw)
        except json.JSONDecodeError as exc:
            logger.debug("rejected payload from %s: %s", self.endpoint, exc)
            self.narrator.say("Invalid JSON format")
            return False
        if not isinstance(document, dict):
            self.narrator.say("Invalid JSON format")
            return False
        self.document = document
        self.narrator.say("JSON validation successful")
        return True

    def transform(self) -> None:
        self.narrator.say("Transforming JSON data...")
        assert self.document is not None
        self.document["processed_at"] = "2024-01-01T10:00:00Z"
        self.narrator.say("JSON transformation completed")

    def save(self) -> None:
        self.narrator.say("Saving processed JSON data...")
        self.narrator.say(f"  {json.dumps(self.document)}")
        self.narrator.pause(400)
        self.narrator.say("JSON data saved to database")

    def handle_validation_error(self) -> None:
        self.narrator.say("JSON validation error - sending alert to admin")


# -----------------------------------------------------------------------------
# Game Levels
# -----------------------------------------------------------------------------


class GameLevel(ABC):
    name = "Level"
    MAX_TURNS = 50

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def play(self) -> bool:
        """Run the level loop; returns whether the player succeeded."""
        say = self.narrator.say
        say(f"\n=== Starting Level: {self.name} ===")
        self.initialize()
        self.show_introduction()
        turns = 0
        while not self.is_complete() and turns < self.MAX_TURNS:
            self.process_input()
            self.update_state()
            self.render_frame()
            if self.should_show_hint():
                self.show_hint()
            turns += 1
        success = self.is_successful()
        if success:
            self.show_success()
            self.unlock_next_level()
        else:
            self.show_failure()
            if self.allow_retry():
                say("🔄 Press R to retry")
        self.cleanup()
        say("=== Level Complete ===")
        return success

    @abstractmethod
    def initialize(self) -> None: ...

    @abstractmethod
    def process_input(self) -> None: ...

    @abstractmethod
    def update_state(self) -> None: ...

    @abstractmethod
    def render_frame(self) -> None: ...

    @abstractmethod
    def is_complete(self) -> bool: ...

    @abstractmethod
    def is_successful(self) -> bool: ...

    def show_introduction(self) -> None:
        self.narrator.say(f"Welcome to {self.name}!")

    def should_show_hint(self) -> bool:
        return False

    def show_hint(self) -> None:
        self.narrator.say("Hint: Keep trying!")

    def show_success(self) -> None:
        self.narrator.say("🎉 Level completed successfully!")

    def show_failure(self) -> None:
        self.narrator.say("💀 Level failed!")

    def unlock_next_level(self) -> None:
        self.narrator.say("🔓 Next level unlocked!")

    def allow_retry(self) -> bool:
        return True

    def cleanup(self) -> None:
        self.narrator.say("Cleaning up level resources")


class TutorialLevel(GameLevel):
    name = "Tutorial"

    def initialize(self) -> None:
        self.narrator.say("Setting up tutorial environment...")
        self.actions = 0
        self.completed = False

    def process_input(self) -> None:
        self.narrator.say("Processing tutorial input...")
        self.actions += 1

    def update_state(self) -> None:
        self.narrator.say(f"Updating tutorial state (action {self.actions})")
        if self.actions >= 3:
            self.completed = True

    def render_frame(self) -> None:
        self.narrator.say("Rendering tutorial frame")
        self.narrator.pause(100)

    def is_complete(self) -> bool:
        return self.completed

    def is_successful(self) -> bool:
        return self.completed

    def should_show_hint(self) -> bool:
        return self.actions == 1

    def show_hint(self) -> None:
        self.narrator.say("💡 Hint: Try moving around and interacting with objects!")

    def show_introduction(self) -> None:
        self.narrator.say("🎮 Welcome to the tutorial! Learn the basics here.")


class BossLevel(GameLevel):
    """Boss fight; damage rolls come from the supplied generator."""

    name = "Boss Battle"

    def __init__(self, narrator: Narrator, rng: random.Random):
        super().__init__(narrator)
        self.rng = rng

    def initialize(self) -> None:
        self.narrator.say("Initializing boss arena...")
        self.boss_health = 100
        self.player_health = 100
        self.turn = 0

    def process_input(self) -> None:
        damage = self.rng.randint(15, 25)
        self.narrator.say(f"Player attacks boss for {damage} damage!")
        self.boss_health = max(0, self.boss_health - damage)
        self.turn += 1

    def update_state(self) -> None:
        if self.boss_health > 0 and self.player_health > 0:
            damage = self.rng.randint(10, 20)
            self.narrator.say(f"Boss attacks player for {damage} damage!")
            self.player_health = max(0, self.player_health - damage)
        self.narrator.say(f"Boss HP: {self.boss_health}, Player HP: {self.player_health}")

    def render_frame(self) -> None:
        self.narrator.say("Rendering epic boss battle!")
        self.narrator.pause(200)

    def is_complete(self) -> bool:
        return self.boss_health <= 0 or self.player_health <= 0

    def is_successful(self) -> bool:
        return self.boss_health <= 0 and self.player_health > 0

    def should_show_hint(self) -> bool:
        return self.turn == 2 and self.boss_health > 60

    def show_hint(self) -> None:
        self.narrator.say("💡 Hint: Try using special attacks for more damage!")

    def show_introduction(self) -> None:
        self.narrator.say("⚔️ A mighty boss appears! Prepare for battle!")

    def show_success(self) -> None:
        self.narrator.say("🏆 Boss defeated! You are victorious!")

    def show_failure(self) -> None:
        self.narrator.say("💀 You have been defeated by the boss!")


# -----------------------------------------------------------------------------
# Recipes
# -----------------------------------------------------------------------------


class Recipe(ABC):
    dish = "Dish"
    estimated_minutes = 0

    def __init__(self, narrator: Narrator):
        self.narrator = narrator

    def cook(self) -> None:
        say = self.narrator.say
        say(f"\n🍳 Cooking: {self.dish}")
        say(f"Estimated time: {self.estimated_minutes} minutes")
        if self.requires_preparation():
            self.prepare_ingredients()
        self.preheat()
        self.cook_main_dish()
        if self.needs_side_dish():
            self.prepare_side_dish()
        if self.requires_garnish():
            self.add_garnish()
        self.plate()
        say(f"✅ {self.dish} is ready to serve!")

    @abstractmethod
    def prepare_ingredients(self) -> None: ...

    @abstractmethod
    def cook_main_dish(self) -> None: ...

    @abstractmethod
    def plate(self) -> None: ...

    def requires_preparation(self) -> bool:
        return True

    def needs_side_dish(self) -> bool:
        return False

    def requires_garnish(self) -> bool:
        return False

    def preheat(self) -> None:
        self.narrator.say("🔥 Preheating oven to 350°F")

    def prepare_side_dish(self) -> None:
        self.narrator.say("🥗 Preparing side dish")

    def add_garnish(self) -> None:
        self.narrator.say("🌿 Adding garnish")


class PastaRecipe(Recipe):
    dish = "Spaghetti Carbonara"
    estimated_minutes = 20

    def prepare_ingredients(self) -> None:
        self.narrator.say("🧄 Chopping garlic, dicing bacon, grating cheese")
        self.narrator.pause(300)

    def cook_main_dish(self) -> None:
        self.narrator.say("🍝 Boiling pasta and cooking bacon")
        self.narrator.say("🥚 Creating egg and cheese mixture")
        self.narrator.say("🍳 Combining all ingredients")
        self.narrator.pause(500)

    def plate(self) -> None:
        self.narrator.say("🍽️ Plating pasta with fresh black pepper")

    def requires_garnish(self) -> bool:
        return True

    def add_garnish(self) -> None:
        self.narrator.say("🌿 Adding fresh parsley and extra parmesan")


class SteakRecipe(Recipe):
    dish = "Grilled Ribeye Steak"
    estimated_minutes = 25

    def prepare_ingredients(self) -> None:
        self.narrator.say("🧂 Seasoning steak with salt and pepper")
        self.narrator.say("🌿 Preparing herb butter")
        self.narrator.pause(200)

    def cook_main_dish(self) -> None:
        self.narrator.say("🔥 Grilling steak to medium-rare")
        self.narrator.say("🧈 Basting with herb butter")
        self.narrator.pause(400)

    def plate(self) -> None:
        self.narrator.say("🍽️ Plating steak with mashed potatoes")

    def needs_side_dish(self) -> bool:
        return True

    def prepare_side_dish(self) -> None:
        self.narrator.say("🥔 Preparing creamy mashed potatoes and grilled vegetables")

    def preheat(self) -> None:
        self.narrator.say("🔥 Preheating grill to high heat")


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("template_method", "Template Method Pattern", "behavioral", "Data pipelines, game levels, recipes")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Template Method Pattern Demo ===")

    say("\n1. Data Processing Framework:")
    say("=" * 50)
    processors: List[DataProcessor] = [
        CSVDataProcessor("sales_data.csv", narrator),
        JSONDataProcessor("https://api.example.com/users", narrator),
        JSONDataProcessor("https://api.example.com/broken", narrator, payload='{"users": [}'),
    ]
    for processor in processors:
        say(f"\nUsing: {processor.processor_type}")
        processor.process()

    say("\n2. Game Level Framework:")
    say("=" * 50)
    for level in (TutorialLevel(narrator), BossLevel(narrator, ctx.rng)):
        level.play()

    say("\n\n3. Recipe Framework:")
    say("=" * 50)
    for recipe in (PastaRecipe(narrator), SteakRecipe(narrator)):
        recipe.cook()


if __name__ == "__main__":
    sys.exit(run_standalone("template_method"))
