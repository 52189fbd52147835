import random

from pattern_catalog.behavioral.template_method import (
    BossLevel,
    CSVDataProcessor,
    JSONDataProcessor,
    PastaRecipe,
    SteakRecipe,
    TutorialLevel,
)


class TestDataProcessors:
    def test_csv_pipeline_runs_hook(self, narrator):
        processor = CSVDataProcessor("data.csv", narrator)
        assert processor.process()
        assert processor.rows[1] == "VALUE1,VALUE2,VALUE3"
        assert "Performing CSV-specific formatting..." in narrator
        assert "Saving processed CSV data to: data_processed.csv" in narrator

    def test_csv_inconsistent_columns(self, narrator):
        processor = CSVDataProcessor("bad.csv", narrator, rows=["a,b", "1,2,3"])
        assert not processor.process()
        assert "Row 1 has inconsistent number of columns" in narrator
        assert "Default validation error handling" in narrator
        assert narrator.lines[-3] == "Performing default cleanup"

    def test_json_pipeline(self, narrator):
        processor = JSONDataProcessor("https://api.example.com/users", narrator)
        assert processor.process()
        assert processor.document["processed_at"] == "2024-01-01T10:00:00Z"
        assert "No additional processing needed" not in narrator

    def test_json_overridden_error_hook(self, narrator):
        processor = JSONDataProcessor("https://api.example.com", narrator, payload="{not json")
        assert not processor.process()
        assert "JSON validation error - sending alert to admin" in narrator


class TestGameLevels:
    def test_tutorial_completes_in_three_actions(self, narrator):
        level = TutorialLevel(narrator)
        assert level.play()
        assert level.actions == 3
        assert narrator.lines.count("💡 Hint: Try moving around and interacting with objects!") == 1
        assert "🔓 Next level unlocked!" in narrator

    def test_boss_level_is_seeded(self, narrator):
        first = BossLevel(narrator, random.Random(42))
        second = BossLevel(narrator, random.Random(42))
        assert first.play() == second.play()
        assert first.turn == second.turn
        assert first.is_complete()


class TestRecipes:
    def test_pasta_garnish_and_default_preheat(self, narrator):
        PastaRecipe(narrator).cook()
        assert "🔥 Preheating oven to 350°F" in narrator
        assert "🌿 Adding fresh parsley and extra parmesan" in narrator
        assert "🥗 Preparing side dish" not in narrator
        assert narrator.lines[-1] == "✅ Spaghetti Carbonara is ready to serve!"

    def test_steak_overrides_preheat_and_side(self, narrator):
        SteakRecipe(narrator).cook()
        assert "🔥 Preheating grill to high heat" in narrator
        assert "🥔 Preparing creamy mashed potatoes and grilled vegetables" in narrator
        assert "🌿 Adding garnish" not in narrator
