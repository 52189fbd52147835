import pytest

from pattern_catalog.structural.decorator import (
    BasicCoffee,
    BoldDecorator,
    CoffeeBuilder,
    ColorDecorator,
    CompressionDecorator,
    EncryptionDecorator,
    FileStream,
    ItalicDecorator,
    LoggingDecorator,
    MilkDecorator,
    PlainText,
    SugarDecorator,
)
from pattern_catalog.core import InvalidArgument


class TestCoffee:
    def test_layers_add_cost_and_label(self):
        coffee = SugarDecorator(MilkDecorator(BasicCoffee()))
        assert coffee.description == "Regular Coffee + Milk + Sugar"
        assert coffee.cost == pytest.approx(4.35)
        assert coffee.size == "Regular"

    def test_builder(self):
        coffee = CoffeeBuilder("Large").add_vanilla().add_whipped_cream().build()
        assert coffee.description == "Large Coffee + Vanilla + Whipped Cream"
        assert coffee.cost == pytest.approx(6.20)

    def test_unknown_size(self):
        with pytest.raises(InvalidArgument):
            BasicCoffee("Venti")


def test_text_decorators_nest_outside_in():
    text = ColorDecorator(BoldDecorator(ItalicDecorator(PlainText("Hi"))), "red")
    assert text.text == '<span style="color:red"><b><i>Hi</i></b></span>'
    assert len(PlainText("Hi")) == 2


class TestStreams:
    def test_encryption_shifts_letters_only(self, narrator):
        raw = FileStream("data.txt", narrator)
        EncryptionDecorator(raw).write("Hello, World!")
        assert raw.data == "Khoor, Zruog!"

    def test_stack_round_trips(self, narrator):
        raw = FileStream("data.txt", narrator)
        stream = CompressionDecorator(EncryptionDecorator(raw))
        stream.write("Sensitive data: 42")
        assert raw.data != "Sensitive data: 42"
        assert stream.read() == "Sensitive data: 42"

    def test_decompression_passes_unmarked_data(self, narrator):
        raw = FileStream("plain.txt", narrator)
        assert CompressionDecorator(raw).read() == "Sample file content: plain.txt"

    def test_info_lists_layers(self, narrator):
        stream = LoggingDecorator(CompressionDecorator(FileStream("f", narrator)), narrator)
        assert stream.info == "File: f [Compressed] [Logged]"
        stream.read()
        assert "[LOG] Reading from File: f [Compressed]" in narrator
