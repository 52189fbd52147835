"""Property-based tests for the invariants shared by several samples."""

import hypothesis.strategies as st
from hypothesis import given, settings

from pattern_catalog.architectural.repository import InMemoryProductRepository, Product
from pattern_catalog.behavioral.command import CommandManager, InsertCommand, TextEditor
from pattern_catalog.core import Narrator, SimulatedClock
from pattern_catalog.structural.decorator import CompressionDecorator, EncryptionDecorator, FileStream
from pattern_catalog.structural.flyweight import CharacterFactory, Document
from pattern_catalog.structural.proxy import CachingWebProxy

products = st.builds(
    Product,
    id=st.integers(min_value=0, max_value=20),
    name=st.text(min_size=1, max_size=12),
    price=st.floats(min_value=0, max_value=1e6, allow_nan=False),
    stock=st.integers(min_value=0, max_value=1000),
)

operations = st.lists(
    st.one_of(
        st.tuples(st.just("save"), products),
        st.tuples(st.just("delete"), st.integers(min_value=0, max_value=20)),
    ),
    max_size=30,
)


class TestStreamLayers:
    @given(data=st.text(max_size=200), shift=st.integers(min_value=-30, max_value=30))
    @settings(max_examples=50, deadline=None)
    def test_compressed_encrypted_round_trip(self, data, shift):
        base = FileStream("data.txt", Narrator(echo=False))
        stream = CompressionDecorator(EncryptionDecorator(base, shift))
        stream.write(data)
        assert stream.read() == data
        assert base.data.startswith(EncryptionDecorator._rotate(CompressionDecorator.MARKER, shift))

    @given(data=st.text(max_size=200), shift=st.integers(min_value=0, max_value=25))
    @settings(max_examples=50, deadline=None)
    def test_encryption_is_invertible(self, data, shift):
        assert EncryptionDecorator._rotate(EncryptionDecorator._rotate(data, shift), -shift) == data


class TestRepositoryModel:
    @given(ops=operations)
    @settings(max_examples=50, deadline=None)
    def test_behaves_like_a_dict(self, ops):
        repository = InMemoryProductRepository()
        model = {}
        for op, arg in ops:
            if op == "save":
                repository.save(arg)
                model[arg.id] = arg
            else:
                assert repository.delete_by_id(arg) == (arg in model)
                model.pop(arg, None)
        assert repository.count() == len(model)
        assert repository.find_all() == [model[k] for k in sorted(model)]
        for product_id in range(21):
            assert repository.find_by_id(product_id) == model.get(product_id)


class TestFlyweightCounts:
    @given(text=st.text(max_size=60), fonts=st.lists(st.sampled_from(["Arial", "Times"]), min_size=1, max_size=3))
    @settings(max_examples=50, deadline=None)
    def test_one_flyweight_per_character_and_font(self, text, fonts):
        narrator = Narrator(echo=False)
        document = Document(CharacterFactory(narrator), narrator)
        for font in fonts:
            document.add_text(text, font)
        stats = document.stats()
        assert stats.flyweights == len(set(text)) * len(set(fonts))
        assert stats.contexts == len(text) * len(fonts)


class TestCachingProxy:
    @given(
        urls=st.lists(st.sampled_from(["/a", "/b", "/c"]), min_size=1, max_size=20),
        gaps=st.lists(st.floats(min_value=0, max_value=20, allow_nan=False), min_size=20, max_size=20),
    )
    @settings(max_examples=50, deadline=None)
    def test_fetches_only_on_miss_or_expiry(self, urls, gaps):
        clock = SimulatedClock()
        proxy = CachingWebProxy(Narrator(echo=False), ttl=30.0, timer=clock)
        stored_at = {}
        expected_fetches = 0
        for url, gap in zip(urls, gaps):
            clock.advance(gap)
            if url not in stored_at or clock() >= stored_at[url] + 30.0:
                expected_fetches += 1
                stored_at[url] = clock()
            proxy.fetch(url)
        assert proxy.service.fetches == expected_fetches


class TestCommandHistory:
    @given(words=st.lists(st.text(min_size=1, max_size=5), min_size=1, max_size=10))
    @settings(max_examples=50, deadline=None)
    def test_undo_everything_restores_empty_document(self, words):
        narrator = Narrator(echo=False)
        editor = TextEditor(narrator)
        manager = CommandManager(narrator)
        for word in words:
            manager.execute_command(InsertCommand(editor, word, len(editor.content)))
        assert editor.content == "".join(words)
        while manager.undo():
            pass
        assert editor.content == ""
        while manager.redo():
            pass
        assert editor.content == "".join(words)
