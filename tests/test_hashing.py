import pytest

from bloomset.hashing import MAX_SEED1, MAX_SEED2, IndexGenerator, IndexSequence, item_bytes


class Token:
    def __init__(self, value):
        self.value = value

    def __bytes__(self):
        return self.value.encode("ascii")


class TestItemBytes:
    def test_types_are_kept_apart(self):
        encodings = [item_bytes(x) for x in (1, "1", b"1", True, 1.0, None, (1,))]
        assert len(set(encodings)) == len(encodings)

    def test_bytes_like_encode_the_same(self):
        assert item_bytes(b"abc") == item_bytes(bytearray(b"abc")) == item_bytes(memoryview(b"abc"))

    def test_signed_zero(self):
        assert item_bytes(-0.0) == item_bytes(0.0)

    def test_integers(self):
        assert item_bytes(-1) != item_bytes(255)
        assert item_bytes(2**100) != item_bytes(-(2**100))

    def test_nested_tuples(self):
        assert item_bytes(("a", "bc")) != item_bytes(("ab", "c"))
        assert item_bytes((1, (2, 3))) != item_bytes((1, 2, 3))

    def test_lone_surrogates(self):
        assert item_bytes("abc\ud800") == item_bytes("abc\ud800")
        assert item_bytes("\udcff") != item_bytes("\udcfe")
        assert item_bytes(("k", "\udcff")) != item_bytes(("k", "\udcfe"))
        gen = IndexGenerator(1000, 7, seed1=1, seed2=2)
        assert list(gen.indices("abc\ud800")) == list(gen.indices("abc\ud800"))

    def test_objects_with_bytes(self):
        assert item_bytes(Token("x")) == item_bytes(Token("x"))
        assert item_bytes(Token("x")) != item_bytes(b"x")

    @pytest.mark.parametrize("item", [[1, 2], {"a": 1}, {1, 2}, object()])
    def test_unsupported_types(self, item):
        with pytest.raises(TypeError):
            item_bytes(item)


class TestIndexSequence:
    def test_arithmetic_progression(self):
        assert list(IndexSequence(3, 4, 4, 10)) == [3, 7, 1, 5]

    def test_zero_step_advances(self):
        assert list(IndexSequence(5, 0, 4, 10)) == [5, 6, 7, 8]
        assert list(IndexSequence(5, 10, 3, 10)) == [5, 6, 7]

    def test_restartable(self):
        seq = IndexSequence(123456789, 987654321, 7, 1000)
        assert len(seq) == 7
        assert list(seq) == list(seq)


class TestIndexGenerator:
    def test_indices_in_range(self):
        gen = IndexGenerator(97, 5, seed1=1, seed2=2)
        for i in range(200):
            idx = list(gen.indices(i))
            assert len(idx) == 5
            assert all(0 <= x < 97 for x in idx)

    def test_deterministic(self):
        gen = IndexGenerator(1000, 7, seed1=11, seed2=22)
        assert list(gen.indices("apple")) == list(gen.indices("apple"))

    def test_same_seeds_same_indices(self):
        a = IndexGenerator(1000, 7, seed1=11, seed2=22)
        b = IndexGenerator(1000, 7, seed1=11, seed2=22)
        assert a.compatible_with(b)
        for i in range(50):
            assert list(a.indices(i)) == list(b.indices(i))

    def test_different_seeds_differ(self):
        a = IndexGenerator(1000, 7, seed1=1, seed2=2)
        b = IndexGenerator(1000, 7, seed1=3, seed2=4)
        assert not a.compatible_with(b)
        assert any(list(a.indices(i)) != list(b.indices(i)) for i in range(50))

    def test_base_hashes_are_64_bit(self):
        gen = IndexGenerator(1000, 7, seed1=1, seed2=2)
        h1, h2 = gen.base_hashes("apple")
        assert 0 <= h1 <= MAX_SEED2
        assert 0 <= h2 <= MAX_SEED2
        assert h1 != h2

    def test_random_seeds_in_range(self):
        gen = IndexGenerator(10, 2)
        assert 0 <= gen.seed1 <= MAX_SEED1
        assert 0 <= gen.seed2 <= MAX_SEED2

    def test_seed_validation(self):
        with pytest.raises(ValueError):
            IndexGenerator(10, 2, seed1=MAX_SEED1 + 1)
        with pytest.raises(ValueError):
            IndexGenerator(10, 2, seed2=-1)
        with pytest.raises(TypeError):
            IndexGenerator(10, 2, seed1="1")

    def test_size_validation(self):
        with pytest.raises(ValueError):
            IndexGenerator(0, 2)
        with pytest.raises(ValueError):
            IndexGenerator(10, 0)
