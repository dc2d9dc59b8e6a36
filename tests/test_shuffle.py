import itertools
import random
from collections import Counter

from conftest import NoSwapRandom

from syncmatch.shuffle import shuffle, shuffled


def test_shuffle_is_in_place_permutation():
    items = list(range(20))
    result = shuffle(items, random.Random(7))
    assert result is items
    assert sorted(result) == list(range(20))


def test_shuffle_is_deterministic_for_a_seed():
    a = shuffle(list("abcdefgh"), random.Random(42))
    b = shuffle(list("abcdefgh"), random.Random(42))
    assert a == b


def test_shuffle_empty_and_single():
    assert shuffle([], random.Random(1)) == []
    assert shuffle(["x"], random.Random(1)) == ["x"]


def test_no_swap_source_keeps_order():
    assert shuffle([1, 2, 3, 4, 5], NoSwapRandom()) == [1, 2, 3, 4, 5]


def test_shuffled_leaves_input_untouched():
    items = [1, 2, 3, 4, 5, 6]
    out = shuffled(items, random.Random(3))
    assert items == [1, 2, 3, 4, 5, 6]
    assert sorted(out) == items
    assert out is not items


def test_every_permutation_is_reachable_and_roughly_uniform():
    rng = random.Random(0)
    counts = Counter(tuple(shuffle([1, 2, 3], rng)) for _ in range(6000))
    assert set(counts) == set(itertools.permutations([1, 2, 3]))
    for n in counts.values():
        assert 800 < n < 1200
