from __future__ import annotations

import pytest

from topomap.rng import Mulberry32, RngStream, create_rng, hash_seed


def test_same_seed_gives_identical_stream() -> None:
    a = create_rng("abc")
    b = create_rng("abc")

    assert [a.random() for _ in range(64)] == [b.random() for _ in range(64)]


def test_different_seeds_diverge() -> None:
    a = create_rng("abc")
    b = create_rng("abd")

    assert [a.random() for _ in range(8)] != [b.random() for _ in range(8)]
    assert hash_seed("abc") != hash_seed("abd")


def test_values_are_unit_interval_floats() -> None:
    gen = create_rng("range-check")
    values = [gen.random() for _ in range(2000)]

    assert all(0.0 <= v < 1.0 for v in values)
    assert gen.draws == 2000
    assert 0.4 < sum(values) / len(values) < 0.6


def test_hash_is_unsigned_32bit_and_handles_unicode() -> None:
    for seed in ("", "abc", "地形図", "\U0001f5fa map"):
        state = hash_seed(seed)
        assert 0 <= state <= 0xFFFFFFFF
        assert state == hash_seed(seed)


def test_integer_is_inclusive() -> None:
    gen = create_rng("ints")
    seen = {gen.integer(3, 5) for _ in range(500)}

    assert seen == {3, 4, 5}


def test_shuffle_is_a_permutation_and_leaves_input_untouched() -> None:
    items = list(range(20))
    shuffled = create_rng("shuffle").shuffle(items)

    assert items == list(range(20))
    assert sorted(shuffled) == items
    assert shuffled != items


def test_fork_appends_layer_name() -> None:
    base = RngStream("abc")

    assert base.fork("zones").seed == "abc_zones"
    assert base.fork("zones").state == RngStream("abc_zones").state
    with pytest.raises(ValueError):
        base.fork("")


def test_forked_layers_do_not_perturb_each_other() -> None:
    base = RngStream("layered")
    reference = [base.fork("grid").generator().random() for _ in range(1)]

    noisy = base.fork("zones").generator()
    for _ in range(100):
        noisy.random()
    grid = base.fork("grid").generator()

    assert [grid.random()] == reference


def test_generator_state_wraps_to_32_bits() -> None:
    gen = Mulberry32(2**40 + 7)

    assert gen.state == 7


def test_streams_match_reference_values() -> None:
    abc = create_rng("abc")
    empty = create_rng("")
    astral = create_rng("\U0001f5fa map")

    assert [abc.random() for _ in range(3)] == [
        0.8865935776848346,
        0.5006652397569269,
        0.13492729025892913,
    ]
    assert empty.random() == 0.9757088038604707
    assert astral.random() == 0.005850934656336904
