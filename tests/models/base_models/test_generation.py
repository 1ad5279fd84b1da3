from unittest.mock import MagicMock

import pytest
from models.base_models.chain_prefix import ChainPrefix
from models.base_models.generation import Generation


def fixed_rng(index):
    """An rng stub whose randrange always returns `index`."""
    rng = MagicMock()
    rng.randrange.return_value = index
    return rng


@pytest.fixture
def table():
    return {
        "": ["the"],
        "the": ["cat", "mat", "cat"],
        "cat": ["sat"],
        "sat": [],
    }


def test_next_returns_successor_and_shifts(table):
    generation = Generation(table, ChainPrefix(1), rng=fixed_rng(0))

    assert generation.next() == "the"
    assert generation.prefix == ("the",)


def test_next_picks_by_index_including_duplicates(table):
    generation = Generation(table, ChainPrefix.from_tokens(["the"], 1), rng=fixed_rng(2))

    assert generation.next() == "cat"


def test_next_unknown_context_returns_empty_and_keeps_prefix(table):
    generation = Generation(table, ChainPrefix.from_tokens(["dog"], 1))

    assert generation.next() == ""
    assert generation.prefix == ("dog",)
    # Keeps returning the end marker
    assert generation.next() == ""


def test_next_empty_successor_list_returns_empty(table):
    generation = Generation(table, ChainPrefix.from_tokens(["sat"], 1))

    assert generation.next() == ""
    assert generation.prefix == ("sat",)


def test_next_end_of_chain(oyster_chain):
    generation = oyster_chain.generate_forward_from_prefix(["oyster."])
    assert generation.next() == ""


def test_next_with_forces_recorded_context(oyster_chain):
    generation = oyster_chain.generate_forward_from_prefix(["What"])
    generation.next_with("noise")

    assert generation.prefix == ("noise",)
    assert generation.next() == "annoys"


def test_next_with_forces_unrecorded_context(oyster_chain):
    generation = oyster_chain.generate_forward_from_prefix(["What"])
    generation.next_with("impossible")

    assert generation.next() == ""
    assert generation.options() == []

    # Forcing back onto the chain revives the cursor
    generation.next_with("noise")
    assert generation.next() == "annoys"


def test_options_returns_recorded_successors(oyster_chain):
    generation = oyster_chain.generate_forward_from_prefix(["noisy"])
    assert generation.options() == ["oyster?", "noise", "oyster."]


def test_options_is_defensive_copy(oyster_chain):
    generation = oyster_chain.generate_forward_from_prefix(["noise"])

    options = generation.options()
    options.append("tampered")
    options[0] = "changed"

    assert generation.options() == ["annoys", "annoys"]
    assert oyster_chain.forward["noise"] == ["annoys", "annoys"]


def test_options_does_not_advance(oyster_chain):
    generation = oyster_chain.generate_forward()
    generation.options()

    assert generation.prefix == ("",)


def test_generation_does_not_mutate_table(oyster_chain):
    before = {key: list(suffixes) for key, suffixes in oyster_chain.forward.items()}

    generation = oyster_chain.generate_forward()
    generation.take(50)
    generation.next_with("impossible")
    generation.next()

    assert oyster_chain.forward == before


def test_take_stops_at_end_of_chain(table):
    generation = Generation(table, ChainPrefix(1), rng=fixed_rng(0))

    # "" -> the -> cat -> sat -> (no successors)
    assert generation.take(10) == ["the", "cat", "sat"]


def test_take_respects_bound():
    cycle = {"": ["a"], "a": ["a"]}
    generation = Generation(cycle, ChainPrefix(1))

    assert generation.take(5) == ["a"] * 5


def test_iteration_yields_until_end(table):
    generation = Generation(table, ChainPrefix(1), rng=fixed_rng(0))

    assert list(generation) == ["the", "cat", "sat"]


def test_walk_follows_recorded_transitions(oyster_chain):
    generation = oyster_chain.generate_forward()
    tokens = generation.take(100)

    assert tokens[0] in {"What", "A"}
    assert tokens[-1] in {"oyster?", "oyster."}
    previous = tokens[0]
    for token in tokens[1:]:
        assert token in oyster_chain.forward[previous]
        previous = token


def test_backward_walk_follows_recorded_transitions(oyster_chain):
    tokens = oyster_chain.generate_backward().take(100)

    assert tokens[0] in {"oyster?", "oyster."}
    assert tokens[-1] in {"What", "A"}
    previous = tokens[0]
    for token in tokens[1:]:
        assert token in oyster_chain.backward[previous]
        previous = token


def test_selection_is_frequency_proportional():
    table = {"x": ["a", "a", "a", "b"]}
    indexes = iter(range(4))
    rng = MagicMock()
    rng.randrange.side_effect = lambda n: next(indexes)

    picks = []
    for _ in range(4):
        generation = Generation(table, ChainPrefix.from_tokens(["x"], 1), rng=rng)
        picks.append(generation.next())

    assert picks.count("a") == 3
    assert picks.count("b") == 1
    rng.randrange.assert_called_with(4)
