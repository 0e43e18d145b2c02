import pytest

from citylines.config import settings
from citylines.schemas import Difficulty, GenerationConfig
from citylines.services import progression
from citylines.services.connectivity import ConnectivityEngine
from citylines.services.errors import PlacementExhausted
from citylines.services.level_loader import grid_from_record
from citylines.services.progression import (
    base_seed_for_level,
    config_for_level,
    difficulty_for_level,
    fallback_level,
    generate_for_level,
    grid_size_for_level,
    landmark_count_for,
    load_level,
    min_path_length_for,
    seed_for_attempt,
)
from citylines.services.structural import validate_structure


def test_difficulty_wave():
    assert [difficulty_for_level(n) for n in range(1, 11)] == [
        Difficulty.EASY, Difficulty.EASY, Difficulty.MEDIUM, Difficulty.MEDIUM, Difficulty.HARD,
    ] * 2


def test_grid_size_grows_per_chapter_and_caps():
    assert [grid_size_for_level(n) for n in range(1, 6)] == [4, 5, 4, 5, 5]
    assert [grid_size_for_level(n) for n in range(6, 11)] == [5, 6, 5, 6, 6]
    assert grid_size_for_level(500) == settings.MAX_GRID_SIZE


def test_size_drives_landmarks_and_path_length():
    assert landmark_count_for(4, Difficulty.EASY) == 1
    assert landmark_count_for(5, Difficulty.EASY) == 2
    assert landmark_count_for(5, Difficulty.HARD) == 3
    assert landmark_count_for(8, Difficulty.HARD) == 4
    assert [min_path_length_for(s) for s in (4, 5, 6, 7, 8)] == [2, 2, 3, 3, 4]


def test_seeds_are_pure():
    assert base_seed_for_level(4) == 49380
    assert seed_for_attempt(49380, 3) == 49383
    assert seed_for_attempt(0xFFFFFFFF, 1) == 0


def test_config_for_level():
    config = config_for_level(7, seed=11)
    assert config.grid_size.rows == config.grid_size.cols == 6
    assert config.difficulty is Difficulty.EASY
    assert config.landmark_count == 2
    assert config.min_path_length == 3
    assert config.seed == 11


def test_generated_levels_are_deterministic():
    for level in (4, 9, 12):
        a = generate_for_level(level)
        b = generate_for_level(level)
        assert a.source in ("generated", "fallback")
        assert a.model_dump() == b.model_dump()


def test_retry_walks_consecutive_seeds(monkeypatch):
    real = progression.generate_level
    seeds = []

    def flaky(config):
        seeds.append(config.seed)
        if len(seeds) < 3:
            raise PlacementExhausted("no room")
        return real(GenerationConfig(
            grid_size={"rows": 4, "cols": 4}, landmark_count=1, seed=config.seed,
        ))

    monkeypatch.setattr(progression, "generate_level", flaky)
    response = generate_for_level(10)

    base = base_seed_for_level(10)
    assert seeds == [base, base + 1, base + 2]
    assert response.source == "generated"
    assert response.attempts == 3
    assert response.data.seed == base + 2


def test_fallback_after_max_attempts(monkeypatch):
    calls = []

    def always_fails(config):
        calls.append(config.seed)
        raise PlacementExhausted("no room")

    monkeypatch.setattr(progression, "generate_level", always_fails)
    response = generate_for_level(20)

    assert len(calls) == settings.GENERATION_MAX_ATTEMPTS
    assert response.source == "fallback"
    assert response.attempts == settings.GENERATION_MAX_ATTEMPTS
    assert response.data == fallback_level()


def test_fallback_level_is_solvable_and_scrambled():
    grid = grid_from_record(fallback_level())
    validate_structure(grid)
    assert not ConnectivityEngine(grid).report.is_complete


def test_handcrafted_levels_come_from_files():
    response = load_level(1)
    assert response.source == "handcrafted"
    assert response.attempts == 0
    assert response.data.grid_size.rows == 3


def test_missing_handcrafted_file_falls_through_to_generation(monkeypatch):
    monkeypatch.setattr(progression, "load_level_from_file", lambda level: None)
    response = load_level(2)
    assert response.source in ("generated", "fallback")


def test_load_level_is_memoised():
    assert load_level(5) is load_level(5)


def test_invalid_level_number():
    with pytest.raises(ValueError):
        load_level(0)
