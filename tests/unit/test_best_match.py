from __future__ import annotations

import pytest

from section_loader.matching.best_match import (
    DropdownOption,
    NoAcceptableMatchError,
    NoCandidatesError,
    select_best,
    select_best_value,
)


def _opts(*labels: str) -> list[DropdownOption]:
    return [DropdownOption(value=f"v{i}", label=label) for i, label in enumerate(labels)]


def test_select_best_exact_match_scores_one():
    result = select_best("Collector", _opts("Arterial", "Collector", "Local"))
    assert result.option.label == "Collector"
    assert result.value == "v1"
    assert result.index == 1
    assert result.score == 1.0


def test_select_best_tolerates_typos():
    result = select_best("City of Exampel", _opts("County Roads", "City of Example", "Town Streets"))
    assert result.option.label == "City of Example"
    assert 0.8 < result.score < 1.0


def test_select_best_tie_keeps_first_option():
    # "ab" vs "ax" and "xb": distance 1 each
    result = select_best("ab", _opts("ax", "xb"))
    assert result.option.label == "ax"
    assert result.index == 0


def test_select_best_single_option_is_returned():
    result = select_best("anything", _opts("Only"))
    assert result.option.label == "Only"


def test_select_best_empty_options_raises():
    with pytest.raises(NoCandidatesError):
        select_best("Arterial", [])


def test_select_best_below_threshold_raises():
    with pytest.raises(NoAcceptableMatchError) as e:
        select_best("Gravel", _opts("Asphalt Concrete", "Portland Cement"), threshold=0.8)
    assert e.value.threshold == 0.8
    assert e.value.best.score < 0.8
    assert "Gravel" in str(e.value)


def test_no_acceptable_match_is_a_no_candidates_error():
    with pytest.raises(NoCandidatesError):
        select_best("Gravel", _opts("Asphalt Concrete"), threshold=0.9)


def test_zero_threshold_accepts_any_best():
    result = select_best("Gravel", _opts("Asphalt Concrete", "Portland Cement"))
    assert result.option.label in {"Asphalt Concrete", "Portland Cement"}


def test_select_best_value_returns_option_value():
    assert select_best_value("Local", _opts("Arterial", "Local")) == "v1"


@pytest.mark.parametrize("worse_label", ["Zzzzzzzzz", "", "Collectorxxxxxx", "collector road"])
def test_appending_worse_option_keeps_result(worse_label):
    options = _opts("Arterial", "Colector", "Local")
    before = select_best("Collector", options)

    extended = [*options, DropdownOption(value="v-new", label=worse_label)]
    assert select_best("Collector", [extended[-1]]).score < before.score
    after = select_best("Collector", extended)
    assert after.value == before.value
    assert after.index == before.index
    assert after.score == before.score


def test_all_zero_scores_keep_first_option():
    result = select_best("abc", _opts("xyz", "uvw"))
    assert result.score == 0.0
    assert result.index == 0
