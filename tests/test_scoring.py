"""Tests for the combined fishing score."""
import pytest

from lunartide.models import ScoreLabel
from lunartide.scoring import combine, score_label


def test_combined_score_example():
    """weatherScore 2.0 and activity 0.6 give 1.0 + 0.9 = 1.9, which is Good."""
    score = combine(2.0, 0.6)
    assert score.combined == pytest.approx(1.9)
    assert score.label is ScoreLabel.GOOD


def test_combined_score_is_capped_at_three():
    score = combine(3.0, 1.0)
    assert score.combined == 3.0
    assert score.label is ScoreLabel.EXCELLENT


def test_lowest_inputs():
    score = combine(0.0, 0.0)
    assert score.combined == 0.0
    assert score.label is ScoreLabel.POOR


@pytest.mark.parametrize("combined,label", [
    (2.5, ScoreLabel.EXCELLENT),
    (2.49, ScoreLabel.GOOD),
    (1.5, ScoreLabel.GOOD),
    (1.49, ScoreLabel.MODERATE),
    (0.8, ScoreLabel.MODERATE),
    (0.79, ScoreLabel.POOR),
])
def test_label_thresholds(combined, label):
    assert score_label(combined) is label


@pytest.mark.parametrize("weather,activity", [
    (float("nan"), 0.5),
    (1.0, float("inf")),
])
def test_non_finite_inputs_rejected(weather, activity):
    with pytest.raises(ValueError, match="must be a finite number"):
        combine(weather, activity)
