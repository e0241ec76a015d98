"""Combined fishing score from the weather score and lunar activity."""

from lunartide.models import FishingScore, ScoreLabel, require_finite
from lunartide.timeutils import clamp

MAX_SCORE = 3.0


def score_label(combined: float) -> ScoreLabel:
    if combined >= 2.5:
        return ScoreLabel.EXCELLENT
    if combined >= 1.5:
        return ScoreLabel.GOOD
    if combined >= 0.8:
        return ScoreLabel.MODERATE
    return ScoreLabel.POOR


def combine(weather_score: float, lunar_activity: float) -> FishingScore:
    """
    Fuse a weather score in [0, 3] with a lunar activity in [0, 1].

    Args:
        weather_score: Output of the weather-condition classifier
        lunar_activity: Activity from activity_at()

    Returns:
        FishingScore with the combined value capped to [0, 3]

    Raises:
        ValueError: If either input is NaN or infinite
    """
    require_finite("weather_score", weather_score)
    require_finite("lunar_activity", lunar_activity)
    combined = clamp(weather_score / 2 + lunar_activity * 1.5, 0.0, MAX_SCORE)
    return FishingScore(combined=combined, label=score_label(combined))
