"""Rule-based clothing advice from today's range and recent averages.

Each rule is evaluated independently and appends at most one message, in a
fixed order. When nothing fires the single default message is returned, so
the result is never empty.
"""

from __future__ import annotations

from typing import List

from wearcast.domain import HighLow

WIDE_SWING_THRESHOLD = 10.0
LAYERING_RANGE_THRESHOLD = 8.0
USUAL_DEVIATION_THRESHOLD = 3.0
RISE_THRESHOLD = 8.0

WIDE_SWING_ADVICE = "wide intraday swing — wear layers"
COLD_MORNING_ADVICE = "mornings/evenings cold — bring a jacket"
COLDER_ADVICE = "colder than usual — dress warmly"
WARM_DAYTIME_ADVICE = "daytime will be warm — bring a light layer to adjust"
WARMER_ADVICE = "warmer than usual — light clothing is fine"
RISING_ADVICE = "temperature will rise — wear adjustable clothing"
DEFAULT_ADVICE = "normal clothing will be comfortable today"


def clothing_advice(today: HighLow, reference: HighLow, current_temperature: float) -> List[str]:
    """Return ordered clothing suggestions for today.

    ``reference`` is the averaged high/low of the trailing comparison window
    (three days in the report). Colder-than-usual and warmer-than-usual are
    separate checks; both fire when lows dropped while highs rose.
    """
    advice: List[str] = []

    today_range = today.spread
    high_diff = today.high - reference.high
    low_diff = today.low - reference.low

    if today_range > WIDE_SWING_THRESHOLD:
        advice.append(WIDE_SWING_ADVICE)

    if high_diff < -USUAL_DEVIATION_THRESHOLD or low_diff < -USUAL_DEVIATION_THRESHOLD:
        if today_range > LAYERING_RANGE_THRESHOLD:
            advice.append(COLD_MORNING_ADVICE)
        else:
            advice.append(COLDER_ADVICE)

    if high_diff > USUAL_DEVIATION_THRESHOLD or low_diff > USUAL_DEVIATION_THRESHOLD:
        if today_range > LAYERING_RANGE_THRESHOLD:
            advice.append(WARM_DAYTIME_ADVICE)
        else:
            advice.append(WARMER_ADVICE)

    if today.high - current_temperature > RISE_THRESHOLD:
        advice.append(RISING_ADVICE)

    if not advice:
        advice.append(DEFAULT_ADVICE)

    return advice
