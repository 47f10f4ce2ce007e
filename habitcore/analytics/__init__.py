"""Analytics - Streak forecasting and adaptive recommendations

Philosophy:
    Numbers first, words later.
    Every coaching message, notification and nudge is rendered from the
    structured results produced here. Nothing in this package writes prose
    for the user beyond short, fixed guidance strings.

Core Principle:
    Deterministic and explainable. A forecast is a weighted blend of three
    simple estimators over a handful of summary statistics. Given the same
    inputs and evaluation date, the same forecast comes out every time.

Components:
    performance.py: Short-window trend from raw completion history
        - 7 and 14 day completion rates
        - First-half vs second-half slope

    ensemble.py: Baseline, trend and seasonal sub-models blended per horizon

    risk.py: Risk tier from forecast probabilities, ranked risk factors

    scoring.py: Single 0-100 sustainability score

    interventions.py: Ordered action list and next critical date

    mood_adjuster.py: Rescale habit difficulty by mood and time of day

    recovery.py: Day-indexed recovery plan after a broken streak

    engine.py: StreakPredictionEngine service wiring the above to a data provider

    integration.py: Batch notifications and intervention timing for consumers

Safety Rules:
    1. Missing data never crashes the caller - documented defaults instead
    2. Risk is information, not judgement - mitigations are forward-facing
    3. A broken streak gets a plan, not a penalty

Database: data/habits.db (reference ledger, see providers.py)
    - habit_completions: One row per habit per completed day

Configuration: args/streak_prediction.yaml
    - Ensemble weights and horizon calibration
    - Seasonal month table
    - Risk thresholds and factor triggers
    - Mood and time-of-day multipliers
"""

from habitcore import ARGS_DIR, DATA_DIR

# Path constants
DB_PATH = DATA_DIR / "habits.db"
CONFIG_PATH = ARGS_DIR / "streak_prediction.yaml"
