"""Enumerations and policy constants for the adaptive engine.

Thresholds cite their published source where one exists. Values without a
citation are coaching conventions and are treated as configurable policy
(see adaptive_engine.config), not as physiological truth.
"""

from enum import Enum, IntEnum


class Priority(IntEnum):
    """Trigger priority tiers — lower value = more urgent.

    SAFETY triggers protect the athlete from accumulated fatigue and are
    surfaced ahead of everything else.
    """

    SAFETY = 0
    RECOVERY = 1
    PROGRESSION = 2
    OPTIMIZATION = 3


class PhaseType(str, Enum):
    """Macrocycle phase types."""

    BASE = "base"
    BUILD = "build"
    PEAK = "peak"
    TAPER = "taper"
    RECOVERY = "recovery"
    TRANSITION = "transition"


class WeekType(str, Enum):
    """Microcycle classification for a weekly target."""

    NORMAL = "normal"
    BUILD = "build"
    RECOVERY = "recovery"
    DELOAD = "deload"
    TEST = "test"
    RACE = "race"


class PlanMode(str, Enum):
    """How phases are regenerated. Does not affect the calculation core."""

    ROLLING = "rolling"
    GOAL_BASED = "goal_based"


class WorkoutCategory(str, Enum):
    STRENGTH = "strength"
    CARDIO = "cardio"
    FLEXIBILITY = "flexibility"
    OTHER = "other"


class WorkoutStatus(str, Enum):
    SUGGESTED = "suggested"
    SCHEDULED = "scheduled"
    SKIPPED = "skipped"
    COMPLETED = "completed"


class ReadinessRecommendation(str, Enum):
    """Training-intensity recommendation derived from the readiness score."""

    PUSH = "push"
    MAINTAIN = "maintain"
    REDUCE = "reduce"


class RiskLevel(str, Enum):
    """Monotony / strain / ACWR injury-risk classification."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    VERY_HIGH = "very_high"


class TSSMethod(str, Enum):
    """Which rung of the TSS cascade produced the estimate."""

    POWER = "power"
    HEART_RATE = "heart_rate"
    EFFORT_SCORE = "effort_score"
    RPE = "rpe"
    CATEGORY_DEFAULT = "category_default"
    NONE = "none"


class DeloadTriggerType(str, Enum):
    TSB = "tsb"
    VOLUME = "volume"
    PLATEAU = "plateau"
    RECOVERY = "recovery"


class DeloadSeverity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class DeloadType(str, Enum):
    VOLUME = "volume"
    INTENSITY = "intensity"
    FULL = "full"


class ProgressionModel(str, Enum):
    LINEAR = "linear"
    DOUBLE = "double"
    RPE_BASED = "rpe_based"


class PlateauAction(str, Enum):
    """Corrective action suggested for a stalled exercise, mildest first."""

    DELOAD_EXERCISE = "deload_exercise"
    CHANGE_REP_RANGE = "change_rep_range"
    SWAP_EXERCISE = "swap_exercise"


class RecommendationType(str, Enum):
    """The eight structured plan-adjustment variants."""

    PHASE_EXTENSION = "phase_extension"
    PHASE_SHORTEN = "phase_shorten"
    PHASE_INSERT = "phase_insert"
    WEEK_VOLUME_ADJUST = "week_volume_adjust"
    WEEK_TYPE_CHANGE = "week_type_change"
    WORKOUT_INTENSITY_SCALE = "workout_intensity_scale"
    WORKOUT_SUBSTITUTE = "workout_substitute"
    WORKOUT_SKIP = "workout_skip"


class RecommendationStatus(str, Enum):
    """Recommendation lifecycle. Every state other than PENDING is terminal."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    MODIFIED = "modified"
    DISMISSED = "dismissed"

    @property
    def is_terminal(self) -> bool:
        return self is not RecommendationStatus.PENDING


class ResponseAction(str, Enum):
    """Caller actions on a pending recommendation."""

    ACCEPT = "accept"
    MODIFY = "modify"
    DISMISS = "dismiss"


class TrainingAdaptation(str, Enum):
    """Targeted physiological adaptations (Galpin's nine adaptations)."""

    SKILL = "skill"
    SPEED_POWER = "speed_power"
    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    MUSCULAR_ENDURANCE = "muscular_endurance"
    ANAEROBIC_CAPACITY = "anaerobic_capacity"
    VO2MAX = "vo2max"
    LONG_DURATION = "long_duration"
    BODY_COMPOSITION = "body_composition"


# ---------------------------------------------------------------------------
# Load model — Banister (1991) impulse-response, Coggan's PMC conventions
# ---------------------------------------------------------------------------
CTL_WINDOW_DAYS = 42  # Chronic Training Load ("fitness")
ATL_WINDOW_DAYS = 7  # Acute Training Load ("fatigue")
TRAILING_WEEK_DAYS = 7

# Default athlete thresholds when none are known
DEFAULT_RESTING_HR = 50
DEFAULT_MAX_HR = 190

# TSS per minute from session RPE: 0.3 + 0.12 × RPE (RPE 5 ≈ 0.9, RPE 10 ≈ 1.5)
RPE_TSS_BASE_PER_MIN = 0.3
RPE_TSS_SLOPE_PER_MIN = 0.12

DEFAULT_CATEGORY_RPE = {
    WorkoutCategory.STRENGTH: 5,  # Muscular effort, lower cardiovascular demand
    WorkoutCategory.CARDIO: 6,
    WorkoutCategory.FLEXIBILITY: 3,
    WorkoutCategory.OTHER: 5,
}

# ---------------------------------------------------------------------------
# Monotony / strain — Foster (1998), Med Sci Sports Exerc 30(7):1164-1168
# ---------------------------------------------------------------------------
MONOTONY_LOW = 1.5
MONOTONY_MODERATE = 2.0
MONOTONY_HIGH = 2.5
MONOTONY_CONSTANT_LOAD = 10.0  # Identical non-zero loads every day

STRAIN_LOW = 3000
STRAIN_MODERATE = 5000
STRAIN_HIGH = 7000

# ACWR — Gabbett (2016), Br J Sports Med 50(5):273-280
ACWR_CAUTION_HIGH = 1.3
ACWR_DANGER_THRESHOLD = 1.5
ACWR_UNDERTRAINED = 0.8
ACWR_MIN_CHRONIC_LOAD = 20  # Below this CTL the "too low" warning is noise

# TSB bands for labelling form
TSB_VERY_FRESH = 25
TSB_FRESH = 10
TSB_OPTIMAL_LOW = -10
TSB_TIRED_LOW = -25
TSB_FATIGUED_LOW = -40

# ---------------------------------------------------------------------------
# Polarized distribution — Seiler (2010), Int J Sports Physiol Perform 5:276
# ---------------------------------------------------------------------------
POLARIZED_TARGET_LOW_PCT = 80.0
POLARIZED_TARGET_HIGH_PCT = 20.0
POLARIZED_MIN_LOW_PCT = 75.0
POLARIZED_MAX_MID_PCT = 15.0
POLARIZED_MIN_HIGH_PCT = 10.0
POLARIZED_MID_PENALTY_FLOOR = 10.0  # Zone 3 time above this is penalised 2x

# ---------------------------------------------------------------------------
# Readiness weights — Galpin readiness model (weights sum to 100)
# ---------------------------------------------------------------------------
READINESS_WEIGHT_SUBJECTIVE = 35
READINESS_WEIGHT_HRV = 20
READINESS_WEIGHT_SLEEP = 20
READINESS_WEIGHT_FORM = 15
READINESS_WEIGHT_GRIP = 5
READINESS_WEIGHT_JUMP = 5

READINESS_PUSH_THRESHOLD = 70
READINESS_MAINTAIN_THRESHOLD = 40
READINESS_NEUTRAL_SCORE = 50.0

# Sleep duration — Walker (2017), Watson et al. (2015) consensus: 7-9 h
SLEEP_OPTIMAL_MIN_HOURS = 7.0
SLEEP_OPTIMAL_MAX_HOURS = 9.0
SLEEP_ADEQUATE_MIN_HOURS = 6.0
SLEEP_OVERSLEEP_SCORE = 90.0
SLEEP_UNKNOWN_HOURS_SCORE = 70.0

# ---------------------------------------------------------------------------
# Deload triggers — Israetel et al., Scientific Principles of Hypertrophy
# ---------------------------------------------------------------------------
DELOAD_TSB_THRESHOLD = -15
DELOAD_SEVERE_TSB = -25
DELOAD_MUSCLES_OVER_MRV = 3
DELOAD_PLATEAU_WEEKS = 2
DELOAD_PLATEAU_EXERCISES = 3
DELOAD_LOW_RECOVERY_SCORE = 50
DELOAD_LOW_RECOVERY_DAYS = 3
DELOAD_MIN_DAYS_BETWEEN = 7

# ---------------------------------------------------------------------------
# Progression
# ---------------------------------------------------------------------------
LINEAR_UPPER_INCREMENT = 5.0
LINEAR_LOWER_INCREMENT = 10.0
DOUBLE_REP_LOW = 8
DOUBLE_REP_HIGH = 12
DOUBLE_INCREMENT = 5.0
RPE_TARGET_LOW = 7.0
RPE_TARGET_HIGH = 9.0
RPE_INCREMENT = 5.0
PLATE_INCREMENT = 2.5
PLATEAU_SESSION_THRESHOLD = 2
PLATEAU_CHANGE_REPS_AFTER = 4
PLATEAU_SWAP_AFTER = 6

# Tempo — explosive phase ("X") counted as ~0.5 s
EXPLOSIVE_PHASE_SECONDS = 0.5
DEFAULT_TEMPO = "2-0-1-0"
DEFAULT_ASSUMED_RPE = 7.5  # Typical working set when nothing was logged

# ---------------------------------------------------------------------------
# Recommendation triggers
# ---------------------------------------------------------------------------
RECOVERY_INSERT_TSB = -25
RECOVERY_INSERT_READINESS = 40
RECOVERY_INSERT_DAYS = 7
DAY_OF_READINESS_THRESHOLD = 50
WORKOUT_SKIP_READINESS = 25
VOLUME_INCREASE_TSB = 10
VOLUME_INCREASE_READINESS = 70
VOLUME_INCREASE_PCT = 10.0
VOLUME_DECREASE_PCT = -15.0
LOW_COMPLIANCE_RATIO = 0.8
LOW_COMPLIANCE_WEEKS = 2
PHASE_PROGRESS_TOLERANCE = 20.0
PHASE_EXTENSION_MAX_DAYS = 14
PHASE_EXTENSION_WINDOW_DAYS = 14
PHASE_SHORTEN_MIN_PROGRESS = 90.0
PHASE_SHORTEN_MIN_DAYS_LEFT = 7
PHASE_SHORTEN_FRACTION = 0.3

# Modifiers given to a freshly inserted phase
INSERTED_RECOVERY_VOLUME_MOD = 0.5
INSERTED_RECOVERY_INTENSITY_MOD = 0.6
INSERTED_OTHER_VOLUME_MOD = 0.7
INSERTED_OTHER_INTENSITY_MOD = 0.8

# Preview projection constants (simplified linear model)
RECOVERY_WEEK_VOLUME_FRACTION = 0.5
RECOVERY_WEEK_TSB_GAIN_7D = 15.0
RECOVERY_WEEK_TSB_GAIN_14D = 20.0
RECOVERY_PHASE_TSB_GAIN_7D = 20.0
RECOVERY_PHASE_TSB_GAIN_14D = 30.0
SKIP_WORKOUT_TSB_GAIN_7D = 3.0
SKIP_WORKOUT_TSB_GAIN_14D = 2.0
