"""Application constants."""

# Hard-valid rep range for a single set
REP_MIN = 1
REP_MAX = 40

# e1RM = weight * (1 + reps / E1RM_REP_DIVISOR). Changing this rewrites every stored comparison.
E1RM_REP_DIVISOR = 30

# Rep outlier detection
OUTLIER_HISTORY_WINDOW = 10
OUTLIER_MEDIAN_MULTIPLIER = 2
OUTLIER_TARGET_SLACK = 10

# End-of-workout summary
BIGGEST_WINS_LIMIT = 3
WIN_WEIGHT_DELTA = 10
WIN_REPS_DELTA = 3

REPS_UNIT = "reps"
