# strength_engine/constants.py

STRENGTH_LEVELS = [
    'Beginner',
    'Novice',
    'Intermediate',
    'Advanced',
    'Elite',
    'World Class',
]

# 1-indexed level scores used by every aggregate (level index + progress/100)
LEVEL_SCORES = {level: index + 1 for index, level in enumerate(STRENGTH_LEVELS)}
MAX_LEVEL_SCORE = len(STRENGTH_LEVELS)

LEVEL_DESCRIPTIONS = {
    'Beginner': 'Just starting out',
    'Novice': 'A few months training',
    'Intermediate': '1-2 years consistent training',
    'Advanced': '2-5 years dedicated training',
    'Elite': 'Competitive athlete level',
    'World Class': 'World record territory',
}

SUPPORTED_GENDERS = ('male', 'female')

METRIC_RATIO = 'ratio'  # multipliers are multiples of bodyweight
METRIC_REPS = 'reps'    # multipliers are bodyweight reps in a single set

GROUP_PUSH = 'Push'
GROUP_PULL = 'Pull'
GROUP_LOWER = 'Lower'
GROUP_OTHER = 'Other'
EXERCISE_GROUPS = [GROUP_PUSH, GROUP_PULL, GROUP_LOWER]

# Strength standards, StrengthLevel.com-derived. One multiplier per level in
# STRENGTH_LEVELS order; each ladder must be strictly increasing.
STRENGTH_STANDARDS = [
    {
        'name': 'Bench Press',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Chest',
        'group': GROUP_PUSH,
        'male': (0.5, 0.75, 1.0, 1.5, 1.75, 2.0),
        'female': (0.3, 0.5, 0.65, 0.9, 1.1, 1.25),
    },
    {
        'name': 'Incline Bench Press',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Chest',
        'group': GROUP_PUSH,
        'male': (0.5, 0.75, 1.0, 1.5, 1.75, 2.0),
        'female': (0.2, 0.4, 0.65, 1.0, 1.4, 1.75),
    },
    {
        'name': 'Dumbbell Bench Press',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Chest',
        'group': GROUP_PUSH,
        'male': (0.2, 0.35, 0.5, 0.75, 1.0, 1.25),
        'female': (0.1, 0.2, 0.3, 0.5, 0.7, 0.9),
    },
    {
        'name': 'Incline Dumbbell Press',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Chest',
        'group': GROUP_PUSH,
        'male': (0.25, 0.35, 0.5, 0.65, 0.85, 1.0),
        'female': (0.1, 0.2, 0.3, 0.45, 0.6, 0.75),
    },
    {
        'name': 'Squat',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Quads',
        'group': GROUP_LOWER,
        'male': (0.75, 1.0, 1.5, 2.0, 2.5, 2.75),
        'female': (0.5, 0.75, 1.0, 1.5, 1.75, 2.0),
    },
    {
        'name': 'Front Squat',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Quads',
        'group': GROUP_LOWER,
        'male': (0.6, 0.85, 1.25, 1.75, 2.0, 2.25),
        'female': (0.4, 0.6, 0.85, 1.25, 1.5, 1.75),
    },
    {
        'name': 'Deadlift',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Back',
        'group': GROUP_LOWER,
        'male': (1.0, 1.25, 1.75, 2.25, 2.75, 3.0),
        'female': (0.5, 0.75, 1.25, 1.75, 2.0, 2.25),
    },
    {
        'name': 'Romanian Deadlift',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Hamstrings',
        'group': GROUP_LOWER,
        'male': (0.75, 1.0, 1.5, 2.0, 2.25, 2.5),
        'female': (0.4, 0.6, 1.0, 1.5, 1.75, 2.0),
    },
    {
        'name': 'Overhead Press',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Shoulders',
        'group': GROUP_PUSH,
        'male': (0.35, 0.5, 0.75, 1.0, 1.25, 1.5),
        'female': (0.2, 0.3, 0.45, 0.65, 0.8, 1.0),
    },
    {
        'name': 'Dumbbell Shoulder Press',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Shoulders',
        'group': GROUP_PUSH,
        'male': (0.15, 0.25, 0.4, 0.6, 0.75, 0.9),
        'female': (0.1, 0.15, 0.25, 0.35, 0.5, 0.65),
    },
    {
        'name': 'Bent Over Row',
        'aliases': ['Barbell Row'],
        'metric': METRIC_RATIO,
        'muscle_group': 'Back',
        'group': GROUP_PULL,
        'male': (0.5, 0.75, 1.0, 1.5, 1.75, 2.0),
        'female': (0.3, 0.5, 0.65, 1.0, 1.25, 1.5),
    },
    {
        'name': 'Pull-Up',
        'aliases': ['Pull-ups'],
        'metric': METRIC_REPS,
        'muscle_group': 'Back',
        'group': GROUP_PULL,
        'male': (1, 5, 10, 15, 20, 25),
        'female': (1, 3, 6, 10, 15, 20),
    },
    {
        'name': 'Weighted Pull-Ups',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Back',
        'group': GROUP_PULL,
        'male': (0.0, 0.1, 0.25, 0.5, 0.75, 1.0),
        'female': (0.0, 0.05, 0.15, 0.35, 0.5, 0.65),
    },
    {
        'name': 'Dips',
        'aliases': [],
        'metric': METRIC_REPS,
        'muscle_group': 'Triceps',
        'group': GROUP_PUSH,
        'male': (1, 8, 15, 25, 35, 45),
        'female': (1, 5, 10, 15, 20, 30),
    },
    {
        'name': 'Weighted Dips',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Triceps',
        'group': GROUP_PUSH,
        'male': (0.0, 0.15, 0.35, 0.65, 1.0, 1.35),
        'female': (0.0, 0.1, 0.25, 0.45, 0.7, 1.0),
    },
    {
        'name': 'Dumbbell Curl',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Biceps',
        'group': GROUP_PULL,
        'male': (0.1, 0.15, 0.3, 0.5, 0.65, 0.8),
        'female': (0.05, 0.1, 0.2, 0.35, 0.45, 0.55),
    },
    {
        'name': 'Barbell Curl',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Biceps',
        'group': GROUP_PULL,
        'male': (0.2, 0.4, 0.6, 0.85, 1.15, 1.4),
        'female': (0.1, 0.2, 0.4, 0.6, 0.85, 1.1),
    },
    {
        'name': 'Leg Press',
        'aliases': [],
        'metric': METRIC_RATIO,
        'muscle_group': 'Quads',
        'group': GROUP_LOWER,
        'male': (1.0, 1.75, 2.75, 4.0, 5.25, 6.5),
        'female': (0.5, 1.25, 2.0, 3.25, 4.5, 5.75),
    },
]

# Muscle groups rolled up for the per-session split display
MUSCLE_SPLIT_ROLLUP = {
    'Biceps': 'Arms',
    'Triceps': 'Arms',
    'Quads': 'Legs',
    'Hamstrings': 'Legs',
    'Calves': 'Legs',
}
SPLIT_EXCLUDED_MUSCLE_GROUPS = {'Cardio'}

BODYWEIGHT_BUCKET = 'bodyweight'

# Only flag a weakest group for coaching when it trails the strongest by a full level
WEAKEST_GROUP_MIN_GAP = 1.0
