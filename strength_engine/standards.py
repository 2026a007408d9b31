"""
Strength standards lookup and classification.

Standards are relative to bodyweight for the major lifts (Pull-Up and Dips
are measured in reps). All name lookups go through a single
ExerciseStandardsCatalog so the whitelist lives in one place.

Name matching policy: surrounding whitespace is stripped, inner whitespace is
collapsed and the result is case-folded before lookup. Aliases resolve to
their canonical exercise.
"""
from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional

from strength_engine.constants import (
    GROUP_OTHER,
    LEVEL_DESCRIPTIONS,
    LEVEL_SCORES,
    METRIC_RATIO,
    METRIC_REPS,
    STRENGTH_LEVELS,
    STRENGTH_STANDARDS,
    SUPPORTED_GENDERS,
)

logger = logging.getLogger(__name__)


def normalize_exercise_name(name: str) -> str:
    return " ".join(str(name).split()).casefold()


def clamp_progress(progress: float) -> float:
    """Clamp to [0, 100]; anything non-finite counts as no progress."""
    if progress is None or not math.isfinite(progress):
        return 0.0
    return max(0.0, min(100.0, progress))


class ExerciseStandardsCatalog:
    """Lookup table from exercise names (and aliases) to strength standards."""

    def __init__(self, entries: Optional[List[dict]] = None) -> None:
        self._entries: List[dict] = []
        self._by_name: Dict[str, dict] = {}
        for raw in entries if entries is not None else STRENGTH_STANDARDS:
            entry = self._build_entry(raw)
            self._entries.append(entry)
            for name in [entry['name'], *entry['aliases']]:
                key = normalize_exercise_name(name)
                if key in self._by_name:
                    raise ValueError(f"Duplicate exercise name in standards table: {name}")
                self._by_name[key] = entry

    @staticmethod
    def _build_entry(raw: dict) -> dict:
        name = raw['name']
        entry = {
            'name': name,
            'aliases': list(raw.get('aliases', [])),
            'metric': raw.get('metric', METRIC_RATIO),
            'muscle_group': raw.get('muscle_group'),
            'group': raw.get('group', GROUP_OTHER),
        }
        if entry['metric'] not in (METRIC_RATIO, METRIC_REPS):
            raise ValueError(f"Unknown metric '{entry['metric']}' for {name}")
        for gender in SUPPORTED_GENDERS:
            multipliers = list(raw[gender])
            if len(multipliers) != len(STRENGTH_LEVELS):
                raise ValueError(
                    f"{name} ({gender}) needs {len(STRENGTH_LEVELS)} multipliers, got {len(multipliers)}"
                )
            # Interpolation relies on strictly increasing thresholds
            for lower, upper in zip(multipliers, multipliers[1:]):
                if not upper > lower:
                    raise ValueError(f"{name} ({gender}) multipliers must strictly increase")
            entry[gender] = [
                {
                    'level': level,
                    'multiplier': float(multiplier),
                    'description': LEVEL_DESCRIPTIONS[level],
                }
                for level, multiplier in zip(STRENGTH_LEVELS, multipliers)
            ]
        return entry

    def get(self, exercise_name: Optional[str]) -> Optional[dict]:
        if not exercise_name:
            return None
        return self._by_name.get(normalize_exercise_name(exercise_name))

    def has_standards(self, exercise_name: Optional[str]) -> bool:
        return self.get(exercise_name) is not None

    def canonical_name(self, exercise_name: Optional[str]) -> Optional[str]:
        entry = self.get(exercise_name)
        return entry['name'] if entry else None

    def names(self) -> List[str]:
        return [entry['name'] for entry in self._entries]

    def ladder(self, exercise_name: Optional[str], gender: Optional[str]) -> Optional[List[dict]]:
        entry = self.get(exercise_name)
        if entry is None or gender not in SUPPORTED_GENDERS:
            return None
        return [dict(row) for row in entry[gender]]

    def rows(self) -> List[dict]:
        """Flattened StrengthStandardRow records for the whole table."""
        return [
            {'exercise_name': entry['name'], 'gender': gender, **row}
            for entry in self._entries
            for gender in SUPPORTED_GENDERS
            for row in entry[gender]
        ]

    def metric(self, exercise_name: Optional[str]) -> Optional[str]:
        entry = self.get(exercise_name)
        return entry['metric'] if entry else None

    def muscle_group(self, exercise_name: Optional[str]) -> Optional[str]:
        entry = self.get(exercise_name)
        return entry['muscle_group'] if entry else None

    def exercise_group(self, exercise_name: Optional[str]) -> str:
        entry = self.get(exercise_name)
        return entry['group'] if entry else GROUP_OTHER


DEFAULT_CATALOG = ExerciseStandardsCatalog()


def has_strength_standards(exercise_name: str, catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG) -> bool:
    return catalog.has_standards(exercise_name)


def get_standards_ladder(
    exercise_name: str,
    gender: str,
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> Optional[List[dict]]:
    """Full ladder of standards for an exercise, or None if unsupported."""
    return catalog.ladder(exercise_name, gender)


def available_standards(catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG) -> List[str]:
    return catalog.names()


def get_strength_standard(
    exercise_name: str,
    gender: Optional[str],
    bodyweight_kg: Optional[float],
    one_rep_max: Optional[float],
    catalog: ExerciseStandardsCatalog = DEFAULT_CATALOG,
) -> Optional[dict]:
    """
    Classify a lift against the exercise's strength standards.

    Args:
        exercise_name: Logged exercise name (aliases accepted).
        gender: 'male' or 'female'.
        bodyweight_kg: Lifter bodyweight in kg, must be positive.
        one_rep_max: Best estimated 1RM in kg; for rep-metric exercises
                     (Pull-Up, Dips) the best single-set rep count.

    Returns:
        None when the lift cannot be classified (unsupported exercise,
        missing/invalid gender, bodyweight or 1RM). Otherwise a dict with
        'level', 'level_index' (1-6), 'progress' (0-100 toward the next
        level), 'next_level' (None at World Class, Beginner
        while below the Beginner threshold), 'threshold',
        'next_threshold', 'ratio' and 'meets_threshold' (False when the
        ratio is still below the Beginner threshold).
    """
    entry = catalog.get(exercise_name)
    if entry is None:
        logger.debug("No strength standards for exercise '%s'", exercise_name)
        return None
    if gender not in SUPPORTED_GENDERS:
        logger.debug("Cannot classify '%s': gender %r not supported", exercise_name, gender)
        return None
    if bodyweight_kg is None or not math.isfinite(bodyweight_kg) or bodyweight_kg <= 0:
        logger.debug("Cannot classify '%s': bodyweight %r invalid", exercise_name, bodyweight_kg)
        return None
    if one_rep_max is None or not math.isfinite(one_rep_max) or one_rep_max < 0:
        return None

    standards = entry[gender]
    if entry['metric'] == METRIC_REPS:
        ratio = float(one_rep_max)
    else:
        ratio = one_rep_max / bodyweight_kg

    level_index = -1
    for i in range(len(standards) - 1, -1, -1):
        if ratio >= standards[i]['multiplier']:
            level_index = i
            break

    if level_index == -1:
        # Below the first milestone: still working toward Beginner itself
        first = standards[0]['multiplier']
        progress = (ratio / first) * 100 if first > 0 else 0.0
        current = standards[0]
        next_standard = standards[0]
        threshold = 0.0
    else:
        current = standards[level_index]
        next_standard = standards[level_index + 1] if level_index < len(standards) - 1 else None
        threshold = current['multiplier']
        if next_standard is None:
            progress = 100.0
        else:
            span = next_standard['multiplier'] - threshold
            progress = ((ratio - threshold) / span) * 100 if span > 0 else 0.0

    return {
        'exercise_name': entry['name'],
        'level': current['level'],
        'level_index': LEVEL_SCORES[current['level']],
        'progress': clamp_progress(progress),
        'next_level': next_standard['level'] if next_standard else None,
        'threshold': threshold,
        'next_threshold': next_standard['multiplier'] if next_standard else None,
        'ratio': round(ratio, 4),
        'meets_threshold': level_index != -1,
        'metric': entry['metric'],
    }


__all__ = [
    "ExerciseStandardsCatalog",
    "DEFAULT_CATALOG",
    "normalize_exercise_name",
    "clamp_progress",
    "has_strength_standards",
    "get_standards_ladder",
    "available_standards",
    "get_strength_standard",
]
