"""
Text Parser

Regex fallback for free-text workout descriptions, used when no language
model credential is configured. Handles short comma/semicolon/line separated
entries such as "bench 135x10, squat 225 for 5, row 3x8 at 95".
"""

import re
import logging
import string
from typing import List

from .models import ParsedExercise, ParsedSet, ParsedWorkoutData

logger = logging.getLogger(__name__)

# Placeholder rep count emitted when captures are not propagated
DEFAULT_REPS = 10


class FallbackWorkoutParser:
    """Parser for free text without a language model"""

    SEGMENT_SPLIT_PATTERN = re.compile(r'[,;\n]')

    # Tried in order, first match wins
    WEIGHT_X_REPS_PATTERN = re.compile(r'^(.+?)\s+(\d+)\s*x\s*(\d+)$', re.IGNORECASE)  # "bench 135x10"
    WEIGHT_FOR_REPS_PATTERN = re.compile(r'^(.+?)\s+(\d+)\s+for\s+(\d+)$', re.IGNORECASE)  # "squat 225 for 5"
    SETS_X_REPS_AT_WEIGHT_PATTERN = re.compile(
        r'^(.+?)\s+(\d+)\s*x\s*(\d+)\s+at\s+(\d+)$', re.IGNORECASE
    )  # "row 3x8 at 95"

    def __init__(self, propagate_captures: bool = False):
        """
        Args:
            propagate_captures: Emit the captured weight and reps. When False,
                every matched entry yields one bodyweight set of DEFAULT_REPS,
                which is what existing consumers of this parser receive.
        """
        self.propagate_captures = propagate_captures

    def parse(self, text: str) -> ParsedWorkoutData:
        exercises: List[ParsedExercise] = []

        for raw_segment in self.SEGMENT_SPLIT_PATTERN.split(text):
            segment = raw_segment.strip().lower()
            if not segment:
                continue
            exercises.append(self._parse_segment(segment))

        logger.info(f"Fallback parser extracted {len(exercises)} exercises")
        return ParsedWorkoutData(exercises=exercises)

    def _parse_segment(self, segment: str) -> ParsedExercise:
        match = self.WEIGHT_X_REPS_PATTERN.match(segment)
        if match:
            name, weight, reps = match.groups()
            return self._exercise(name, [(1, float(weight), int(reps))])

        match = self.WEIGHT_FOR_REPS_PATTERN.match(segment)
        if match:
            name, weight, reps = match.groups()
            return self._exercise(name, [(1, float(weight), int(reps))])

        match = self.SETS_X_REPS_AT_WEIGHT_PATTERN.match(segment)
        if match:
            name, sets, reps, weight = match.groups()
            return self._exercise(name, [(int(sets), float(weight), int(reps))])

        logger.debug(f"No pattern matched segment: {segment!r}")
        return ParsedExercise(name=string.capwords(segment), sets=[])

    def _exercise(self, name: str, captured: List[tuple]) -> ParsedExercise:
        if not self.propagate_captures:
            sets = [ParsedSet(weight=None, reps=DEFAULT_REPS, set_type="working")]
        else:
            sets = [
                ParsedSet(weight=weight, reps=reps, set_type="working")
                for count, weight, reps in captured
                for _ in range(count)
            ]
        return ParsedExercise(name=string.capwords(name), sets=sets)
