from adaptive_practice.scoring.confidence import (
    ConfidenceFactors,
    ConfidenceInput,
    ConfidenceResult,
    calculate_confidence_score,
    validate_confidence_input,
)

__all__ = [
    "ConfidenceFactors",
    "ConfidenceInput",
    "ConfidenceResult",
    "calculate_confidence_score",
    "validate_confidence_input",
]
