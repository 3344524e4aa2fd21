"""Result types, mode policies and the backend client."""

from .base import (
    AnalysisError,
    PredictionResult,
    SoilBox,
    SoilResult,
    SummaryLine,
    TransportError,
    UserInputError,
    VegetationResult,
)
from .modes import MODE_POLICIES, ModePolicy, policy_for
from .remote import PredictionClient

__all__ = [
    "AnalysisError",
    "MODE_POLICIES",
    "ModePolicy",
    "PredictionClient",
    "PredictionResult",
    "SoilBox",
    "SoilResult",
    "SummaryLine",
    "TransportError",
    "UserInputError",
    "VegetationResult",
    "policy_for",
]
