"""
Model router for selecting the model used by each AI feature.
"""
from prepcoach.core import config

# Feature -> model mapping; None means the active provider's default model
MODEL_ROUTING = {
    "question_generation": None,
    "answer_evaluation": None,
    "cv_analysis": None,
    "interview_evaluation": None,
}

# Feature -> sampling temperature
TEMPERATURE_ROUTING = {
    "question_generation": 0.8,
    "answer_evaluation": 0.2,
    "cv_analysis": 0.3,
    "interview_evaluation": 0.2,
}


def get_model_for_feature(feature: str) -> str:
    """
    Get the model for a feature.

    Args:
        feature: Feature name (e.g. "question_generation", "answer_evaluation")

    Returns:
        Model identifier string
    """
    return MODEL_ROUTING.get(feature) or config.get_default_model()


def get_temperature_for_feature(feature: str) -> float:
    return TEMPERATURE_ROUTING.get(feature, 0.7)
