"""Intent classification with a free-first escalation ladder."""

from .classifier import Classifier, ModelClassification

__all__ = ["Classifier", "ModelClassification"]
