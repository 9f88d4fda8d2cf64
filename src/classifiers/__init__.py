"""Post text classifiers."""

from .text_classifier import TextClassifier, classify_text

__all__ = [
    'TextClassifier',
    'classify_text',
]
