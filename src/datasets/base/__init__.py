"""
Jaipur Traffic Grid - Base Classes for Datasets

Abstract base classes that dataset implementations inherit from.

Usage:
    from src.datasets.base import BasePreprocessor

    class TrafficGridPreprocessor(BasePreprocessor):
        def transform(self, df: pd.DataFrame) -> pd.DataFrame:
            ...
"""

from src.datasets.base.preprocessor import BasePreprocessor, PreprocessingResult

__all__ = [
    "BasePreprocessor",
    "PreprocessingResult",
]
