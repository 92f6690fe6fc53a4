"""
Jaipur Traffic Grid - Traffic Readings Dataset

Grid readings from the traffic worker API: one record per cell with
congestion counts per severity bucket (yellow, red, dark_red) and a
timestamp in the fixed civil zone.

Components:
    - TrafficGridPreprocessor: Places readings on the map and normalizes times

Usage:
    from src.datasets.traffic import TrafficGridPreprocessor

    preprocessor = TrafficGridPreprocessor()
    result = preprocessor.run(raw_df, execution_date="2026-01-02")
    readings = preprocessor.get_data()
"""

from src.datasets.traffic.preprocess import TrafficGridPreprocessor, preprocess_traffic_data

__all__ = [
    "TrafficGridPreprocessor",
    "preprocess_traffic_data",
]
