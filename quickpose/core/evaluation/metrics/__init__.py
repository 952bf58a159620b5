from .base_metric import BaseMetric
from .builder import METRICS, build_metric
from .pcp_metric import PCPMetric
from .prediction_matcher import PredictionMatcher

__all__ = [
    'BaseMetric', 'METRICS', 'PCPMetric', 'PredictionMatcher', 'build_metric'
]
