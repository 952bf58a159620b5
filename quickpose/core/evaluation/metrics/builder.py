from mmengine.registry import Registry

from .base_metric import BaseMetric
from .pcp_metric import PCPMetric
from .prediction_matcher import PredictionMatcher

METRICS = Registry('metrics')

METRICS.register_module(name='PredictionMatcher', module=PredictionMatcher)
METRICS.register_module(name='PCPMetric', module=PCPMetric)


def build_metric(cfg) -> BaseMetric:
    """Build an evaluation metric."""
    return METRICS.build(cfg)
