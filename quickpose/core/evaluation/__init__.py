from .builder import EVALUATION, build_evaluation
from .metric_manager import MetricManager
from .quickpose_evaluation import QuickPoseEvaluation

__all__ = [
    'EVALUATION', 'MetricManager', 'QuickPoseEvaluation', 'build_evaluation'
]
