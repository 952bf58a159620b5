from mmengine.registry import Registry

from .quickpose_evaluation import QuickPoseEvaluation

EVALUATION = Registry('evaluation')

EVALUATION.register_module(
    name='QuickPoseEvaluation', module=QuickPoseEvaluation)


def build_evaluation(cfg) -> QuickPoseEvaluation:
    """Build an evaluation instance."""
    return EVALUATION.build(cfg)
