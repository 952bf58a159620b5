# yapf: disable
import logging
from typing import Union

from quickpose.utils.log_utils import get_logger

# yapf: enable


class BaseMetric:
    RANK = 0

    def __init__(
        self,
        name: str,
        logger: Union[None, str, logging.Logger] = None,
    ) -> None:
        self.name = name
        self.logger = get_logger(logger)

    def __call__(self, *args, **kwargs):
        return dict()

    def check_frame_number(self, pred_poses: list, gt_poses: list) -> int:
        if len(pred_poses) != len(gt_poses):
            self.logger.error('Prediction and ground-truth does not match in '
                              'the number of frame.')
            raise ValueError
        return len(gt_poses)
