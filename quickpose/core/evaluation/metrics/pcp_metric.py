# yapf: disable
import logging
import numpy as np
from prettytable import PrettyTable
from typing import Dict, List, Tuple, Union

from quickpose.data_structure.pose import MultiPersonPose
from quickpose.utils.eval_utils import check_limb_is_correct
from quickpose.utils.skeleton_utils import get_skeleton_info
from .base_metric import BaseMetric

# yapf: enable


class PCPMetric(BaseMetric):
    """Percentage of Correct Parts (PCP) metric measures percentage of the
    corrected predicted limbs.

    This is a rank-1 metric, depends on rank-0 metric PredictionMatcher. A
    limb of a ground-truth person is incorrect when no prediction is
    matched, or when the matched prediction misses one of its ends.
    """
    RANK = 1

    def __init__(
        self,
        name: str,
        kps_convention: str = 'openpose_25',
        selected_limbs_names: Union[None, List[str]] = None,
        threshold: float = 0.5,
        additional_limbs: Union[None, Dict[str, List[int]]] = None,
        show_table: bool = False,
        logger: Union[None, str, logging.Logger] = None,
    ) -> None:
        """Init PCP metric evaluation.

        Args:
            name (str):
                Name of the metric.
            kps_convention (str, optional):
                Convention of both predictions and ground truth.
                Defaults to 'openpose_25'.
            selected_limbs_names (Union[None, List[str]], optional):
                Names of the convention's eval_limbs to evaluate.
                Defaults to None, all of them.
            threshold (float, optional):
                Threshold for correct limb. If the mean endpoint error is
                not larger than threshold * limb_length, the limb is
                correct. Defaults to 0.5.
            additional_limbs (Union[None, Dict[str, List[int]]], optional):
                Additional limbs to be evaluated, name -> [kps_a, kps_b].
                Defaults to None.
            show_table (bool, optional):
                Whether to show the table of detailed metric result.
                Defaults to False.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be
                selected. Defaults to None.
        """
        BaseMetric.__init__(self, name=name, logger=logger)
        self.kps_convention = kps_convention
        self.threshold = threshold
        self.show_table = show_table
        eval_limbs = get_skeleton_info(kps_convention)['eval_limbs']
        if selected_limbs_names is None:
            selected_limbs_names = list(eval_limbs.keys())
        self.limbs = dict()
        for limb_name in selected_limbs_names:
            if limb_name not in eval_limbs:
                self.logger.error(f'{limb_name} is not a limb of '
                                  f'{kps_convention}.')
                raise KeyError
            self.limbs[limb_name] = eval_limbs[limb_name]
        if additional_limbs is not None:
            self.limbs.update(additional_limbs)

    def __call__(self, pred_poses: List[MultiPersonPose],
                 gt_poses: List[MultiPersonPose], **kwargs) -> dict:
        n_frame = self.check_frame_number(pred_poses, gt_poses)
        if 'match_matrix_gt2pred' in kwargs:
            match_matrix_gt2pred = kwargs['match_matrix_gt2pred']
        else:
            self.logger.error('No matching metric found. '
                              'Please add PredictionMatcher in the config.')
            raise KeyError
        pcp_mean, eval_table = self.calc_limbs_accuracy(
            pred_poses, gt_poses, match_matrix_gt2pred, n_frame)
        if self.show_table:
            self.logger.info('Detailed table for PCPMetric\n' +
                             eval_table.get_string())
        return dict(pcp_total_mean=pcp_mean)

    def calc_limbs_accuracy(
        self,
        pred_poses: List[MultiPersonPose],
        gt_poses: List[MultiPersonPose],
        match_matrix_gt2pred: List[List[int]],
        n_frame: int,
    ) -> Tuple[float, PrettyTable]:
        """Calculate accuracy of the selected limbs.

        Returns:
            Tuple[float, PrettyTable]:
                Accuracy in percent and table of detailed results.
        """
        limb_names = list(self.limbs.keys())
        n_correct = np.zeros(len(limb_names), dtype=np.int64)
        n_total = np.zeros(len(limb_names), dtype=np.int64)
        for frame_idx in range(n_frame):
            for gt_idx, gt_pose in enumerate(gt_poses[frame_idx]):
                pred_idx = match_matrix_gt2pred[frame_idx][gt_idx]
                pred_pose = pred_poses[frame_idx][pred_idx] \
                    if pred_idx >= 0 else None
                for limb_idx, limb_name in enumerate(limb_names):
                    start_point, end_point = self.limbs[limb_name]
                    if not (gt_pose.has_joint[start_point]
                            and gt_pose.has_joint[end_point]):
                        continue
                    n_total[limb_idx] += 1
                    if pred_pose is None or \
                            not pred_pose.has_joint[start_point] or \
                            not pred_pose.has_joint[end_point]:
                        continue
                    if check_limb_is_correct(
                            pred_pose.joint_pos[start_point],
                            pred_pose.joint_pos[end_point],
                            gt_pose.joint_pos[start_point],
                            gt_pose.joint_pos[end_point], self.threshold):
                        n_correct[limb_idx] += 1

        limb_accuracy = n_correct / np.clip(n_total, 1, None)
        total_mean = n_correct.sum() / max(int(n_total.sum()), 1)

        tb = PrettyTable()
        tb.field_names = ['Limb', 'Correct', 'Total', 'PCP']
        for limb_idx, limb_name in enumerate(limb_names):
            tb.add_row([
                limb_name, n_correct[limb_idx], n_total[limb_idx],
                np.char.mod('%.2f', limb_accuracy[limb_idx] * 100)
            ])
        tb.add_row([
            'total',
            n_correct.sum(),
            n_total.sum(),
            np.char.mod('%.2f', total_mean * 100)
        ])
        return float(total_mean * 100), tb
