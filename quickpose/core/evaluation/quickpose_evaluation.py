# yapf: disable
import logging
import prettytable
from tqdm import tqdm
from typing import List, Sequence, Union

from quickpose.data_structure.multiview import MultiView
from quickpose.data_structure.pose import MultiPersonPose
from quickpose.ops.bottom_up_association.builder import (
    QuickPoseAssociator, build_bottom_up_associator,
)
from quickpose.transform.convention import convert_poses
from quickpose.transform.limbs import calibrate_max_bone_lengths
from quickpose.utils.log_utils import get_logger
from quickpose.utils.skeleton_utils import get_skeleton_info
from .metric_manager import MetricManager
from .metrics.base_metric import BaseMetric

# yapf: enable


class QuickPoseEvaluation:
    """Run the associator on every frame and evaluate the predictions
    against ground truth."""

    def __init__(self,
                 associator: Union[dict, QuickPoseAssociator],
                 metric_list: List[Union[dict, BaseMetric]],
                 pick_dict: Union[dict, None] = None,
                 gt_kps3d_convention: str = 'campus',
                 eval_kps3d_convention: str = 'openpose_25',
                 bone_length_margin: Union[None, float] = None,
                 logger: Union[None, str, logging.Logger] = None) -> None:
        """
        Args:
            associator (Union[dict, QuickPoseAssociator]):
                The associator or its config.
            metric_list (List[Union[dict, BaseMetric]]):
                A list of metrics to be evaluated.
            pick_dict (Union[dict, None], optional):
                Selected metrics to be printed in the final table.
                Defaults to None.
            gt_kps3d_convention (str, optional):
                Convention of the ground-truth poses.
                Defaults to 'campus'.
            eval_kps3d_convention (str, optional):
                Convention both sides are converted to before evaluation.
                Defaults to 'openpose_25'.
            bone_length_margin (Union[None, float], optional):
                If given, bone length limits of the associator are
                calibrated from the ground truth with this margin before
                running. Defaults to None.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        if isinstance(associator, dict):
            associator['logger'] = self.logger
            self.associator = build_bottom_up_associator(associator)
        else:
            self.associator = associator
        self.metric_manager = MetricManager(
            metric_list=metric_list, pick_dict=pick_dict, logger=self.logger)
        self.gt_kps3d_convention = gt_kps3d_convention
        self.eval_kps3d_convention = eval_kps3d_convention
        self.bone_length_margin = bone_length_margin

    def calibrate(self, gt_poses: Sequence[MultiPersonPose]) -> None:
        """Set the associator's bone length limits from ground truth."""
        pred_convention = self.associator.kps_convention
        gt_poses = convert_poses(gt_poses, self.gt_kps3d_convention,
                                 pred_convention)
        limbs = get_skeleton_info(pred_convention)['bone_limbs']
        margin = self.bone_length_margin \
            if self.bone_length_margin is not None else 0.0
        max_bone_lengths = calibrate_max_bone_lengths(
            gt_poses, limbs, margin=margin)
        for kps_a, kps_b, length in max_bone_lengths:
            self.logger.info(f'Max bone length {kps_a}-{kps_b}: {length:.3f}')
            self.associator.set_max_bone_length(kps_a, kps_b, length)

    def run(self, multiviews: Sequence[MultiView],
            gt_poses: Sequence[MultiPersonPose]) -> dict:
        """Associate every frame and evaluate.

        Args:
            multiviews (Sequence[MultiView]):
                Frames with part affinity scores set.
            gt_poses (Sequence[MultiPersonPose]):
                Ground-truth poses of every frame.

        Returns:
            dict: Picked metric results.
        """
        if len(multiviews) != len(gt_poses):
            self.logger.error(
                f'Got {len(multiviews)} frames and {len(gt_poses)} '
                'frames of ground truth.')
            raise ValueError
        if self.bone_length_margin is not None:
            self.calibrate(gt_poses)
        pred_poses = []
        for multiview in tqdm(multiviews):
            _, _, multi_person_pose = self.associator.associate_frame(
                multiview)
            pred_poses.append(multi_person_pose)
        pred_poses = convert_poses(pred_poses,
                                   self.associator.kps_convention,
                                   self.eval_kps3d_convention)
        gt_poses = convert_poses(gt_poses, self.gt_kps3d_convention,
                                 self.eval_kps3d_convention)
        eval_results, _ = self.metric_manager(
            pred_poses=pred_poses, gt_poses=gt_poses)

        table = prettytable.PrettyTable()
        table.field_names = ['Metric name', 'Value']
        for metric_name, metric_dict in eval_results.items():
            for key, value in metric_dict.items():
                if isinstance(value, float):
                    table.add_row([f'{metric_name}: {key}', f'{value:.2f}'])
        self.logger.info('\n' + table.get_string())
        return eval_results
