# yapf: disable
import logging
import numpy as np
from typing import List, Union

from quickpose.data_structure.pose import MultiPersonPose, Pose
from .base_metric import BaseMetric

# yapf: enable


class PredictionMatcher(BaseMetric):
    """Match every ground-truth person to the predicted pose with the
    smallest mean joint distance over commonly present joints.

    This is a rank-0 metric, its match_matrix_gt2pred is consumed by rank-1
    metrics.
    """
    RANK = 0

    def __init__(
        self,
        name: str,
        logger: Union[None, str, logging.Logger] = None,
    ) -> None:
        BaseMetric.__init__(self, name=name, logger=logger)

    def __call__(self, pred_poses: List[MultiPersonPose],
                 gt_poses: List[MultiPersonPose], **kwargs) -> dict:
        """
        Args:
            pred_poses (List[MultiPersonPose]):
                Predicted poses of every frame.
            gt_poses (List[MultiPersonPose]):
                Ground-truth poses of every frame.

        Returns:
            dict:
                match_matrix_gt2pred, for every frame a list with the
                index of the matched prediction of each ground-truth
                person, -1 if no prediction shares a joint with it.
        """
        n_frame = self.check_frame_number(pred_poses, gt_poses)
        match_matrix_gt2pred = []
        for frame_idx in range(n_frame):
            frame_match = [
                self.match_person(gt_pose, pred_poses[frame_idx])
                for gt_pose in gt_poses[frame_idx]
            ]
            match_matrix_gt2pred.append(frame_match)
        return dict(match_matrix_gt2pred=match_matrix_gt2pred)

    @staticmethod
    def match_person(gt_pose: Pose,
                     multi_person_pose: MultiPersonPose) -> int:
        closest_idx = -1
        min_distance = np.inf
        for pred_idx, pred_pose in enumerate(multi_person_pose):
            common = np.logical_and(gt_pose.has_joint, pred_pose.has_joint)
            if not common.any():
                continue
            distance = np.linalg.norm(
                gt_pose.joint_pos[common] - pred_pose.joint_pos[common],
                axis=-1).mean()
            if distance < min_distance:
                closest_idx = pred_idx
                min_distance = distance
        return closest_idx
