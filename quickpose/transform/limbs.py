# yapf: disable
import numpy as np
from typing import List, Sequence

from quickpose.data_structure.pose import MultiPersonPose

# yapf: enable


def get_max_limb_lengths(multi_person_poses: Sequence[MultiPersonPose],
                         limbs: Sequence[Sequence[int]]) -> np.ndarray:
    """Get the longest length of every limb over all frames and persons.

    Args:
        multi_person_poses (Sequence[MultiPersonPose]):
            Poses of every frame.
        limbs (Sequence[Sequence[int]]):
            Joint type pairs.

    Returns:
        np.ndarray:
            In shape [n_limbs, ], 0 for a limb never observed with
            both ends.
    """
    max_lengths = np.zeros(len(limbs), dtype=np.float64)
    for multi_person_pose in multi_person_poses:
        for pose in multi_person_pose:
            for limb_idx, (kps_a, kps_b) in enumerate(limbs):
                if not (pose.has_joint[kps_a] and pose.has_joint[kps_b]):
                    continue
                length = np.linalg.norm(pose.joint_pos[kps_a] -
                                        pose.joint_pos[kps_b])
                max_lengths[limb_idx] = max(max_lengths[limb_idx], length)
    return max_lengths


def calibrate_max_bone_lengths(multi_person_poses: Sequence[MultiPersonPose],
                               limbs: Sequence[Sequence[int]],
                               margin: float = 0.1) -> List[list]:
    """Calibrate bone length limits from ground-truth poses.

    Args:
        multi_person_poses (Sequence[MultiPersonPose]):
            Ground-truth poses of every frame.
        limbs (Sequence[Sequence[int]]):
            Joint type pairs to calibrate.
        margin (float, optional):
            Added to the longest observed length. Defaults to 0.1.

    Returns:
        List[list]:
            A list of [kps_a, kps_b, max_length] for every limb observed
            at least once, the format QuickPoseAssociator takes as
            max_bone_lengths.
    """
    max_lengths = get_max_limb_lengths(multi_person_poses, limbs)
    ret_list = []
    for (kps_a, kps_b), length in zip(limbs, max_lengths):
        if length > 0:
            ret_list.append([int(kps_a), int(kps_b), float(length + margin)])
    return ret_list
