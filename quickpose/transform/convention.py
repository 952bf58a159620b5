# yapf: disable
import numpy as np
from typing import List

from quickpose.data_structure.pose import MultiPersonPose, Pose
from quickpose.utils.skeleton_utils import get_kps_index, get_skeleton_info

# yapf: enable

# dst kps name -> src kps names, a position averaged over several
# src keypoints exists only when all of them exist
KPS_MAPPING = {
    ('campus', 'openpose_25'):
    dict(
        nose=['top_head'],
        neck=['bottom_head'],
        right_shoulder=['right_shoulder'],
        right_elbow=['right_elbow'],
        right_wrist=['right_wrist'],
        left_shoulder=['left_shoulder'],
        left_elbow=['left_elbow'],
        left_wrist=['left_wrist'],
        mid_hip=['right_hip', 'left_hip'],
        right_hip=['right_hip'],
        right_knee=['right_knee'],
        right_ankle=['right_ankle'],
        left_hip=['left_hip'],
        left_knee=['left_knee'],
        left_ankle=['left_ankle'],
    ),
}


def convert_pose(pose: Pose, src: str, dst: str) -> Pose:
    """Convert a pose between keypoints conventions. Destination joints
    without a source are left missing.

    Args:
        pose (Pose): Pose in src convention.
        src (str): Source convention name.
        dst (str): Destination convention name.

    Raises:
        KeyError: No mapping from src to dst.

    Returns:
        Pose: Pose in dst convention.
    """
    if src == dst:
        return pose
    if (src, dst) not in KPS_MAPPING:
        raise KeyError(f'No keypoints mapping from {src} to {dst}.')
    mapping = KPS_MAPPING[(src, dst)]
    dst_pose = Pose(
        n_kps=get_skeleton_info(dst)['n_kps'], identity=pose.identity)
    for dst_name, src_names in mapping.items():
        src_idxs = [get_kps_index(name, src) for name in src_names]
        if not pose.has_joint[src_idxs].all():
            continue
        dst_pose.set_joint(
            get_kps_index(dst_name, dst),
            np.mean(pose.joint_pos[src_idxs], axis=0))
    return dst_pose


def convert_poses(multi_person_poses: List[MultiPersonPose], src: str,
                  dst: str) -> List[MultiPersonPose]:
    """Convert poses of every frame between keypoints conventions."""
    return [[convert_pose(pose, src, dst) for pose in multi_person_pose]
            for multi_person_pose in multi_person_poses]
