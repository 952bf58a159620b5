import numpy as np
from typing import List, Tuple


class Pose:
    """3D pose of one person, dense over all joint types."""

    def __init__(self, n_kps: int, identity: int = 0) -> None:
        self.identity = identity
        self.has_joint = np.zeros(n_kps, dtype=bool)
        self.joint_pos = np.zeros((n_kps, 3), dtype=np.float64)

    @property
    def n_kps(self) -> int:
        return len(self.has_joint)

    def set_joint(self, kps_id: int, position: np.ndarray) -> None:
        self.has_joint[kps_id] = True
        self.joint_pos[kps_id] = position

    def get_n_joints(self) -> int:
        return int(self.has_joint.sum())

    def to_keypoints(self) -> np.ndarray:
        """Get keypoints in shape [n_kps, 4], the last channel is 1 where
        the joint exists."""
        kps = np.zeros((self.n_kps, 4), dtype=np.float64)
        kps[:, :3] = self.joint_pos
        kps[:, 3] = self.has_joint
        return kps

    @classmethod
    def from_keypoints(cls, kps: np.ndarray, identity: int = 0) -> 'Pose':
        """Build a pose from keypoints in shape [n_kps, 4]; joints with a
        positive last channel are present."""
        kps = np.asarray(kps, dtype=np.float64)
        pose = cls(n_kps=kps.shape[0], identity=identity)
        pose.has_joint = kps[:, 3] > 0
        pose.joint_pos = kps[:, :3].copy()
        return pose

    def __repr__(self) -> str:
        return (f'Pose(identity={self.identity}, '
                f'n_joints={self.get_n_joints()}/{self.n_kps})')


MultiPersonPose = List[Pose]


def poses_to_keypoints(multi_person_pose: MultiPersonPose,
                       n_kps: int) -> Tuple[np.ndarray, np.ndarray]:
    """Stack poses of one frame.

    Args:
        multi_person_pose (MultiPersonPose):
            Poses of one frame.
        n_kps (int):
            Number of joint types, used when there is no pose.

    Returns:
        Tuple[np.ndarray, np.ndarray]:
            keypoints3d in shape [n_person, n_kps, 4] and
            mask in shape [n_person, n_kps].
    """
    kps3d = np.zeros((len(multi_person_pose), n_kps, 4), dtype=np.float64)
    for index, pose in enumerate(multi_person_pose):
        kps3d[index] = pose.to_keypoints()
    mask = kps3d[..., 3].astype(np.uint8)
    return kps3d, mask
