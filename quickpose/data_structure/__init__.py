from .camera import Camera, Ray
from .multiview import JointCandidate, MultiView, PairScoreTable, View
from .pose import MultiPersonPose, Pose, poses_to_keypoints

__all__ = [
    'Camera', 'JointCandidate', 'MultiPersonPose', 'MultiView',
    'PairScoreTable', 'Pose', 'Ray', 'View', 'poses_to_keypoints'
]
