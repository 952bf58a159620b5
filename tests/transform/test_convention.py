import numpy as np
import pytest

from quickpose.data_structure.pose import Pose
from quickpose.transform.convention import convert_pose, convert_poses
from quickpose.utils.skeleton_utils import get_kps_index


def campus_pose():
    pose = Pose(n_kps=14, identity=2)
    for kps_id in range(14):
        pose.set_joint(kps_id, np.array([kps_id, 0.0, 1.0]))
    return pose


def test_campus_to_openpose():
    pose = campus_pose()
    dst_pose = convert_pose(pose, 'campus', 'openpose_25')
    assert dst_pose.n_kps == 25
    assert dst_pose.identity == 2
    assert dst_pose.get_n_joints() == 15
    right_hip = get_kps_index('right_hip', 'campus')
    left_hip = get_kps_index('left_hip', 'campus')
    mid_hip = get_kps_index('mid_hip', 'openpose_25')
    assert np.allclose(
        dst_pose.joint_pos[mid_hip],
        (pose.joint_pos[right_hip] + pose.joint_pos[left_hip]) / 2)
    neck = get_kps_index('neck', 'openpose_25')
    assert np.allclose(dst_pose.joint_pos[neck],
                       pose.joint_pos[get_kps_index('bottom_head', 'campus')])
    # no source for the feet
    assert not dst_pose.has_joint[get_kps_index('left_heel', 'openpose_25')]


def test_missing_source():
    pose = campus_pose()
    pose.has_joint[get_kps_index('left_hip', 'campus')] = False
    dst_pose = convert_pose(pose, 'campus', 'openpose_25')
    assert not dst_pose.has_joint[get_kps_index('mid_hip', 'openpose_25')]
    assert not dst_pose.has_joint[get_kps_index('left_hip', 'openpose_25')]
    assert dst_pose.has_joint[get_kps_index('right_hip', 'openpose_25')]


def test_convert_poses():
    pose = campus_pose()
    assert convert_pose(pose, 'campus', 'campus') is pose
    converted = convert_poses([[pose, pose], []], 'campus', 'openpose_25')
    assert len(converted) == 2
    assert len(converted[0]) == 2
    assert converted[1] == []
    with pytest.raises(KeyError):
        convert_pose(pose, 'openpose_25', 'campus')
