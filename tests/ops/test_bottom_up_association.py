# yapf: disable
import numpy as np
import pytest
from mmengine.config import Config

from quickpose.data_structure.multiview import MultiView
from quickpose.ops.bottom_up_association.builder import (
    build_bottom_up_associator,
)
from quickpose.ops.bottom_up_association.quickpose_associator import (
    QuickPoseAssociator,
)

# yapf: enable


def build_associator(scene, **kwargs):
    return QuickPoseAssociator(
        kps_parent=scene.kps_parent_3, joint_orders=[[0, 1, 2]], **kwargs)


def test_build_bottom_up_associator():
    associator_cfg = dict(
        Config.fromfile('configs/modules/ops/' + 'bottom_up_association/' +
                        'quickpose_associator.py'))
    associator = build_bottom_up_associator(associator_cfg)
    assert isinstance(associator, QuickPoseAssociator)
    assert associator.n_kps == 25
    assert associator.max_epi_dist == 0.1
    assert associator.get_view_orders(3) == [[0, 1, 2], [1, 2, 0],
                                             [2, 0, 1]]


def test_invalid_config(scene):
    with pytest.raises(ValueError):
        QuickPoseAssociator(
            kps_parent=scene.kps_parent_3, joint_orders=[[0, 2, 1]])
    with pytest.raises(ValueError):
        build_associator(scene, max_epi_dist=0.0)
    with pytest.raises(KeyError):
        QuickPoseAssociator(kps_convention='not_a_convention')


def test_bone_length_getter_setter(scene):
    associator = build_associator(
        scene, max_bone_lengths=[[0, 1, 0.7], [2, 1, 0.4]])
    assert associator.get_max_bone_length(1, 0) == 0.7
    assert associator.get_max_bone_length(1, 2) == 0.4
    assert associator.get_max_bone_length(0, 2) == float('inf')
    associator.set_max_bone_length(0, 1, 0.8)
    assert associator.get_max_bone_length(0, 1) == 0.8


def test_one_person(scene):
    multiview = scene.make_multiview(
        scene.ring_cameras(2), [scene.person_kps3d], scene.kps_parent_3)
    associator = build_associator(scene)
    multi_person_pose = associator.compute(multiview)
    assert len(multi_person_pose) == 1
    pose = multi_person_pose[0]
    assert pose.has_joint.all()
    assert np.allclose(pose.joint_pos, scene.person_kps3d, atol=1e-6)


def test_occluded_joint(scene):
    visible = np.ones((1, 2, 3), dtype=bool)
    # joint 2 is seen by view 0 only
    visible[0, 1, 2] = False
    multiview = scene.make_multiview(
        scene.ring_cameras(2), [scene.person_kps3d],
        scene.kps_parent_3,
        visible=visible)
    associator = build_associator(scene)
    multi_person_pose = associator.compute(multiview)
    assert len(multi_person_pose) == 1
    pose = multi_person_pose[0]
    assert pose.has_joint.tolist() == [True, True, False]
    assert np.allclose(pose.joint_pos[:2], scene.person_kps3d[:2], atol=1e-6)


def test_two_persons(scene):
    persons = [
        scene.person_kps3d + np.array([-0.5, 0.0, 0.0]),
        scene.person_kps3d + np.array([0.5, 0.3, 0.0]),
    ]
    multiview = scene.make_multiview(scene.ring_cameras(3), persons,
                                     scene.kps_parent_3)
    associator = build_associator(scene)
    multi_person_pose = associator.compute(multiview)
    assert len(multi_person_pose) == 2
    assert [pose.identity for pose in multi_person_pose] == [0, 1]
    matched = set()
    for pose in multi_person_pose:
        assert pose.has_joint.all()
        for person_idx, person in enumerate(persons):
            if np.allclose(pose.joint_pos, person, atol=1e-6):
                matched.add(person_idx)
    assert matched == {0, 1}


def test_bone_length_limit(scene):
    multiview = scene.make_multiview(
        scene.ring_cameras(2), [scene.person_kps3d], scene.kps_parent_3)
    associator = build_associator(scene)
    # spine is 0.5 long
    associator.set_max_bone_length(0, 1, 0.1)
    multi_person_pose = associator.compute(multiview)
    assert len(multi_person_pose) == 1
    assert multi_person_pose[0].has_joint.tolist() == [True, False, False]


def test_associate_frame(scene):
    multiview = scene.make_multiview(
        scene.ring_cameras(3), [scene.person_kps3d],
        scene.kps_parent_3,
        separate_persons=False)
    associator = build_associator(scene, max_epi_dist=0.05)
    keypoints3d, identities, multi_person_pose = \
        associator.associate_frame(multiview)
    assert keypoints3d.shape == (1, 3, 4)
    assert identities == [0]
    assert len(multi_person_pose) == 1
    assert np.allclose(keypoints3d[0, :, :3], scene.person_kps3d, atol=1e-6)
    assert np.all(keypoints3d[0, :, 3] == 1)


def test_degenerate_frames(scene):
    associator = build_associator(scene)
    assert associator.compute(MultiView(views=[])) == []
    # no candidates at all
    multiview = scene.make_multiview(
        scene.ring_cameras(2), [], scene.kps_parent_3)
    assert associator.compute(multiview) == []
    # wrong number of joint types
    multiview = scene.make_multiview(
        scene.ring_cameras(2), [np.zeros((2, 3))], [-1, 0])
    with pytest.raises(ValueError):
        associator.compute(multiview)


def test_zero_confidence(scene):
    associator = build_associator(scene)
    # no ray carries weight
    multiview = scene.make_multiview(
        scene.ring_cameras(2), [scene.person_kps3d],
        scene.kps_parent_3,
        confidence=0.0)
    assert associator.compute(multiview) == []
    # one weighted ray per joint is not enough
    multiview = scene.make_multiview(
        scene.ring_cameras(2), [scene.person_kps3d],
        scene.kps_parent_3,
        confidence=[0.9, 0.0])
    assert associator.compute(multiview) == []
    # the zero-confidence view neither blocks nor moves the joints
    multiview = scene.make_multiview(
        scene.ring_cameras(3), [scene.person_kps3d],
        scene.kps_parent_3,
        confidence=[0.9, 0.0, 0.8])
    multi_person_pose = associator.compute(multiview)
    assert len(multi_person_pose) == 1
    assert multi_person_pose[0].has_joint.all()
    assert np.allclose(
        multi_person_pose[0].joint_pos, scene.person_kps3d, atol=1e-6)
