import numpy as np
import pytest

from quickpose.core.evaluation.metrics.builder import build_metric
from quickpose.core.evaluation.metrics.pcp_metric import PCPMetric
from quickpose.core.evaluation.metrics.prediction_matcher import (
    PredictionMatcher,
)
from quickpose.data_structure.pose import Pose

CAMPUS_KPS3D = np.array([
    [-0.1, 0.0, 0.1],
    [-0.1, 0.0, 0.5],
    [-0.1, 0.0, 0.9],
    [0.1, 0.0, 0.9],
    [0.1, 0.0, 0.5],
    [0.1, 0.0, 0.1],
    [-0.3, 0.0, 1.0],
    [-0.25, 0.0, 1.2],
    [-0.2, 0.0, 1.45],
    [0.2, 0.0, 1.45],
    [0.25, 0.0, 1.2],
    [0.3, 0.0, 1.0],
    [0.0, 0.0, 1.55],
    [0.0, 0.0, 1.75],
])


def campus_pose(offset=(0.0, 0.0, 0.0), identity=0):
    kps = np.ones((14, 4))
    kps[:, :3] = CAMPUS_KPS3D + np.array(offset)
    return Pose.from_keypoints(kps, identity=identity)


def test_prediction_matcher():
    matcher = PredictionMatcher(name='matching')
    gt_poses = [[campus_pose(), campus_pose((2.0, 0.0, 0.0))], [campus_pose()]]
    pred_poses = [[campus_pose((2.1, 0.0, 0.0)),
                   campus_pose((0.05, 0.0, 0.0))], []]
    ret_dict = matcher(pred_poses=pred_poses, gt_poses=gt_poses)
    assert ret_dict['match_matrix_gt2pred'] == [[1, 0], [-1]]
    with pytest.raises(ValueError):
        matcher(pred_poses=pred_poses[:1], gt_poses=gt_poses)


def test_pcp_metric():
    metric = build_metric(
        dict(
            type='PCPMetric',
            name='pcp',
            kps_convention='campus',
            show_table=True))
    assert isinstance(metric, PCPMetric)
    assert len(metric.limbs) == 9
    gt_poses = [[campus_pose(), campus_pose((2.0, 0.0, 0.0))]]
    pred_poses = [[campus_pose((0.01, 0.0, 0.0))]]
    ret_dict = metric(
        pred_poses=pred_poses,
        gt_poses=gt_poses,
        match_matrix_gt2pred=[[0, -1]])
    # the unmatched person counts as wrong
    assert ret_dict['pcp_total_mean'] == pytest.approx(50.0)
    # a missing joint fails both limbs around it
    pred_poses[0][0].has_joint[7] = False
    ret_dict = metric(
        pred_poses=pred_poses,
        gt_poses=gt_poses,
        match_matrix_gt2pred=[[0, -1]])
    assert ret_dict['pcp_total_mean'] == pytest.approx(700 / 18)


def test_selected_limbs():
    metric = PCPMetric(
        name='pcp',
        kps_convention='campus',
        selected_limbs_names=['right_forearm'],
        threshold=0.5,
        additional_limbs=dict(shoulders=[8, 9]))
    assert list(metric.limbs.keys()) == ['right_forearm', 'shoulders']
    gt_poses = [[campus_pose()]]
    pred_pose = campus_pose()
    # right wrist is 0.5 away, beyond half of the 0.206 forearm
    pred_pose.joint_pos[6] += np.array([0.5, 0.0, 0.0])
    ret_dict = metric(
        pred_poses=[[pred_pose]],
        gt_poses=gt_poses,
        match_matrix_gt2pred=[[0]])
    assert ret_dict['pcp_total_mean'] == pytest.approx(50.0)
    with pytest.raises(KeyError):
        metric(pred_poses=[[pred_pose]], gt_poses=gt_poses)
    with pytest.raises(KeyError):
        PCPMetric(
            name='pcp', kps_convention='campus', selected_limbs_names=['tail'])
