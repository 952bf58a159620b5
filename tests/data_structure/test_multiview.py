import numpy as np
import pytest

from quickpose.data_structure.multiview import MultiView, PairScoreTable, View


def test_pair_score_table():
    table = PairScoreTable(name='paf')
    table.set((0, 1, 0), (0, 0, 2), 0.5)
    assert table.get((0, 0, 2), (0, 1, 0)) == 0.5
    assert table.contains((0, 1, 0), (0, 0, 2))
    assert len(table) == 1
    with pytest.raises(KeyError):
        table.get((0, 1, 0), (0, 0, 1))
    table.clear()
    assert len(table) == 0


def test_add_joint(scene):
    camera = scene.ring_cameras(1)[0]
    view = View(camera=camera, n_kps=3, view_id=2)
    joint_0 = view.add_joint(1, [400.0, 300.0], 0.8)
    joint_1 = view.add_joint(1, np.array([410.0, 310.0]), 1.0)
    assert joint_0.id == (2, 1, 0)
    assert joint_1.id == (2, 1, 1)
    assert view.get_n_candidates(1) == 2
    assert view.get_n_candidates(0) == 0
    assert np.allclose(joint_0.ray.origin, camera.position)
    assert np.isclose(np.linalg.norm(joint_0.ray.direction), 1.0)
    with pytest.raises(ValueError):
        view.add_joint(3, [0.0, 0.0], 0.5)
    with pytest.raises(ValueError):
        view.add_joint(0, [0.0, 0.0], 1.5)
    # pafs are symmetric
    joint_2 = view.add_joint(0, [400.0, 200.0], 0.9)
    view.set_paf(joint_2, joint_0, 0.7)
    assert view.get_paf(joint_0, joint_2) == 0.7
    with pytest.raises(KeyError):
        view.get_paf(joint_2, joint_1)


def test_compute_epipolar(scene):
    cameras = scene.ring_cameras(3)
    person_kps3d = scene.person_kps3d
    multiview = scene.make_multiview(
        cameras, [person_kps3d], scene.kps_parent_3, separate_persons=False)
    assert multiview.n_views == 3
    assert multiview.n_kps == 3
    assert multiview.get_n_candidates() == 9
    # exact projections of one point score 1
    for kps_id in range(3):
        pairs = list(multiview.iter_candidate_pairs(kps_id))
        assert len(pairs) == 3
        for joint_a, joint_b in pairs:
            assert np.isclose(multiview.get_epipolar(joint_a, joint_b), 1.0)
            assert multiview.get_epipolar(joint_b, joint_a) == \
                multiview.get_epipolar(joint_a, joint_b)
    # a second person far away scores negative against the first
    far_kps3d = person_kps3d + np.array([0.0, 0.0, 1.0])
    multiview = scene.make_multiview(
        cameras[:2], [person_kps3d, far_kps3d],
        scene.kps_parent_3,
        separate_persons=False)
    view_0, view_1 = multiview.views
    assert multiview.get_epipolar(view_0.joints[0][0],
                                  view_1.joints[0][1]) < 0
    assert np.isclose(
        multiview.get_epipolar(view_0.joints[0][1], view_1.joints[0][1]),
        1.0)
    multiview.set_epipolar(view_0.joints[0][0], view_1.joints[0][0], 0.25)
    assert multiview.get_epipolar(view_1.joints[0][0],
                                  view_0.joints[0][0]) == 0.25
    with pytest.raises(ValueError):
        multiview.compute_epipolar(0.0)


def test_mismatched_views(scene):
    cameras = scene.ring_cameras(2)
    with pytest.raises(ValueError):
        MultiView(views=[
            View(camera=cameras[0], n_kps=3, view_id=0),
            View(camera=cameras[1], n_kps=4, view_id=1)
        ])
    empty = MultiView(views=[])
    assert empty.n_views == 0
    assert empty.n_kps == 0
