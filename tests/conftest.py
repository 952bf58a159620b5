import numpy as np
import pytest

from quickpose.data_structure.camera import Camera
from quickpose.data_structure.multiview import MultiView, View

# root, spine, arm of a three-joint skeleton
KPS_PARENT_3 = [-1, 0, 1]
PERSON_KPS3D = np.array([
    [0.0, 0.0, 1.0],
    [0.0, 0.0, 1.5],
    [0.3, 0.0, 1.5],
])


def look_at_camera(position, target=(0.0, 0.0, 1.2), focal=500.0,
                   center=500.0):
    position = np.asarray(position, dtype=np.float64)
    forward = np.asarray(target, dtype=np.float64) - position
    forward /= np.linalg.norm(forward)
    right = np.cross(forward, np.array([0.0, 0.0, 1.0]))
    right /= np.linalg.norm(right)
    down = np.cross(forward, right)
    R = np.stack([right, down, forward])
    T = -R.dot(position)
    K = np.array([[focal, 0.0, center], [0.0, focal, center],
                  [0.0, 0.0, 1.0]])
    return Camera(K=K, R=R, T=T)


def ring_cameras(n_views, radius=4.0, step_deg=50.0, height=1.5):
    cameras = []
    for view_idx in range(n_views):
        angle = np.deg2rad(step_deg * view_idx)
        cameras.append(
            look_at_camera((radius * np.cos(angle), radius * np.sin(angle),
                            height)))
    return cameras


def project(camera, point):
    cam_point = camera.R.dot(point) + camera.T
    uvw = camera.K.dot(cam_point)
    return uvw[:2] / uvw[2]


def make_multiview(cameras,
                   persons_kps3d,
                   kps_parent,
                   visible=None,
                   confidence=0.9,
                   paf=1.0,
                   max_epi_dist=0.1,
                   separate_persons=True):
    """Build a frame from exact projections of every person.

    visible[person][view][kps] hides a detection when False. confidence is
    a scalar or one value per view. Affinity is paf inside a person and 0
    across persons. With separate_persons, cross-person epipolar scores are
    forced to -1.
    """
    n_kps = len(kps_parent)
    views = []
    owners = []
    for view_id, camera in enumerate(cameras):
        view = View(camera=camera, n_kps=n_kps, view_id=view_id)
        view_owners = dict()
        view_confidence = confidence[view_id] \
            if isinstance(confidence, (list, tuple)) else confidence
        for kps_id in range(n_kps):
            for person_idx, kps3d in enumerate(persons_kps3d):
                if visible is not None and \
                        not visible[person_idx][view_id][kps_id]:
                    continue
                joint = view.add_joint(kps_id,
                                       project(camera, kps3d[kps_id]),
                                       view_confidence)
                view_owners[joint.id] = person_idx
        for kps_id, parent in enumerate(kps_parent):
            if parent < 0:
                continue
            for joint_a in view.joints[parent]:
                for joint_b in view.joints[kps_id]:
                    same = view_owners[joint_a.id] == view_owners[joint_b.id]
                    view.set_paf(joint_a, joint_b, paf if same else 0.0)
        views.append(view)
        owners.append(view_owners)
    multiview = MultiView(views=views)
    multiview.compute_epipolar(max_epi_dist)
    if separate_persons:
        all_owners = dict()
        for view_owners in owners:
            all_owners.update(view_owners)
        for kps_id in range(n_kps):
            for joint_a, joint_b in multiview.iter_candidate_pairs(kps_id):
                if all_owners[joint_a.id] != all_owners[joint_b.id]:
                    multiview.set_epipolar(joint_a, joint_b, -1.0)
    return multiview


class SceneFactory:
    kps_parent_3 = KPS_PARENT_3
    person_kps3d = PERSON_KPS3D
    look_at_camera = staticmethod(look_at_camera)
    ring_cameras = staticmethod(ring_cameras)
    project = staticmethod(project)
    make_multiview = staticmethod(make_multiview)


@pytest.fixture
def scene():
    return SceneFactory
