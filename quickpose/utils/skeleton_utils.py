from typing import List

SKELETON_INFO = {
    'openpose_25':
    dict(
        n_kps=25,
        kps_names=[
            'nose', 'neck', 'right_shoulder', 'right_elbow', 'right_wrist',
            'left_shoulder', 'left_elbow', 'left_wrist', 'mid_hip',
            'right_hip', 'right_knee', 'right_ankle', 'left_hip', 'left_knee',
            'left_ankle', 'right_eye', 'left_eye', 'right_ear', 'left_ear',
            'left_bigtoe', 'left_smalltoe', 'left_heel', 'right_bigtoe',
            'right_smalltoe', 'right_heel'
        ],
        # ears hang from the shoulders so that head passes stay short
        kps_parent=[
            1, 8, 1, 2, 3, 1, 5, 6, -1, 8, 9, 10, 8, 12, 13, 0, 0, 2, 5, 14,
            19, 14, 11, 22, 11
        ],
        joint_orders=[
            [8, 1, 2, 3, 4],
            [8, 1, 5, 6, 7],
            [8, 1, 0],
            [8, 9, 10, 11],
            [8, 12, 13, 14],
            [8, 1, 2, 17],
            [8, 1, 5, 18],
        ],
        # detector affinity fields, [kps_a, kps_b] per paf
        paf_pairs=[[1, 8], [9, 10], [10, 11], [8, 9], [8, 12], [12, 13],
                   [13, 14], [1, 2], [2, 3], [3, 4], [2, 17], [1, 5], [5, 6],
                   [6, 7], [5, 18], [1, 0], [0, 15], [0, 16], [15, 17],
                   [16, 18], [14, 19], [19, 20], [14, 21], [11, 22],
                   [22, 23], [11, 24]],
        # bones whose maximum length is calibrated from ground truth
        bone_limbs=[[0, 1], [1, 2], [2, 3], [3, 4], [1, 5], [5, 6], [6, 7],
                    [1, 8], [8, 9], [9, 10], [10, 11], [8, 12], [12, 13],
                    [13, 14]],
        eval_limbs=dict(
            torso=[1, 8],
            right_upperarm=[2, 3],
            right_forearm=[3, 4],
            left_upperarm=[5, 6],
            left_forearm=[6, 7],
            right_thigh=[9, 10],
            right_lower_leg=[10, 11],
            left_thigh=[12, 13],
            left_lower_leg=[13, 14],
        ),
    ),
    'campus':
    dict(
        n_kps=14,
        kps_names=[
            'right_ankle', 'right_knee', 'right_hip', 'left_hip', 'left_knee',
            'left_ankle', 'right_wrist', 'right_elbow', 'right_shoulder',
            'left_shoulder', 'left_elbow', 'left_wrist', 'bottom_head',
            'top_head'
        ],
        kps_parent=[1, 2, 12, 12, 3, 4, 7, 8, 12, 12, 9, 10, -1, 12],
        joint_orders=[
            [12, 13],
            [12, 8, 7, 6],
            [12, 9, 10, 11],
            [12, 2, 1, 0],
            [12, 3, 4, 5],
        ],
        paf_pairs=[],
        bone_limbs=[[13, 12], [12, 8], [8, 7], [7, 6], [12, 9], [9, 10],
                    [10, 11], [12, 2], [2, 1], [1, 0], [12, 3], [3, 4],
                    [4, 5]],
        eval_limbs=dict(
            right_upperarm=[8, 7],
            right_forearm=[7, 6],
            left_upperarm=[9, 10],
            left_forearm=[10, 11],
            right_thigh=[2, 1],
            right_lower_leg=[1, 0],
            left_thigh=[3, 4],
            left_lower_leg=[4, 5],
            head=[12, 13],
        ),
    ),
}


def get_skeleton_info(kps_convention: str) -> dict:
    """Get the skeleton definition of a keypoints convention.

    Args:
        kps_convention (str):
            Name of the convention, one of SKELETON_INFO's keys.

    Raises:
        KeyError: The convention is not defined.

    Returns:
        dict: A dict with n_kps, kps_names, kps_parent,
            joint_orders, paf_pairs, bone_limbs and eval_limbs.
    """
    if kps_convention not in SKELETON_INFO:
        raise KeyError(f'Unknown keypoints convention {kps_convention}, ' +
                       f'available: {list(SKELETON_INFO.keys())}.')
    return SKELETON_INFO[kps_convention]


def get_kps_index(kps_name: str, kps_convention: str) -> int:
    """Get the index of a keypoint by name."""
    kps_names = get_skeleton_info(kps_convention)['kps_names']
    return kps_names.index(kps_name)


def get_cyclic_view_orders(n_views: int) -> List[List[int]]:
    """Get every cyclic rotation of range(n_views).

    Each rotation starts at a different main view, e.g. for 3 views:
    [[0, 1, 2], [1, 2, 0], [2, 0, 1]].
    """
    views = list(range(n_views))
    return [views[i:] + views[:i] for i in range(n_views)]
