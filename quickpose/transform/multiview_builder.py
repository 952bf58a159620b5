# yapf: disable
import logging
import numpy as np
from typing import List, Sequence, Union

from quickpose.data_structure.camera import Camera
from quickpose.data_structure.multiview import MultiView, View
from quickpose.utils.log_utils import get_logger

# yapf: enable


def build_multiview(cameras: List[Camera],
                    kps2d: Sequence[Sequence[np.ndarray]],
                    pafs: Sequence[Sequence[np.ndarray]],
                    paf_pairs: Sequence[Sequence[int]],
                    paf_power: float = 0.2,
                    image_size: Union[None, Sequence[float]] = None,
                    frame_idx: int = 0,
                    logger: Union[None, str,
                                  logging.Logger] = None) -> MultiView:
    """Build a MultiView from bottom-up detections of one frame.

    Args:
        cameras (List[Camera]):
            Camera of every view.
        kps2d (Sequence[Sequence[np.ndarray]]):
            Candidates in shape [n_views][n_kps][n_candidates, 3],
            each row is (u, v, confidence).
        pafs (Sequence[Sequence[np.ndarray]]):
            Raw affinity in shape [n_views][n_pafs][n_cand_a, n_cand_b],
            where a and b are the joint types of paf_pairs[paf_id].
        paf_pairs (Sequence[Sequence[int]]):
            Joint type pair of every paf.
        paf_power (float, optional):
            Raw affinity is raised to this power. Defaults to 0.2.
        image_size (Union[None, Sequence[float]], optional):
            (width, height). If given, (u, v) are normalized to [0, 1]
            and scaled by (size - 1). Defaults to None, pixels.
        frame_idx (int, optional):
            Index of the frame. Defaults to 0.
        logger (Union[None, str, logging.Logger], optional):
            Logger for logging. If None, root logger will be selected.
            Defaults to None.

    Returns:
        MultiView: Views with candidates and part affinity scores set,
            epipolar scores not computed yet.
    """
    logger = get_logger(logger)
    if len(cameras) != len(kps2d) or len(cameras) != len(pafs):
        logger.error(f'Got {len(cameras)} cameras, {len(kps2d)} views '
                     f'of keypoints and {len(pafs)} views of pafs.')
        raise ValueError
    if image_size is not None:
        scale = np.array(image_size, dtype=np.float64)[:2] - 1.0
    else:
        scale = np.ones(2, dtype=np.float64)
    views = []
    for view_id, camera in enumerate(cameras):
        view_kps2d = kps2d[view_id]
        view = View(
            camera=camera,
            n_kps=len(view_kps2d),
            view_id=view_id,
            logger=logger)
        for kps_id, candidates in enumerate(view_kps2d):
            for candidate in np.asarray(candidates, dtype=np.float64).reshape(
                    -1, 3):
                view.add_joint(
                    kps_id=kps_id,
                    uv=candidate[:2] * scale,
                    confidence=float(candidate[2]))
        view_pafs = pafs[view_id]
        if len(view_pafs) != len(paf_pairs):
            logger.error(f'View {view_id} has {len(view_pafs)} pafs, '
                         f'expected {len(paf_pairs)}.')
            raise ValueError
        for paf_id, (kps_a, kps_b) in enumerate(paf_pairs):
            paf = np.asarray(view_pafs[paf_id], dtype=np.float64).reshape(
                view.get_n_candidates(kps_a), view.get_n_candidates(kps_b))
            for index_a, joint_a in enumerate(view.joints[kps_a]):
                for index_b, joint_b in enumerate(view.joints[kps_b]):
                    view.set_paf(joint_a, joint_b,
                                 np.power(paf[index_a, index_b], paf_power))
        views.append(view)
    return MultiView(views=views, frame_idx=frame_idx, logger=logger)
