# yapf: disable
import logging
import numpy as np
from typing import List, Sequence, Tuple, Union

from quickpose.data_structure.multiview import MultiView
from quickpose.data_structure.pose import MultiPersonPose, poses_to_keypoints
from quickpose.ops.triangulation.multi_ray_triangulator import (
    MultiRayTriangulator,
)
from quickpose.utils.log_utils import get_logger
from quickpose.utils.skeleton_utils import (
    get_cyclic_view_orders, get_skeleton_info,
)
from .cluster_resolver import ClusterResolver
from .hypothesis_search import HypothesisSearch, get_pass_combinations

# yapf: enable


class QuickPoseAssociator:

    def __init__(self,
                 kps_convention: str = 'openpose_25',
                 kps_parent: Union[None, Sequence[int]] = None,
                 joint_orders: Union[None, Sequence[Sequence[int]]] = None,
                 view_orders: Union[None, Sequence[Sequence[int]]] = None,
                 max_epi_dist: float = 0.1,
                 max_bone_lengths: Union[None, Sequence[Sequence]] = None,
                 triangulator: Union[None, dict,
                                     MultiRayTriangulator] = None,
                 max_n_clusters: Union[None, int] = None,
                 min_n_main_kps: int = 1,
                 logger: Union[None, str, logging.Logger] = None) -> None:
        """Bottom-up multi-view multi-person associator. Part affinity
        and epipolar scores drive a backtracking hypothesis search, whose
        clusters are merged greedily into per-person 3D poses.

        Args:
            kps_convention (str, optional):
                Name of the skeleton convention, providing default
                parents and joint orders. Defaults to 'openpose_25'.
            kps_parent (Union[None, Sequence[int]], optional):
                Parent of each joint type, -1 for the root. Defaults to
                None, taken from the convention.
            joint_orders (Union[None, Sequence[Sequence[int]]], optional):
                Joint types of every search pass. Defaults to None, taken
                from the convention.
            view_orders (Union[None, Sequence[Sequence[int]]], optional):
                View permutations of the search. Defaults to None, every
                cyclic rotation of the views of a frame.
            max_epi_dist (float, optional):
                Ray distance at which an epipolar score drops to zero,
                used by associate_frame(). Defaults to 0.1.
            max_bone_lengths (Union[None, Sequence[Sequence]], optional):
                A list of [kps_a, kps_b, max_length]. Defaults to None,
                no limit.
            triangulator (Union[None, dict, MultiRayTriangulator]):
                Triangulator or its config. Defaults to None.
            max_n_clusters (Union[None, int], optional):
                Maximum number of preserved clusters per frame.
                Defaults to None, unbounded.
            min_n_main_kps (int, optional):
                Minimum number of main view joint types of an accepted
                cluster. Defaults to 1.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        self.kps_convention = kps_convention
        skeleton_info = get_skeleton_info(kps_convention)
        self.kps_parent = list(kps_parent) if kps_parent is not None \
            else list(skeleton_info['kps_parent'])
        self.n_kps = len(self.kps_parent)
        self.joint_orders = [list(order) for order in joint_orders] \
            if joint_orders is not None \
            else [list(order) for order in skeleton_info['joint_orders']]
        self.view_orders = [list(order) for order in view_orders] \
            if view_orders is not None else None
        self._check_joint_orders()
        if max_epi_dist <= 0:
            self.logger.error(
                f'max_epi_dist must be positive, got {max_epi_dist}.')
            raise ValueError
        self.max_epi_dist = max_epi_dist

        self.hypothesis_search = HypothesisSearch(
            kps_parent=self.kps_parent,
            triangulator=triangulator,
            max_n_clusters=max_n_clusters,
            logger=self.logger)
        self.cluster_resolver = ClusterResolver(
            min_n_main_kps=min_n_main_kps, logger=self.logger)
        if max_bone_lengths is not None:
            for kps_a, kps_b, length in max_bone_lengths:
                self.set_max_bone_length(kps_a, kps_b, length)

    def _check_joint_orders(self) -> None:
        for joint_order in self.joint_orders:
            for joint_i, kps_id in enumerate(joint_order):
                if joint_i == 0:
                    continue
                if self.kps_parent[kps_id] not in joint_order[:joint_i]:
                    self.logger.error(
                        f'Joint type {kps_id} comes before its parent '
                        f'{self.kps_parent[kps_id]} in joint order '
                        f'{joint_order}.')
                    raise ValueError

    def get_max_bone_length(self, kps_a: int, kps_b: int) -> float:
        """Get the maximum bone length between two joint types, inf if not
        set."""
        return self.hypothesis_search.get_max_bone_length(kps_a, kps_b)

    def set_max_bone_length(self, kps_a: int, kps_b: int,
                            length: float) -> None:
        """Set the maximum bone length between two joint types, in either
        order."""
        self.hypothesis_search.set_max_bone_length(kps_a, kps_b, length)

    def get_view_orders(self, n_views: int) -> List[List[int]]:
        if self.view_orders is not None:
            return self.view_orders
        return get_cyclic_view_orders(n_views)

    def compute(self, multiview: MultiView) -> MultiPersonPose:
        """Reconstruct 3D poses of one frame.

        Args:
            multiview (MultiView):
                The frame, with part affinity and epipolar scores of
                every candidate pair already set.

        Returns:
            MultiPersonPose: One pose per person found.
        """
        if multiview.n_views == 0:
            return []
        if multiview.n_kps != self.n_kps:
            self.logger.error(f'Frame has {multiview.n_kps} joint types, '
                              f'the skeleton has {self.n_kps}.')
            raise ValueError
        self.hypothesis_search.reset(multiview)
        for view_order, joint_order in get_pass_combinations(
                self.get_view_orders(multiview.n_views), self.joint_orders):
            self.hypothesis_search.search(multiview, view_order,
                                          joint_order)
        clusters = self.hypothesis_search.preserved_clusters
        multi_person_pose = self.cluster_resolver(clusters, self.n_kps)
        self.logger.debug(
            f'Frame {multiview.frame_idx}: {multiview.n_views} views, '
            f'{multiview.get_n_candidates()} candidates, '
            f'{len(clusters)} clusters, {len(multi_person_pose)} persons.')
        return multi_person_pose

    def associate_frame(
        self, multiview: MultiView
    ) -> Tuple[np.ndarray, List[int], MultiPersonPose]:
        """Compute epipolar scores of a frame, then associate and
        triangulate it.

        Args:
            multiview (MultiView):
                The frame, with part affinity scores set.

        Returns:
            keypoints3d (np.ndarray):
                In shape [n_person, n_kps, 4], the last channel is 1
                where the joint exists.
            identities (List[int]):
                Identity of every person in this frame.
            multi_person_pose (MultiPersonPose):
                The resolved poses.
        """
        multiview.compute_epipolar(self.max_epi_dist)
        multi_person_pose = self.compute(multiview)
        keypoints3d, _ = poses_to_keypoints(multi_person_pose, self.n_kps)
        identities = [pose.identity for pose in multi_person_pose]
        return keypoints3d, identities, multi_person_pose
