# yapf: disable
import logging
import numpy as np
from contextlib import contextmanager
from typing import Iterator, List, NamedTuple, Sequence, Tuple, Union

from quickpose.data_structure.multiview import MultiView
from quickpose.ops.triangulation.builder import build_triangulator
from quickpose.ops.triangulation.multi_ray_triangulator import (
    MultiRayTriangulator,
)
from quickpose.utils.log_utils import get_logger

# yapf: enable

NO_CHOICE = -1
# affinity and epipolar scores below this value reject a candidate
EPS = 1e-4


class ScoreTerm(NamedTuple):
    """One pairwise term added to a cluster score.

    kind is 'paf' for a same-view affinity between joint_a (parent) and
    joint_b, or 'epipolar' for a cross-view score between two candidates of
    the same joint type.
    """
    kind: str
    joint_a: tuple
    joint_b: tuple
    value: float


class Cluster:
    """A skeleton hypothesis: per view and joint type, either NO_CHOICE or
    a candidate index."""

    def __init__(self, n_views: int, n_kps: int, main_view: int = 0) -> None:
        self.main_view = main_view
        self.score = 0.0
        self.choices = np.full((n_views, n_kps), NO_CHOICE, dtype=np.int64)
        self.positions = np.zeros((n_kps, 3), dtype=np.float64)
        self.has_position = np.zeros(n_kps, dtype=bool)
        self.terms: List[ScoreTerm] = []

    @property
    def n_views(self) -> int:
        return self.choices.shape[0]

    @property
    def n_kps(self) -> int:
        return self.choices.shape[1]

    def get_joint(self, view: int, kps_id: int) -> int:
        return int(self.choices[view, kps_id])

    def set_joint(self, view: int, kps_id: int, choice: int) -> None:
        self.choices[view, kps_id] = choice

    def add_term(self, term: ScoreTerm) -> None:
        self.terms.append(term)
        self.score += term.value

    def get_main_kps(self) -> np.ndarray:
        """Get joint types assigned in the main view."""
        return np.where(self.choices[self.main_view] != NO_CHOICE)[0]

    def copy(self) -> 'Cluster':
        ret = Cluster.__new__(Cluster)
        ret.main_view = self.main_view
        ret.score = self.score
        ret.choices = self.choices.copy()
        ret.positions = self.positions.copy()
        ret.has_position = self.has_position.copy()
        ret.terms = list(self.terms)
        return ret

    def __repr__(self) -> str:
        return (f'Cluster(main_view={self.main_view}, score={self.score:.4f}, '
                f'n_main_kps={len(self.get_main_kps())})')


class _JointStart(NamedTuple):
    score: float
    n_terms: int


class HypothesisSearch:
    """Backtracking search for skeleton hypotheses across views.

    For one view order (the first view is the main view) and one joint
    order, the search assigns a candidate, or nothing, to every
    (view, joint type) pair, walking views inside a joint type and joint
    types inside the order. A candidate is expanded only when its parent is
    assigned in the same view with a positive part affinity, and when its
    epipolar scores against the same joint type in every previously
    assigned view are positive. Once the last view of a joint type is
    reached the joint is triangulated and its bone length to the parent is
    checked. Every finished assignment is preserved as a Cluster.
    """

    def __init__(self,
                 kps_parent: Sequence[int],
                 triangulator: Union[None, dict, MultiRayTriangulator] = None,
                 max_n_clusters: Union[None, int] = None,
                 logger: Union[None, str, logging.Logger] = None) -> None:
        """
        Args:
            kps_parent (Sequence[int]):
                Parent joint type of every joint type, -1 for the root.
            triangulator (Union[None, dict, MultiRayTriangulator], optional):
                Triangulator or its config. Defaults to None, a
                MultiRayTriangulator with squared confidence weights.
            max_n_clusters (Union[None, int], optional):
                Maximum number of preserved clusters per frame. Clusters
                beyond it are dropped and counted in n_dropped.
                Defaults to None, unbounded.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        self.kps_parent = list(kps_parent)
        if triangulator is None:
            triangulator = dict(type='MultiRayTriangulator')
        if isinstance(triangulator, dict):
            triangulator['logger'] = self.logger
            self.triangulator = build_triangulator(triangulator)
        else:
            self.triangulator = triangulator
        self.max_n_clusters = max_n_clusters
        self.max_bone_lengths = dict()

        self.preserved_clusters: List[Cluster] = []
        self.n_dropped = 0
        self.multiview = None
        self.view_order = []
        self.joint_order = []

    def get_max_bone_length(self, kps_a: int, kps_b: int) -> float:
        """Get the bone length limit between two joint types, inf if no
        limit is set."""
        key = (min(kps_a, kps_b), max(kps_a, kps_b))
        return self.max_bone_lengths.get(key, float('inf'))

    def set_max_bone_length(self, kps_a: int, kps_b: int,
                            length: float) -> None:
        key = (min(kps_a, kps_b), max(kps_a, kps_b))
        self.max_bone_lengths[key] = float(length)

    def reset(self, multiview: MultiView) -> None:
        """Bind a frame and drop clusters of the previous one."""
        self.multiview = multiview
        self.preserved_clusters = []
        self.n_dropped = 0

    def search(self, multiview: MultiView, view_order: Sequence[int],
               joint_order: Sequence[int]) -> int:
        """Run one pass and append its clusters to preserved_clusters.

        Args:
            multiview (MultiView):
                The frame, with affinity and epipolar scores computed.
            view_order (Sequence[int]):
                A permutation of view indexes, the first one is the
                main view.
            joint_order (Sequence[int]):
                Joint types of this pass, each one after its parent.

        Returns:
            int: Number of clusters preserved by this pass.
        """
        if multiview is not self.multiview:
            self.reset(multiview)
        self.view_order = list(view_order)
        self.joint_order = list(joint_order)
        n_before = len(self.preserved_clusters)
        cluster = Cluster(
            n_views=multiview.n_views,
            n_kps=multiview.n_kps,
            main_view=self.view_order[0])
        self._assign(cluster, 0, 0, _JointStart(score=0.0, n_terms=0))
        return len(self.preserved_clusters) - n_before

    def _preserve(self, cluster: Cluster) -> None:
        if self.max_n_clusters is not None and \
                len(self.preserved_clusters) >= self.max_n_clusters:
            if self.n_dropped == 0:
                self.logger.warning(
                    f'More than {self.max_n_clusters} clusters in frame '
                    f'{self.multiview.frame_idx}, the rest are dropped.')
            self.n_dropped += 1
            return
        self.preserved_clusters.append(cluster.copy())

    @contextmanager
    def _checkpoint(self, cluster: Cluster) -> Iterator[None]:
        """Restore score, terms and positions of a cluster on exit."""
        score = cluster.score
        terms = list(cluster.terms)
        positions = cluster.positions.copy()
        has_position = cluster.has_position.copy()
        try:
            yield
        finally:
            cluster.score = score
            cluster.terms[:] = terms
            cluster.positions[:] = positions
            cluster.has_position[:] = has_position

    @contextmanager
    def _assigned(self, cluster: Cluster, view: int, kps_id: int,
                  choice: int) -> Iterator[None]:
        """Set one choice, and restore the previous one on exit."""
        prev_choice = cluster.get_joint(view, kps_id)
        cluster.set_joint(view, kps_id, choice)
        try:
            yield
        finally:
            cluster.set_joint(view, kps_id, prev_choice)

    def _triangulate(self, cluster: Cluster, kps_id: int) -> bool:
        rays = []
        confidences = []
        for view in self.view_order:
            choice = cluster.get_joint(view, kps_id)
            if choice == NO_CHOICE:
                continue
            joint = self.multiview.views[view].joints[kps_id][choice]
            # a ray without confidence carries no weight
            if joint.confidence <= 0:
                continue
            rays.append(joint.ray)
            confidences.append(joint.confidence)
        if len(rays) < self.triangulator.min_n_rays:
            cluster.has_position[kps_id] = False
            return False
        cluster.positions[kps_id] = self.triangulator.triangulate(
            rays, confidences)
        cluster.has_position[kps_id] = True
        return True

    def _bone_too_long(self, cluster: Cluster, kps_id: int) -> bool:
        parent = self.kps_parent[kps_id]
        if not cluster.has_position[parent]:
            return False
        bone_length = np.linalg.norm(cluster.positions[parent] -
                                     cluster.positions[kps_id])
        return bone_length > self.get_max_bone_length(kps_id, parent)

    def _rollback_joint(self, cluster: Cluster, kps_id: int,
                        joint_start: _JointStart) -> None:
        """Drop the main view choice of a joint type and every score term
        added since the joint type was entered."""
        cluster.set_joint(self.view_order[0], kps_id, NO_CHOICE)
        cluster.has_position[kps_id] = False
        cluster.score = joint_start.score
        del cluster.terms[joint_start.n_terms:]

    def _finish_joint(self, cluster: Cluster, joint_i: int,
                      joint_start: _JointStart) -> None:
        """Triangulate the current joint type after its last view, check
        the bone to its parent and go on with the next joint type."""
        kps_id = self.joint_order[joint_i]
        main_view = self.view_order[0]
        with self._checkpoint(cluster), self._assigned(
                cluster, main_view, kps_id,
                cluster.get_joint(main_view, kps_id)):
            if not self._triangulate(cluster, kps_id):
                self._rollback_joint(cluster, kps_id, joint_start)
            elif joint_i != 0 and self._bone_too_long(cluster, kps_id):
                self._rollback_joint(cluster, kps_id, joint_start)
            self._assign(cluster, 0, joint_i + 1,
                         _JointStart(cluster.score, len(cluster.terms)))

    def _score_candidate(self, cluster: Cluster, view_i: int, joint_i: int,
                         choice: int) -> Union[None, List[ScoreTerm]]:
        """Get score terms of a candidate, or None if any gate rejects
        it."""
        view = self.view_order[view_i]
        kps_id = self.joint_order[joint_i]
        view_joints = self.multiview.views[view].joints
        joint = view_joints[kps_id][choice]
        terms = []
        if joint_i != 0:
            parent = self.kps_parent[kps_id]
            parent_joint = view_joints[parent][cluster.get_joint(
                view, parent)]
            paf = self.multiview.views[view].get_paf(parent_joint, joint)
            if paf < EPS:
                return None
            terms.append(ScoreTerm('paf', parent_joint.id, joint.id, paf))
        for prev_view in self.view_order[:view_i]:
            prev_choice = cluster.get_joint(prev_view, kps_id)
            if prev_choice == NO_CHOICE:
                continue
            prev_joint = self.multiview.views[prev_view].joints[kps_id][
                prev_choice]
            epipolar = self.multiview.get_epipolar(prev_joint, joint)
            if epipolar < EPS:
                return None
            terms.append(
                ScoreTerm('epipolar', prev_joint.id, joint.id, epipolar))
        return terms

    def _assign(self, cluster: Cluster, view_i: int, joint_i: int,
                joint_start: _JointStart) -> None:
        if joint_i == len(self.joint_order):
            self._preserve(cluster)
            return

        view = self.view_order[view_i]
        kps_id = self.joint_order[joint_i]
        is_last_view = view_i == len(self.view_order) - 1

        parent_assigned = joint_i == 0 or cluster.get_joint(
            view, self.kps_parent[kps_id]) != NO_CHOICE
        n_candidates = self.multiview.views[view].get_n_candidates(kps_id) \
            if parent_assigned else 0

        matched = False
        for choice in range(n_candidates):
            terms = self._score_candidate(cluster, view_i, joint_i, choice)
            if terms is None:
                continue
            matched = True
            with self._checkpoint(cluster), self._assigned(
                    cluster, view, kps_id, choice):
                for term in terms:
                    cluster.add_term(term)
                if is_last_view:
                    self._finish_joint(cluster, joint_i, joint_start)
                else:
                    self._assign(cluster, view_i + 1, joint_i, joint_start)

        # skip this view: always at the last and intermediate views, at
        # the main view only when no candidate matched
        if is_last_view:
            self._finish_joint(cluster, joint_i, joint_start)
        elif view_i != 0:
            self._assign(cluster, view_i + 1, joint_i, joint_start)
        elif not matched:
            self._assign(cluster, 0, joint_i + 1,
                         _JointStart(cluster.score, len(cluster.terms)))


def get_pass_combinations(
        view_orders: Sequence[Sequence[int]],
        joint_orders: Sequence[Sequence[int]]) -> List[Tuple[list, list]]:
    """Get every (view order, joint order) pair, view orders outermost."""
    return [(list(view_order), list(joint_order))
            for view_order in view_orders for joint_order in joint_orders]
