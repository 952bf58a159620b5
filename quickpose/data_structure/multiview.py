# yapf: disable
import logging
import numpy as np
from itertools import combinations
from typing import Dict, Hashable, Iterator, List, NamedTuple, Tuple, Union

from quickpose.utils.log_utils import get_logger
from quickpose.utils.ray_utils import ray2raydist
from .camera import Camera, Ray

# yapf: enable

JointId = Tuple[int, int, int]


class JointCandidate(NamedTuple):
    """One 2D detection of a joint type in one view.

    The id is (view_id, kps_id, index), unique inside a frame.
    """
    id: JointId
    uv: np.ndarray
    ray: Ray
    confidence: float


class PairScoreTable:
    """A symmetric score table keyed by an unordered pair of ids.

    Lookups of pairs that were never set raise KeyError, since a missing
    pair means the upstream precomputation is incomplete.
    """

    def __init__(self, name: str = 'score') -> None:
        self.name = name
        self._scores: Dict[Tuple[Hashable, Hashable], float] = dict()

    @staticmethod
    def _key(id_a: Hashable, id_b: Hashable) -> Tuple[Hashable, Hashable]:
        return (id_a, id_b) if id_a <= id_b else (id_b, id_a)

    def set(self, id_a: Hashable, id_b: Hashable, value: float) -> None:
        self._scores[self._key(id_a, id_b)] = float(value)

    def get(self, id_a: Hashable, id_b: Hashable) -> float:
        try:
            return self._scores[self._key(id_a, id_b)]
        except KeyError:
            raise KeyError(f'No {self.name} computed for pair '
                           f'{id_a} and {id_b}.') from None

    def contains(self, id_a: Hashable, id_b: Hashable) -> bool:
        return self._key(id_a, id_b) in self._scores

    def clear(self) -> None:
        self._scores.clear()

    def __len__(self) -> int:
        return len(self._scores)


class View:
    """Joint candidates of one camera in one frame, together with the part
    affinity scores between candidates of adjacent joint types."""

    def __init__(self,
                 camera: Camera,
                 n_kps: int,
                 view_id: int = 0,
                 logger: Union[None, str, logging.Logger] = None) -> None:
        """
        Args:
            camera (Camera):
                Calibrated camera of this view, shared read-only.
            n_kps (int):
                Number of joint types.
            view_id (int, optional):
                Index of this view inside its MultiView, used in
                candidate ids. Defaults to 0.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        self.camera = camera
        self.n_kps = n_kps
        self.view_id = view_id
        self.joints: List[List[JointCandidate]] = [[] for _ in range(n_kps)]
        self.pafs = PairScoreTable(name='part affinity')

    def add_joint(self, kps_id: int, uv: Union[np.ndarray, list],
                  confidence: float) -> JointCandidate:
        """Append a candidate of joint type kps_id and compute its ray.

        Returns:
            JointCandidate: The new candidate.
        """
        if kps_id < 0 or kps_id >= self.n_kps:
            self.logger.error(f'Joint type {kps_id} is out of range, '
                              f'this view has {self.n_kps} joint types.')
            raise ValueError
        if not 0.0 <= confidence <= 1.0:
            self.logger.error(
                f'Confidence must be in [0, 1], got {confidence}.')
            raise ValueError
        uv = np.array(uv, dtype=np.float64)[:2]
        uv.setflags(write=False)
        candidate = JointCandidate(
            id=(self.view_id, kps_id, len(self.joints[kps_id])),
            uv=uv,
            ray=self.camera.cal_ray(uv),
            confidence=float(confidence))
        self.joints[kps_id].append(candidate)
        return candidate

    def get_paf(self, joint_a: JointCandidate,
                joint_b: JointCandidate) -> float:
        return self.pafs.get(joint_a.id, joint_b.id)

    def set_paf(self, joint_a: JointCandidate, joint_b: JointCandidate,
                value: float) -> None:
        self.pafs.set(joint_a.id, joint_b.id, value)

    def get_n_candidates(self, kps_id: int) -> int:
        return len(self.joints[kps_id])


class MultiView:
    """Views of all cameras sharing one timestamp, with the epipolar
    consistency scores between their candidates."""

    def __init__(self,
                 views: List[View],
                 frame_idx: int = 0,
                 logger: Union[None, str, logging.Logger] = None) -> None:
        self.logger = get_logger(logger)
        self.views = views
        self.frame_idx = frame_idx
        self.epipolars = PairScoreTable(name='epipolar score')
        if len(set(view.n_kps for view in views)) > 1:
            self.logger.error('All views of a MultiView must share '
                              'the same number of joint types.')
            raise ValueError

    @property
    def n_views(self) -> int:
        return len(self.views)

    @property
    def n_kps(self) -> int:
        return self.views[0].n_kps if len(self.views) > 0 else 0

    def get_n_candidates(self) -> int:
        return sum(
            view.get_n_candidates(kps_id) for view in self.views
            for kps_id in range(view.n_kps))

    def iter_candidate_pairs(
        self, kps_id: int
    ) -> Iterator[Tuple[JointCandidate, JointCandidate]]:
        """Yield every pair of same-type candidates from two different
        views."""
        for view_a, view_b in combinations(self.views, 2):
            for joint_a in view_a.joints[kps_id]:
                for joint_b in view_b.joints[kps_id]:
                    yield joint_a, joint_b

    def compute_epipolar(self, max_distance: float) -> None:
        """Score every cross-view pair of same-type candidates by
        1 - ray_distance / max_distance. Scores can be negative.

        Args:
            max_distance (float):
                Ray distance at which the score drops to zero.
        """
        if max_distance <= 0:
            self.logger.error(
                f'max_distance must be positive, got {max_distance}.')
            raise ValueError
        self.epipolars.clear()
        for kps_id in range(self.n_kps):
            for joint_a, joint_b in self.iter_candidate_pairs(kps_id):
                distance = ray2raydist(joint_a.ray, joint_b.ray)
                self.epipolars.set(joint_a.id, joint_b.id,
                                   1.0 - distance / max_distance)

    def get_epipolar(self, joint_a: JointCandidate,
                     joint_b: JointCandidate) -> float:
        return self.epipolars.get(joint_a.id, joint_b.id)

    def set_epipolar(self, joint_a: JointCandidate, joint_b: JointCandidate,
                     value: float) -> None:
        self.epipolars.set(joint_a.id, joint_b.id, value)
