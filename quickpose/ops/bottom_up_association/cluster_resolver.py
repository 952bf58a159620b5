# yapf: disable
import logging
from typing import Dict, List, Sequence, Tuple, Union

from quickpose.data_structure.pose import MultiPersonPose, Pose
from quickpose.utils.log_utils import get_logger
from .hypothesis_search import NO_CHOICE, Cluster

# yapf: enable


class ClusterResolver:
    """Merge scored clusters into disjoint per-person poses.

    Clusters are visited from the highest score down. A cluster is accepted
    when its (view, joint type, candidate) claims belong to at most one
    known person, agree with every candidate that person already holds,
    and add at least one unclaimed candidate. Only joint types assigned in
    the cluster's main view take part. The first accepted cluster that
    triangulates a joint type sets its position on the person.
    """

    def __init__(self,
                 min_n_main_kps: int = 1,
                 logger: Union[None, str, logging.Logger] = None) -> None:
        """
        Args:
            min_n_main_kps (int, optional):
                Minimum number of joint types assigned in the main view
                for a cluster to be considered. Defaults to 1.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        self.min_n_main_kps = min_n_main_kps

    def __call__(self, clusters: Sequence[Cluster],
                 n_kps: int) -> MultiPersonPose:
        """Resolve clusters of one frame.

        Args:
            clusters (Sequence[Cluster]):
                Preserved clusters of every search pass.
            n_kps (int):
                Number of joint types.

        Returns:
            MultiPersonPose: One pose per resolved person.
        """
        multi_person_pose: MultiPersonPose = []
        # (view, kps_id, choice) -> person
        claim_owner: Dict[Tuple[int, int, int], int] = dict()
        # (view, kps_id, person) -> choice
        person_choice: Dict[Tuple[int, int, int], int] = dict()

        # sorted() is stable, ties keep the search order
        sorted_clusters = sorted(
            clusters, key=lambda cluster: cluster.score, reverse=True)
        n_accepted = 0
        for cluster in sorted_clusters:
            claims = self._get_claims(cluster)
            if len(set(kps_id for _, kps_id, _ in claims)) < \
                    self.min_n_main_kps:
                continue
            person_id = self._find_owner(claims, claim_owner)
            if person_id is None:
                continue
            if person_id == NO_CHOICE:
                person_id = len(multi_person_pose)
                multi_person_pose.append(Pose(n_kps=n_kps,
                                              identity=person_id))
            elif self._contradicts(claims, person_id, person_choice):
                continue
            pose = multi_person_pose[person_id]
            for view, kps_id, choice in claims:
                claim_owner[(view, kps_id, choice)] = person_id
                person_choice[(view, kps_id, person_id)] = choice
                if not pose.has_joint[kps_id] and \
                        cluster.has_position[kps_id]:
                    pose.set_joint(kps_id, cluster.positions[kps_id])
            n_accepted += 1
        self.logger.debug(f'{n_accepted} of {len(sorted_clusters)} clusters '
                          f'accepted, {len(multi_person_pose)} persons.')
        return multi_person_pose

    @staticmethod
    def _get_claims(cluster: Cluster) -> List[Tuple[int, int, int]]:
        claims = []
        for kps_id in cluster.get_main_kps():
            for view in range(cluster.n_views):
                choice = cluster.get_joint(view, kps_id)
                if choice != NO_CHOICE:
                    claims.append((view, int(kps_id), choice))
        return claims

    @staticmethod
    def _find_owner(
            claims: List[Tuple[int, int, int]],
            claim_owner: Dict[Tuple[int, int, int], int]) -> Union[None, int]:
        """Get the person owning the claimed candidates.

        Returns:
            Union[None, int]:
                None if the claims span several persons or nothing new is
                claimed, NO_CHOICE if no claim is owned yet, else the
                owner's person id.
        """
        person_id = NO_CHOICE
        contributing = False
        for claim in claims:
            owner = claim_owner.get(claim, NO_CHOICE)
            if owner == NO_CHOICE:
                contributing = True
            elif person_id == NO_CHOICE:
                person_id = owner
            elif person_id != owner:
                return None
        if not contributing:
            return None
        return person_id

    @staticmethod
    def _contradicts(claims: List[Tuple[int, int, int]], person_id: int,
                     person_choice: Dict[Tuple[int, int, int], int]) -> bool:
        for view, kps_id, choice in claims:
            recorded = person_choice.get((view, kps_id, person_id),
                                         NO_CHOICE)
            if recorded != NO_CHOICE and recorded != choice:
                return True
        return False
