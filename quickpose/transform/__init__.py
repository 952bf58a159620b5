from .convention import convert_pose, convert_poses
from .limbs import calibrate_max_bone_lengths, get_max_limb_lengths
from .multiview_builder import build_multiview

__all__ = [
    'build_multiview', 'calibrate_max_bone_lengths', 'convert_pose',
    'convert_poses', 'get_max_limb_lengths'
]
