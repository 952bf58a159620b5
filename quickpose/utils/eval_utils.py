import numpy as np


def check_limb_is_correct(model_start_point: np.ndarray,
                          model_end_point: np.ndarray,
                          gt_start_point: np.ndarray,
                          gt_end_point: np.ndarray,
                          alpha: float = 0.5) -> bool:
    """Check that limb predictions are correct.

    Returns:
        bool: True if the mean error of both ends is not larger than
            alpha times the ground-truth limb length.
    """
    limb_length = np.linalg.norm(gt_end_point - gt_start_point)
    start_difference = np.linalg.norm(gt_start_point - model_start_point)
    end_difference = np.linalg.norm(gt_end_point - model_end_point)
    return bool(((start_difference + end_difference) / 2) <= alpha *
                limb_length)
