# yapf: disable
import logging
import numpy as np
from typing import NamedTuple, Union

from quickpose.utils.log_utils import get_logger

# yapf: enable


class Ray(NamedTuple):
    """A 3D ray in world space, direction is normalized."""
    origin: np.ndarray
    direction: np.ndarray


class Camera:
    """A calibrated pinhole camera. Distortion is assumed to be corrected
    upstream.

    Instances are immutable after construction and can be shared by every
    frame of a dataset.
    """

    def __init__(self,
                 K: Union[np.ndarray, list],
                 R: Union[np.ndarray, list],
                 T: Union[np.ndarray, list],
                 name: str = '',
                 logger: Union[None, str, logging.Logger] = None) -> None:
        """
        Args:
            K (Union[np.ndarray, list]):
                Intrinsic matrix in shape [3, 3].
            R (Union[np.ndarray, list]):
                World to camera rotation matrix in shape [3, 3].
            T (Union[np.ndarray, list]):
                World to camera translation vector in shape [3, ].
            name (str, optional):
                Name of the camera. Defaults to ''.
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. If None, root logger will be selected.
                Defaults to None.
        """
        self.logger = get_logger(logger)
        self.name = name
        K = np.array(K, dtype=np.float64)
        R = np.array(R, dtype=np.float64)
        T = np.array(T, dtype=np.float64).reshape(-1)
        if K.shape != (3, 3) or R.shape != (3, 3) or T.shape != (3, ):
            self.logger.error('Camera expects K and R in shape [3, 3] '
                              'and T in shape [3, ], '
                              f'got {K.shape}, {R.shape} and {T.shape}.')
            raise ValueError
        self._K = K
        self._R = R
        self._T = T
        self._position = -np.matmul(R.T, T)
        self._rt_ki = np.matmul(R.T, np.linalg.inv(K))
        for array in (self._K, self._R, self._T, self._position,
                      self._rt_ki):
            array.setflags(write=False)

    @property
    def K(self) -> np.ndarray:
        return self._K

    @property
    def R(self) -> np.ndarray:
        return self._R

    @property
    def T(self) -> np.ndarray:
        return self._T

    @property
    def position(self) -> np.ndarray:
        """Camera center in world space, -R^T * T."""
        return self._position

    @property
    def inverse_ray_matrix(self) -> np.ndarray:
        """R^T * K^-1, maps homogeneous pixels to world directions."""
        return self._rt_ki

    def cal_ray(self, uv: Union[np.ndarray, list]) -> Ray:
        """Compute the world ray through a pixel.

        Args:
            uv (Union[np.ndarray, list]):
                Pixel location in shape [2, ].

        Returns:
            Ray: A ray starting at the camera center.
        """
        var = -self._rt_ki.dot(np.append(np.asarray(uv, dtype=np.float64),
                                         1.0))
        direction = var / np.linalg.norm(var)
        direction.setflags(write=False)
        return Ray(origin=self._position, direction=direction)

    @classmethod
    def from_projection_dict(cls,
                             cam_dict: dict,
                             logger: Union[None, str,
                                           logging.Logger] = None) -> 'Camera':
        """Build a camera from a calibration dict holding K and either R/T
        or a row-major 3x4 RT.

        Args:
            cam_dict (dict):
                A dict with key K (9 values, row-major), and keys R (9
                values) and T (3 values), or key RT (12 values).
            logger (Union[None, str, logging.Logger], optional):
                Logger for logging. Defaults to None.

        Returns:
            Camera
        """
        K = np.asarray(cam_dict['K'], dtype=np.float64).reshape(3, 3)
        if 'RT' in cam_dict:
            rt = np.asarray(cam_dict['RT'], dtype=np.float64).reshape(3, 4)
            R, T = rt[:, :3], rt[:, 3]
        else:
            R = np.asarray(cam_dict['R'], dtype=np.float64).reshape(3, 3)
            T = np.asarray(cam_dict['T'], dtype=np.float64).reshape(3)
        return cls(
            K=K, R=R, T=T, name=cam_dict.get('name', ''), logger=logger)
