type = 'QuickPoseAssociator'
kps_convention = 'openpose_25'
# None for every cyclic rotation of the views
view_orders = None
joint_orders = [
    [8, 1, 2, 3, 4],
    [8, 1, 5, 6, 7],
    [8, 1, 0],
    [8, 9, 10, 11],
    [8, 12, 13, 14],
    [8, 1, 2, 17],
    [8, 1, 5, 18],
]
max_epi_dist = 0.1
max_bone_lengths = None
max_n_clusters = 100000
min_n_main_kps = 1
triangulator = dict(
    type='MultiRayTriangulator',
    min_n_rays=2,
    square_confidence=True,
)
logger = None
