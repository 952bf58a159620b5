type = 'QuickPoseEvaluation'
gt_kps3d_convention = 'campus'
eval_kps3d_convention = 'openpose_25'
bone_length_margin = 0.1
logger = None

associator = dict(
    type='QuickPoseAssociator',
    kps_convention='openpose_25',
    max_epi_dist=0.1,
    max_n_clusters=100000,
    triangulator=dict(type='MultiRayTriangulator'),
)

metric_list = [
    dict(type='PredictionMatcher', name='matching'),
    dict(
        type='PCPMetric',
        name='pcp',
        kps_convention='openpose_25',
        selected_limbs_names=[
            'torso', 'right_upperarm', 'right_forearm', 'left_upperarm',
            'left_forearm', 'right_thigh', 'right_lower_leg', 'left_thigh',
            'left_lower_leg'
        ],
        threshold=0.5,
        show_table=True),
]
pick_dict = dict(pcp='pcp_total_mean')
