type = 'MultiRayTriangulator'
min_n_rays = 2
square_confidence = True
