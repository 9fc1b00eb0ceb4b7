"""
Model evaluation backends.

    tensor: torch expressions, any device (CPU, MPS, CUDA)
    cuda: numba.cuda element-wise kernels, one thread per sample
"""
