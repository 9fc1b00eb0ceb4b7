"""
Kernel launch geometry.

Element-wise kernels map one thread to one output element on a 1D grid.
The transpose maps one thread to one element of a TILE_DIM x TILE_DIM tile
on a 2D grid; grid x walks rows and grid y walks columns of the column-major
input, so consecutive threads in a warp touch consecutive addresses.
"""

from pycurvefit.core.compute.precision import THREADS_PER_BLOCK, TILE_DIM
from pycurvefit.core.validation import check_dimension


def blocks_for(n: int, per_block: int) -> int:
    """Number of blocks of size per_block needed to cover n items."""
    return (n + per_block - 1) // per_block


def launch_config_1d(
    n: int,
    threads_per_block: int = THREADS_PER_BLOCK,
) -> tuple[int, int]:
    """
    Launch configuration for an element-wise kernel over n elements.

    Args:
        n: Number of output elements
        threads_per_block: Threads per block

    Returns:
        (blocks, threads_per_block). Threads past n are masked in-kernel.

    Raises:
        ValidationError: If n or threads_per_block is not positive
    """
    n = check_dimension(n, 'n')
    threads_per_block = check_dimension(threads_per_block, 'threads_per_block')
    return blocks_for(n, threads_per_block), threads_per_block


def launch_config_2d(
    m: int,
    n: int,
    tile: int = TILE_DIM,
) -> tuple[tuple[int, int], tuple[int, int]]:
    """
    Launch configuration for the tiled transpose of an m x n matrix.

    Args:
        m: Rows of the (column-major) input
        n: Columns of the input
        tile: Square tile edge; one thread per tile element

    Returns:
        ((grid_x, grid_y), (tile, tile)) with grid_x covering the m rows
        and grid_y covering the n columns. Neither m nor n need be a multiple
        of tile.

    Raises:
        ValidationError: If any argument is not positive
    """
    m = check_dimension(m, 'm')
    n = check_dimension(n, 'n')
    tile = check_dimension(tile, 'tile')
    return (blocks_for(m, tile), blocks_for(n, tile)), (tile, tile)
