"""
Tests for kernel launch geometry.
"""

import pytest

from pycurvefit.core.compute.launch import blocks_for, launch_config_1d, launch_config_2d
from pycurvefit.core.compute.precision import THREADS_PER_BLOCK, TILE_DIM
from pycurvefit.core.exceptions import ValidationError


class TestLaunchConfig1D:

    @pytest.mark.parametrize("n,blocks", [
        (1, 1),
        (256, 1),
        (257, 2),
        (1000, 4),
    ])
    def test_blocks_cover_n(self, n, blocks):
        assert launch_config_1d(n) == (blocks, THREADS_PER_BLOCK)

    def test_custom_block_size(self):
        assert launch_config_1d(100, threads_per_block=32) == (4, 32)

    def test_zero_rejected(self):
        with pytest.raises(ValidationError):
            launch_config_1d(0)


class TestLaunchConfig2D:

    def test_exact_multiple(self):
        grid, block = launch_config_2d(64, 96)
        assert grid == (2, 3)
        assert block == (TILE_DIM, TILE_DIM)

    def test_ragged_edges_round_up(self):
        # grid x follows rows, grid y follows columns
        grid, _ = launch_config_2d(33, 1)
        assert grid == (2, 1)

    def test_threads_cover_matrix(self):
        m, n = 70, 45
        (gx, gy), (bx, by) = launch_config_2d(m, n)
        assert gx * bx >= m
        assert gy * by >= n
        assert (gx - 1) * bx < m
        assert (gy - 1) * by < n

    def test_blocks_for(self):
        assert blocks_for(0, 32) == 0
        assert blocks_for(32, 32) == 1
        assert blocks_for(33, 32) == 2
