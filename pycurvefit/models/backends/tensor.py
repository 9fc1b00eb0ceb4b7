"""
Tensor backend for model evaluation.

Each function maps the sample index tensor t = [0, 1, ..., n-1] (float32,
on the output's device) and the parameter values to the model output.
Decay rates enter as -|k| so the exponentials always decay.
"""

import torch


def linear(t: torch.Tensor, a: float, b: float) -> torch.Tensor:
    return t * a + b


def exponential(t: torch.Tensor, a: float, k: float, b: float) -> torch.Tensor:
    return torch.exp(t * -abs(k)) * a + b


def double_exponential(
    t: torch.Tensor,
    a1: float,
    k1: float,
    a2: float,
    k2: float,
    b: float,
) -> torch.Tensor:
    return torch.exp(t * -abs(k1)) * a1 + torch.exp(t * -abs(k2)) * a2 + b


def design_matrix(t: torch.Tensor, out: torch.Tensor) -> None:
    """Write the n x 2 column-major design matrix [t, 1] into out[:2n]."""
    n = t.numel()
    out[:n].copy_(t)
    out[n:2 * n].fill_(1.0)
