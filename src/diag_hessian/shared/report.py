import numpy as np
import torch
import matplotlib.pyplot as plt

from diag_hessian.registry.factory import create_operator
from diag_hessian.shared.autodiff import gradient, hessian_diagonal, value

TEST_FUNCTIONS = {
    'f': lambda x: x[0] ** 2 + x[1] ** 2 * x[2] ** 2,
    'g': lambda x: torch.exp(x[0]) + x[1] + torch.cos(x[2]),
    'h': lambda x: x[0] ** 2 * x[1] * x[2] ** 3,
}

# (method, auxiliary vector choice for the modified SR1 rule)
METHOD_CASES = [
    ('diagonal_qn', None),
    ('spectral_gradient', None),
    ('diagonal_msr1', 's'),
    ('diagonal_msr1', 'y'),
    ('diagonal_msr1', 'grad'),
]


def _as_numpy(d):
    if isinstance(d, torch.Tensor):
        return d.detach().cpu().numpy()
    return np.asarray(d)


def compare_update(fun, x0, x1, method, choice=None, name=None, logfile=None):
    """
    Initialize ``method`` with the exact Hessian diagonal at x0, update it with
    the secant data between x0 and x1 and compare with the exact diagonal at x1.

    Returns:
        dict with keys 'name', 'method', 'choice', 'exact', 'before', 'after',
        'error_before', 'error_after' (max-abs differences to 'exact').
    """
    x0 = np.asarray(x0, dtype=np.float64)
    x1 = np.asarray(x1, dtype=np.float64)
    g0, g1 = gradient(fun, x0), gradient(fun, x1)
    exact = hessian_diagonal(fun, x1)

    op = create_operator(method, initial=hessian_diagonal(fun, x0))
    before = _as_numpy(op.to_diagonal()).copy()
    if method.startswith('diagonal_msr1'):
        op.update_from_points(x0, x1, g0, g1, value(fun, x0), value(fun, x1),
                              choice=choice or 's', logfile=logfile)
    else:
        op.update(x1 - x0, g1 - g0, logfile=logfile)
    after = _as_numpy(op.to_diagonal()).copy()

    return {
        'name': name or method,
        'method': method,
        'choice': choice,
        'exact': exact,
        'before': before,
        'after': after,
        'error_before': float(np.max(np.abs(before - exact))),
        'error_after': float(np.max(np.abs(after - exact))),
    }


def run_comparisons(x0, x1, functions=None, cases=None, logfile=None):
    functions = functions or TEST_FUNCTIONS
    cases = cases or METHOD_CASES
    records = []
    for fname, fun in functions.items():
        for method, choice in cases:
            label = method if choice is None else f"{method}(u={choice})"
            records.append(compare_update(fun, x0, x1, method, choice, name=f"{fname}: {label}", logfile=logfile))
    return records


def format_comparison(records):
    lines = [f"{'case':<32} {'err before':>12} {'err after':>12}"]
    for r in records:
        lines.append(f"{r['name']:<32} {r['error_before']:>12.4e} {r['error_after']:>12.4e}")
        lines.append(f"    exact : {np.array2string(r['exact'], precision=4)}")
        lines.append(f"    approx: {np.array2string(r['after'], precision=4)}")
    return "\n".join(lines)


def plot_diagonal_comparison(records, save_path=None, title="Hessian diagonal approximation"):
    """Bar chart of exact / initial / updated diagonals, one panel per record."""
    if not records:
        raise ValueError("no records to plot")
    fig, axes = plt.subplots(1, len(records), figsize=(3.2 * len(records), 3.5), squeeze=False)
    width = 0.27
    for ax, r in zip(axes[0], records):
        idx = np.arange(len(r['exact']))
        ax.bar(idx - width, r['exact'], width, color='tab:gray', label='exact')
        ax.bar(idx, r['before'], width, color='tab:blue', label='before')
        ax.bar(idx + width, r['after'], width, color='tab:orange', label='after')
        ax.set_xticks(idx)
        ax.set_title(r['name'], fontsize=8)
        ax.grid(True, linestyle='--', alpha=0.3)
    axes[0][0].legend(fontsize=7)
    fig.suptitle(title)
    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150)
        print(f"Plot saved to {save_path}")
    plt.close(fig)
    return save_path
