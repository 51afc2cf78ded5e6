from .config import Config
from .autodiff import value, gradient, hessian_diagonal
from .reproducibility import set_deterministic
from .report import compare_update, run_comparisons, format_comparison, plot_diagonal_comparison
