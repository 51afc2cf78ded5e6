import os
import sys

# Ensure we can import from the repo root
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from diag_hessian.shared import set_deterministic, run_comparisons, format_comparison, plot_diagonal_comparison


def main():
    rng = set_deterministic(123)

    # Points
    x0 = rng.normal(0.0, 1.0, 3)
    x1 = x0 + rng.normal(0.0, 0.1, 3)

    records = run_comparisons(x0, x1, logfile=sys.stdout)
    print()
    print(format_comparison(records))

    out_dir = os.path.dirname(__file__)
    for fname in ('f', 'g', 'h'):
        subset = [r for r in records if r['name'].startswith(f"{fname}:")]
        plot_diagonal_comparison(subset, save_path=os.path.join(out_dir, f"diag_{fname}.png"),
                                 title=f"Test function {fname}")


if __name__ == "__main__":
    main()
