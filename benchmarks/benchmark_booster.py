"""Benchmark HistogramBooster on synthetic multi-target class data."""

import time
from typing import Any

import mlx.core as mx
import numpy as np

from histboost import HistogramBooster
from histboost.utils import check_training_inputs, per_target_accuracy, shuffle_split

N_CLASSES = (3, 5)


def make_data(
    n_samples: int, n_features: int, rng: np.random.Generator
) -> tuple[np.ndarray, np.ndarray]:
    """Integer-coded features with two class-coded targets."""
    X = rng.integers(0, 20, size=(n_samples, n_features)).astype(np.float64)
    y0 = np.clip(np.floor(X[:, 0] / 7.0), 0, N_CLASSES[0] - 1)
    y1 = np.clip(np.floor((X[:, 1] + X[:, 2]) / 8.0), 0, N_CLASSES[1] - 1)
    return X, np.column_stack([y0, y1])


def benchmark(n_samples: int, n_features: int, rounds: int) -> dict[str, Any]:
    """Train, validate and time one configuration."""
    print(f"\n{'=' * 60}")
    print(f"Boosting: {n_samples:,} samples, {n_features} features, {rounds} rounds")
    print("=" * 60)

    rng = np.random.default_rng(42)
    X, Y = make_data(n_samples, n_features, rng)
    X, Y = check_training_inputs(X, Y, n_targets=len(N_CLASSES))
    train_idx, val_idx = shuffle_split(n_samples, 0.8, rng)

    model = HistogramBooster(
        n_targets=len(N_CLASSES), learning_rate=0.1, max_depth=3, min_samples=5
    )

    start = time.perf_counter()
    model.fit(X[train_idx], Y[train_idx], rounds)
    fit_time = time.perf_counter() - start
    print(f"fit:           {fit_time:.3f}s")

    start = time.perf_counter()
    host_preds = model.predict_batch(X[val_idx])
    host_time = time.perf_counter() - start
    print(f"predict_batch: {host_time:.3f}s")

    X_val_mx = mx.array(X[val_idx].astype(np.float32))
    mx.eval(X_val_mx)
    start = time.perf_counter()
    model.predict_mlx(X_val_mx)
    mlx_time = time.perf_counter() - start
    print(f"predict_mlx:   {mlx_time:.3f}s")

    accuracy = per_target_accuracy(Y[val_idx], host_preds, N_CLASSES)
    for j, acc in enumerate(accuracy):
        print(f"target {j} validation accuracy: {acc * 100:.2f}%")

    return {
        "n_samples": n_samples,
        "n_features": n_features,
        "rounds": rounds,
        "fit_time": fit_time,
        "accuracy": accuracy,
    }


def main() -> None:
    """Run all benchmarks."""
    configs = [
        # (n_samples, n_features, rounds)
        (1_000, 10, 50),
        (10_000, 20, 50),
        (50_000, 20, 50),
    ]

    all_results = [benchmark(*config) for config in configs]

    print("\n" + "=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print(f"{'Samples':>10} {'Features':>10} {'Rounds':>8} {'Fit (s)':>10}")
    print("-" * 60)
    for r in all_results:
        print(
            f"{r['n_samples']:>10,} {r['n_features']:>10} "
            f"{r['rounds']:>8} {r['fit_time']:>10.3f}"
        )


if __name__ == "__main__":
    main()
