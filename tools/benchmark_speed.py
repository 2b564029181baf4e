"""
Performance Benchmark
=====================

Measures CoreGame and CatchEnv step throughput.

Usage:
    python -m tools.benchmark_speed [--steps S] [--envs N ...] [--quick]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import List
import numpy as np

import gymnasium as gym

from clean_drops.catch_core.config_loader import load_config
from clean_drops.catch_core.game import CoreGame
from clean_drops.catch_core.env_gym import CatchEnv


def _random_click(rng: np.random.Generator) -> np.ndarray:
    return rng.uniform(0.0, 1.0, size=3).astype(np.float32)


def benchmark_core_game(num_steps: int = 1000, seed: int = 42) -> dict:
    """
    Benchmark raw CoreGame without Gym overhead.

    Each step is a random click followed by one env frame of game time.
    """
    config = load_config()
    game = CoreGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)
    frame_ms = config.env.frame_ms
    width, height = game.field.width, game.field.height

    game.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        x, y, click = _random_click(rng)
        if click > 0.5:
            game.collect_at(x * width, y * height)
        game.advance(frame_ms)
        if game.is_over:
            game.reset()

    elapsed = time.perf_counter() - start

    return {
        "mode": "core_game",
        "num_envs": 1,
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_single_env(num_steps: int = 1000, seed: int = 42) -> dict:
    """Benchmark a single CatchEnv."""
    env = CatchEnv()
    rng = np.random.default_rng(seed)

    # Warmup
    env.reset(seed=seed)
    for _ in range(10):
        env.step(_random_click(rng))

    env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        _, _, terminated, truncated, _ = env.step(_random_click(rng))
        if terminated or truncated:
            env.reset()

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "single",
        "num_envs": 1,
        "num_steps": num_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_vector_env(num_envs: int = 16, num_steps: int = 1000, seed: int = 42) -> dict:
    """Benchmark CatchEnv copies stepped together by gymnasium's SyncVectorEnv."""
    vec_env = gym.vector.SyncVectorEnv([CatchEnv for _ in range(num_envs)])
    rng = np.random.default_rng(seed)

    vec_env.reset(seed=seed)
    start = time.perf_counter()

    for _ in range(num_steps):
        actions = rng.uniform(0.0, 1.0, size=(num_envs, 3)).astype(np.float32)
        vec_env.step(actions)

    elapsed = time.perf_counter() - start
    vec_env.close()

    total_steps = num_steps * num_envs
    return {
        "mode": "vector",
        "num_envs": num_envs,
        "num_steps": num_steps,
        "total_env_steps": total_steps,
        "elapsed_seconds": elapsed,
        "steps_per_second": total_steps / elapsed,
        "ms_per_batch": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(vector_env_sizes: List[int], steps: int = 500) -> list:
    """Run every benchmark and print a summary table."""
    results = []

    print("=" * 60)
    print("CLEAN DROPS PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking CoreGame (raw)...")
    result = benchmark_core_game(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print()

    print("Benchmarking CatchEnv (single)...")
    result = benchmark_single_env(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print()

    for num_envs in vector_env_sizes:
        print(f"Benchmarking SyncVectorEnv (n={num_envs})...")
        result = benchmark_vector_env(num_envs=num_envs, num_steps=steps)
        results.append(result)
        print(f"  Env steps/sec: {result['steps_per_second']:.1f}")
        print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Envs':>6} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 50)

    for r in results:
        ms = r.get("ms_per_step", r.get("ms_per_batch"))
        print(f"{r['mode']:<20} {r['num_envs']:>6} {r['steps_per_second']:>12.1f} {ms:>10.3f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Clean Drops performance")
    parser.add_argument("--steps", type=int, default=500, help="Steps per benchmark")
    parser.add_argument("--envs", type=int, nargs="+", default=[1, 4, 16],
                        help="Vector env sizes to test")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 100 if args.quick else args.steps
    run_all_benchmarks(vector_env_sizes=args.envs, steps=steps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
