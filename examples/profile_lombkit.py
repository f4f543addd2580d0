# profile_lombkit.py

import numpy as np
import cProfile
import pstats

from lombkit.analysis import compute_periodogram


def main():
    """Sets up and runs the profiling task."""
    print("Setting up profiling workload...")

    # --- 1. A long, irregularly sampled series ---
    N = int(2e5)
    rng = np.random.default_rng(1)
    t = np.sort(rng.uniform(0.0, N / 10.0, N))
    y = np.sin(2 * np.pi * 1.7 * t) + rng.normal(size=N)
    data = np.vstack([t, y])

    print(f"Profiling compute_periodogram on a series of length {N}...")

    # --- 2. Run the function under cProfile ---
    command = "compute_periodogram(data, ofac=4, hifac=1, capacity=1 << 24)"
    profiler_context = {"compute_periodogram": compute_periodogram, "data": data}

    cProfile.runctx(
        command, globals=profiler_context, locals={}, filename="lombkit_profile.prof"
    )

    print("Profiling complete. Stats saved to 'lombkit_profile.prof'")

    # --- 3. Print a simple summary to the console ---
    print("\n--- Top 10 Functions by Cumulative Time ---")
    stats = pstats.Stats("lombkit_profile.prof")
    stats.sort_stats("cumulative").print_stats(10)


if __name__ == "__main__":
    main()
