"""
Batch runner experiments for the SandCaveModel.

This script sweeps over:
  - The spawn interval: 1, 2, 3, 5 and 8 ticks between grains
  - The floor mode: a synthesised floor vs an open bottom

Each experiment runs until the source is blocked (floor) or the first grain
falls into the void (no floor), or until max_ticks is reached. The tick count,
settled grains and runtime of each run are recorded.

Usage: Run as a normal python file. For example:
    python batch_runner.py data/reference_cave.txt
"""

import sys
import time
from itertools import product

import matplotlib.pyplot as plt
import pandas as pd
from tqdm.auto import tqdm

from sand_cave.model import REFERENCE_CAVE, SandCaveModel

# Define the parameter sweep.
params = {
    "spawn_interval": [1, 2, 3, 5, 8],
    "floor": [True, False],
    "halt_on_void": True,
}


def run_experiment(run_id, kwargs, cave_text=REFERENCE_CAVE, max_ticks=100000):
    """
    Run a single model instance until it stops or max_ticks are reached.

    Returns:
        dict: A summary of the run including the run id, parameters,
              final tick count, settled grains and run time.
    """
    model = SandCaveModel(cave_text=cave_text, **kwargs)
    start_time = time.time()
    pbar = tqdm(total=max_ticks, desc=f"Run {run_id}", leave=False)
    while model.running and model.tick < max_ticks:
        model.step()
        pbar.update(1)
    pbar.close()
    run_time = time.time() - start_time

    return {
        "RunId": run_id,
        **kwargs,
        **model.summary(),
        "RunTime": run_time,
    }


def make_runs(parameters):
    """
    Generate a list of runs given the parameter sweep.

    Each run is represented as a tuple: (run_id, kwargs)
    """
    keys = list(parameters.keys())
    values_product = product(
        *(parameters[k] if isinstance(parameters[k], list) else [parameters[k]] for k in keys)
    )
    return [(run_id, dict(zip(keys, vals))) for run_id, vals in enumerate(values_product)]


if __name__ == "__main__":
    cave_text = REFERENCE_CAVE
    if len(sys.argv) > 1:
        with open(sys.argv[1], encoding="utf-8") as handle:
            cave_text = handle.read()

    runs = make_runs(params)
    results = []
    for run_id, kwargs in tqdm(runs, total=len(runs), desc="Running experiments"):
        results.append(run_experiment(run_id, kwargs, cave_text=cave_text))

    df = pd.DataFrame(results)
    print(df[["spawn_interval", "floor", "Ticks", "Settled", "Lost", "SourceBlocked"]])

    # Ticks until the run stopped against spawn interval, one line per floor mode.
    fig, ax = plt.subplots()
    for floor in df["floor"].unique():
        floor_df = df[df["floor"] == floor].sort_values("spawn_interval")
        ax.plot(floor_df["spawn_interval"], floor_df["Ticks"],
                label="floor" if floor else "open bottom", marker="o")

    ax.set_xlabel("Ticks Between Grains")
    ax.set_ylabel("Ticks Until Stop")
    ax.set_title("Run Length vs Spawn Interval")
    ax.legend(title="Cave")
    plt.show()
