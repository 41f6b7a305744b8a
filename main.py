"""
EvoSim – Main Entry Point
=========================

Usage examples:
  python main.py                              # defaults from config.py
  python main.py --gens 200 --seed 42         # reproducible run
  python main.py --selection tournament       # swap the selection strategy
  python main.py --crossover single_point     # swap the crossover strategy
  python main.py --creatures 80 --foods 120   # bigger world population
  python main.py --mutation-chance 0          # turn off mutations (demonstration)
"""

import argparse
import os

import numpy as np

from simulation import Simulation, build_genetic_algorithm
from visualizer import ensure_dirs, save_fitness_chart, append_csv
from config import (SAVE_DIR, CHART_INTERVAL, NUM_CREATURES, NUM_FOODS,
                    MAX_GENERATIONS, STEPS_PER_GEN, MUTATION_CHANCE,
                    MUTATION_COEFF, SELECTION_METHOD, CROSSOVER_METHOD,
                    TOURNAMENT_SIZE, BRAIN_TOPOLOGY)
from genetic_algorithm import SELECTION_METHODS, CROSSOVER_METHODS


# ──────────────────────────────────────────────────────────────────────────────
# CLI
# ──────────────────────────────────────────────────────────────────────────────

def parse_args(argv=None):
    p = argparse.ArgumentParser(description="EvoSim – foraging neuro-evolution")
    p.add_argument("--gens",       type=int,   default=MAX_GENERATIONS,
                   help="Number of generations to run")
    p.add_argument("--creatures",  type=int,   default=NUM_CREATURES,
                   help="Creatures per generation")
    p.add_argument("--foods",      type=int,   default=NUM_FOODS,
                   help="Food items in the world")
    p.add_argument("--steps",      type=int,   default=STEPS_PER_GEN,
                   help="Ticks per generation")
    p.add_argument("--mutation-chance", type=float, default=MUTATION_CHANCE,
                   help="Probability each gene is mutated")
    p.add_argument("--mutation-coeff",  type=float, default=MUTATION_COEFF,
                   help="Max mutation magnitude")
    p.add_argument("--selection",  default=SELECTION_METHOD,
                   choices=sorted(SELECTION_METHODS),
                   help="Parent selection strategy")
    p.add_argument("--crossover",  default=CROSSOVER_METHOD,
                   choices=sorted(CROSSOVER_METHODS),
                   help="Crossover strategy")
    p.add_argument("--tournament-size", type=int, default=TOURNAMENT_SIZE,
                   help="Contenders per tournament (tournament selection only)")
    p.add_argument("--seed",       type=int,   default=None,
                   help="Random seed for reproducibility")
    p.add_argument("--outdir",     default=SAVE_DIR,
                   help="Output directory")
    p.add_argument("--chart-interval", type=int, default=CHART_INTERVAL,
                   help="Redraw the fitness chart every N generations")
    return p.parse_args(argv)


# ──────────────────────────────────────────────────────────────────────────────
# Callbacks
# ──────────────────────────────────────────────────────────────────────────────

class SimCallbacks:
    """Bundles the per-generation callbacks used by the simulation."""

    def __init__(self, outdir: str, chart_interval: int):
        self.outdir         = outdir
        self.chart_interval = chart_interval
        self.all_stats      = []

    def on_generation(self, gen_idx, stats, world):
        self.all_stats.append(stats)
        append_csv(stats, self.outdir)

        if gen_idx % self.chart_interval == 0 and gen_idx > 0:
            save_fitness_chart(self.all_stats, self.outdir)


# ──────────────────────────────────────────────────────────────────────────────
# Main
# ──────────────────────────────────────────────────────────────────────────────

def main(argv=None):
    args = parse_args(argv)
    ensure_dirs(args.outdir)

    print("=" * 60)
    print("  EvoSim – Foraging Neuro-Evolution")
    print("=" * 60)
    print(f"  Creatures  : {args.creatures}")
    print(f"  Foods      : {args.foods}")
    print(f"  Generations: {args.gens}")
    print(f"  Steps/gen  : {args.steps}")
    print(f"  Brain      : {' → '.join(str(n) for n in BRAIN_TOPOLOGY)}")
    print(f"  Selection  : {args.selection}")
    print(f"  Crossover  : {args.crossover}")
    print(f"  Mutation   : chance {args.mutation_chance}, coeff {args.mutation_coeff}")
    print(f"  Seed       : {args.seed}")
    print(f"  Output dir : {args.outdir}")
    print("=" * 60)

    rng = np.random.default_rng(args.seed)

    ga = build_genetic_algorithm(
        selection       = args.selection,
        crossover       = args.crossover,
        mutation_chance = args.mutation_chance,
        mutation_coeff  = args.mutation_coeff,
        tournament_size = args.tournament_size,
    )

    sim = Simulation(
        rng,
        num_creatures     = args.creatures,
        num_foods         = args.foods,
        steps_per_gen     = args.steps,
        genetic_algorithm = ga,
    )

    cb = SimCallbacks(args.outdir, max(1, args.chart_interval))
    sim.run(rng, args.gens, on_gen_callback=cb.on_generation)

    print("\nSaving final fitness chart …")
    chart_path = save_fitness_chart(cb.all_stats, args.outdir, "fitness_final.png")
    if chart_path:
        print(f"  → {chart_path}")

    print("\nDone! All outputs saved to:", os.path.abspath(args.outdir))


if __name__ == "__main__":
    main()
