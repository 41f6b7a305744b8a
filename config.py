"""
EvoSim Configuration
All tunable parameters for the foraging neuro-evolution simulation.
"""

import math

# ─── World ────────────────────────────────────────────────────────────────────
WORLD_WIDTH  = 1.0   # world is a torus: positions wrap modulo these bounds
WORLD_HEIGHT = 1.0

# ─── Population ───────────────────────────────────────────────────────────────
NUM_CREATURES    = 40     # creatures per generation
NUM_FOODS        = 60     # food items (constant, relocated when eaten)
MAX_GENERATIONS  = 100    # how many generations main.py runs
STEPS_PER_GEN    = 2500   # ticks each generation lives

# ─── Movement ─────────────────────────────────────────────────────────────────
SPEED_MIN      = 0.001
SPEED_MAX      = 0.005
SPEED_INITIAL  = 0.002
SPEED_ACCEL    = 0.002         # max speed change per tick
ROTATION_ACCEL = math.pi / 2   # max heading change per tick (radians)

# ─── Food ─────────────────────────────────────────────────────────────────────
FOOD_RADIUS = 0.01    # capture distance between creature and food

# ─── Eye / Brain ──────────────────────────────────────────────────────────────
FOV_RANGE = 0.25                      # how far a creature can see
FOV_ANGLE = math.pi + math.pi / 4     # field of view, centred on the heading
EYE_CELLS = 9                         # photoreceptors = brain inputs

# sensors → hidden → (rotation, speed)
BRAIN_TOPOLOGY = (EYE_CELLS, 2 * EYE_CELLS, 2)

# ─── Genetic Algorithm ────────────────────────────────────────────────────────
MUTATION_CHANCE = 0.01   # probability a single gene is perturbed
MUTATION_COEFF  = 0.3    # max perturbation magnitude

# Built-in strategies (see genetic_algorithm.py):
#   selection: "roulette", "rank", "tournament"
#   crossover: "uniform", "single_point"
SELECTION_METHOD = "roulette"
CROSSOVER_METHOD = "uniform"
TOURNAMENT_SIZE  = 3

# ─── Output / Logging ─────────────────────────────────────────────────────────
SAVE_DIR        = "output"   # directory for charts and the CSV log
CHART_INTERVAL  = 25         # redraw the fitness chart every N generations
LOG_CSV         = True       # write per-generation CSV log
