# Urban Planning
#
# Puzzle from http://www.puzzlor.com/2013-08_UrbanPlanning.html
#
# A 5x5 grid of lots has to be zoned with 12 residential lots and 13
# commercial lots. Every row and every column is scored by how many
# residential lots it has:
#   5 -> +5, 4 -> +4, 3 -> +3, 2 -> -3, 1 -> -4, 0 -> -5
# and we want the layout with the best total over all 10 lines.
#
# x[i, j] = 1 means lot (i, j) is residential. The line scores aren't linear
# in the number of residential lots, so each line gets a set of binary
# indicators y[rc, points, i] (rc is "R" for row i or "C" for column i):
# a positive indicator can only switch on once the line has enough residential
# lots, and a negative indicator is forced on when the line has too few.
# The scores are built up incrementally, e.g. a full line collects
# 3 (for >= 3) + 1 (for >= 4) + 1 (for 5) = 5.

import argparse
import sys
import time

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
from pyomo.environ import ConcreteModel, Var, Binary, Constraint, Objective, SolverFactory, maximize, value
from pyomo.opt import check_optimal_termination


DEFAULT_SOLVER = 'glpk'
SIZE = 5
RESIDENTIAL_LOTS = 12

ROWCOL = ["R", "C"]
POINTS = [5, 4, 3, -3, -4, -5]

# Objective weight of each indicator
WEIGHTS = {5: 1, 4: 1, 3: 3, -3: -3, -4: -1, -5: -1}

# Line score by number of residential lots in the line
LINE_SCORES = {5: 5, 4: 4, 3: 3, 2: -3, 1: -4, 0: -5}


def lineSum(model, rc, i):
    if rc == "R":
        return sum(model.x[i, j] for j in range(SIZE))
    return sum(model.x[j, i] for j in range(SIZE))


def buildUrbanModel():
    model = ConcreteModel()

    # x is indexed by row and column
    model.x = Var(range(SIZE), range(SIZE), within=Binary)

    # y is indexed by R or C, the points, and the row/column number
    model.y = Var(ROWCOL, POINTS, range(SIZE), within=Binary)

    # Combine the positive and negative parts
    model.obj = Objective(
        expr=sum(WEIGHTS[p] * model.y[rc, p, i] for rc in ROWCOL for p in POINTS for i in range(SIZE)),
        sense=maximize)

    # Constrain the number of residential lots
    model.lots = Constraint(expr=sum(model.x[i, j] for i in range(SIZE) for j in range(SIZE)) == RESIDENTIAL_LOTS)

    # Link the y indicators to the x variables
    def upper_rule(model, rc, p, i):
        return model.y[rc, p, i] <= 1/p * lineSum(model, rc, i)  # sum >= p

    def lower_rule(model, rc, p, i):
        # -3 when sum <= 2, -4 when sum <= 1, -5 when sum = 0
        divisor = {-3: 3, -4: 2, -5: 1}[p]
        return model.y[rc, p, i] >= 1 - 1/divisor * lineSum(model, rc, i)

    model.upper = Constraint(ROWCOL, [p for p in POINTS if p > 0], range(SIZE), rule=upper_rule)
    model.lower = Constraint(ROWCOL, [p for p in POINTS if p < 0], range(SIZE), rule=lower_rule)

    return model


def solveUrban(solverName=DEFAULT_SOLVER, tee=False):
    """
    Solve the puzzle. Returns the best objective (rounded) and the 5x5 layout,
    1 for residential and 0 for commercial.
    """
    model = buildUrbanModel()

    solver = SolverFactory(solverName)
    if not solver.available(exception_flag=False):
        raise RuntimeError(f"Solver '{solverName}' is not available")

    results = solver.solve(model, tee=tee, load_solutions=False)
    if not check_optimal_termination(results):
        raise RuntimeError("The solver did not find an optimal solution.")
    model.solutions.load_from(results)

    layout = np.zeros((SIZE, SIZE), dtype=int)
    for i in range(SIZE):
        for j in range(SIZE):
            layout[i, j] = int(round(value(model.x[i, j])))

    return int(round(value(model.obj))), layout


def checkLayout(layout):
    """
    Return layout as a 5x5 int array, raising ValueError unless every lot
    is 0 (commercial) or 1 (residential).
    """
    layout = np.asarray(layout)
    if layout.shape != (SIZE, SIZE):
        raise ValueError(f"Layout must be {SIZE}x{SIZE}, got shape {layout.shape}")
    if not np.all((layout == 0) | (layout == 1)):
        raise ValueError("Layout values must be 0 (commercial) or 1 (residential)")
    return layout.astype(int)


def scoreLayout(layout):
    """
    Score a layout straight from the puzzle rules, without the model.
    """
    layout = checkLayout(layout)
    lineSums = np.concatenate((layout.sum(axis=1), layout.sum(axis=0)))
    return int(sum(LINE_SCORES[int(s)] for s in lineSums))


def plotLayout(layout, title="", show=True):
    """
    Draw the layout with residential lots shaded, and each line's score
    to the right of its row / below its column.
    """
    layout = checkLayout(layout)
    fig, ax = plt.subplots(figsize=(6, 6))

    for i in range(SIZE):
        for j in range(SIZE):
            residential = layout[i, j] == 1
            rect = Rectangle((j, SIZE - i), 1, -1, linewidth=1, edgecolor='black',
                             facecolor='lightgreen' if residential else 'lightgray')
            ax.add_patch(rect)
            ax.text(j + 0.5, SIZE - i - 0.5, 'R' if residential else 'C', fontsize=16, ha='center', va='center')

    for i, s in enumerate(layout.sum(axis=1)):
        ax.text(SIZE + 0.5, SIZE - i - 0.5, f"{LINE_SCORES[int(s)]:+d}", fontsize=12, ha='center', va='center')
    for j, s in enumerate(layout.sum(axis=0)):
        ax.text(j + 0.5, -0.5, f"{LINE_SCORES[int(s)]:+d}", fontsize=12, ha='center', va='center')

    ax.set_xlim(0, SIZE + 1)
    ax.set_ylim(-1, SIZE)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title or f"Score: {scoreLayout(layout)}")

    if show:
        plt.show()

    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(description="Solve the puzzlor urban planning puzzle as a mixed-integer program.")
    parser.add_argument('--solver', default=DEFAULT_SOLVER, help=f"Pyomo solver name (default: {DEFAULT_SOLVER})")
    parser.add_argument('--tee', action='store_true', help="Show the solver's own output")
    parser.add_argument('--plot', action='store_true', help="Draw the layout with matplotlib")
    args = parser.parse_args(argv)

    startTime = time.time()
    try:
        objective, layout = solveUrban(args.solver, tee=args.tee)
    except RuntimeError as e:
        print(e, file=sys.stderr)
        return 1

    print(f"Best objective: {objective}")
    print(layout)
    print(f"Solved in {time.time() - startTime} seconds.")

    if args.plot:
        plotLayout(layout)

    return 0


if __name__ == "__main__":
    sys.exit(main())
