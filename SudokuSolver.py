# Sudoku Solver
#
# Reads a 9x9 Sudoku from a CSV file (0s are blanks), solves it as a
# mixed-integer program, and prints the completed grid.
#
#   python SudokuSolver.py sudoku.csv
#
# We have binary variables x[row, col, val] which, if = 1, say that the square
# (row, col) contains the number val. The constraints are:
# 1 - Each square has one value only
# 2 - Each row contains each number exactly once
# 3 - Each column contains each number exactly once
# 4 - Each 3x3 box contains each number exactly once
# plus one constraint per given value. The objective is a constant zero, any
# grid that satisfies the constraints is a solution. The search itself is left
# to the solver (GLPK by default).

import argparse
import sys
import time

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
from pyomo.environ import ConcreteModel, Var, Binary, Constraint, Objective, SolverFactory, value
from pyomo.opt import check_optimal_termination


DEFAULT_SOLVER = 'glpk'
VALUES = range(1, 10)


def loadData(filepath):
    """
    Read the initial grid. Each of the first 9 lines holds 9 comma separated
    integers, with 0 marking a blank square. Anything after line 9 is ignored.
    """
    with open(filepath, 'r') as textFile:
        fileContent = textFile.readlines()

    if len(fileContent) < 9:
        raise ValueError(f"Expected 9 rows in {filepath}, found {len(fileContent)}")

    initgrid = np.zeros((9, 9), dtype=int)
    for row, line in enumerate(fileContent[:9]):
        entries = line.strip().split(',')
        if len(entries) != 9:
            raise ValueError(f"Row {row + 1} should have 9 values, found {len(entries)}")
        try:
            initgrid[row, :] = [int(s) for s in entries]
        except ValueError:
            raise ValueError(f"Row {row + 1} contains a value that isn't an integer: {line.strip()!r}") from None

    if np.any((initgrid < 0) | (initgrid > 9)):
        raise ValueError("Grid values must be between 0 and 9")

    return initgrid


def buildModel(initgrid):
    """
    Set up the Sudoku as a feasibility problem over 729 binary indicators.
    """
    model = ConcreteModel()

    model.x = Var(range(9), range(9), VALUES, within=Binary)

    # Constant objective, any feasible grid is optimal
    model.obj = Objective(expr=0)

    # Only one value appears in each square
    for row in range(9):
        for col in range(9):
            model.add_component(f'cell_{row}_{col}', Constraint(expr=sum(model.x[row, col, val] for val in VALUES) == 1))

    # Each value appears in each row once only
    for row in range(9):
        for val in VALUES:
            model.add_component(f'row_{row}_{val}', Constraint(expr=sum(model.x[row, col, val] for col in range(9)) == 1))

    # Each value appears in each column once only
    for col in range(9):
        for val in VALUES:
            model.add_component(f'col_{col}_{val}', Constraint(expr=sum(model.x[row, col, val] for row in range(9)) == 1))

    # Each value appears in each box once only
    for br in range(3):
        for bc in range(3):
            for val in VALUES:
                model.add_component(f'box_{br}_{bc}_{val}', Constraint(expr=sum(model.x[3*br + square//3, 3*bc + square%3, val] for square in range(9)) == 1))

    # The given values
    for row in range(9):
        for col in range(9):
            if initgrid[row, col] != 0:
                model.add_component(f'given_{row}_{col}', Constraint(expr=model.x[row, col, int(initgrid[row, col])] == 1))

    return model


def solveModel(initgrid, solverName=DEFAULT_SOLVER, tee=False):
    """
    Build and solve the model, then read the grid back out of the indicators.
    Raises RuntimeError if the solver is missing or doesn't find an optimal
    solution (e.g. the given values conflict with each other).
    """
    model = buildModel(initgrid)

    solver = SolverFactory(solverName)
    if not solver.available(exception_flag=False):
        raise RuntimeError(f"Solver '{solverName}' is not available")

    results = solver.solve(model, tee=tee, load_solutions=False)
    if not check_optimal_termination(results):
        raise RuntimeError("The solver did not find an optimal solution.")
    model.solutions.load_from(results)

    sol = np.zeros((9, 9), dtype=int)
    for row in range(9):
        for col in range(9):
            for val in VALUES:
                if value(model.x[row, col, val]) >= 0.9:
                    sol[row, col] = val

    return sol


def checkSudoku(grid):
    """
    grid is a 9x9 array. Returns True if every row, column, and box holds
    the values 1-9 exactly once.
    """
    grid = np.asarray(grid).astype(int)
    if grid.shape != (9, 9):
        return False

    expected = set(VALUES)
    for i in range(9):
        if set(grid[i, :]) != expected or set(grid[:, i]) != expected:
            return False

    for br in range(3):
        for bc in range(3):
            if set(grid[3*br:3*br+3, 3*bc:3*bc+3].flatten()) != expected:
                return False

    return True


def formatSolution(sol):
    lines = ["Solution:", "[-----------------------]"]
    for row in range(9):
        line = "[ "
        for col in range(9):
            line += f"{sol[row, col]} "
            if col % 3 == 2 and col < 8:
                line += "| "
        lines.append(line + "]")
        if row % 3 == 2:
            lines.append("[-----------------------]")
    return "\n".join(lines)


def prettyPlot(sol, initgrid=None, title="", show=True):
    """
    Draw the solved grid. Given values are black, values filled in by the
    solver are blue.
    """
    if initgrid is None:
        initgrid = np.zeros((9, 9), dtype=int)

    fig, ax = plt.subplots(figsize=(6, 6))

    for row in range(9):
        for col in range(9):
            val = int(sol[row, col])
            if val != 0:
                color = 'black' if initgrid[row, col] != 0 else 'blue'
                ax.text(col + 0.5, 8.5 - row, str(val), fontsize=20, ha='center', va='center', color=color)

            rect = Rectangle((col, 9 - row), 1, -1, linewidth=1, edgecolor='black', facecolor='none')
            ax.add_patch(rect)

            if row % 3 == 0 and col % 3 == 0:
                # Thicker border around each box
                rect = Rectangle((col, 9 - row), 3, -3, linewidth=3, edgecolor='black', facecolor='none')
                ax.add_patch(rect)

    ax.set_xlim(0, 9)
    ax.set_ylim(0, 9)
    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(title)

    if show:
        plt.show()

    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(description="Solve a 9x9 Sudoku as a mixed-integer program.")
    parser.add_argument('grid', help="CSV file with the initial grid, 0 for blanks, e.g. sudoku.csv")
    parser.add_argument('--solver', default=DEFAULT_SOLVER, help=f"Pyomo solver name (default: {DEFAULT_SOLVER})")
    parser.add_argument('--tee', action='store_true', help="Show the solver's own output")
    parser.add_argument('--plot', action='store_true', help="Draw the solution with matplotlib")
    args = parser.parse_args(argv)

    startTime = time.time()
    try:
        initgrid = loadData(args.grid)
        sol = solveModel(initgrid, args.solver, tee=args.tee)
    except (OSError, ValueError, RuntimeError) as e:
        print(e, file=sys.stderr)
        return 1

    print(formatSolution(sol))
    print(f"Solved in {time.time() - startTime} seconds.")

    if args.plot:
        prettyPlot(sol, initgrid, title=args.grid)

    return 0


if __name__ == "__main__":
    sys.exit(main())
