import matplotlib

matplotlib.use("Agg")

import pytest
from pyomo.environ import SolverFactory


MIP_SOLVERS = ['glpk', 'appsi_highs', 'cbc']


@pytest.fixture(params=MIP_SOLVERS)
def mip_solver(request):
    """Name of an installed Pyomo MIP solver, one test run per solver."""
    if not SolverFactory(request.param).available(exception_flag=False):
        pytest.skip(f"{request.param} is not available")
    return request.param
