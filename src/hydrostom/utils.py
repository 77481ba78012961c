"""
Utilities: Includes error types, vectorising helpers and the parameter sweep used to explore the hydrostom response functions
"""

import inspect
import itertools
import logging
from concurrent.futures import Executor
from collections.abc import Mapping
from typing import Any, Callable, List, Optional, Sequence, Tuple
import numpy as np
from attrs import define, field

logger = logging.getLogger(__name__)


class DomainError(ValueError):
    """Input lies outside the domain of a response function (e.g. division by zero, negative potential drop)."""
    pass


class NumericalError(ArithmeticError):
    """A numerical routine failed (quadrature or optimiser did not converge, imaginary quadratic roots)."""
    pass


def array_like_wrapper(func, array_like_args):
    """
    Wrap a function to handle array-like inputs for specified arguments that could be array-like.

    This wrapper allows a function designed for scalar inputs to handle array-like inputs
    by automatically iterating over these inputs and calling the original function for each element.
    The results are aggregated and returned as a numpy array.

    Parameters
    ----------
    func (callable): The original function to wrap. This function should accept scalar inputs.
    array_like_args (list of str): List of argument names that could be array-like. The wrapper will check
                                   these arguments and iterate over them if they are array-like.

    Returns
    -------
    callable: A wrapped function that can handle both scalar and array-like inputs for the specified arguments.
    Scalar-only calls return the scalar result unchanged.

    Raises
    ------
    ValueError: If the array-like arguments have different lengths.

    Example
    -------
    >>> wrapped = array_like_wrapper(conductivity, ['psi'])
    >>> wrapped([0.0, -2.0], PAR_CONDUCTIVITY_STD)
    array([1. , 0.5])

    """
    sig = inspect.signature(func)

    def wrapper(*args, **kwargs):
        bound_args = sig.bind_partial(*args, **kwargs)
        bound_args.apply_defaults()

        # Determine which arguments are actually array-like
        actual_array_like_args = []
        for arg_name in array_like_args:
            if arg_name in bound_args.arguments:
                if isinstance(bound_args.arguments[arg_name], (list, tuple, np.ndarray)):
                    actual_array_like_args.append(arg_name)
                    bound_args.arguments[arg_name] = np.atleast_1d(bound_args.arguments[arg_name])

        if not actual_array_like_args:
            return func(**bound_args.arguments)

        # Determine the length of the array-like arguments
        length = None
        for arg_name in actual_array_like_args:
            if length is None:
                length = len(bound_args.arguments[arg_name])
            elif length != len(bound_args.arguments[arg_name]):
                raise ValueError(f"Array-like arguments must have the same length, but '{arg_name}' has length {len(bound_args.arguments[arg_name])} while others have length {length}")

        results = []
        for i in range(length):
            single_call_args = {
                arg_name: bound_args.arguments[arg_name][i] if arg_name in actual_array_like_args else bound_args.arguments[arg_name]
                for arg_name in bound_args.arguments
            }
            results.append(func(**single_call_args))

        return np.array(results)

    wrapper.__name__ = getattr(func, "__name__", "wrapper")
    wrapper.__doc__ = func.__doc__
    return wrapper


@define(frozen=True)
class SweepPoint:
    """
    One evaluated point of a parameter sweep.
    """
    inputs: Any = field()    ## the parameter tuple (or mapping) the function was called with
    value: Any = field(default=np.nan)    ## function result (a float or a tuple of floats), NaN when the point failed
    error: Optional[str] = field(default=None)    ## "<ErrorClass>: message" when the point failed, otherwise None

    @property
    def ok(self) -> bool:
        return self.error is None


def grid_points(*axes: Sequence[Any]) -> List[Tuple[Any, ...]]:
    """
    Ordered Cartesian product of the axis values, the last axis varying fastest.

    >>> grid_points([0.1, 0.2], [500, 1000])
    [(0.1, 500), (0.1, 1000), (0.2, 500), (0.2, 1000)]
    """
    return [tuple(p) for p in itertools.product(*axes)]


def _evaluate_point(func: Callable, point: Any) -> SweepPoint:
    try:
        if isinstance(point, Mapping):
            value = func(**point)
        elif isinstance(point, (tuple, list)):
            value = func(*point)
        else:
            value = func(point)
    except (DomainError, NumericalError) as e:
        logger.warning("Sweep point %r failed: %s", point, e)
        return SweepPoint(inputs=point, value=np.nan, error=f"{type(e).__name__}: {e}")
    return SweepPoint(inputs=point, value=value)


def sweep(
    func: Callable,
    points: Sequence[Any],
    executor: Optional[Executor] = None,
) -> List[SweepPoint]:
    """
    Evaluate a pure function over an ordered sequence of parameter points.

    Parameters
    ----------
    func: Callable
        Pure function to evaluate. Tuple (or list) points are unpacked as positional arguments,
        mapping points as keyword arguments and anything else is passed as the single argument.
        Use functools.partial to fix the parameter records that do not vary.

    points: Sequence
        Ordered parameter points, e.g. from grid_points.

    executor: concurrent.futures.Executor, optional
        When given, points are fanned out with executor.map. With a ProcessPoolExecutor the
        function must be picklable (a module-level function or a partial of one).

    Returns
    -------
    List of SweepPoint in the same order as points.

    Notes
    -----
    A DomainError or NumericalError at one point is recorded on that point (value NaN, error tag)
    and never aborts the rest of the sweep. Any other exception propagates.
    """
    points = list(points)
    if executor is None:
        results = [_evaluate_point(func, p) for p in points]
    else:
        results = list(executor.map(_evaluate_point, itertools.repeat(func, len(points)), points))

    nfailed = sum(1 for r in results if not r.ok)
    logger.info("Sweep of %s finished: %d points, %d failed", getattr(func, "__name__", repr(func)), len(results), nfailed)
    return results


def sweep_to_arrays(results: Sequence[SweepPoint]) -> Tuple[np.ndarray, np.ndarray]:
    """
    Convert sweep results to (inputs, values) numpy arrays for plotting.

    Inputs have shape (npoints,) for scalar points or (npoints, nparams) for tuple points. Values have
    shape (npoints,) for scalar results or (npoints, noutputs) for tuple results. Failed points carry NaN,
    filled to the shape of the successful results, so plotting routines skip them.
    """
    inputs = np.array([r.inputs for r in results])
    shape = next((np.shape(r.value) for r in results if r.ok), ())
    values = np.array([r.value if r.ok else np.full(shape, np.nan) for r in results], dtype=float)
    return inputs, values
