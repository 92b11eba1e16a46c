# _registry.py
from __future__ import annotations
from typing import Any

from .base import BaseConfig, BalancedClusterer

_SOLVERS: dict[str, type[BalancedClusterer]] = {}


def register_solver(name: str):
    def _decorator(cls: type[BalancedClusterer]):
        _SOLVERS[name.lower()] = cls
        return cls
    return _decorator


def available_solvers() -> list[str]:
    return sorted(_SOLVERS)


def get_solver(name: str, /, *args: Any, **kwargs: Any) -> BalancedClusterer:
    """
    Factory that instantiates a registered solver.

    Parameters
    ----------
    name : str
        The key used in ``@register_solver`` (case-insensitive).
    config : BaseConfig
        **Required** argument, positional or keyword. Contains all
        hyper-parameters for the solver (e.g. ``VNSConfig``).
    *args, **kwargs
        Any additional positional / keyword arguments are passed straight
        into the solver's ``__init__`` *after* the config.

    Returns
    -------
    BalancedClusterer
        An unfitted solver instance.
    """
    try:
        cls = _SOLVERS[name.lower()]
    except KeyError as exc:
        raise ValueError(f"Unknown solver '{name}'. Available: {list(_SOLVERS)}") from exc

    # ------------------------------------------------------------------ #
    # pull config out of kwargs or the first positional arg ------------- #
    if "config" in kwargs:
        config = kwargs.pop("config")
    elif args:
        config, *args = args
    else:
        raise TypeError(
            "get_solver() missing required argument 'config'. "
            "Call it like get_solver('vns', config=VNSConfig(...))."
        )

    if not isinstance(config, BaseConfig):
        raise TypeError(
            f"'config' must be a BaseConfig (got {type(config).__name__})."
        )

    return cls(config, *args, **kwargs)
