from __future__ import annotations
from typing import Dict, Any, List

# Nested dict: [fractal][op_name][backend][precision] -> meta
_REGISTRY: Dict[str, Dict[str, Dict[str, Dict[str, Dict[str, Any]]]]] = {}

def register_kernel(fractal: str, op_name: str, backend: str, precision: str, **meta: Any) -> None:
    """
    Register kernel metadata for a given fractal, operation, backend, and precision.
    Example:
        register_kernel("mandelbrot", "strip", "CPU", "f64", func=my_njit_func, arg_order=[...])
    """
    if "func" not in meta or not callable(meta["func"]):
        raise KeyError(f"register_kernel({fractal}.{op_name}:{backend}/{precision}) requires a callable 'func'")
    if not isinstance(meta.get("arg_order"), (list, tuple)):
        raise KeyError(f"register_kernel({fractal}.{op_name}:{backend}/{precision}) requires an 'arg_order' list")
    for key in ("scalars", "int_scalars", "produces"):
        meta.setdefault(key, [])
    _REGISTRY.setdefault(fractal, {}).setdefault(op_name, {}).setdefault(backend.upper(), {})[precision] = meta

def load_kernel(backend: str, fractal: str, op_name: str, precision: str) -> Dict[str, Any]:
    """
    Load kernel metadata from the registry for the given parameters.
    Raises KeyError if not found.
    """
    be = backend.upper()
    try:
        meta = _REGISTRY[fractal][op_name][be][precision]
    except KeyError as e:
        raise KeyError(f"Kernel not found for fractal='{fractal}', op='{op_name}', backend='{be}', precision='{precision}'") from e
    return meta

def list_kernels(fractal: str, backend: str, precision: str) -> List[str]:
    """
    List all registered operation names for the given fractal, backend, and precision.
    """
    be = backend.upper()
    if fractal not in _REGISTRY:
        return []
    ops = []
    for op_name, backends in _REGISTRY[fractal].items():
        if be in backends and precision in backends[be]:
            ops.append(op_name)
    return sorted(ops)
