"""
Slidewright — deterministic slide layout and font sizing for 16:9 decks.

Kernel infrastructure:
- Kernel / KernelInput / KernelOutput: traceable pipeline steps
- KernelRegistry: discovery and dependency ordering

The deck family lives in slidewright.deck.
"""

__version__ = "0.1.0"

__all__ = [
    "Kernel",
    "KernelInput",
    "KernelOutput",
    "KernelRegistry",
    "discover_kernels",
    "get_kernel",
    "list_kernels",
]


def __getattr__(name):
    """Lazy imports to avoid circular dependencies."""
    if name in ("Kernel", "KernelInput", "KernelOutput"):
        from slidewright.base import Kernel, KernelInput, KernelOutput
        return locals()[name]
    elif name in ("KernelRegistry", "discover_kernels", "get_kernel", "list_kernels"):
        from slidewright.registry import KernelRegistry, discover_kernels, get_kernel, list_kernels
        return locals()[name]
    raise AttributeError(f"module 'slidewright' has no attribute '{name}'")
