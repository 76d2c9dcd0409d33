"""
Kernel Registry — discovery and dependency ordering for deck kernels.

Scans the slidewright package for Kernel subclasses, indexes them by
name and stage, and orders a requested set so that every kernel runs
after the kernels it requires.
"""

import importlib
import pkgutil
import logging
from pathlib import Path
from typing import Dict, List, Optional, Set
from collections import defaultdict

from slidewright.base import Kernel, KernelClass

logger = logging.getLogger(__name__)


class KernelRegistry:
    """
    Discovers and manages available kernels.

    Example:
        KernelRegistry.discover()
        plan = KernelRegistry.get("deck_layout_plan")
        ordered = KernelRegistry.resolve_dependencies(["deck_export"])
        # ['deck_load', 'deck_layout_plan', 'deck_html_render', 'deck_export']
    """

    _kernels: Dict[str, KernelClass] = {}
    _stages: Dict[int, List[str]] = defaultdict(list)
    _discovered: bool = False

    @classmethod
    def discover(cls, package_path: str = "slidewright") -> int:
        """Import every module under *package_path* and register its kernels."""
        if cls._discovered:
            logger.debug("Kernels already discovered, skipping")
            return len(cls._kernels)

        try:
            package = importlib.import_module(package_path)
        except ImportError as e:
            logger.error(f"Failed to import {package_path}: {e}")
            return 0

        package_dir = Path(package.__file__).parent
        count = 0

        for _, module_name, _ in pkgutil.walk_packages(
            [str(package_dir)],
            prefix=f"{package_path}."
        ):
            if module_name.endswith(("__init__", "base", "registry")):
                continue
            if ".tests" in module_name or ".cli" in module_name:
                continue

            try:
                module = importlib.import_module(module_name)
            except ImportError as e:
                logger.warning(f"Failed to import {module_name}: {e}")
                continue

            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, Kernel)
                    and attr is not Kernel
                    and attr.name != "base"
                    and attr.__module__ == module.__name__
                ):
                    cls.register(attr)
                    count += 1

        cls._discovered = True
        logger.info(f"Discovered {count} kernels in {package_path}")
        return count

    @classmethod
    def register(cls, kernel_class: KernelClass) -> None:
        """Register a kernel class; a different class under a taken name is ignored."""
        name = kernel_class.name

        if name in cls._kernels:
            existing = cls._kernels[name]
            if existing is not kernel_class:
                logger.warning(
                    f"Kernel '{name}' already registered "
                    f"(existing: {existing.__module__}, new: {kernel_class.__module__})"
                )
            return

        cls._kernels[name] = kernel_class
        cls._stages[kernel_class.stage].append(name)
        logger.debug(f"Registered kernel: {name} (stage={kernel_class.stage})")

    @classmethod
    def get(cls, name: str) -> KernelClass:
        """
        Get kernel class by name.

        Raises:
            KeyError: If kernel not found
        """
        cls._ensure_discovered()

        if name not in cls._kernels:
            available = ", ".join(sorted(cls._kernels.keys()))
            raise KeyError(f"Kernel '{name}' not found. Available: {available}")
        return cls._kernels[name]

    @classmethod
    def list_all(cls) -> List[str]:
        cls._ensure_discovered()
        return sorted(cls._kernels.keys())

    @classmethod
    def list_stage(cls, stage: int) -> List[str]:
        cls._ensure_discovered()
        return sorted(cls._stages.get(stage, []))

    @classmethod
    def get_info(cls, name: str) -> Dict:
        kernel_class = cls.get(name)
        return {
            "name": kernel_class.name,
            "version": kernel_class.version,
            "category": kernel_class.category,
            "stage": kernel_class.stage,
            "description": kernel_class.description,
            "requires": kernel_class.requires,
            "provides": kernel_class.provides,
            "module": kernel_class.__module__,
        }

    @classmethod
    def resolve_dependencies(cls, kernel_names: List[str]) -> List[str]:
        """
        Expand *kernel_names* with everything they require and sort
        topologically (Kahn's algorithm, alphabetical tie-break).

        Raises:
            ValueError: If circular dependency detected
        """
        cls._ensure_discovered()

        all_kernels = set(kernel_names)
        to_process = list(kernel_names)
        while to_process:
            name = to_process.pop()
            for dep in cls.get(name).requires:
                if dep not in all_kernels:
                    all_kernels.add(dep)
                    to_process.append(dep)

        graph: Dict[str, Set[str]] = {
            name: set(cls.get(name).requires) for name in all_kernels
        }

        in_degree = {name: len(deps) for name, deps in graph.items()}
        queue = [name for name, degree in in_degree.items() if degree == 0]
        sorted_kernels = []

        while queue:
            queue.sort()
            name = queue.pop(0)
            sorted_kernels.append(name)
            for other_name, deps in graph.items():
                if name in deps:
                    in_degree[other_name] -= 1
                    if in_degree[other_name] == 0:
                        queue.append(other_name)

        if len(sorted_kernels) != len(all_kernels):
            remaining = set(all_kernels) - set(sorted_kernels)
            raise ValueError(f"Circular dependency detected among: {remaining}")

        return sorted_kernels

    @classmethod
    def _ensure_discovered(cls):
        if not cls._discovered:
            cls.discover()

    @classmethod
    def reset(cls):
        """Reset the registry (mainly for testing)."""
        cls._kernels.clear()
        cls._stages.clear()
        cls._discovered = False


def discover_kernels() -> int:
    """Discover all available kernels."""
    return KernelRegistry.discover()


def get_kernel(name: str) -> KernelClass:
    """Get a kernel class by name."""
    return KernelRegistry.get(name)


def list_kernels(stage: Optional[int] = None) -> List[str]:
    """List available kernel names, optionally for one stage."""
    if stage is not None:
        return KernelRegistry.list_stage(stage)
    return KernelRegistry.list_all()
