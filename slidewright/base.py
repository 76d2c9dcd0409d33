"""
Slidewright Kernel Base Classes

A kernel is one deterministic step of the deck pipeline:
- reads the JSON outputs of the kernels it requires
- computes (no model calls, no network)
- persists its data to {workspace}/stage{N}/{name}.json with a summary

Same configuration + same dependency files = same output.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Any, List
from datetime import datetime
import hashlib
import json
import logging

logger = logging.getLogger(__name__)


@dataclass
class KernelInput:
    """Standard input for any kernel.

    Attributes:
        workspace: Pipeline workspace root directory
        config: Deck configuration as a plain dict (see DeckConfig.to_dict)
        dependencies: Output files of required kernels, keyed by kernel name
    """
    workspace: Path
    config: Dict[str, Any]
    dependencies: Dict[str, Path] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.workspace, str):
            self.workspace = Path(self.workspace)

    def load(self, name: str) -> Dict[str, Any]:
        """Return the ``data`` payload persisted by dependency *name*."""
        path = self.dependencies[name]
        payload = json.loads(path.read_text(encoding="utf-8"))
        return payload["data"]


@dataclass
class KernelOutput:
    """Standard output from any kernel.

    Attributes:
        success: Whether execution completed without errors
        data: Full structured data (JSON-serializable)
        summary: One-line human-readable summary (<500 chars)
        output_file: Path where JSON was persisted

    Traceability:
        kernel_name, kernel_version, execution_time_ms,
        input_hash (config + dependency paths), dependencies_used

    Diagnostics:
        warnings: Non-fatal issues encountered
        errors: Errors that caused failure (if success=False)
    """
    success: bool
    data: Dict[str, Any]
    summary: str
    output_file: Path

    kernel_name: str
    kernel_version: str
    execution_time_ms: int
    input_hash: str
    dependencies_used: List[str]

    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "summary": self.summary,
            "output_file": str(self.output_file),
            "kernel_name": self.kernel_name,
            "kernel_version": self.kernel_version,
            "execution_time_ms": self.execution_time_ms,
            "input_hash": self.input_hash,
            "dependencies_used": self.dependencies_used,
            "warnings": self.warnings,
            "errors": self.errors,
        }


class Kernel(ABC):
    """
    Abstract base class for all deck kernels.

    Subclasses implement compute() and summarize(), and declare:
        name, version, category, stage (1=load, 2=layout, 3=render/export),
        requires (kernel names), provides (capabilities).

    Example:
        class SlideCountKernel(Kernel):
            name = "slide_count"
            stage = 2
            requires = ["deck_load"]
            provides = ["slide_count"]

            def compute(self, input):
                deck = input.load("deck_load")
                return {"count": len(deck["presentation"]["slides"])}

            def summarize(self, data):
                return f"{data['count']} slides"
    """

    name: str = "base"
    version: str = "1.0.0"
    category: str = "base"
    stage: int = 0
    description: str = "Base kernel"

    requires: List[str] = []
    provides: List[str] = []

    @abstractmethod
    def compute(self, input: KernelInput) -> Dict[str, Any]:
        """
        Core computation logic. Must be deterministic.

        Raises:
            Any exception; run() turns it into a failed KernelOutput.
        """
        pass

    @abstractmethod
    def summarize(self, data: Dict[str, Any]) -> str:
        """Short human-readable summary of compute() output."""
        pass

    def validate_input(self, input: KernelInput) -> List[str]:
        """Return a list of validation errors (empty if valid)."""
        errors = []

        if not input.workspace.exists():
            errors.append(f"Workspace does not exist: {input.workspace}")

        for dep in self.requires:
            if dep not in input.dependencies:
                errors.append(f"Missing required dependency: {dep}")
            elif not input.dependencies[dep].exists():
                errors.append(f"Dependency file does not exist: {input.dependencies[dep]}")

        return errors

    def output_path(self, workspace: Path) -> Path:
        return workspace / f"stage{self.stage}" / f"{self.name}.json"

    def run(self, input: KernelInput) -> KernelOutput:
        """
        Execute the kernel with full traceability.

        Do NOT override: validates input, hashes it, computes, summarizes,
        persists {"_meta": ..., "data": ...} and a .summary.txt next to it.
        """
        start_time = datetime.now()
        warnings: List[str] = []
        errors: List[str] = []

        validation_errors = self.validate_input(input)
        if validation_errors:
            for err in validation_errors:
                logger.error(f"[{self.name}] Validation error: {err}")
            return KernelOutput(
                success=False,
                data={"validation_errors": validation_errors},
                summary=f"Kernel {self.name} failed validation: {validation_errors[0]}",
                output_file=self.output_path(input.workspace),
                kernel_name=self.name,
                kernel_version=self.version,
                execution_time_ms=0,
                input_hash="",
                dependencies_used=[],
                errors=validation_errors,
            )

        input_hash = self._hash_input(input)
        logger.info(f"[{self.name}] Starting computation (input_hash={input_hash[:8]})")

        try:
            data = self.compute(input)
            summary = self.summarize(data)

            if len(summary) > 500:
                summary = summary[:497] + "..."
                warnings.append("Summary truncated to 500 characters")

            warnings.extend(data.get("warnings", []))
            success = True
            logger.info(f"[{self.name}] Computation successful")

        except Exception as e:
            logger.error(f"[{self.name}] Computation failed: {e}")
            data = {"error": str(e), "error_type": type(e).__name__}
            summary = f"Kernel {self.name} failed: {str(e)[:100]}"
            success = False
            errors.append(str(e))

        execution_time_ms = int((datetime.now() - start_time).total_seconds() * 1000)

        output_file = self.output_path(input.workspace)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        output_data = {
            "_meta": {
                "kernel_name": self.name,
                "kernel_version": self.version,
                "execution_time_ms": execution_time_ms,
                "input_hash": input_hash,
                "timestamp": datetime.now().isoformat(),
                "success": success,
            },
            "data": data,
        }
        output_file.write_text(
            json.dumps(output_data, indent=2, ensure_ascii=False, default=str),
            encoding="utf-8",
        )
        output_file.with_suffix(".summary.txt").write_text(summary, encoding="utf-8")

        logger.info(f"[{self.name}] Output saved to {output_file} ({execution_time_ms}ms)")

        return KernelOutput(
            success=success,
            data=data,
            summary=summary,
            output_file=output_file,
            kernel_name=self.name,
            kernel_version=self.version,
            execution_time_ms=execution_time_ms,
            input_hash=input_hash,
            dependencies_used=list(input.dependencies.keys()),
            warnings=warnings,
            errors=errors,
        )

    def _hash_input(self, input: KernelInput) -> str:
        """16-char SHA256 prefix over kernel identity, config and dependency paths."""
        content = json.dumps({
            "kernel": f"{self.name}@{self.version}",
            "config": input.config,
            "dependencies": {k: str(v) for k, v in sorted(input.dependencies.items())},
        }, sort_keys=True, default=str)
        return hashlib.sha256(content.encode()).hexdigest()[:16]

    def __repr__(self) -> str:
        return f"<Kernel {self.name}@{self.version} stage={self.stage}>"


KernelClass = type[Kernel]
