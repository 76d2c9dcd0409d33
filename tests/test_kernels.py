"""
Test Slidewright Kernels
"""

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from slidewright.base import Kernel, KernelInput, KernelOutput
from slidewright.registry import KernelRegistry, list_kernels


class _EchoKernel(Kernel):
    name = "test_echo"
    stage = 1
    requires = []
    provides = ["echo"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        if input.config.get("fail"):
            raise RuntimeError("asked to fail")
        return {"value": input.config.get("value"), "warnings": input.config.get("warnings", [])}

    def summarize(self, data: Dict[str, Any]) -> str:
        return "x" * (data.get("value") or 1)


class TestKernelBase:
    """Test Kernel base class."""

    def test_kernel_input_creation(self):
        """Test KernelInput dataclass."""
        workspace = Path("/tmp/test")
        config = {"presentation_path": "/some/deck.json"}

        input = KernelInput(
            workspace=workspace,
            config=config,
            dependencies={}
        )

        assert input.workspace == workspace
        assert input.config == config
        assert input.dependencies == {}

    def test_kernel_input_string_path(self):
        """Test KernelInput converts string paths."""
        input = KernelInput(
            workspace="/tmp/test",  # String, should be converted
            config={},
        )

        assert isinstance(input.workspace, Path)

    def test_kernel_input_load(self, tmp_path):
        """Test loading a dependency's data payload."""
        dep = tmp_path / "dep.json"
        dep.write_text(json.dumps({"_meta": {}, "data": {"answer": 42}}), encoding="utf-8")

        input = KernelInput(workspace=tmp_path, config={}, dependencies={"dep": dep})
        assert input.load("dep") == {"answer": 42}

    def test_run_persists_output(self, tmp_path):
        """Test run() writes JSON and summary files."""
        output = _EchoKernel().run(KernelInput(workspace=tmp_path, config={"value": 3}))

        assert isinstance(output, KernelOutput)
        assert output.success
        assert output.summary == "xxx"
        assert output.output_file == tmp_path / "stage1" / "test_echo.json"
        payload = json.loads(output.output_file.read_text(encoding="utf-8"))
        assert payload["data"]["value"] == 3
        assert payload["_meta"]["input_hash"] == output.input_hash
        assert (tmp_path / "stage1" / "test_echo.summary.txt").read_text(encoding="utf-8") == "xxx"

    def test_run_collects_warnings(self, tmp_path):
        output = _EchoKernel().run(KernelInput(workspace=tmp_path, config={"warnings": ["careful"]}))
        assert output.warnings == ["careful"]

    def test_run_truncates_summary(self, tmp_path):
        output = _EchoKernel().run(KernelInput(workspace=tmp_path, config={"value": 600}))
        assert len(output.summary) == 500
        assert output.summary.endswith("...")
        assert "Summary truncated to 500 characters" in output.warnings

    def test_run_failure(self, tmp_path):
        """Test compute() exceptions become a failed output."""
        output = _EchoKernel().run(KernelInput(workspace=tmp_path, config={"fail": True}))

        assert not output.success
        assert output.errors == ["asked to fail"]
        assert output.data["error_type"] == "RuntimeError"
        assert output.output_file.exists()

    def test_missing_workspace(self, tmp_path):
        output = _EchoKernel().run(KernelInput(workspace=tmp_path / "nowhere", config={}))
        assert not output.success
        assert "Workspace does not exist" in output.errors[0]

    def test_input_hash_stable(self, tmp_path):
        kernel = _EchoKernel()
        a = kernel._hash_input(KernelInput(workspace=tmp_path, config={"value": 1}))
        b = kernel._hash_input(KernelInput(workspace=tmp_path, config={"value": 1}))
        c = kernel._hash_input(KernelInput(workspace=tmp_path, config={"value": 2}))
        assert a == b
        assert a != c
        assert len(a) == 16


class TestKernelRegistry:
    """Test Kernel registry."""

    def setup_method(self):
        """Reset registry before each test."""
        KernelRegistry.reset()

    def test_discover_kernels(self):
        """Test kernel discovery."""
        count = KernelRegistry.discover()

        assert count >= 4

    def test_get_kernel(self):
        """Test getting a kernel by name."""
        KernelRegistry.discover()

        plan_kernel = KernelRegistry.get("deck_layout_plan")
        assert plan_kernel.name == "deck_layout_plan"
        assert plan_kernel.stage == 2

    def test_get_unknown(self):
        KernelRegistry.discover()

        with pytest.raises(KeyError):
            KernelRegistry.get("no_such_kernel")

    def test_list_stage(self):
        """Test listing kernels by stage."""
        KernelRegistry.discover()

        assert KernelRegistry.list_stage(1) == ["deck_load"]
        assert KernelRegistry.list_stage(3) == ["deck_export", "deck_html_render"]
        assert list_kernels(stage=2) == ["deck_layout_plan"]

    def test_get_info(self):
        """Test getting kernel info."""
        KernelRegistry.discover()

        info = KernelRegistry.get_info("deck_load")
        assert info["name"] == "deck_load"
        assert info["version"] == "1.0.0"
        assert info["category"] == "deck"
        assert info["stage"] == 1
        assert info["requires"] == []
        assert "presentation" in info["provides"]

    def test_resolve_dependencies(self):
        """Test dependency resolution."""
        KernelRegistry.discover()

        ordered = KernelRegistry.resolve_dependencies(["deck_export"])
        assert ordered == ["deck_load", "deck_layout_plan", "deck_html_render", "deck_export"]

    def test_circular_dependency(self):
        class _A(Kernel):
            name = "test_cycle_a"
            requires = ["test_cycle_b"]

            def compute(self, input):
                return {}

            def summarize(self, data):
                return ""

        class _B(_A):
            name = "test_cycle_b"
            requires = ["test_cycle_a"]

        KernelRegistry.discover()
        KernelRegistry.register(_A)
        KernelRegistry.register(_B)

        with pytest.raises(ValueError):
            KernelRegistry.resolve_dependencies(["test_cycle_a"])


class TestDeckPipelineViaRegistry:
    """Run the deck kernels in resolved order, as deckctl does."""

    def setup_method(self):
        KernelRegistry.reset()
        KernelRegistry.discover()

    def test_pipeline(self, tmp_path, presentation_file):
        workspace = tmp_path / "ws"
        workspace.mkdir()
        config = {"presentation_path": str(presentation_file)}

        outputs = {}
        for name in KernelRegistry.resolve_dependencies(["deck_export"]):
            kernel = KernelRegistry.get(name)()
            deps = {req: outputs[req].output_file for req in kernel.requires}
            outputs[name] = kernel.run(KernelInput(workspace=workspace, config=config, dependencies=deps))
            assert outputs[name].success, outputs[name].errors

        meta = json.loads((workspace / "output" / "metadata.json").read_text(encoding="utf-8"))
        assert meta["title"] == "Test Deck"
        assert meta["palette"]["name"] == "Sunset"
        assert meta["exports"]["pdf"] == "Test_Deck_Presentation.pdf"
        assert meta["exports"]["png"] == ["Slide_1.png", "Slide_2.png"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
