"""
deckctl — CLI for the Slidewright deck kernel family.

Commands:
    render    Run the load → layout → render → export pipeline on a presentation
    plan      Print the per-slide template and font-size table
    show      Display workspace info (stages, output bundle, metadata)
    kernels   List discovered kernels by stage
"""

import argparse
import hashlib
import json
import sys
from pathlib import Path
from typing import List, Optional

import logging

logger = logging.getLogger(__name__)

# ANSI color helpers (auto-disabled for non-TTY)
_USE_COLOR = sys.stdout.isatty()


def _c(code: str, text: str) -> str:
    if not _USE_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def _bold(text: str) -> str:
    return _c("1", text)


def _green(text: str) -> str:
    return _c("32", text)


def _yellow(text: str) -> str:
    return _c("33", text)


def _red(text: str) -> str:
    return _c("31", text)


def _cyan(text: str) -> str:
    return _c("36", text)


def _dim(text: str) -> str:
    return _c("2", text)


_STAGE_TITLES = {1: "Load", 2: "Layout", 3: "Rendering"}


# ---------------------------------------------------------------------------
# Workspace and configuration
# ---------------------------------------------------------------------------

def _resolve_workspace(presentation_path: Path, workspace: Optional[Path]) -> Path:
    """Resolve the workspace directory for a presentation file.

    Default: <dir>/.deck/<stem>_<hash12>/
    """
    if workspace:
        return workspace

    h = hashlib.sha256(str(presentation_path.resolve()).encode()).hexdigest()[:12]
    return presentation_path.parent / ".deck" / f"{presentation_path.stem}_{h}"


def _load_config(args: argparse.Namespace):
    """DeckConfig from -c (if given) with command-line overrides applied."""
    from slidewright.deck.config import DeckConfig, load_deck_config

    config = load_deck_config(args.config) if getattr(args, "config", None) else DeckConfig()
    if getattr(args, "math", None):
        config.render.math = args.math
    if getattr(args, "no_thumbnails", False):
        config.render.thumbnails = False
    return config


# ---------------------------------------------------------------------------
# Kernel runner
# ---------------------------------------------------------------------------

def _discover_dependencies(requires: List[str], workspace: Path) -> dict:
    """Find output files from required kernels."""
    deps = {}
    for req in requires:
        for stage in ("stage1", "stage2", "stage3"):
            candidate = workspace / stage / f"{req}.json"
            if candidate.exists():
                deps[req] = candidate
                break
    return deps


def _run_kernel(
    kernel_name: str,
    workspace: Path,
    config: dict,
    verbose: bool = False,
) -> bool:
    """Run a single kernel by name; True on success."""
    from slidewright.base import KernelInput
    from slidewright.registry import KernelRegistry

    print(f"  [{_cyan(kernel_name)}] ", end="", flush=True)

    kernel = KernelRegistry.get(kernel_name)()
    ki = KernelInput(
        workspace=workspace,
        config=config,
        dependencies=_discover_dependencies(kernel.requires, workspace),
    )
    result = kernel.run(ki)

    if result.success:
        print(_green(result.summary or "done"))
        for w in result.warnings:
            print(f"    {_yellow(w)}")
        return True

    errors = "; ".join(result.errors) if result.errors else "unknown error"
    print(_red(f"FAILED: {errors}"))
    if verbose:
        for e in result.errors:
            print(f"    {_dim(e)}")
    return False


# ---------------------------------------------------------------------------
# Command: render
# ---------------------------------------------------------------------------

def cmd_render(args: argparse.Namespace) -> int:
    """Run the full deck pipeline."""
    from slidewright.registry import KernelRegistry

    presentation_path = Path(args.presentation).resolve()
    if not presentation_path.is_file():
        print(_red(f"Error: Not a file: {presentation_path}"))
        return 1

    try:
        config = _load_config(args)
    except (OSError, ValueError) as e:
        print(_red(f"Error: Invalid configuration: {e}"))
        return 1
    config.presentation_path = str(presentation_path)

    workspace = _resolve_workspace(
        presentation_path, Path(args.workspace) if args.workspace else None
    )
    workspace.mkdir(parents=True, exist_ok=True)

    print(_bold(f"Slidewright — {presentation_path.name}"))
    print(f"Workspace: {_dim(str(workspace))}")
    print(f"Math: {config.render.math}")
    print()

    config_dict = config.to_dict()
    ordered = KernelRegistry.resolve_dependencies(["deck_export"])
    current_stage = None
    for name in ordered:
        stage = KernelRegistry.get(name).stage
        if stage != current_stage:
            if current_stage is not None:
                print()
            print(_bold(f"Stage {stage}: {_STAGE_TITLES.get(stage, '')}"))
            current_stage = stage
        if not _run_kernel(name, workspace, config_dict, args.verbose):
            print()
            print(_red(f"Pipeline stopped at {name}"))
            return 1
    print()

    output_dir = workspace / "output"
    for fname in ("presentation.html", "thumbnails.html"):
        out_file = output_dir / fname
        if out_file.exists():
            print(_green(f"HTML: {out_file}"))
            print(f"  Size: {_dim(f'{out_file.stat().st_size:,} bytes')}")

    meta_file = output_dir / "metadata.json"
    if meta_file.exists():
        meta = json.loads(meta_file.read_text(encoding="utf-8"))
        print(f"Slides: {_bold(str(meta.get('slide_count', '?')))}")
        print(f"PDF name: {meta.get('exports', {}).get('pdf', '?')}")

    return 0


# ---------------------------------------------------------------------------
# Command: plan
# ---------------------------------------------------------------------------

def cmd_plan(args: argparse.Namespace) -> int:
    """Print the layout plan of a presentation without writing a workspace."""
    from slidewright.deck.models import Presentation
    from slidewright.deck.templates import layout_slide, size_table

    presentation_path = Path(args.presentation)
    if not presentation_path.is_file():
        print(_red(f"Error: Not a file: {presentation_path}"))
        return 1

    try:
        config = _load_config(args)
        document = json.loads(presentation_path.read_text(encoding="utf-8"))
        presentation = Presentation.from_dict(document)
    except (OSError, ValueError) as e:
        print(_red(f"Error: {e}"))
        return 1

    mode = "thumbnail" if args.thumbnail else "full"
    print(_bold(f"{presentation.title} — {len(presentation.slides)} slides ({mode})"))
    print()

    for i, slide in enumerate(presentation.slides, 1):
        view = layout_slide(slide, thumbnail=args.thumbnail, config=config)
        label = view.arrangement.value
        if slide.layout_tag is None:
            label += _yellow(f" (unknown layout {slide.layout!r})")
        print(f"  {i:3d}. {_cyan(label)}  {_dim(slide.title[:60])}")
        for decision in size_table(view):
            marker = _yellow(" scaled") if decision.scaled else ""
            print(
                f"       {decision.role:<12} {decision.token:>6}  "
                f"{_dim(f'complexity={decision.complexity}')}{marker}"
            )

    return 0


# ---------------------------------------------------------------------------
# Command: show
# ---------------------------------------------------------------------------

def cmd_show(args: argparse.Namespace) -> int:
    """Display workspace info."""
    workspace = Path(args.workspace).resolve()

    if not workspace.exists():
        print(_red(f"Error: Workspace not found: {workspace}"))
        return 1

    print(_bold("Slidewright — Workspace Info"))
    print(f"Path: {_dim(str(workspace))}")
    print()

    for stage_name in ("stage1", "stage2", "stage3"):
        stage_dir = workspace / stage_name
        if stage_dir.exists():
            files = sorted(stage_dir.glob("*.json"))
            if files:
                print(f"  {_bold(stage_name)}: {_green(f'{len(files)} files')}")
                for f in files:
                    size = f.stat().st_size
                    print(f"    {f.name} ({_dim(f'{size:,} bytes')})")
            else:
                print(f"  {_bold(stage_name)}: {_dim('empty')}")
        else:
            print(f"  {_bold(stage_name)}: {_dim('not created')}")

    output_dir = workspace / "output"
    if output_dir.exists():
        print()
        print(f"  {_bold('output')}:")
        for f in sorted(output_dir.iterdir()):
            if f.is_file():
                print(f"    {f.name} ({_dim(f'{f.stat().st_size:,} bytes')})")

    meta_file = output_dir / "metadata.json"
    if meta_file.exists():
        print()
        print(f"  {_bold('Metadata')}:")
        try:
            meta = json.loads(meta_file.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            print(f"    {_dim('(could not read metadata.json)')}")
        else:
            for key in ("title", "style", "slide_count", "generated_at"):
                val = meta.get(key, "")
                if val != "":
                    print(f"    {key}: {val}")
            palette = meta.get("palette", {})
            if palette:
                print(f"    palette: {palette.get('name', '?')}")
            pdf = meta.get("exports", {}).get("pdf")
            if pdf:
                print(f"    pdf: {pdf}")

    return 0


# ---------------------------------------------------------------------------
# Command: kernels
# ---------------------------------------------------------------------------

def cmd_kernels(args: argparse.Namespace) -> int:
    """List discovered kernels, grouped by stage."""
    from slidewright.registry import KernelRegistry

    names = KernelRegistry.list_all()
    if not names:
        print(_yellow("No kernels found"))
        return 1

    print(_bold(f"Slidewright kernels ({len(names)})"))
    for stage in sorted({KernelRegistry.get(n).stage for n in names}):
        print()
        print(_bold(f"Stage {stage}: {_STAGE_TITLES.get(stage, '')}"))
        for name in KernelRegistry.list_stage(stage):
            info = KernelRegistry.get_info(name)
            requires = ", ".join(info["requires"]) or "-"
            print(f"  {_cyan(name):<24} v{info['version']}  {info['description']}")
            print(f"    {_dim(f'requires: {requires}')}")

    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the deckctl argument parser."""
    parser = argparse.ArgumentParser(
        prog="deckctl",
        description="Slidewright — slide layout, font sizing and HTML deck export",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Verbose output"
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # --- render ---
    p_render = sub.add_parser("render", help="Run the load -> layout -> render -> export pipeline")
    p_render.add_argument("presentation", help="Path to presentation JSON")
    p_render.add_argument("-w", "--workspace", help="Workspace directory (default: auto)")
    p_render.add_argument("-c", "--config", help="YAML configuration file")
    p_render.add_argument(
        "--math", default=None,
        choices=["katex", "plain"],
        help="Math renderer (default: from config, katex)"
    )
    p_render.add_argument(
        "--no-thumbnails", action="store_true",
        help="Skip the thumbnail rail"
    )
    p_render.set_defaults(func=cmd_render)

    # --- plan ---
    p_plan = sub.add_parser("plan", help="Print the per-slide template and font-size table")
    p_plan.add_argument("presentation", help="Path to presentation JSON")
    p_plan.add_argument("-c", "--config", help="YAML configuration file")
    p_plan.add_argument(
        "--thumbnail", action="store_true",
        help="Size for thumbnail mode"
    )
    p_plan.set_defaults(func=cmd_plan)

    # --- show ---
    p_show = sub.add_parser("show", help="Display workspace info")
    p_show.add_argument("workspace", help="Path to workspace directory")
    p_show.set_defaults(func=cmd_show)

    # --- kernels ---
    p_kernels = sub.add_parser("kernels", help="List available kernels")
    p_kernels.set_defaults(func=cmd_kernels)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for deckctl."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
