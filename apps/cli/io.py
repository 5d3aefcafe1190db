"""CLI output path helpers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class OutputPaths:
    """Fixed rename-table paths for one gensrg run."""

    obf_to_final: Path
    final_to_intermediate: Path
    final_to_obf: Path


def build_output_paths(out_dir: Path) -> OutputPaths:
    """Build fixed output file paths under out_dir."""

    return OutputPaths(
        obf_to_final=out_dir / "obf_to_final.srg",
        final_to_intermediate=out_dir / "final_to_intermediate.srg",
        final_to_obf=out_dir / "final_to_obf.srg",
    )
