"""Image rendering through the Graphviz ``dot`` executable."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from depgraph.analysis.graph_models import DependencyGraph
from depgraph.errors import RendererFailure, RendererUnavailable
from depgraph.exporter.dot_writer import write_dot

logger = logging.getLogger(__name__)


class GraphRenderer:
    """Pipes a DOT description into ``dot -T<format> -o <output>``."""

    def __init__(self, executable: str = "dot"):
        self.executable = executable

    def ensure_available(self) -> None:
        """Fail early if the renderer cannot be started at all."""
        try:
            subprocess.run(
                [self.executable, "-?"],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise RendererUnavailable(f"Failed to spawn {self.executable}: {e}") from e

    def render(self, graph: DependencyGraph, output_file: Path, output_format: str) -> None:
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        cmd = [self.executable, f"-T{output_format}", "-o", str(output_file)]
        logger.debug("Running %s", " ".join(cmd))
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
            )
        except OSError as e:
            raise RendererUnavailable(f"Failed to spawn {self.executable}: {e}") from e

        try:
            write_dot(graph, proc.stdin)
        except BrokenPipeError:
            # The exit status below explains why the renderer stopped reading
            pass
        finally:
            try:
                proc.stdin.close()
            except BrokenPipeError:
                pass
        returncode = proc.wait()
        if returncode != 0:
            raise RendererFailure(returncode)
