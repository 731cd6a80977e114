from __future__ import annotations

import os
import shutil
import subprocess
from typing import List, Optional

from ...options import METHOD_FLOYD_STEINBERG, METHOD_ORDERED, DitherOptions
from .base import DitherBackend, output_format_for, sniff_format

EXECUTABLE_CANDIDATES = ("gm", "magick")


class MagickBackend(DitherBackend):
    """Runs the pipeline through GraphicsMagick (or ImageMagick) over pipes."""

    name = "magick"

    def __init__(self, executable: Optional[str] = None) -> None:
        self._executable = executable

    @property
    def executable(self) -> Optional[str]:
        if self._executable:
            return self._executable
        for candidate in EXECUTABLE_CANDIDATES:
            found = shutil.which(candidate)
            if found:
                return found
        return None

    def process(self, data: bytes, options: DitherOptions) -> bytes:
        executable = self.executable
        if not executable:
            raise RuntimeError("GraphicsMagick not found: install 'gm' or 'magick' on PATH")
        output_format = output_format_for(sniff_format(data)).lower()
        cmd = build_command(executable, options, output_format)
        result = subprocess.run(
            cmd,
            input=data,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
        if result.returncode != 0:
            msg = result.stderr.decode("utf-8", errors="replace").strip()
            raise RuntimeError(msg or f"{os.path.basename(executable)} exited with {result.returncode}")
        if not result.stdout:
            raise RuntimeError("image backend produced empty output")
        return result.stdout


def build_command(executable: str, options: DitherOptions, output_format: str = "png") -> List[str]:
    """Build the convert command line for the given options."""
    cmd = [executable]
    if os.path.basename(executable).lower().startswith("gm"):
        cmd.append("convert")
    cmd.append("-")
    # Profile removal has to come before any tone change.
    if options.gamma_correction:
        cmd += ["+profile", "*"]
    cmd += ["-colorspace", "Gray"]
    if options.adjusts_levels:
        cmd += ["-level", f"{options.black_level}%,1.0,{options.white_level}%"]
    diffuse = "-dither" if options.method == METHOD_FLOYD_STEINBERG else "+dither"
    if options.bit_depth == 1:
        if options.method in (METHOD_FLOYD_STEINBERG, METHOD_ORDERED):
            cmd += [diffuse, "-monochrome"]
        else:
            cmd += ["-threshold", "50%"]
    elif options.bit_depth in (2, 4):
        if options.method in (METHOD_FLOYD_STEINBERG, METHOD_ORDERED):
            cmd.append(diffuse)
        cmd += ["-colors", str(options.levels)]
    elif options.method in (METHOD_FLOYD_STEINBERG, METHOD_ORDERED):
        cmd.append(diffuse)
    cmd.append(f"{output_format}:-")
    return cmd
