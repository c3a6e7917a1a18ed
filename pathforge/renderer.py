"""
Renderer module - the driver of the path tracer.

Implements:
- Per-pixel jittered sampling with invalid-sample rejection
- Multi-threaded row-based rendering with one seeded random stream per worker
- A flat, row-major linear color buffer as output
"""

from __future__ import annotations
import logging
import os
import platform
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional
import numpy as np

from .vec3 import Color, is_invalid
from .camera import Camera
from .scene import Scene
from .integrator import Integrator, BackgroundFunction
from .parallel import parallel_for
from .sampling import RandomStream


logger = logging.getLogger(__name__)


@dataclass
class RenderSettings:
    """Configuration for the renderer."""
    width: int = 960
    height: int = 540
    samples_per_pixel: int = 64
    max_depth: int = 128
    num_threads: int = 0  # 0 = auto-detect
    luminance_cutoff: float = 0.01

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Image size must be at least 1x1, got {self.width}x{self.height}")
        if self.samples_per_pixel < 1:
            raise ValueError(f"samples_per_pixel must be at least 1, got {self.samples_per_pixel}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be non-negative, got {self.max_depth}")
        if self.num_threads < 0:
            raise ValueError(f"num_threads must be non-negative, got {self.num_threads}")
        if self.num_threads == 0:
            self.num_threads = os.cpu_count() or 1


class Renderer:
    """Path tracing renderer with multi-threading support."""

    def __init__(self, settings: RenderSettings = None, background: Optional[BackgroundFunction] = None):
        """Create a renderer with the given settings.

        Args:
            settings: Render configuration (uses defaults if None)
            background: Radiance for escaping rays (the placeholder sky if None)
        """
        self.settings = settings if settings else RenderSettings()
        self.background = background
        self._progress_callback: Optional[Callable[[float], None]] = None

    def set_progress_callback(self, callback: Callable[[float], None]) -> None:
        """Set a callback function for progress updates.

        Args:
            callback: Function that takes progress as float (0.0 to 1.0)
        """
        self._progress_callback = callback

    def make_streams(self) -> List[RandomStream]:
        """One random stream per worker, seeded with the worker ordinal."""
        workers = max(1, min(self.settings.num_threads, self.settings.height))
        return [RandomStream(ordinal) for ordinal in range(workers)]

    def make_integrator(self, scene: Scene) -> Integrator:
        return Integrator(
            scene,
            max_depth=self.settings.max_depth,
            luminance_cutoff=self.settings.luminance_cutoff,
            background=self.background
        )

    def render(self, scene: Scene, camera: Camera) -> np.ndarray:
        """Render the scene and return the linear color buffer.

        Args:
            scene: The scene to render, read-only for the whole render
            camera: The camera to render from

        Returns:
            Array of shape (height * width, 3); row y occupies
            [y * width, (y + 1) * width) and row 0 is the bottom of the image
        """
        width = self.settings.width
        height = self.settings.height
        integrator = self.make_integrator(scene)
        streams = self.make_streams()

        colors = np.zeros((width * height, 3), dtype=np.float64)
        completed_rows = [0]
        discarded = [0]
        lock = threading.Lock()

        logger.info(
            "Rendering %dx%d, %d spp, max depth %d, %d workers, %d primitives",
            width, height, self.settings.samples_per_pixel,
            self.settings.max_depth, len(streams), len(scene)
        )

        def render_row(y: int, stream: RandomStream) -> None:
            row_discarded = 0
            for x in range(width):
                color, invalid = self._sample_pixel(integrator, camera, x, y, stream)
                colors[y * width + x] = color.to_array()
                row_discarded += invalid

            with lock:
                completed_rows[0] += 1
                discarded[0] += row_discarded
                progress = completed_rows[0] / height
            if self._progress_callback:
                self._progress_callback(progress)

        parallel_for(0, height, render_row, streams)

        if discarded[0]:
            logger.debug("Discarded %d invalid samples", discarded[0])
        logger.info("Render finished")
        return colors

    def render_pixel(self, integrator: Integrator, camera: Camera, x: int, y: int, stream: RandomStream) -> Color:
        """Average the valid samples for pixel (x, y).

        Returns:
            Mean of the finite samples, black if every sample was invalid
        """
        color, _ = self._sample_pixel(integrator, camera, x, y, stream)
        return color

    def _sample_pixel(self, integrator: Integrator, camera: Camera, x: int, y: int, stream: RandomStream) -> tuple[Color, int]:
        width = self.settings.width
        height = self.settings.height
        samples = self.settings.samples_per_pixel

        total = Color(0, 0, 0)
        count = 0

        for _ in range(samples):
            u = (x + stream.random_float() - width / 2.0) / width
            v = (y + stream.random_float() - height / 2.0) / width

            sample = integrator.evaluate(camera.get_ray(u, v), stream)
            if is_invalid(sample):
                continue
            total = total + sample
            count += 1

        if count == 0:
            return Color(0, 0, 0), samples
        return total / count, samples - count


def get_platform_info() -> dict:
    """Get information about the current platform.

    Returns:
        Dictionary with platform details
    """
    return {
        'system': platform.system(),
        'machine': platform.machine(),
        'processor': platform.processor(),
        'python_version': platform.python_version(),
        'cpu_count': os.cpu_count(),
    }
