#!/usr/bin/env python3
"""
PathForge - A Python Path Tracer

Main entry point for rendering scenes.
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from pathforge.vec3 import Vec3, Point3
from pathforge.camera import Camera
from pathforge.scene import Scene
from pathforge.materials import MaterialTable, Lambertian
from pathforge.renderer import Renderer, RenderSettings, get_platform_info
from pathforge.image import write_image, ImageWriteError
from pathforge.scene_parser import load_scene, SceneParseError


def create_simple_scene() -> Scene:
    """Three diffuse spheres on a diffuse ground plane, all with albedo 0.8."""
    scene = Scene(MaterialTable({0: Lambertian(0.8)}))
    scene.insert_sphere(Point3(0, 1, 3), 1.0)
    scene.insert_sphere(Point3(-2, 1, 3), 1.0)
    scene.insert_sphere(Point3(0, 3, 3), 1.0)
    scene.insert_plane(Vec3(0, 1, 0), 0.0)
    return scene


def create_reference_scene() -> Scene:
    """Glass sphere and box, a mirror sphere, a small light, diffuse ground."""
    scene = Scene()
    scene.insert_sphere(Point3(0, 1, 3), 1.0, 2)
    scene.insert_sphere(Point3(-2, 1, 3), 1.0, 1)
    scene.insert_sphere(Point3(0, 3, 3), 0.3, 3)
    scene.insert_plane(Vec3(0, 1, 0), 0.0)
    scene.insert_box(Point3(2, 1.1, 3), Vec3(2, 2, 0.5), 2)
    return scene


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='PathForge - A Python Path Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene simple --output render.png
  python main.py --width 480 --height 270 --samples 16 --output small.png
  python main.py --scene-file scenes/reference.json --output reference.png
        '''
    )

    parser.add_argument('--width', type=int, default=None, help='Image width (default: 960)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 540)')
    parser.add_argument('--samples', type=int, default=None, help='Samples per pixel (default: 64)')
    parser.add_argument('--depth', type=int, default=None, help='Max path depth (default: 128)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='reference', choices=['simple', 'reference'],
                        help='Built-in scene to render (default: reference)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='JSON or YAML scene description (overrides --scene)')
    parser.add_argument('--info', action='store_true', help='Show platform info and exit')
    parser.add_argument('--verbose', action='store_true', help='Enable log output')

    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    # Show platform info
    if args.info:
        info = get_platform_info()
        print("PathForge Platform Info:")
        print(f"  System: {info['system']}")
        print(f"  Machine: {info['machine']}")
        print(f"  Processor: {info['processor']}")
        print(f"  Python: {info['python_version']}")
        print(f"  CPU Cores: {info['cpu_count']}")
        return 0

    # Print header
    print("=" * 60)
    print("PathForge Path Tracer")
    print("=" * 60)

    # Create scene
    if args.scene_file:
        print(f"\nLoading scene file: {args.scene_file}")
        try:
            scene, camera, settings = load_scene(args.scene_file)
        except SceneParseError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
    else:
        print(f"\nCreating scene: {args.scene}")
        scene = create_simple_scene() if args.scene == 'simple' else create_reference_scene()
        camera = Camera(Point3(0, 1, -3)) if args.scene == 'simple' else Camera()
        settings = RenderSettings()

    # Command line values override the scene file
    try:
        settings = RenderSettings(
            width=args.width if args.width is not None else settings.width,
            height=args.height if args.height is not None else settings.height,
            samples_per_pixel=args.samples if args.samples is not None else settings.samples_per_pixel,
            max_depth=args.depth if args.depth is not None else settings.max_depth,
            num_threads=args.threads if args.threads is not None else settings.num_threads,
            luminance_cutoff=settings.luminance_cutoff
        )
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print(f"  Primitives in scene: {len(scene)}")
    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Samples: {settings.samples_per_pixel}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")

    renderer = Renderer(settings)

    # Progress tracking
    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    renderer.set_progress_callback(progress_callback)

    # Render
    print("\nRendering...")
    start_time = time.time()

    colors = renderer.render(scene, camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Samples per second: {(settings.width * settings.height * settings.samples_per_pixel) / elapsed:.0f}")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    try:
        write_image(output_path, settings.width, settings.height, colors)
    except ImageWriteError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
