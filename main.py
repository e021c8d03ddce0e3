#!/usr/bin/env python3
"""
MirrorTrace - A Python Whitted-style Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

from mirrortrace.canvas import ImageCanvas
from mirrortrace.renderer import RayTracer, RenderSettings
from mirrortrace.scene import create_demo_scene, create_transformed_scene
from mirrortrace.scene_parser import SceneParseError, load_scene


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='MirrorTrace - A Python Whitted-style Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --scene demo --output render.png
  python main.py --width 640 --height 480 --threads 4 --output big.png
  python main.py --scene-file scenes/room.yaml --output room.png
        '''
    )

    parser.add_argument('--width', type=int, default=None, help='Image width (default: 800)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 600)')
    parser.add_argument('--depth', type=int, default=None, help='Max reflection depth (default: 5)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='demo', choices=['demo', 'transformed'],
                        help='Built-in scene to render (default: demo)')
    parser.add_argument('--scene-file', type=str, default=None,
                        help='YAML or JSON scene description (overrides --scene)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(name)s %(levelname)s: %(message)s'
    )

    print("=" * 60)
    print("MirrorTrace Ray Tracer")
    print("=" * 60)

    # Scene and defaults
    width, height = 800, 600
    settings = RenderSettings()
    if args.scene_file:
        try:
            description = load_scene(args.scene_file)
        except SceneParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        scene = description.scene
        settings = description.settings
        width, height = description.width, description.height
        print(f"\nLoaded scene: {args.scene_file}")
    elif args.scene == 'transformed':
        scene = create_transformed_scene()
        print(f"\nCreating scene: {args.scene}")
    else:
        scene = create_demo_scene()
        print(f"\nCreating scene: {args.scene}")

    # Command-line overrides
    if args.width is not None:
        width = args.width
    if args.height is not None:
        height = args.height
    overrides = {}
    if args.depth is not None:
        overrides['max_depth'] = args.depth
    if args.threads is not None:
        overrides['num_threads'] = args.threads
    try:
        settings = dataclasses.replace(settings, **overrides)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if width <= 0 or height <= 0:
        print(f"Error: image size must be positive, got {width}x{height}", file=sys.stderr)
        return 1

    print(f"  Objects in scene: {len(scene.things)}")
    print(f"  Lights in scene: {len(scene.lights)}")
    print(f"\nRender Settings:")
    print(f"  Resolution: {width}x{height}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")

    tracer = RayTracer(settings)
    canvas = ImageCanvas(width, height)

    last_progress = [0]

    def progress_callback(progress: float):
        pct = int(progress * 100)
        if pct > last_progress[0]:
            last_progress[0] = pct
            bar_len = 40
            filled = int(bar_len * progress)
            bar = '█' * filled + '░' * (bar_len - filled)
            print(f'\rRendering: [{bar}] {pct}%', end='', flush=True)

    tracer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    tracer.render(scene, canvas, width, height)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    if elapsed > 0:
        print(f"  Primary rays per second: {(width * height) / elapsed:.0f}")

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    canvas.save(str(output_path))

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
