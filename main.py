#!/usr/bin/env python3
"""
PrismForge - A Python Recursive Ray Tracer

Main entry point for rendering scenes.
"""

import argparse
import dataclasses
import logging
import sys
import time
from pathlib import Path

from prismforge.vec3 import Vec3, Point3
from prismforge.color import Color
from prismforge.camera import Camera
from prismforge.scene import Scene
from prismforge.shapes import Sphere, Plane
from prismforge.lights import AmbientLight, PointLight, SpotLight, PulsatingPointLight
from prismforge.materials import CheckerboardMaterial, GlassMaterial, MirrorMaterial, EmissiveMaterial
from prismforge.pbr import MetalPBRMaterial, MarblePBRMaterial, PlasticPBRMaterial
from prismforge.tracer import RayTracer, RenderSettings
from prismforge.scene_parser import load_scene, SceneParseError

logger = logging.getLogger("prismforge")


def create_demo_scene() -> Scene:
    """Create a demo scene with various materials and lights."""
    scene = Scene()

    # Checkerboard floor with a faint reflection
    floor = CheckerboardMaterial(secondary=Color(0.15, 0.15, 0.15), scale=1.0, reflectivity=0.15)
    scene.add(Plane(Point3(0, 0, 0), Vec3(0, 1, 0), floor))

    # Center sphere - glass
    scene.add(Sphere(Point3(0, 1, 0), 1.0, GlassMaterial()))

    # Left sphere - marble
    scene.add(Sphere(Point3(-2.3, 1, -0.5), 1.0, MarblePBRMaterial()))

    # Right sphere - gold
    scene.add(Sphere(Point3(2.3, 1, -0.5), 1.0, MetalPBRMaterial.gold()))

    # Small spheres in front
    scene.add(Sphere(Point3(-1.0, 0.4, 1.6), 0.4, PlasticPBRMaterial()))
    scene.add(Sphere(Point3(1.0, 0.4, 1.6), 0.4, MirrorMaterial()))

    # Glowing marker sphere
    scene.add(Sphere(Point3(0, 3.2, -2.5), 0.3, EmissiveMaterial(Color(1.0, 0.9, 0.6), strength=1.0)))

    scene.add_light(AmbientLight.default())
    scene.add_light(PointLight(Point3(4, 6, 4), Color.white(), 8.0))
    scene.add_light(SpotLight(
        Point3(-4, 5, 3), Vec3(4, -5, -3), Color.from_rgb255(255, 200, 150),
        intensity=6.0, inner_angle=20.0, outer_angle=35.0
    ))
    scene.add_light(PulsatingPointLight(Point3(0, 2.5, 3), Color.from_rgb255(150, 180, 255), intensity=2.0))

    return scene


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='PrismForge - A Python Recursive Ray Tracer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  python main.py --output render.png
  python main.py --width 1280 --height 720 --depth 8 --output hd_render.png
  python main.py --scene scenes/example.yaml --time 1.5 --output frame.png
        '''
    )

    parser.add_argument('--width', type=int, default=None, help='Image width (default: 800)')
    parser.add_argument('--height', type=int, default=None, help='Image height (default: 600)')
    parser.add_argument('--depth', type=int, default=None, help='Max recursion depth (default: 5)')
    parser.add_argument('--threads', type=int, default=None, help='Number of threads (0=auto)')
    parser.add_argument('--time', type=float, default=0.0, help='Advance the scene clock by this many seconds')
    parser.add_argument('--output', type=str, default='output/render.png', help='Output filename')
    parser.add_argument('--scene', type=str, default='demo',
                        help='Scene file (.yaml/.yml/.json) or "demo" (default: demo)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    overrides = {
        key: value for key, value in (
            ('width', args.width), ('height', args.height),
            ('max_depth', args.depth), ('num_threads', args.threads)
        ) if value is not None
    }

    try:
        if args.scene == 'demo':
            settings = RenderSettings(**overrides)
            scene = create_demo_scene()
            camera = Camera(
                look_from=Point3(0, 2.2, 7),
                look_at=Point3(0, 0.8, 0),
                vup=Vec3(0, 1, 0),
                vfov=45,
                aspect_ratio=settings.width / settings.height
            )
        else:
            scene, camera, settings = load_scene(args.scene)
            if overrides:
                settings = dataclasses.replace(settings, **overrides)
                camera = Camera(camera.origin, camera.look_at, camera.v, camera.vfov,
                                settings.width / settings.height)
    except (SceneParseError, ValueError) as e:
        logger.error("Could not set up scene: %s", e)
        return 1

    if args.time:
        scene.update(args.time)

    print("=" * 60)
    print("PrismForge Ray Tracer")
    print("=" * 60)
    print(f"\nRender Settings:")
    print(f"  Resolution: {settings.width}x{settings.height}")
    print(f"  Max Depth: {settings.max_depth}")
    print(f"  Threads: {settings.num_threads}")
    print(f"  Objects in scene: {len(scene.objects)}")
    print(f"  Lights in scene: {len(scene.lights)}")

    tracer = RayTracer(scene, settings)

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

    tracer.set_progress_callback(progress_callback)

    print("\nRendering...")
    start_time = time.time()

    image = tracer.render(camera)

    elapsed = time.time() - start_time
    print(f"\nRender completed in {elapsed:.2f} seconds")
    print(f"  Primary rays per second: {(settings.width * settings.height) / elapsed:.0f}")

    # Ensure output directory exists
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    print(f"\nSaving to: {args.output}")
    tracer.save_image(image, args.output)

    print("\nDone!")
    return 0


if __name__ == '__main__':
    sys.exit(main())
