"""
Timing demonstration for stroke rendering and mask export.

Paints a zig-zag stroke across images of increasing size, then binarizes
and encodes the result the way the editor does on submit. Shows that a
pointer move costs roughly the same at any resolution while export scales
with the pixel count.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import time

from IM_Libs.MaskEditingLib.mask_binarizer import export_binary_mask
from IM_Libs.MaskEditingLib.mask_models import BrushState, DisplayRect, SourceImage
from IM_Libs.MaskEditingLib.stroke_renderer import StrokeRenderer


def benchmark(width, height, moves=200):
    """Time one gesture of ``moves`` pointer moves plus one export."""
    print(f"\nImage {width}x{height}")
    print("-" * 60)

    source = SourceImage(width, height)
    rect = DisplayRect(0, 0, 800, 600)
    renderer = StrokeRenderer(source, BrushState(diameter=20))
    print(f"  Stroke width: {renderer.stroke_width():.1f}px")

    start = time.time()
    renderer.pointer_down(100, 100, rect)
    for i in range(moves):
        x = 100 + (i * 3) % 600
        y = 100 + (i % 2) * 400
        renderer.pointer_move(x, y, rect)
    renderer.pointer_up()
    paint_time = time.time() - start
    print(f"  Paint: {paint_time:.3f}s ({paint_time / moves * 1000:.2f}ms per move)")

    start = time.time()
    mask = export_binary_mask(renderer.raster)
    export_time = time.time() - start
    print(f"  Export: {export_time:.3f}s ({len(mask.data) // 1024} KB PNG)")

    return paint_time / moves, export_time


def main():
    """Run timing benchmarks."""
    print("=" * 60)
    print("Mask Painting and Export Timing")
    print("=" * 60)

    sizes = [(800, 600), (1600, 1200), (4032, 3024)]

    results = []
    for width, height in sizes:
        try:
            per_move, export_time = benchmark(width, height)
            results.append((width, height, per_move, export_time))
        except KeyboardInterrupt:
            print("\n\nBenchmark interrupted by user")
            break

    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print("Size         Per move   Export")
    print("-" * 60)
    for width, height, per_move, export_time in results:
        print(f"{width:4d}x{height:<4d}   {per_move * 1000:6.2f}ms  {export_time:6.3f}s")

    print("\n" + "=" * 60)


if __name__ == "__main__":
    main()
