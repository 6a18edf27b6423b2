"""
Example of running one pipeline over a directory of images
"""

import sys
from pathlib import Path

from imapipe import Pipeline, batch_process, setup_logging


DESCRIPTORS = [
    "aspect[16:9,crop,mm]",
    "resize[1280,*,lanczos]",
    "levels[0.02,*,0.98]",
    "quantize[wu,128]",
]


def main():
    setup_logging("INFO")

    photo_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("./photos")
    out_dir = photo_dir / "transformed"

    if not photo_dir.exists():
        print(f"Error: Directory {photo_dir} not found")
        print("Please create a 'photos' directory with some images")
        return

    images = sorted(
        p for p in photo_dir.iterdir()
        if p.suffix.lower() in (".png", ".jpg", ".jpeg", ".gif", ".webp", ".tga")
    )
    if not images:
        print(f"No images found in {photo_dir}")
        return

    pipeline = Pipeline.from_descriptors(DESCRIPTORS)
    print(f"Found {len(images)} images, {len(pipeline)} operations")
    print("=" * 60)

    def on_progress(current, total, result):
        if result.success:
            print(f"[{current}/{total}] ✓ {result.source_path.name} -> {result.width}x{result.height}")
        else:
            print(f"[{current}/{total}] ✗ {result.source_path.name}: {result.error}")

    results = batch_process(images, pipeline, output_dir=out_dir, progress_callback=on_progress)

    print("=" * 60)
    successful = [r for r in results if r.success]
    print(f"\nResults:")
    print(f"  Successful: {len(successful)}")
    print(f"  Failed:     {len(results) - len(successful)}")
    print(f"  Output:     {out_dir}")


if __name__ == "__main__":
    main()
