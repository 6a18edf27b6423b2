"""
Simple example of transforming one image with imapipe
"""

from pathlib import Path

from imapipe import process_image


def main():
    # Replace with actual image path
    image_path = Path("example.png")

    if not image_path.exists():
        print(f"Error: {image_path} not found")
        print("Please provide a valid image path")
        return

    print(f"Processing {image_path}...")
    print("-" * 60)

    result = process_image(
        image_path,
        [
            "deborder",
            "rotate[5,crop,bilinear,box]",
            "canvas[1024,1024,mm,white]",
            "channel[blend,rgb,#FFCC0020]",
        ],
        output_path=image_path.with_name(f"{image_path.stem}_out.png"),
    )

    if result.success:
        print("✓ Success!\n")
        print(f"Dimensions:     {result.width}x{result.height}px")
        print(f"Frames:         {result.frames}")
        print(f"Saved to:       {result.output_path}")
    else:
        print(f"✗ Failed: {result.error}")


if __name__ == "__main__":
    main()
