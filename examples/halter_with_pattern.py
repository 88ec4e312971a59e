#!/usr/bin/env python3
"""
Halter Apron Example

Draws a halter-strap apron with two pockets and a tiled pattern fill,
generated in memory so the example needs no input files.

Outputs:
- SVG drawing
- PNG preview (white background)
- Zip bundle with drawing, manifest, and specification sheet
"""

import asyncio
from pathlib import Path

from aprongen import DesignConfig, DesignSession, ExportError, UploadedFile
from aprongen.export import design_summary

DOTS_SVG = b"""<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 40 40">
  <rect width="40" height="40" fill="#f4e7d3"/>
  <circle cx="20" cy="20" r="8" fill="#c0392b"/>
</svg>"""


def main():
    output_dir = Path(__file__).parent / "output"
    output_dir.mkdir(exist_ok=True)

    print("Halter Apron Example")
    print("=" * 50)

    session = DesignSession(DesignConfig(
        top_width=40,
        bottom_width=62,
        strap_style="halter",
        pockets={"mode": "double", "spacing": 6},
    ))
    session.attach_pattern(UploadedFile(name="dots.svg", data=DOTS_SVG), repeat_mode="tile")

    result = asyncio.run(session.render())
    print(design_summary(result.config))

    svg_path = session.export_svg(output_dir / "halter-apron.svg")
    print(f"\nExported SVG: {svg_path}")

    try:
        png_path = session.export_png(output_dir / "halter-apron.png")
        print(f"Exported PNG: {png_path}")
    except ExportError as e:
        print(f"PNG export skipped: {e}")

    bundle_path = session.export_bundle(output_dir / "halter-apron.zip")
    print(f"Exported bundle: {bundle_path}")


if __name__ == "__main__":
    main()
