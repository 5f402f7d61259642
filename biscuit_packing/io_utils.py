"""
io_utils.py - SVG rendering and file output for biscuit placements
One pan outline plus one circle per biscuit, padded away from the origin.
"""
import os
import xml.etree.ElementTree as ET
from typing import Optional

from shapely import affinity
from shapely.geometry import Point as ShapelyPoint, box

from .geometry import PlacementLike, as_array

SVG_NAMESPACE = "http://www.w3.org/2000/svg"


def _svg_fragment(geom, **kwargs) -> ET.Element:
    """Parse a shapely geometry's svg() fragment into an element."""
    return ET.fromstring(geom.svg(**kwargs))


def render_packing(
    width: float,
    length: float,
    placement: PlacementLike,
    pad: float = 10.0,
    marker_radius: float = 1.0
) -> ET.Element:
    """Render the pan outline and one marker per biscuit as an <svg> element."""
    document = ET.Element("svg", {
        "xmlns": SVG_NAMESPACE,
        "viewBox": f"0 0 {width + pad:g} {length + pad:g}",
    })

    pan = affinity.translate(box(0.0, 0.0, width, length), xoff=pad, yoff=pad)
    outline = _svg_fragment(pan, fill_color="none")
    outline.set("stroke", "black")
    outline.set("stroke-width", "1")
    outline.attrib.pop("opacity", None)
    document.append(outline)

    # shapely draws points with radius 3 * scale_factor
    for x, y in as_array(placement):
        marker = _svg_fragment(ShapelyPoint(x + pad, y + pad), scale_factor=marker_radius / 3.0)
        marker.set("fill", "black")
        marker.set("stroke", "none")
        marker.attrib.pop("stroke-width", None)
        marker.attrib.pop("opacity", None)
        document.append(marker)

    return document


def _format_dimension(value: float) -> str:
    return f"{value:g}"


def output_filename(biscuits: int, width: float, length: float) -> str:
    return f"{biscuits}_biscuits_{_format_dimension(width)}X{_format_dimension(length)}_pan.svg"


def get_output_path(filename: str, output_dir: Optional[str] = None) -> str:
    """Join the filename onto output_dir (created if needed)."""
    if not output_dir:
        return filename
    os.makedirs(output_dir, exist_ok=True)
    return os.path.join(output_dir, filename)


def save_svg(document: ET.Element, path: str) -> str:
    ET.ElementTree(document).write(path, encoding="utf-8", xml_declaration=True)
    return path
