"""Circbuf - Exact buffers of circulinear curves.

Circbuf computes the signed offset ("buffer") of planar curves made of straight
segments, rays, infinite lines and circular arcs. The result is a domain whose
boundary lies at a constant distance from the source curve, with round joins at
convex corners, caps at open ends, and the self-intersections produced by the
offset split apart and filtered out.

Example:
    $ circbuf polyline -p 0,0 -p 4,0 -p 4,4 -d 1

This prints the contours of the buffer around an L-shaped polyline.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
