"""Splitting of self-intersecting and mutually intersecting curves.

Curves are cut at every point where they cross or touch, then the pieces are
re-assembled: each time a path reaches a crossing node it leaves along the
next branch passing through that node instead of continuing on its own
branch. A figure-eight becomes two loops, two overlapping circles become their
outer boundary and their lens, and the loops produced by offsetting a concave
corner come apart from the main contour.

Two entry points are provided:
- split_continuous_curve: self-intersections of one curve
- split_intersecting_contours: crossings between distinct contours
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from circbuf.core.geometry import intersections, overlaps
from circbuf.domain import CirculinearElement, ContinuousCurve, Point
from circbuf.exceptions import CoincidentContoursError, SplittingError


@dataclass(frozen=True, slots=True)
class _Position:
    """Location on one of the curves being split."""

    curve: int
    element: int
    t: float


@dataclass(slots=True)
class _Node:
    """Crossing point with the curve positions passing through it."""

    point: Point
    passages: list[_Position] = field(default_factory=list)


@dataclass(slots=True)
class _Piece:
    """Stretch of a curve between two consecutive cut positions."""

    curve: int
    start: _Position | None
    end: _Position | None
    start_node: int | None
    end_node: int | None
    elements: list[CirculinearElement]


class _CurveSplitter:
    """Cuts a group of curves at their shared nodes and re-traces the pieces."""

    def __init__(
        self,
        curves: Sequence[ContinuousCurve],
        tolerance: float,
        self_intersections: bool,
    ) -> None:
        self.tolerance = tolerance
        self.curves = [
            ContinuousCurve(
                tuple(e for e in curve.elements if not e.is_degenerate(tolerance)),
                curve.closed,
            )
            for curve in curves
        ]
        self.self_intersections = self_intersections
        self.nodes: list[_Node] = []

    def split(self) -> list[ContinuousCurve]:
        self._collect_nodes()
        if not self.nodes:
            return [c for c in self.curves if c.elements]
        pieces = self._cut()
        return self._trace(pieces)

    def _normalize(self, curve_index: int, element_index: int, t: float) -> _Position:
        """Move a position at the end of an element to the start of the next one."""
        curve = self.curves[curve_index]
        element = curve.elements[element_index]
        ptol = element.param_tolerance(self.tolerance)
        if not math.isinf(element.t0) and t <= element.t0 + ptol:
            return _Position(curve_index, element_index, element.t0)
        if not math.isinf(element.t1) and t >= element.t1 - ptol:
            if element_index + 1 < len(curve.elements):
                nxt = curve.elements[element_index + 1]
                return _Position(curve_index, element_index + 1, nxt.t0)
            if curve.closed:
                return _Position(curve_index, 0, curve.elements[0].t0)
            return _Position(curve_index, element_index, element.t1)
        return _Position(curve_index, element_index, t)

    def _is_curve_end(self, position: _Position) -> bool:
        curve = self.curves[position.curve]
        if curve.closed:
            return False
        first = curve.elements[0]
        last = curve.elements[-1]
        if position.element == 0 and position.t == first.t0:
            return True
        return position.element == len(curve.elements) - 1 and position.t == last.t1

    def _same_position(self, a: _Position, b: _Position) -> bool:
        if a.curve != b.curve or a.element != b.element:
            return False
        element = self.curves[a.curve].elements[a.element]
        return abs(a.t - b.t) <= element.param_tolerance(self.tolerance)

    def _adjacent_junction(
        self, curve_index: int, i: int, j: int
    ) -> Point | None:
        """Shared endpoint of two consecutive elements of the same curve, if any."""
        curve = self.curves[curve_index]
        n = len(curve.elements)
        if j == i + 1:
            return curve.elements[i].last_point
        if curve.closed and n > 2 and i == 0 and j == n - 1:
            return curve.elements[0].first_point
        return None

    def _element_pairs(self):
        """Yield (curve_a, element_a, curve_b, element_b) pairs to intersect."""
        for ca, curve_a in enumerate(self.curves):
            if self.self_intersections:
                n = len(curve_a.elements)
                for i in range(n):
                    for j in range(i + 1, n):
                        yield ca, i, ca, j
            for cb in range(ca + 1, len(self.curves)):
                curve_b = self.curves[cb]
                for i in range(len(curve_a.elements)):
                    for j in range(len(curve_b.elements)):
                        yield ca, i, cb, j

    def _collect_nodes(self) -> None:
        tol = self.tolerance
        hits: list[tuple[Point, _Position, _Position]] = []

        for ca, i, cb, j in self._element_pairs():
            a = self.curves[ca].elements[i]
            b = self.curves[cb].elements[j]
            if ca != cb and overlaps(a, b, tol):
                raise CoincidentContoursError(ca, cb)
            junction = self._adjacent_junction(ca, i, j) if ca == cb else None
            for p in intersections(a, b, tol):
                if junction is not None and p.almost_equals(junction, tol):
                    continue
                hits.append(
                    (
                        p,
                        self._normalize(ca, i, a.project(p)),
                        self._normalize(cb, j, b.project(p)),
                    )
                )

        for p, pa, pb in hits:
            node = self._find_node(p)
            for position in (pa, pb):
                if self._is_curve_end(position):
                    continue
                if not any(self._same_position(position, q) for q in node.passages):
                    node.passages.append(position)

        kept = [node for node in self.nodes if len(node.passages) >= 2]
        for node in kept:
            node.passages.sort(key=lambda q: (q.curve, q.element, q.t))
        self.nodes = kept

    def _find_node(self, p: Point) -> _Node:
        for node in self.nodes:
            if node.point.almost_equals(p, self.tolerance):
                return node
        node = _Node(p)
        self.nodes.append(node)
        return node

    def _extract(
        self, curve_index: int, start: _Position | None, end: _Position | None
    ) -> list[CirculinearElement]:
        """Elements of a curve between two positions, following the curve direction.

        A missing start (end) means the beginning (end) of an open curve. On a
        closed curve, an end at or before the start wraps around.
        """
        curve = self.curves[curve_index]
        elements = curve.elements
        n = len(elements)
        ei, ti = (0, elements[0].t0) if start is None else (start.element, start.t)
        ej, tj = (n - 1, elements[-1].t1) if end is None else (end.element, end.t)

        if ei == ej and (ti < tj or not curve.closed):
            parts = [elements[ei].sub(ti, tj)]
        else:
            parts = [elements[ei].sub(ti, elements[ei].t1)]
            k = (ei + 1) % n
            while k != ej:
                parts.append(elements[k])
                k = (k + 1) % n
            parts.append(elements[ej].sub(elements[ej].t0, tj))
        return [e for e in parts if not e.is_degenerate(self.tolerance)]

    def _cut(self) -> list[_Piece]:
        cuts: dict[int, list[tuple[_Position, int]]] = {}
        for index, node in enumerate(self.nodes):
            for position in node.passages:
                cuts.setdefault(position.curve, []).append((position, index))

        pieces: list[_Piece] = []
        for c, curve in enumerate(self.curves):
            if not curve.elements:
                continue
            marks = sorted(cuts.get(c, []), key=lambda m: (m[0].element, m[0].t))
            if not marks:
                pieces.append(_Piece(c, None, None, None, None, list(curve.elements)))
                continue
            if curve.closed:
                for k, (position, node) in enumerate(marks):
                    next_position, next_node = marks[(k + 1) % len(marks)]
                    pieces.append(
                        _Piece(
                            c,
                            position,
                            next_position,
                            node,
                            next_node,
                            self._extract(c, position, next_position),
                        )
                    )
            else:
                bounds = [(None, None), *marks, (None, None)]
                for k in range(len(bounds) - 1):
                    (position, node), (next_position, next_node) = bounds[k], bounds[k + 1]
                    pieces.append(
                        _Piece(
                            c,
                            position,
                            next_position,
                            node,
                            next_node,
                            self._extract(c, position, next_position),
                        )
                    )
        return pieces

    def _trace(self, pieces: list[_Piece]) -> list[ContinuousCurve]:
        outgoing: dict[tuple[int, int], int] = {}
        incoming: dict[int, int] = {}
        for index, piece in enumerate(pieces):
            if piece.start_node is not None:
                slot = self._passage_index(piece.start_node, piece.start)
                outgoing[(piece.start_node, slot)] = index
            if piece.end_node is not None:
                slot = self._passage_index(piece.end_node, piece.end)
                incoming[index] = slot

        def successor(index: int) -> int | None:
            piece = pieces[index]
            if piece.end_node is None:
                return None
            node = self.nodes[piece.end_node]
            slot = (incoming[index] + 1) % len(node.passages)
            try:
                return outgoing[(piece.end_node, slot)]
            except KeyError:
                raise SplittingError(
                    f"no outgoing branch at node ({node.point.x:.6g}, {node.point.y:.6g})"
                ) from None

        used = [False] * len(pieces)
        results: list[ContinuousCurve] = []

        for index, piece in enumerate(pieces):
            if piece.start is None and piece.end is None:
                used[index] = True
                closed = self.curves[piece.curve].closed
                results.append(ContinuousCurve(tuple(piece.elements), closed))

        starts = [i for i, piece in enumerate(pieces) if piece.start_node is None and not used[i]]
        for first in starts:
            path: list[int] = []
            current: int | None = first
            while current is not None:
                if used[current]:
                    raise SplittingError("open path runs into an already traced branch")
                used[current] = True
                path.append(current)
                current = successor(current)
            results.append(self._assemble(pieces, path, closed=False))

        for first in range(len(pieces)):
            if used[first]:
                continue
            path = []
            current = first
            while True:
                if used[current]:
                    raise SplittingError("closed path runs into an already traced branch")
                used[current] = True
                path.append(current)
                nxt = successor(current)
                if nxt is None:
                    raise SplittingError("closed path reaches the end of an open curve")
                if nxt == first:
                    break
                current = nxt
            results.append(self._assemble(pieces, path, closed=True))

        return [curve for curve in results if curve.elements]

    def _passage_index(self, node_index: int, position: _Position | None) -> int:
        passages = self.nodes[node_index].passages
        for slot, passage in enumerate(passages):
            if position is not None and self._same_position(position, passage):
                return slot
        raise SplittingError("piece boundary does not match any passage of its node")

    @staticmethod
    def _assemble(pieces: list[_Piece], path: list[int], closed: bool) -> ContinuousCurve:
        elements = [e for index in path for e in pieces[index].elements]
        return ContinuousCurve(tuple(elements), closed)


def split_continuous_curve(
    curve: ContinuousCurve, tolerance: float
) -> list[ContinuousCurve]:
    """Split a curve into pieces without self-intersections.

    Args:
        curve: Curve to split, open or closed, possibly unbounded
        tolerance: Coincidence distance

    Returns:
        Curves whose union is the input, each free of self-intersections

    Raises:
        SplittingError: If the crossing structure cannot be resolved
    """
    return _CurveSplitter([curve], tolerance, self_intersections=True).split()


def split_intersecting_contours(
    contours: Sequence[ContinuousCurve], tolerance: float
) -> list[ContinuousCurve]:
    """Re-arrange contours so that no two of them cross.

    Contours are assumed individually free of self-intersections.

    Args:
        contours: Contours to split against each other
        tolerance: Coincidence distance

    Returns:
        Equivalent list of contours with no pairwise crossings

    Raises:
        CoincidentContoursError: If two contours share a boundary stretch
        SplittingError: If the crossing structure cannot be resolved
    """
    return _CurveSplitter(contours, tolerance, self_intersections=False).split()
