"""
Contour extraction and paper candidate selection.

Borders are traced with the Suzuki-Abe border following algorithm
("Topological Structural Analysis of Digitized Binary Images by Border
Following", 1985) over 8-connected foreground. Hole borders are followed so
that the hierarchy stays correct, but only the outermost borders (those whose
parent is the image frame) are returned.
"""

from typing import List, Tuple

import numpy as np

from .errors import InvalidInput, NoPaperDetected

# Neighbour offsets (dy, dx), counter-clockwise starting from the right.
# y grows downwards, so "up" is dy = -1.
NEIGHBOURS = (
    (0, 1),    # 0: right
    (-1, 1),   # 1: up-right
    (-1, 0),   # 2: up
    (-1, -1),  # 3: up-left
    (0, -1),   # 4: left
    (1, -1),   # 5: down-left
    (1, 0),    # 6: down
    (1, 1),    # 7: down-right
)

RIGHT = 0
LEFT = 4

# Border id of the image frame
FRAME_ID = 1


def _follow_border(
    img: np.ndarray,
    i: int,
    j: int,
    start_dir: int,
    nbd: int
) -> Tuple[List[Tuple[int, int]], List[int]]:
    """
    Follow one border starting at (i, j) and mark its pixels with nbd.

    Args:
        img: Padded label image, modified in place
        i: Row of the starting pixel
        j: Column of the starting pixel
        start_dir: Direction of the known 0-pixel next to the start
        nbd: Id of the border being followed

    Returns:
        Tuple (points, directions): border pixels as (x, y) in padded
        coordinates and the outgoing chain direction of each of them
    """
    # Clockwise search for the first non-zero neighbour
    for k in range(1, 9):
        d = (start_dir - k) % 8
        dy, dx = NEIGHBOURS[d]
        if img[i + dy, j + dx] != 0:
            break
    else:
        # Isolated pixel
        img[i, j] = -nbd
        return [(j, i)], [RIGHT]

    first = (i + dy, j + dx)
    y3, x3 = i, j
    back = d

    points = []
    directions = []

    while True:
        # Counter-clockwise search, starting right after the previous pixel
        right_is_zero = False
        for k in range(1, 9):
            d = (back + k) % 8
            dy, dx = NEIGHBOURS[d]
            if img[y3 + dy, x3 + dx] != 0:
                break
            if d == RIGHT:
                right_is_zero = True

        if right_is_zero:
            img[y3, x3] = -nbd
        elif img[y3, x3] == 1:
            img[y3, x3] = nbd

        points.append((x3, y3))
        directions.append(d)

        y4, x4 = y3 + dy, x3 + dx
        if (y4, x4) == (i, j) and (y3, x3) == first:
            break

        back = (d + 4) % 8
        y3, x3 = y4, x4

    return points, directions


def _compress(points: List[Tuple[int, int]], directions: List[int]) -> List[Tuple[int, int]]:
    """Drop points in the middle of straight runs (same in and out direction)."""
    outgoing = np.asarray(directions)
    incoming = np.roll(outgoing, 1)
    keep = np.flatnonzero(outgoing != incoming)
    if keep.size == 0:
        return points
    return [points[k] for k in keep]


def _last_border_id(row: np.ndarray, start: int, stop: int, current: int) -> int:
    """Id of the last already-traced pixel in row[start:stop], or current."""
    segment = row[start:stop]
    marked = segment[(segment != 0) & (segment != 1)]
    if marked.size == 0:
        return current
    return abs(int(marked[-1]))


def find_contours(binary: np.ndarray, simplify: bool = True) -> List[np.ndarray]:
    """
    Find the outer contours of the foreground regions in a binary image.

    Args:
        binary: Single-channel image, non-zero pixels are foreground
        simplify: Keep only the points where the chain direction changes

    Returns:
        List of contours in raster discovery order. Each contour is an
        int32 array of shape (N, 2) holding (x, y) points in trace order.
    """
    binary = np.asarray(binary)
    if binary.ndim != 2 or binary.size == 0:
        raise InvalidInput(f"Expected a non-empty single-channel image, got shape {binary.shape}")

    h, w = binary.shape

    # Zero frame around the image so every border is closed
    img = np.zeros((h + 2, w + 2), dtype=np.int32)
    img[1:-1, 1:-1] = binary != 0

    # border id -> (is_hole, parent id); the frame counts as a hole border
    borders = {FRAME_ID: (True, None)}
    nbd = FRAME_ID
    contours = []

    for i in range(1, h + 1):
        row = img[i]
        nonzero = row != 0
        left_zero = np.zeros_like(nonzero)
        left_zero[1:] = ~nonzero[:-1]
        right_zero = np.zeros_like(nonzero)
        right_zero[:-1] = ~nonzero[1:]

        # Only pixels next to a 0-pixel can start a border; their values are
        # re-read below because earlier traces in this row may relabel them
        candidates = np.flatnonzero(nonzero & (left_zero | right_zero))

        lnbd = FRAME_ID
        scanned = 0

        for j in candidates:
            j = int(j)
            lnbd = _last_border_id(row, scanned, j, lnbd)
            value = int(row[j])

            if value == 1 and row[j - 1] == 0:
                is_hole, start_dir = False, LEFT
            elif value >= 1 and row[j + 1] == 0:
                is_hole, start_dir = True, RIGHT
                if value > 1:
                    lnbd = value
            else:
                is_hole = None

            if is_hole is not None:
                nbd += 1
                lnbd_is_hole, lnbd_parent = borders[lnbd]
                parent = lnbd_parent if is_hole == lnbd_is_hole else lnbd
                borders[nbd] = (is_hole, parent)

                points, directions = _follow_border(img, i, j, start_dir, nbd)

                if not is_hole and parent == FRAME_ID:
                    if simplify:
                        points = _compress(points, directions)
                    contours.append(np.asarray(points, dtype=np.int32) - 1)

            value = int(row[j])
            if value != 0 and value != 1:
                lnbd = abs(value)
            scanned = j + 1

    return contours


def contour_area(contour: np.ndarray) -> float:
    """
    Area enclosed by a contour (shoelace formula, absolute value).

    Args:
        contour: Array of (x, y) points

    Returns:
        Enclosed area in square pixels
    """
    pts = np.asarray(contour, dtype=np.float64).reshape(-1, 2)
    if len(pts) < 3:
        return 0.0

    x = pts[:, 0]
    y = pts[:, 1]
    return 0.5 * abs(float(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


def select_largest_contour(contours: List[np.ndarray]) -> np.ndarray:
    """
    Pick the contour with the strictly greatest area.

    Ties keep the first contour encountered.

    Raises:
        NoPaperDetected: If there are no contours
    """
    if len(contours) == 0:
        raise NoPaperDetected("No contours found")

    best = contours[0]
    best_area = contour_area(best)

    for contour in contours[1:]:
        area = contour_area(contour)
        if area > best_area:
            best = contour
            best_area = area

    return best
