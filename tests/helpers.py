from io import BytesIO

import numpy as np
from PIL import Image


def png_bytes(color, size=(100, 100), mode="RGB") -> bytes:
    buf = BytesIO()
    Image.new(mode, size, color).save(buf, "PNG")
    return buf.getvalue()


def color_bbox(image: Image.Image, predicate):
    """
    (left, top, right, bottom) of pixels where ``predicate(r, g, b)`` holds,
    right/bottom exclusive. ``predicate`` works on whole channel arrays.
    """
    arr = np.asarray(image.convert("RGB")).astype(np.int32)
    mask = predicate(arr[:, :, 0], arr[:, :, 1], arr[:, :, 2])
    ys, xs = np.nonzero(mask)
    if xs.size == 0:
        return None
    return int(xs.min()), int(ys.min()), int(xs.max()) + 1, int(ys.max()) + 1


def box_center(box):
    left, top, right, bottom = box
    return (left + right) / 2, (top + bottom) / 2
