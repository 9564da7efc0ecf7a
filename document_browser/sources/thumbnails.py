"""Thumbnail decoding with pyvips.

Decodes straight to a downscaled RGB numpy array and wraps it in a ``QImage``.
Safe to call from worker threads (no ``QPixmap`` involved).
"""

from __future__ import annotations

import contextlib
from typing import Any

import numpy as np
from PySide6.QtGui import QImage

from document_browser.logger import get_logger

_logger = get_logger("decoder")

RGB_CHANNELS = 3
_EXPECTED_NDIM = 3

_pyvips: Any | None = None


def _get_pyvips_module() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        # Thumbnails are cached by the caller; keep libvips' own caches off.
        with contextlib.suppress(Exception):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
        _pyvips = pyvips
    return _pyvips


def decode_thumbnail_array(path: str, size: int) -> np.ndarray:
    """Decode ``path`` into an (H, W, 3) uint8 array fitting in ``size`` x ``size``."""
    pyvips = _get_pyvips_module()
    image = pyvips.Image.thumbnail(path, int(size), height=int(size), size="down")

    with contextlib.suppress(Exception):
        image = image.colourspace("srgb")
    if image.hasalpha():
        image = image.flatten(background=[0, 0, 0])
    if image.bands > RGB_CHANNELS:
        image = image.extract_band(0, n=RGB_CHANNELS)
    elif image.bands < RGB_CHANNELS:
        image = pyvips.Image.bandjoin([image] * RGB_CHANNELS)
    if image.format != "uchar":
        image = image.cast("uchar")

    mem = image.write_to_memory()
    array = np.frombuffer(mem, dtype=np.uint8).reshape(image.height, image.width, image.bands)
    if array.shape[2] != RGB_CHANNELS:
        raise RuntimeError(f"Unsupported band count after conversion: {array.shape[2]}")
    return array


def array_to_qimage(array: np.ndarray) -> QImage:
    arr = np.ascontiguousarray(array)
    if arr.ndim != _EXPECTED_NDIM or arr.shape[2] < RGB_CHANNELS:
        raise ValueError("unexpected image array shape")
    height, width = arr.shape[0], arr.shape[1]
    # copy() detaches the QImage from the numpy buffer's lifetime.
    return QImage(arr.data, width, height, RGB_CHANNELS * width, QImage.Format.Format_RGB888).copy()


def decode_thumbnail(path: str, size: int) -> QImage:
    image = array_to_qimage(decode_thumbnail_array(path, size))
    _logger.debug("decoded thumbnail: %s -> %dx%d", path, image.width(), image.height())
    return image
