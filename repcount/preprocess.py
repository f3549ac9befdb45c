"""
Frame preprocessing for the pose model: BGR camera frame -> [1, S, S, 3] RGB tensor.
The resize is a plain stretch to S x S (no letterbox), so non-square frames are distorted.
"""
from __future__ import annotations

import cv2
import numpy as np

# MoveNet Lightning input size
DEFAULT_INPUT_SIZE = 192

# ONNX tensor element types the model may declare for its image input
_ONNX_INPUT_DTYPES = {
    "tensor(uint8)": np.uint8,
    "tensor(int32)": np.int32,
    "tensor(int64)": np.int64,
    "tensor(float16)": np.float16,
    "tensor(float)": np.float32,
    "tensor(double)": np.float64,
}


class FrameError(ValueError):
    """Raised for frames that cannot be preprocessed (empty, wrong channel count)."""


def input_dtype_for(onnx_type: str) -> np.dtype:
    """Numpy dtype for an ONNX input type string such as 'tensor(int32)'."""
    try:
        return np.dtype(_ONNX_INPUT_DTYPES[onnx_type])
    except KeyError:
        raise ValueError(f"Unsupported model input type: {onnx_type}") from None


def preprocess_frame(
    frame_bgr: np.ndarray,
    input_size: int = DEFAULT_INPUT_SIZE,
    dtype: np.dtype = np.dtype(np.int32),
) -> np.ndarray:
    """
    Stretch frame to input_size x input_size, convert BGR -> RGB, add batch dim.
    Integer dtypes keep raw 0..255 values; float dtypes are scaled to 0..1.
    """
    if frame_bgr is None or frame_bgr.size == 0:
        raise FrameError("empty frame")
    if frame_bgr.ndim != 3 or frame_bgr.shape[2] != 3:
        raise FrameError(f"expected HxWx3 frame, got shape {frame_bgr.shape}")
    dtype = np.dtype(dtype)
    resized = cv2.resize(frame_bgr, (input_size, input_size), interpolation=cv2.INTER_LINEAR)
    rgb = cv2.cvtColor(resized, cv2.COLOR_BGR2RGB)
    if np.issubdtype(dtype, np.floating):
        tensor = rgb.astype(dtype) / dtype.type(255.0)
    else:
        tensor = rgb.astype(dtype)
    return np.expand_dims(tensor, axis=0)
