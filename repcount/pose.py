"""
ONNX Runtime pose model (MoveNet single-pose, 17 keypoints).
Loads the session once and exposes the input tensor layout the preprocessor needs.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional

import numpy as np
import onnxruntime

from .preprocess import DEFAULT_INPUT_SIZE, input_dtype_for

logger = logging.getLogger(__name__)

DEFAULT_MODEL_PATH = os.path.join("models", "pose.onnx")
DEFAULT_PROVIDERS = ("CPUExecutionProvider",)


class PoseModelError(RuntimeError):
    """Raised when the pose model cannot be loaded or has an unexpected input."""


def _static_input_size(shape: list[Any]) -> Optional[int]:
    """Spatial size from an NHWC input shape, if the model declares it."""
    if len(shape) != 4:
        return None
    height, width = shape[1], shape[2]
    if isinstance(height, int) and isinstance(width, int) and height == width and height > 0:
        return height
    return None


def create_session(model_path: str, providers: tuple[str, ...] = DEFAULT_PROVIDERS):
    """Create an InferenceSession; any load failure is a PoseModelError."""
    if not os.path.isfile(model_path):
        raise PoseModelError(f"Pose model not found: {model_path}")
    session_options = onnxruntime.SessionOptions()
    session_options.execution_mode = onnxruntime.ExecutionMode.ORT_SEQUENTIAL
    try:
        return onnxruntime.InferenceSession(
            model_path,
            sess_options=session_options,
            providers=list(providers),
        )
    except Exception as exc:
        raise PoseModelError(f"Cannot load pose model {model_path}: {exc}") from exc


class PoseEstimator:
    """
    Thin wrapper around an ONNX Runtime session.
    Pass model_path to load a model, or session to reuse an existing one.
    """

    def __init__(
        self,
        model_path: Optional[str] = None,
        session=None,
        input_size: Optional[int] = None,
    ):
        if session is None:
            if model_path is None:
                raise PoseModelError("Either model_path or session must be provided")
            session = create_session(model_path)
        self.model_path = model_path
        self.session = session

        model_input = session.get_inputs()[0]
        self.input_name = model_input.name
        try:
            self.input_dtype = input_dtype_for(model_input.type)
        except ValueError as exc:
            raise PoseModelError(str(exc)) from exc
        self.input_size = (
            input_size
            or _static_input_size(list(model_input.shape or []))
            or DEFAULT_INPUT_SIZE
        )
        logger.info(
            "pose: model input name=%s type=%s shape=%s -> size=%s dtype=%s",
            self.input_name, model_input.type, model_input.shape, self.input_size, self.input_dtype,
        )

    def infer(self, tensor: np.ndarray) -> np.ndarray:
        """Run the model on one preprocessed tensor and return the first output."""
        outputs = self.session.run(None, {self.input_name: tensor})
        return outputs[0]

    def close(self) -> None:
        # InferenceSession has no explicit close; dropping the reference frees it.
        self.session = None
