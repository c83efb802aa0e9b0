"""Transform and prediction modules for the Golomb codecs."""

from .mid_side import mid_side_forward, mid_side_inverse
from .predictors import (
    Predictor,
    get_predictor,
    paeth,
    predict_pixel,
    predict_image,
    compute_residuals,
)

__all__ = [
    'mid_side_forward',
    'mid_side_inverse',
    'Predictor',
    'get_predictor',
    'paeth',
    'predict_pixel',
    'predict_image',
    'compute_residuals',
]
