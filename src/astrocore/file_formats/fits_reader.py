"""
FITS pixel loading through astropy.

Returns the primary image as a flat float32 buffer in the same
(pixels, width, height) form as the XISF reader. Values are left in their
native scale (BSCALE/BZERO applied by astropy, no normalization).
"""

import logging

import numpy as np
from astropy.io import fits

from ..exceptions import InvalidFormatError
from ..types import FilePath, PixelData

logger = logging.getLogger(__name__)


def load_fits(path: FilePath) -> PixelData:
    """
    Load the primary HDU image of a FITS file.

    Cubes are reduced to their first plane.

    Raises:
        InvalidFormatError: If the primary HDU holds no 2-D image
    """
    with fits.open(path, mode='readonly') as hdul:
        data = hdul[0].data
        if data is None or data.ndim < 2:
            raise InvalidFormatError(
                f"Primary HDU of {path} is not an image",
                file_path=str(path),
                error_code="NOT_AN_IMAGE"
            )

        while data.ndim > 2:
            data = data[0]

        height, width = data.shape
        pixels = np.array(data, dtype=np.float32).reshape(-1)

    logger.info(f"Loaded FITS image {path}: {width}x{height}")
    return pixels, int(width), int(height)
