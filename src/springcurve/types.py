from collections.abc import Callable

import numpy as np
import numpy.typing as npt

FRAMES = npt.NDArray[np.float64]
EasingFunction = Callable[[float], float]
