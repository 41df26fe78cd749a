from pathlib import Path

import numpy as np
import pytest

from moonmap.types import ProjectionConfig

MARIA_CSV = """Mare Imbrium,1146,32.8,15.6
Mare Crisium,556,17.0,-59.1
"""

CRATERS_CSV = """Tycho,85,-43.3,11.22
Copernicus,93,9.62,20.08
Clavius,231,-58.4,14.4
Kepler,31,8.1,38.0
Proclus,27,16.1,-46.8
"""


@pytest.fixture
def config() -> ProjectionConfig:
    """Centered disk on a 600x600 image without libration, rotation or phase."""
    return ProjectionConfig(center_x=300, center_y=300, radius=240)


@pytest.fixture
def blank_image() -> np.ndarray:
    return np.zeros((600, 600, 3), dtype=np.uint8)


@pytest.fixture
def catalog_dir(tmp_path: Path) -> Path:
    """Directory with small maria and crater catalogs."""
    (tmp_path / "MoonMaria.csv").write_text(MARIA_CSV, encoding="utf-8")
    (tmp_path / "MoonCraters.csv").write_text(CRATERS_CSV, encoding="utf-8")
    return tmp_path
