import os
from typing import Callable, Iterable, Iterator, Optional

from moonmap.types import PointOfInterest, PointType

DATA_DIRECTORY_PATH = os.path.join(os.path.dirname(__file__), "data")
MARIA_FILE_NAME = "MoonMaria.csv"
CRATERS_FILE_NAME = "MoonCraters.csv"

# Craters that can be made out with the naked eye or binoculars
VISIBLE_CRATER_NAMES = frozenset({
    "Tycho", "Copernicus", "Aristarchus", "Kepler", "Plato", "Ptolemaeus",
    "Posidonius", "Theophilus", "Hercules", "Piccolomini", "Atlas", "Macrobius"
})

PointFilter = Callable[[PointOfInterest], bool]

class CatalogFormatError(ValueError):
    """A catalog record could not be parsed."""

def parse_point(line: str, point_type: PointType) -> PointOfInterest:
    """
    Parse one ``name,diameter,latitude,longitude`` record.

    The longitude of the record is negated (east/west convention flip).
    """
    cells = line.split(",")
    if len(cells) != 4:
        raise ValueError(f"expected 4 fields, got {len(cells)}")
    name = cells[0].strip()
    diameter = float(cells[1])
    latitude = float(cells[2])
    longitude = float(cells[3])
    return PointOfInterest(point_type=point_type, name=name, diameter=diameter,
                           latitude=latitude, longitude=-longitude)

def load_points(point_type: PointType,
                filepath: str,
                point_filter: Optional[PointFilter] = None,
                missing_ok: bool = True) -> set:
    """
    Load points of interest from a CSV file.

    Parameters
    ----------
    point_type : PointType
        Type assigned to every loaded point
    filepath : str
        Path to CSV file with columns: name, diameter (km), latitude, longitude.
        No header, separator is ','
    point_filter : callable, optional
        Called with every parsed point, only points it accepts are kept
    missing_ok : bool
        If True a missing file contributes no points, otherwise it is an error

    Returns
    -------
    set
        Set of PointOfInterest

    Raises
    ------
    CatalogFormatError
        If any record is malformed. Nothing is loaded in that case.
    FileNotFoundError
        If the file does not exist and missing_ok is False
    """
    points = set()
    if not os.path.isfile(filepath):
        if not missing_ok:
            raise FileNotFoundError(f"Catalog file {filepath} was not found")
        print(f"Warning: Catalog file {filepath} was not found. Points not loaded.")
        return points

    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            lines = f.readlines()
    except UnicodeDecodeError as e:
        raise CatalogFormatError(f"{filepath}: not a UTF-8 text file: {e}") from e

    for line_number, line in enumerate(lines, start=1):
        line = line.strip()
        if not line:
            continue
        try:
            point = parse_point(line, point_type)
        except ValueError as e:
            raise CatalogFormatError(f"{filepath}:{line_number}: invalid record '{line}': {e}") from e
        if point_filter is None or point_filter(point):
            points.add(point)

    return points

def is_visible_crater(point: PointOfInterest) -> bool:
    return point.name in VISIBLE_CRATER_NAMES

class MoonFeatureCatalog:
    """
    In-memory set of maria and craters.

    Populated once, then only read while rendering.
    """

    def __init__(self, data_directory: str = DATA_DIRECTORY_PATH, missing_ok: bool = True):
        self.data_directory = data_directory
        self.missing_ok = missing_ok
        self.points = set()

    def __iter__(self) -> Iterator[PointOfInterest]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)

    def __contains__(self, point) -> bool:
        return point in self.points

    def add(self, points: Iterable[PointOfInterest]):
        self.points.update(points)

    def load(self, point_type: PointType, file_name: str, point_filter: Optional[PointFilter] = None):
        filepath = os.path.join(self.data_directory, file_name)
        self.add(load_points(point_type, filepath, point_filter, self.missing_ok))

    def load_maria(self, point_filter: Optional[PointFilter] = None):
        self.load(PointType.Mare, MARIA_FILE_NAME, point_filter)

    def load_visible_craters(self):
        self.load(PointType.Crater, CRATERS_FILE_NAME, is_visible_crater)

    def load_craters(self, point_filter: Optional[PointFilter] = None):
        self.load(PointType.Crater, CRATERS_FILE_NAME, point_filter)
