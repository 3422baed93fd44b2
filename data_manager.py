"""
Data management service for distance-matrix and locations file processing.
"""

import json
import math
import numbers
import pandas as pd
from typing import Any, Dict, List
import logging
from exceptions import MalformedInputError
from calculations.types import DistanceEntry
from calculations.distance_oracle import collect_nodes

logger = logging.getLogger(__name__)

DISTANCE_FIELDS = ('from', 'to', 'distance')
LOCATION_COLUMNS = ['name', 'lat', 'lon', 'point']


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _as_identifier(value: Any) -> Any:
    """Return the value as int if it is an integral number, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


class DataManager:
    """Service for loading and validating distance matrices and location data."""

    def _read_text(self, file) -> str:
        """Read an uploaded file, raw bytes or a string into text."""
        if hasattr(file, 'getvalue'):
            content = file.getvalue()
        elif hasattr(file, 'read'):
            content = file.read()
        else:
            content = file

        if isinstance(content, bytes):
            try:
                content = content.decode('utf-8-sig')
            except UnicodeDecodeError as e:
                raise MalformedInputError(f"File is not valid UTF-8 text: {e}")
        return content

    def _parse_json(self, document: Any, label: str) -> Any:
        if isinstance(document, (list, dict)):
            return document
        text = self._read_text(document)
        try:
            return json.loads(text)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to parse {label} JSON: {e}")
            raise MalformedInputError(f"Failed to parse {label} JSON. Ensure it's valid JSON ({e}).")

    def parse_distance_matrix(self, document: Any) -> List[DistanceEntry]:
        """
        Parse and validate a distance-matrix document.

        The document is a JSON array of {"from": int, "to": int, "distance": number >= 0}
        objects. Validation stops at the first offending entry and field.

        Args:
            document: JSON text, bytes, an uploaded file, or an already decoded list

        Returns:
            List of DistanceEntry dictionaries in document order

        Raises:
            MalformedInputError: on invalid JSON or the first schema violation
        """
        data = self._parse_json(document, 'distance matrix')
        if not isinstance(data, list):
            raise MalformedInputError("Distance matrix must be a JSON array of {from, to, distance} entries.")

        entries: List[DistanceEntry] = []
        for index, raw in enumerate(data):
            if not isinstance(raw, dict):
                raise MalformedInputError(f"Entry {index}: expected an object with 'from', 'to' and 'distance'.",
                                          index=index)
            for field in DISTANCE_FIELDS:
                if field not in raw:
                    raise MalformedInputError(f"Entry {index}: missing required field '{field}'.",
                                              index=index, field=field)

            endpoints = {}
            for field in ('from', 'to'):
                node = _as_identifier(raw[field])
                if node is None:
                    raise MalformedInputError(f"Entry {index}: '{field}' must be an integer, got {raw[field]!r}.",
                                              index=index, field=field)
                endpoints[field] = node

            distance = raw['distance']
            if not _is_number(distance) or not math.isfinite(distance) or distance < 0:
                raise MalformedInputError(
                    f"Entry {index}: 'distance' must be a non-negative number, got {distance!r}.",
                    index=index, field='distance'
                )

            entries.append({'from': endpoints['from'], 'to': endpoints['to'], 'distance': float(distance)})

        logger.info(f"Parsed distance matrix with {len(entries)} entries")
        return entries

    def load_distance_matrix(self, file) -> List[DistanceEntry]:
        """Load and validate an uploaded distance-matrix JSON file."""
        entries = self.parse_distance_matrix(self._read_text(file))
        logger.info(f"Loaded {len(entries)} distance entries from file")
        return entries

    def load_locations(self, file) -> pd.DataFrame:
        """
        Load and validate a locations JSON file.

        Expects an array of {"name": str, "lat": [-90, 90], "lon": [-180, 180], "point": int}.
        Locations are only used for map display; the clustering engine never reads them.
        """
        data = self._parse_json(file, 'locations')
        if not isinstance(data, list):
            raise MalformedInputError("Locations file must be a JSON array of {name, lat, lon, point} entries.")

        rows = []
        for index, raw in enumerate(data):
            if not isinstance(raw, dict):
                raise MalformedInputError(f"Location {index}: expected an object.", index=index)
            for field in LOCATION_COLUMNS:
                if field not in raw:
                    raise MalformedInputError(f"Location {index}: missing required field '{field}'.",
                                              index=index, field=field)

            if not isinstance(raw['name'], str):
                raise MalformedInputError(f"Location {index}: 'name' must be a string.", index=index, field='name')
            if not _is_number(raw['lat']) or not -90 <= raw['lat'] <= 90:
                raise MalformedInputError(f"Location {index}: 'lat' must be a number between -90 and 90.",
                                          index=index, field='lat')
            if not _is_number(raw['lon']) or not -180 <= raw['lon'] <= 180:
                raise MalformedInputError(f"Location {index}: 'lon' must be a number between -180 and 180.",
                                          index=index, field='lon')
            point = _as_identifier(raw['point'])
            if point is None:
                raise MalformedInputError(f"Location {index}: 'point' must be an integer.", index=index, field='point')

            rows.append({'name': raw['name'], 'lat': float(raw['lat']), 'lon': float(raw['lon']), 'point': point})

        df = pd.DataFrame(rows, columns=LOCATION_COLUMNS)
        logger.info(f"Loaded {len(df)} locations")
        return df

    def entries_to_dataframe(self, entries: List[DistanceEntry]) -> pd.DataFrame:
        """Tabular view of the distance entries for previews."""
        return pd.DataFrame(list(entries), columns=list(DISTANCE_FIELDS))

    def summarize(self, entries: List[DistanceEntry]) -> Dict[str, Any]:
        """Counts describing how complete the distance matrix is."""
        nodes = collect_nodes(entries)
        n = len(nodes)
        pairs = {frozenset((e['from'], e['to'])) for e in entries if e['from'] != e['to']}
        possible_pairs = n * (n - 1) // 2
        return {
            'entries': len(entries),
            'unique_nodes': n,
            'known_pairs': len(pairs),
            'possible_pairs': possible_pairs,
            'coverage_pct': (len(pairs) / possible_pairs * 100) if possible_pairs else 0.0
        }
