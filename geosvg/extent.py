import numpy as np

from geosvg.errors import EmptyGeometryError
from geosvg.geometry import FeatureCollection
from geosvg.logger import logger
from geosvg.project_types import SENTINEL_EXTENT, BoundingBox


class GeometryExtentResolver:
    def resolve(
        self, fc: FeatureCollection, override: BoundingBox | None = None
    ) -> BoundingBox:
        """Bounding box of every coordinate in the collection.

        A caller-supplied `override` always wins and is returned unchanged.

        Raises:
            EmptyGeometryError: If there is no override and no coordinates
        """
        if override is not None:
            return override

        coords = fc.coordinates()
        if len(coords) == 0:
            raise EmptyGeometryError("Feature collection has no coordinates")

        min_x, min_y = np.min(coords, axis=0)
        max_x, max_y = np.max(coords, axis=0)
        extent = BoundingBox(float(min_x), float(min_y), float(max_x), float(max_y))
        logger.debug(f"Resolved extent {extent.as_list()} from {len(coords)} coordinates")
        return extent

    def resolve_or_sentinel(
        self, fc: FeatureCollection, override: BoundingBox | None = None
    ) -> BoundingBox:
        """Like resolve, but falls back to a unit box around the origin when empty"""
        try:
            return self.resolve(fc, override)
        except EmptyGeometryError:
            logger.info(
                f"No coordinates to measure, using sentinel extent {SENTINEL_EXTENT.as_list()}"
            )
            return SENTINEL_EXTENT
