"""
Map visualization service for clustering results.
"""

import folium
import folium.plugins
import pandas as pd
from typing import List, Optional
import logging
from config import Config
from calculations.types import Cluster
from shared.geo_utils import map_center, point_to_cluster
from shared.utils import validate_coordinates

logger = logging.getLogger(__name__)


class MapBuilder:
    """Service for creating interactive cluster maps with Folium."""

    def __init__(self):
        """Initialize MapBuilder."""
        self.colors = list(Config.CLUSTER_COLORS)

    def color_for(self, cluster_id: Optional[int]) -> str:
        """Colour of a cluster id; unclustered points are grey."""
        if cluster_id is None:
            return Config.UNCLUSTERED_COLOR
        return self.colors[(cluster_id - 1) % len(self.colors)]

    def create_cluster_map(self, locations: pd.DataFrame,
                           clusters: Optional[List[Cluster]] = None) -> folium.Map:
        """
        Create a map of all locations, coloured by cluster.

        With no clusters every location is drawn in the unclustered colour.
        One feature group per cluster lets the layer control toggle clusters.
        """
        try:
            center_lat, center_lon = map_center(locations)
            m = folium.Map(
                location=[center_lat, center_lon],
                zoom_start=Config.MAP_ZOOM_START,
                tiles='OpenStreetMap'
            )

            assignments = point_to_cluster(clusters)
            layers = {}
            for cluster in clusters or []:
                layers[cluster['id']] = folium.FeatureGroup(name=f"Cluster {cluster['id']}")
            unclustered_layer = folium.FeatureGroup(name="Unclustered")

            for _, row in locations.iterrows():
                if not validate_coordinates(row['lat'], row['lon']):
                    continue

                point = int(row['point'])
                cluster_id = assignments.get(point)
                color = self.color_for(cluster_id)
                cluster_label = f"Cluster {cluster_id}" if cluster_id is not None else "Unclustered"

                popup_html = f"""
                <div style="font-family: Arial, sans-serif; font-size: 12px;">
                    <strong>{row.get('name', 'N/A')}</strong><br>
                    Point: {point}<br>
                    {cluster_label}<br>
                    Coords: {row['lat']:.4f}, {row['lon']:.4f}
                </div>
                """

                folium.CircleMarker(
                    location=[row['lat'], row['lon']],
                    radius=Config.POINT_RADIUS,
                    popup=folium.Popup(popup_html, max_width=300),
                    tooltip=f"{row.get('name', point)} ({cluster_label})",
                    color=color,
                    fill=True,
                    fillColor=color,
                    fillOpacity=0.8,
                    weight=1
                ).add_to(layers.get(cluster_id, unclustered_layer))

            for layer in layers.values():
                layer.add_to(m)
            unclustered_layer.add_to(m)

            folium.LayerControl().add_to(m)

            folium.plugins.Fullscreen(
                position='topright',
                title='Expand map',
                title_cancel='Exit full screen',
                force_separate_button=True
            ).add_to(m)

            logger.info(f"Cluster map created: {len(locations)} locations, {len(layers)} clusters")
            return m

        except Exception as e:
            logger.error(f"Error creating cluster map: {e}")
            raise
