"""
UI tab modules for the Medoid Cluster Optimizer Streamlit app.
"""
from .data_upload import tab_data_upload
from .clustering import tab_clustering
from .export import tab_export

__all__ = [
    'tab_data_upload',
    'tab_clustering',
    'tab_export'
]
