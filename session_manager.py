"""
Session state management for the Medoid Cluster Optimizer.
"""

import streamlit as st
import logging
from typing import Any
from exceptions import DataValidationError

logger = logging.getLogger(__name__)

class SessionManager:
    """Manages Streamlit session state with validation and organization."""

    DEFAULTS = {
        'distance_entries': None,
        'distance_file_id': None,
        'distance_error': None,
        'locations': None,
        'locations_file_id': None,
        'locations_error': None,
        'result': None,
        'result_params': None,
        'show_map': False
    }

    def __init__(self):
        self._initialize_session_state()

    def _initialize_session_state(self):
        """Initialize all session state variables with default values."""
        for key, default_value in self.DEFAULTS.items():
            if key not in st.session_state:
                st.session_state[key] = default_value
                logger.debug(f"Initialized session state: {key}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get session state value with validation."""
        if key not in st.session_state:
            logger.warning(f"Session state key '{key}' not found, returning default")
            return default
        return st.session_state[key]

    def set(self, key: str, value: Any) -> None:
        """Set session state value with logging."""
        try:
            st.session_state[key] = value
            logger.debug(f"Set session state: {key}")
        except Exception as e:
            logger.error(f"Failed to set session state '{key}': {e}")
            raise DataValidationError(f"Session state error: {e}")

    def clear_results(self) -> None:
        """Clear clustering output, e.g. after new data is uploaded."""
        for key in ['result', 'result_params']:
            st.session_state[key] = None
        st.session_state['show_map'] = False
        logger.info("Cleared clustering results")

    def has_locations(self) -> bool:
        locations = self.get('locations')
        return locations is not None and not locations.empty and self.get('locations_error') is None
