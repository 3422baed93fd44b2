"""
Custom exceptions for the Medoid Cluster Optimizer.
"""

class ClusterOptimizerError(Exception):
    """Base exception for the application."""
    pass

class ConfigurationError(ClusterOptimizerError):
    """Raised when configuration is invalid or missing."""
    pass

class DataValidationError(ClusterOptimizerError):
    """Raised when input data validation fails."""
    pass

class MalformedInputError(DataValidationError):
    """Raised when a distance matrix or locations document cannot be parsed or fails its schema."""
    def __init__(self, message: str, index: int = None, field: str = None):
        self.index = index
        self.field = field
        self.message = message
        super().__init__(message)

class InvalidParameterError(DataValidationError):
    """Raised when clustering parameters are non-positive or inverted."""
    def __init__(self, message: str, parameter: str = None):
        self.parameter = parameter
        self.message = message
        super().__init__(message)

class OptimizationError(ClusterOptimizerError):
    """Raised when the clustering search fails."""
    pass

class SearchCancelledError(OptimizationError):
    """Raised when a search is cancelled or exceeds its time budget."""
    pass
