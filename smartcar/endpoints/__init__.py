"""
Endpoint definitions for the Smartcar API.
"""

from .global_endpoints import get_global_endpoints
from .vehicle_endpoints import (
    VEHICLE_RESOURCES,
    ResourcePathSpec,
    batch_paths,
    get_resource,
    path_to_name,
    relative_path,
)

__all__ = [
    "VEHICLE_RESOURCES",
    "ResourcePathSpec",
    "batch_paths",
    "get_global_endpoints",
    "get_resource",
    "path_to_name",
    "relative_path",
]
