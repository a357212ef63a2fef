"""
Global endpoint definitions for the Smartcar API.
These endpoints are not vehicle-specific and can be called directly.
"""

from typing import Dict, Any


def get_global_endpoints() -> Dict[str, Any]:
    """Get global endpoints configuration."""
    return {
        # Compatibility of a VIN with a set of scopes (client credentials)
        "compatibility": {
            "path": "/compatibility",
            "auth": "basic",
            "management": False,
        },

        # Authorizing user
        "user": {
            "path": "/user",
            "auth": "bearer",
            "management": False,
        },

        # Vehicles connected by the authorizing user
        "vehicles": {
            "path": "/vehicles",
            "auth": "bearer",
            "management": False,
        },

        # Vehicle connections of the application (application management token)
        "connections": {
            "path": "/management/connections",
            "auth": "basic",
            "management": True,
            "default_limit": 10,
        },
    }
