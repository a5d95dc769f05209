"""
System components for resquin.

This module provides configuration and the HTTP server.
"""

from resquin.components.config import Config, ConfigManager
from resquin.components.server import Server, ServerManager
