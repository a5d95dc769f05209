"""
Server component for resquin.

This module provides a FastAPI server exposing the indicator functions.
Response tables travel as JSON with null for missing responses.
"""

import logging
import threading
import warnings
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import fastapi
from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from resquin.components.config import Config, ConfigManager
from resquin.errors import ResquinError, SingularCovarianceWarning
from resquin.math.indicators import resp_distributions, resp_styles

# Set up logging
logger = logging.getLogger(__name__)


# Define API models
class ResponseData(BaseModel):
    """Responses in wide format, one row per respondent."""

    columns: List[str]
    rows: List[List[Optional[float]]]


class StylesRequest(ResponseData):
    """Response style request model."""

    scale_min: float
    scale_max: float
    min_valid_responses: Optional[float] = None
    normalize: Optional[bool] = None


class DistributionsRequest(ResponseData):
    """Response distribution request model."""

    min_valid_responses: Optional[float] = None


def to_frame(data: ResponseData) -> pd.DataFrame:
    """
    Build a data frame from request rows.

    Args:
        data: Request holding column names and rows

    Returns:
        DataFrame with NaN for null cells

    Raises:
        HTTPException: rows do not match the number of columns
    """
    ragged = [i for i, row in enumerate(data.rows) if len(row) != len(data.columns)]
    if ragged:
        raise HTTPException(
            status_code=422,
            detail=f"Rows {ragged} do not have {len(data.columns)} values"
        )
    return pd.DataFrame(data.rows, columns=data.columns, dtype=float)


def _json_value(value: Any) -> Any:
    if pd.isna(value):
        return None
    if isinstance(value, (int, np.integer)):
        return int(value)
    return float(value)


def to_payload(result: pd.DataFrame, caught: List[warnings.WarningMessage]) -> Dict[str, Any]:
    """
    Convert an indicator table to a JSON-ready dictionary.

    Args:
        result: Indicator table
        caught: Warnings recorded while computing it

    Returns:
        Dictionary with columns, rows and warning messages
    """
    return {
        'columns': list(result.columns),
        'rows': [[_json_value(v) for v in row] for row in result.itertuples(index=False)],
        'warnings': [str(w.message) for w in caught
                     if issubclass(w.category, SingularCovarianceWarning)]
    }


class Server:
    """
    FastAPI server for resquin.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize a server.

        Args:
            config: Configuration for the server
        """
        self.config = config or ConfigManager.get_config()

        # Create FastAPI app
        self.app = FastAPI(
            title="resquin API",
            description="API for survey response quality indicators",
            version="0.1.0"
        )

        # Set up routes
        self._setup_routes()

        # Set up error handling
        self._setup_error_handling()

    def _setup_routes(self) -> None:
        """
        Set up API routes.
        """
        # Health check
        @self.app.get("/health")
        async def health_check():
            return {"status": "ok"}

        # Response styles
        @self.app.post("/resp_styles")
        async def styles(request: StylesRequest):
            min_valid = request.min_valid_responses
            if min_valid is None:
                min_valid = self.config.get('indicators.min-valid-responses', 1.0)
            normalize = request.normalize
            if normalize is None:
                normalize = self.config.get('indicators.normalize', True)

            frame = to_frame(request)
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always')
                result = resp_styles(frame, request.scale_min, request.scale_max,
                                     min_valid_responses=min_valid, normalize=normalize)
            return to_payload(result, caught)

        # Response distributions
        @self.app.post("/resp_distributions")
        async def distributions(request: DistributionsRequest):
            min_valid = request.min_valid_responses
            if min_valid is None:
                min_valid = self.config.get('indicators.min-valid-responses', 1.0)

            frame = to_frame(request)
            with warnings.catch_warnings(record=True) as caught:
                warnings.simplefilter('always')
                result = resp_distributions(frame, min_valid_responses=min_valid)
            return to_payload(result, caught)

    def _setup_error_handling(self) -> None:
        """
        Set up error handling.
        """
        @self.app.exception_handler(ResquinError)
        async def resquin_exception_handler(request, exc):
            return JSONResponse(
                status_code=422,
                content={"detail": str(exc)}
            )

        @self.app.exception_handler(fastapi.exceptions.RequestValidationError)
        async def validation_exception_handler(request, exc):
            return JSONResponse(
                status_code=422,
                content={"detail": str(exc)}
            )

        @self.app.exception_handler(Exception)
        async def generic_exception_handler(request, exc):
            logger.exception("Unhandled exception")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"}
            )

    def run(self) -> None:
        """
        Run the server until interrupted.
        """
        # Import uvicorn here so the API can be used without it
        import uvicorn

        port = self.config.get('server.port', 8080)
        host = self.config.get('server.host', 'localhost')

        logger.info(f"Starting server at http://{host}:{port}")
        uvicorn.run(
            self.app,
            host=host,
            port=port,
            log_level=self.config.get('logging.level', 'warning')
        )


class ServerManager:
    """
    Singleton manager for the server.
    """

    _instance = None
    _lock = threading.RLock()

    @classmethod
    def get_server(cls, config: Optional[Config] = None) -> Server:
        """
        Get the server instance.

        Args:
            config: Configuration

        Returns:
            Server instance
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = Server(config)

            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the server instance."""
        with cls._lock:
            cls._instance = None
