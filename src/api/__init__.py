"""HTTP surface: FastAPI app exposing skills as resolvers and REST endpoints."""

from src.api.app import create_app

__all__ = ["create_app"]
