"""Server infrastructure settings."""

from typing import List

from pydantic import Field

from infrastructure.configuration.base import InfrastructureSettings


class ServerSettings(InfrastructureSettings):
    """HTTP server configuration.

    Environment Variables:
        CORS_ALLOW_ORIGINS: Comma separated list of allowed origins
        USER_ID_HEADER: Header carrying the authenticated user id, set by the
            upstream auth layer (default: X-User-Id)
    """

    CORS_ALLOW_ORIGINS: str = Field(
        default="http://localhost:5000,http://127.0.0.1:5000",
        alias="CORS_ALLOW_ORIGINS",
    )
    USER_ID_HEADER: str = Field(default="X-User-Id", alias="USER_ID_HEADER")

    @property
    def cors_origins(self) -> List[str]:
        """Allowed origins as a list."""
        return [
            origin.strip()
            for origin in self.CORS_ALLOW_ORIGINS.split(",")
            if origin.strip()
        ]
