"""Configuration management for the Allegro REST and WebAPI (SOAP) APIs."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

PRODUCTION_API_HOST = "https://api.allegro.pl"
SANDBOX_API_HOST = "https://api.allegro.pl.allegrosandbox.pl"
PRODUCTION_SOAP_WSDL = "https://webapi.allegro.pl/service.php?wsdl"
SANDBOX_SOAP_WSDL = "https://webapi.allegro.pl.allegrosandbox.pl/service.php?wsdl"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class AllegroConfig:
    """Configuration for Allegro API access."""

    client_id: str
    client_secret: str
    sandbox: bool = False
    api_host: Optional[str] = None
    soap_wsdl_url: Optional[str] = None
    webapi_key: Optional[str] = None
    country_code: int = 1
    timeout: float = 30.0

    def __post_init__(self):
        if not self.api_host:
            self.api_host = SANDBOX_API_HOST if self.sandbox else PRODUCTION_API_HOST
        if not self.soap_wsdl_url:
            self.soap_wsdl_url = SANDBOX_SOAP_WSDL if self.sandbox else PRODUCTION_SOAP_WSDL
        self.api_host = self.api_host.rstrip("/")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AllegroConfig":
        """Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file. If not provided, looks for
                     .env in the allegro_integration directory.

        Returns:
            AllegroConfig instance with loaded configuration.

        Raises:
            ValueError: If required environment variables are missing.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path(__file__).parent / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        client_id = os.getenv("ALLEGRO_CLIENT_ID") or os.getenv("CLIENT_ID")
        client_secret = os.getenv("ALLEGRO_CLIENT_SECRET") or os.getenv("CLIENT_SECRET")

        missing = []
        if not client_id:
            missing.append("CLIENT_ID")
        if not client_secret:
            missing.append("CLIENT_SECRET")

        if missing:
            raise ValueError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        sandbox = os.getenv("ALLEGRO_SANDBOX", "false").strip().lower() in _TRUE_VALUES

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            sandbox=sandbox,
            api_host=os.getenv("ALLEGRO_API_HOST"),
            soap_wsdl_url=os.getenv("ALLEGRO_SOAP_WSDL"),
            webapi_key=os.getenv("ALLEGRO_WEBAPI_KEY"),
            country_code=int(os.getenv("ALLEGRO_COUNTRY_CODE", "1")),
            timeout=float(os.getenv("ALLEGRO_TIMEOUT", "30.0")),
        )

    def api_url(self, path: str) -> str:
        """Get the absolute REST API URL for a resource path."""
        return f"{self.api_host}/{path.lstrip('/')}"
