"""
Runtime configuration for the forwarding proxy.
"""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_OWNER = "netham45"
DEFAULT_REPO = "esp32-scream-receiver"
DEFAULT_ORIGIN = "https://netham45.org"
DEFAULT_USER_AGENT = "ESP32-Flasher-Proxy"
DEFAULT_ENDPOINT_PATH = "/proxy.php"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_TIMEOUT = 30  # seconds


@dataclass
class ProxyConfig:
    """Settings shared by the handler, the web application and the CLI.

    The owner/repo pair is operator configuration; it is never read from a
    client request.
    """

    owner: str = DEFAULT_OWNER
    repo: str = DEFAULT_REPO
    cache_dir: Path = Path("cache")
    cache_enabled: bool = True
    allowed_origin: str = DEFAULT_ORIGIN
    user_agent: str = DEFAULT_USER_AGENT
    endpoint_path: str = DEFAULT_ENDPOINT_PATH
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        self.cache_dir = Path(self.cache_dir)
        if not self.endpoint_path.startswith("/"):
            self.endpoint_path = "/" + self.endpoint_path

    @property
    def project(self) -> str:
        """Return the allow-listed "owner/repo" identifier."""
        return f"{self.owner}/{self.repo}"
