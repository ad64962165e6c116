"""Configuration management for pyiiif."""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Config:
    """Configuration for the default HTTP client and the command-line tool.

    Library calls that receive a caller-supplied client ignore everything
    here; the caller's client owns timeouts, proxies and pooling.
    """

    # HTTP settings
    timeout: float = 30.0  # seconds
    proxy: Optional[str] = None
    verify_ssl: bool = True
    follow_redirects: bool = True
    http2: bool = True

    # Batch downloads (CLI)
    max_concurrent_tasks: int = 4
    download_dir: str = "./downloads"

    # Progress display
    show_progress: bool = True

    def __post_init__(self):
        """Validate configuration."""
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive: {self.timeout}")

        if self.max_concurrent_tasks < 1:
            raise ValueError(
                f"Concurrent task limit must be at least 1: {self.max_concurrent_tasks}"
            )

        # Setup proxy from environment if not specified
        if not self.proxy:
            self.proxy = os.environ.get('HTTPS_PROXY') or os.environ.get('HTTP_PROXY')
