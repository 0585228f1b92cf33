"""Configuration management for the ocautomator application."""
import os
from typing import Dict, Optional

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()

# Sub-directory of the credential store root that holds every cluster we manage
STORE_DIR_NAME = "OCClusterAutomator"
STORE_FILE_NAME = "clusterinfo.json"
INSTALL_SCRIPT = os.path.join("scripts", "run-openshift-install.sh")

SUPPORTED_PLATFORMS = ("aws", "azure")


class Config:
    """Application configuration read from APP_* environment variables."""

    # Security
    REDACT_KEYS: tuple = ("cluster_pull_secret", "ssh_key")

    def __init__(self, environ: Optional[Dict[str, str]] = None):
        env = os.environ if environ is None else environ

        # Prefix of cluster name
        self.cluster_name_prefix: str = env.get("APP_CLUSTERNAMEPREFIX", "")
        # Directory where all cluster credentials and related files are stored
        self.oc_store_path: str = env.get("APP_OCSTOREPATH", "")
        self.cluster_pull_secret: str = env.get("APP_CLUSTERPULLSECRET", "")
        self.ssh_key: str = env.get("APP_SSHKEY", "")
        self.platform: str = env.get("APP_PLATFORM", "")

        # Logging
        self.log_level: str = env.get("LOG_LEVEL", "INFO").upper()
        self.log_format: str = env.get(
            "LOG_FORMAT",
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    @classmethod
    def from_env(cls) -> "Config":
        """Load and validate configuration from the process environment."""
        config = cls()
        config.validate()
        return config

    def validate(self) -> None:
        """Validate required configuration."""
        required = {
            "APP_CLUSTERNAMEPREFIX": self.cluster_name_prefix,
            "APP_OCSTOREPATH": self.oc_store_path,
            "APP_CLUSTERPULLSECRET": self.cluster_pull_secret,
            "APP_SSHKEY": self.ssh_key,
            "APP_PLATFORM": self.platform,
        }
        missing = [k for k, v in required.items() if not v]
        if missing:
            raise ValueError(f"Missing required configuration: {', '.join(missing)}")

    @property
    def store_root(self) -> str:
        return os.path.join(self.oc_store_path, STORE_DIR_NAME)

    @property
    def store_file(self) -> str:
        return os.path.join(self.store_root, STORE_FILE_NAME)

    def as_dict(self, redact: bool = True) -> Dict[str, str]:
        values = {
            "cluster_name_prefix": self.cluster_name_prefix,
            "oc_store_path": self.oc_store_path,
            "cluster_pull_secret": self.cluster_pull_secret,
            "ssh_key": self.ssh_key,
            "platform": self.platform,
            "log_level": self.log_level,
        }
        if redact:
            for key in self.REDACT_KEYS:
                if values[key]:
                    values[key] = "***"
        return values

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in self.as_dict().items())
        return f"Config({fields})"
