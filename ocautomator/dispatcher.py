"""Create and destroy clusters through the installer script and keep the store in sync."""
import logging
import os
import threading
from typing import Dict, List, Optional

from ocautomator.config import INSTALL_SCRIPT, SUPPORTED_PLATFORMS, Config
from ocautomator.registry import (
    ClusterRecord,
    find_record,
    forget_cluster,
    load_store,
    record_cluster,
)
from ocautomator.runner import build_install_args, format_command, run_script
from ocautomator.utils import generate_cluster_name

logger = logging.getLogger(__name__)


def validate_platform(platform: Optional[str]) -> str:
    """Return ``platform`` if it is supported, raise ValueError otherwise."""
    if not platform:
        raise ValueError("Please enter a platform to create the cluster on")
    if platform not in SUPPORTED_PLATFORMS:
        raise ValueError(f"Platform '{platform}' is not supported. Try {'/'.join(SUPPORTED_PLATFORMS)}")
    return platform


def resolve_install_script(cwd: Optional[str] = None) -> str:
    script = os.path.join(cwd or os.getcwd(), INSTALL_SCRIPT)
    if not os.path.exists(script):
        raise FileNotFoundError(f"failed to stat {INSTALL_SCRIPT}: {script} does not exist")
    return script


def ensure_store_root(path: str) -> str:
    if not os.path.isdir(path):
        logger.info(f"📁 Creating cluster store directory {path}")
        os.makedirs(path, mode=0o755, exist_ok=True)
    return path


class ClusterDispatcher:
    """Runs the create/destroy actions requested for one invocation."""

    def __init__(
        self,
        config: Config,
        platform: str,
        script_path: str,
        dry_run: bool = False,
        shutdown: Optional[threading.Event] = None,
    ):
        self.config = config
        self.platform = validate_platform(platform)
        self.script_path = script_path
        self.dry_run = dry_run
        self.shutdown = shutdown or threading.Event()

    @classmethod
    def prepare(
        cls,
        config: Config,
        platform: str,
        dry_run: bool = False,
        cwd: Optional[str] = None,
        shutdown: Optional[threading.Event] = None,
    ) -> "ClusterDispatcher":
        """Locate the installer script and make sure the store directory exists."""
        platform = validate_platform(platform)
        if config.platform and config.platform != platform:
            logger.warning(
                f"⚠️  --platform {platform} differs from APP_PLATFORM={config.platform}; using {platform}"
            )
        script_path = resolve_install_script(cwd)
        ensure_store_root(config.store_root)
        return cls(config, platform, script_path, dry_run=dry_run, shutdown=shutdown)

    @property
    def store_file(self) -> str:
        return self.config.store_file

    def run(self, create: bool = False, destroy: Optional[str] = None) -> None:
        """Create first, then destroy, as requested by the flags."""
        if create:
            self.create()
        if destroy:
            if self.shutdown.is_set():
                logger.info(f"🛑 Interrupt received, skipping destroy of {destroy}")
                return
            self.destroy(destroy)

    def create(self) -> Optional[ClusterRecord]:
        """Provision a new cluster and record it. Returns None on a dry run."""
        logger.info("🚀 execute OpenShift install create")
        record = ClusterRecord(
            name=generate_cluster_name(self.config.cluster_name_prefix, self.platform),
            directory=self.config.store_root,
            platform=self.platform,
        )
        args = build_install_args("create", record)

        if self.dry_run:
            logger.info(f"🧪 would exec {format_command(self.script_path, args)}")
            return None

        try:
            run_script(self.script_path, args)
        except Exception:
            logger.error(f"❌ failed to create cluster {record.name}")
            raise
        logger.info(f"✅ created cluster {record.name}")

        record_cluster(record, self.store_file)
        logger.info(f"📝 Recorded {record.name} in {self.store_file}")
        return record

    def destroy(self, name: str) -> Optional[ClusterRecord]:
        """Tear down ``name``. Returns the record acted upon, None on a dry run."""
        logger.info("🗑️ execute OpenShift install destroy")
        store = load_store(self.store_file)

        logger.info(f"📋 Current clusters on platform {self.platform}:")
        for existing in store.records(self.platform):
            logger.info(f"   • {existing.name}")

        record = find_record(store, self.platform, name)
        if record is None:
            logger.info(f"🔍 cluster not found: {name}")
            logger.info(f"trying to delete cluster {name} in default directory {self.config.store_root}")
            record = ClusterRecord(name=name, directory=self.config.store_root, platform=self.platform)

        args = build_install_args("delete", record)
        if self.dry_run:
            logger.info(f"🧪 would exec {format_command(self.script_path, args)}")
            return None

        try:
            run_script(self.script_path, args)
        except Exception:
            logger.error(f"❌ failed to destroy cluster {record.name}")
            raise
        logger.info(f"✅ destroyed cluster {record.name}")

        forget_cluster(record, self.store_file)
        return record


def list_clusters(config: Config, platform: Optional[str] = None) -> Dict[str, List[ClusterRecord]]:
    """Stored clusters, for one platform or all of them."""
    store = load_store(config.store_file)
    if platform:
        return {platform: store.records(validate_platform(platform))}
    return {p: list(records) for p, records in store.clusters.items()}
