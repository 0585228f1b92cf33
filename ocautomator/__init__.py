"""OC Cluster Automator - create and destroy OpenShift clusters via the installer script."""

__version__ = "0.1.0"
