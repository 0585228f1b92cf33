import os
import stat

import pytest

from ocautomator.config import Config

PREFIX = "demo"

FAKE_INSTALLER = """#!/bin/sh
echo "$@" >> "$INSTALL_LOG"
echo "running openshift-install $4 for $6"
echo "warning from installer" >&2
exit ${INSTALL_EXIT_CODE:-0}
"""


def write_script(path, body):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def env(tmp_path, monkeypatch):
    store_path = tmp_path / "store"
    values = {
        "APP_CLUSTERNAMEPREFIX": PREFIX,
        "APP_OCSTOREPATH": str(store_path),
        "APP_CLUSTERPULLSECRET": "pull-secret",
        "APP_SSHKEY": "ssh-rsa AAAA",
        "APP_PLATFORM": "aws",
        "INSTALL_LOG": str(tmp_path / "install.log"),
    }
    for key, value in values.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv("INSTALL_EXIT_CODE", raising=False)
    return values


@pytest.fixture
def config(env):
    return Config.from_env()


@pytest.fixture
def workspace(tmp_path, monkeypatch, env):
    """A working directory holding scripts/run-openshift-install.sh."""
    work = tmp_path / "work"
    write_script(work / "scripts" / "run-openshift-install.sh", FAKE_INSTALLER)
    monkeypatch.chdir(work)
    return work


@pytest.fixture
def install_calls(env):
    """Read back the argument lines the fake installer was called with."""
    def _calls():
        log = env["INSTALL_LOG"]
        if not os.path.exists(log):
            return []
        with open(log) as f:
            return [line.split() for line in f.read().splitlines()]
    return _calls
