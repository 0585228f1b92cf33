import logging

import pytest

from ocautomator.registry import ClusterRecord
from ocautomator.runner import ExecError, build_install_args, format_command, run_script

from conftest import write_script


def messages(caplog):
    return [r.getMessage() for r in caplog.records if r.name == "ocautomator.runner"]


def test_build_install_args():
    record = ClusterRecord(name="demo-aws-abc12", directory="/store/OCClusterAutomator", platform="aws")
    assert build_install_args("delete", record) == [
        "-s", "/store/OCClusterAutomator",
        "-a", "delete",
        "-n", "demo-aws-abc12",
        "-p", "aws",
    ]


def test_build_install_args_rejects_unknown_action():
    record = ClusterRecord(name="n", directory="/d", platform="aws")
    with pytest.raises(ValueError):
        build_install_args("upgrade", record)


def test_format_command_quotes_arguments():
    assert format_command("/opt/run.sh", ["-s", "/my store"]) == "/opt/run.sh -s '/my store'"


def test_stdout_and_stderr_lines_are_tagged(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    script = write_script(tmp_path / "run.sh", "#!/bin/sh\necho hello \"$1\"\necho oops >&2\necho bye\n")

    run_script(str(script), ["world"])

    logged = messages(caplog)
    assert "Install Script StdOut: hello world" in logged
    assert "Install Script StdErr: oops" in logged
    assert logged.index("Install Script StdOut: hello world") < logged.index("Install Script StdOut: bye")


def test_nonzero_exit_raises_after_logging_output(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    script = write_script(tmp_path / "run.sh", "#!/bin/sh\necho 'install failed' >&2\nexit 3\n")

    with pytest.raises(ExecError) as excinfo:
        run_script(str(script), [])

    assert excinfo.value.returncode == 3
    assert excinfo.value.cmd == [str(script)]
    assert "Install Script StdErr: install failed" in messages(caplog)


def test_missing_executable_raises(tmp_path):
    with pytest.raises(ExecError) as excinfo:
        run_script(str(tmp_path / "nope.sh"), ["-a", "create"])

    assert excinfo.value.returncode is None
    assert isinstance(excinfo.value.__cause__, OSError)


def test_all_output_is_drained_before_returning(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    script = write_script(
        tmp_path / "run.sh",
        "#!/bin/sh\n"
        "i=0\n"
        "while [ $i -lt 2000 ]; do echo \"line $i\"; echo \"err $i\" >&2; i=$((i+1)); done\n",
    )

    run_script(str(script), [])

    logged = messages(caplog)
    assert sum(1 for m in logged if m.startswith("Install Script StdOut: line ")) == 2000
    assert sum(1 for m in logged if m.startswith("Install Script StdErr: err ")) == 2000


def test_undecodable_output_is_replaced_and_script_completes(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    marker = tmp_path / "finished"
    script = write_script(
        tmp_path / "run.sh",
        "#!/bin/sh\n"
        "printf 'progress \\377\\n'\n"
        "printf 'bad \\376 stderr\\n' >&2\n"
        "i=0\n"
        "while [ $i -lt 5000 ]; do echo \"line $i\"; i=$((i+1)); done\n"
        f"touch {marker}\n",
    )

    run_script(str(script), [])

    logged = messages(caplog)
    assert marker.exists()
    assert "Install Script StdOut: progress �" in logged
    assert "Install Script StdErr: bad � stderr" in logged
    assert sum(1 for m in logged if m.startswith("Install Script StdOut: line ")) == 5000


def test_failure_message_has_no_emoji(tmp_path):
    script = write_script(tmp_path / "run.sh", "#!/bin/sh\nexit 1\n")

    with pytest.raises(ExecError) as excinfo:
        run_script(str(script), [])

    assert str(excinfo.value).startswith("Command failed: ")
