"""Tests for the rc.d service controller."""

import os
import stat
import sys
from unittest.mock import patch

import pytest

from conftest import RecordingProgram
from runcom_service.errors import (
    AlreadyExistsError,
    CommandError,
    ConfigEditError,
    NotInstalledError,
    ServiceIOError,
    TemplateRenderError,
    UnsupportedConfigurationError,
)
from runcom_service.services.rcconf import read_startup_list
from runcom_service.services.runcom import SYS_VERSION, RunComService
from runcom_service.services.status import Status
from runcom_service.services.syslog import ConsoleLogger, SysLogger

RUNCOM = "runcom_service.services.runcom"


class TestScriptPath:
    def test_joins_script_dir_and_name(self, make_service, script_dir):
        assert make_service().script_path() == script_dir / "mysvc"

    def test_user_services_are_unsupported(self, make_service):
        service = make_service(options={"UserService": True})

        with pytest.raises(UnsupportedConfigurationError, match=SYS_VERSION):
            service.script_path()


class TestDescription:
    def test_str_prefers_display_name(self, make_service):
        assert str(make_service(display_name="My Service")) == "My Service"
        assert str(make_service()) == "mysvc"

    def test_platform(self, make_service):
        assert make_service().platform() == "openbsd"

    def test_exec_path_override_is_made_absolute(self, make_service):
        service = make_service(executable="bin/app")

        assert service.exec_path() == os.path.abspath("bin/app")

    def test_exec_path_falls_back_to_interpreter(self, make_service):
        service = make_service(executable=None)

        with patch.object(sys, "argv", [""]):
            assert service.exec_path() == sys.executable

    def test_exec_path_uses_running_program(self, make_service, tmp_path):
        prog = tmp_path / "app"
        prog.write_text("#!/bin/sh\n")
        prog.chmod(0o755)
        service = make_service(executable=None)

        with patch.object(sys, "argv", [str(prog), "--install"]):
            assert service.exec_path() == str(prog)


class TestInstall:
    def test_writes_script_and_registers(self, make_service, script_dir, rc_conf):
        service = make_service(
            arguments=["-s", "run"], options={"SvcInfo": "mysvc 1.2"}
        )

        service.install()

        script = script_dir / "mysvc"
        text = script.read_text()
        assert "daemon=/usr/local/bin/mysvc\n" in text
        assert "daemon_flags='-s run'\n" in text
        assert "# $OpenBSD: mysvc 1.2\n" in text
        assert stat.S_IMODE(script.stat().st_mode) == 0o755
        assert rc_conf.read_text() == "pkg_scripts=mysvc\n"

    def test_svc_info_defaults_to_description(self, make_service, script_dir):
        make_service(display_name="My Service").install()

        assert "# $OpenBSD: My Service\n" in (script_dir / "mysvc").read_text()

    def test_custom_template(self, make_service, script_dir):
        service = make_service(options={"RunComScript": "#!/bin/sh\n{path}\n"})

        service.install()

        assert (script_dir / "mysvc").read_text() == "#!/bin/sh\n/usr/local/bin/mysvc\n"

    def test_second_install_fails_and_keeps_list(self, make_service, rc_conf):
        service = make_service()
        service.install()
        before = rc_conf.read_text()

        with pytest.raises(AlreadyExistsError) as exc_info:
            service.install()

        assert str(exc_info.value).startswith(f"installing {SYS_VERSION} mysvc service: ")
        assert rc_conf.read_text() == before

    def test_existing_script_is_not_overwritten(self, make_service, script_dir, rc_conf):
        (script_dir / "mysvc").write_text("# edited by hand\n")

        with pytest.raises(AlreadyExistsError):
            make_service().install()

        assert (script_dir / "mysvc").read_text() == "# edited by hand\n"
        assert not rc_conf.exists()

    def test_user_service(self, make_service, script_dir, rc_conf):
        with pytest.raises(UnsupportedConfigurationError):
            make_service(options={"UserService": True}).install()

        assert list(script_dir.iterdir()) == []
        assert not rc_conf.exists()

    def test_malformed_template_writes_nothing(self, make_service, script_dir, rc_conf):
        service = make_service(options={"RunComScript": "{nope}"})

        with pytest.raises(TemplateRenderError, match="installing"):
            service.install()

        assert list(script_dir.iterdir()) == []
        assert not rc_conf.exists()

    def test_missing_script_dir(self, program, tmp_path, rc_conf):
        from runcom_service.descriptor import ServiceDescriptor

        service = RunComService(
            program,
            ServiceDescriptor(name="mysvc", executable="/bin/app"),
            script_dir=tmp_path / "missing",
            rc_conf_local=rc_conf,
        )

        with pytest.raises(ServiceIOError, match="creating rc.d script file"):
            service.install()

    def test_registration_failure_leaves_script(self, program, script_dir, tmp_path):
        from runcom_service.descriptor import ServiceDescriptor

        service = RunComService(
            program,
            ServiceDescriptor(name="mysvc", executable="/bin/app"),
            script_dir=script_dir,
            rc_conf_local=tmp_path,
        )

        with pytest.raises(ConfigEditError, match="installing"):
            service.install()

        assert (script_dir / "mysvc").exists()


class TestUninstall:
    def test_removes_script_but_keeps_registration(self, make_service, script_dir, rc_conf):
        service = make_service()
        service.install()

        service.uninstall()

        assert not (script_dir / "mysvc").exists()
        assert read_startup_list(rc_conf) == ["mysvc"]

    def test_reinstall_after_uninstall(self, make_service, rc_conf):
        service = make_service()
        service.install()
        service.uninstall()

        service.install()

        assert read_startup_list(rc_conf) == ["mysvc"]

    def test_missing_script(self, make_service):
        with pytest.raises(ServiceIOError) as exc_info:
            make_service().uninstall()

        assert f"uninstalling {SYS_VERSION} mysvc service" in str(exc_info.value)


class TestControl:
    def test_start_and_stop_run_the_script(self, make_service, script_dir):
        service = make_service()

        with patch(f"{RUNCOM}.check_command", return_value="") as mock_check:
            service.start()
            service.stop()

        script = str(script_dir / "mysvc")
        assert [c.args for c in mock_check.call_args_list] == [
            (script, ["start"]),
            (script, ["stop"]),
        ]

    def test_start_failure_is_annotated(self, make_service):
        error = CommandError("command exited with status 1", returncode=1)

        with patch(f"{RUNCOM}.check_command", side_effect=error):
            with pytest.raises(CommandError) as exc_info:
                make_service().start()

        assert str(exc_info.value) == (
            f"starting {SYS_VERSION} mysvc service: command exited with status 1"
        )
        assert exc_info.value.returncode == 1

    def test_restart_stops_then_starts(self, make_service):
        with patch(f"{RUNCOM}.check_command", return_value="") as mock_check:
            make_service().restart()

        assert [c.args[1] for c in mock_check.call_args_list] == [["stop"], ["start"]]

    def test_restart_does_not_start_when_stop_fails(self, make_service):
        error = CommandError("boom")

        with patch(f"{RUNCOM}.check_command", side_effect=error) as mock_check:
            with pytest.raises(CommandError) as exc_info:
                make_service().restart()

        assert exc_info.value is error
        assert str(error) == f"stopping {SYS_VERSION} mysvc service: boom"
        assert mock_check.call_count == 1

    def test_script_runs_for_real(self, make_service, script_dir):
        service = make_service(
            options={"RunComScript": '#!/bin/sh\n[ "$1" = start ]\n'}
        )
        service.install()

        service.start()
        with pytest.raises(CommandError, match="stopping"):
            service.stop()


class TestStatus:
    @pytest.mark.parametrize(
        "rc, output, expected",
        [(0, "mysvc(ok)\n", Status.RUNNING), (1, "mysvc(failed)\n", Status.STOPPED)],
    )
    def test_translates_check_output(self, make_service, script_dir, rc, output, expected):
        with patch(f"{RUNCOM}.run_command", return_value=(rc, output)) as mock_run:
            assert make_service().status() is expected

        mock_run.assert_called_once_with(str(script_dir / "mysvc"), ["check"])

    def test_unrecognized_output(self, make_service):
        with patch(f"{RUNCOM}.run_command", return_value=(0, "")):
            with pytest.raises(NotInstalledError, match="getting status of"):
                make_service().status()

    def test_missing_script(self, make_service):
        with pytest.raises(CommandError, match="getting status of"):
            make_service().status()


class TestRun:
    def test_blocks_until_wait_returns(self, make_service):
        program = RecordingProgram(stop_result=0)

        def wait():
            assert program.calls == ["start"]
            program.calls.append("wait")

        service = make_service(program=program, options={"RunWait": wait})

        assert service.run() == 0
        assert program.calls == ["start", "wait", "stop"]

    def test_start_failure_skips_wait_and_stop(self, make_service):
        error = RuntimeError("cannot start")
        program = RecordingProgram(start_error=error)
        waited = []
        service = make_service(program=program, options={"RunWait": lambda: waited.append(1)})

        with pytest.raises(RuntimeError) as exc_info:
            service.run()

        assert exc_info.value is error
        assert waited == []
        assert program.calls == ["start"]

    def test_default_wait(self, make_service):
        program = RecordingProgram()
        service = make_service(program=program)

        with patch(f"{RUNCOM}.run_wait") as mock_wait:
            service.run()

        mock_wait.assert_called_once_with()
        assert program.calls == ["start", "stop"]


class TestLoggers:
    def test_interactive_gets_console_logger(self, make_service):
        with patch(f"{RUNCOM}.os.getppid", return_value=1234):
            assert isinstance(make_service().logger(), ConsoleLogger)

    def test_started_by_init_gets_system_logger(self, make_service):
        with patch(f"{RUNCOM}.os.getppid", return_value=1):
            log = make_service().logger()

        assert type(log) is SysLogger
        assert log.name == "mysvc"
