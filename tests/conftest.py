"""Shared pytest fixtures."""

import pytest

from runcom_service.descriptor import ServiceDescriptor
from runcom_service.services.base import Program
from runcom_service.services.runcom import RunComService


class RecordingProgram(Program):
    """Program that records the callbacks made on it."""

    def __init__(self, start_error=None, stop_result=None):
        self.calls = []
        self.start_error = start_error
        self.stop_result = stop_result

    def start(self, service):
        self.calls.append("start")
        if self.start_error is not None:
            raise self.start_error

    def stop(self, service):
        self.calls.append("stop")
        return self.stop_result


@pytest.fixture
def script_dir(tmp_path):
    path = tmp_path / "rc.d"
    path.mkdir()
    return path


@pytest.fixture
def rc_conf(tmp_path):
    return tmp_path / "rc.conf.local"


@pytest.fixture
def program():
    return RecordingProgram()


@pytest.fixture
def make_service(program, script_dir, rc_conf):
    """Build a RunComService writing into the temporary directories."""

    def _make(name="mysvc", program=program, **kwargs):
        kwargs.setdefault("executable", "/usr/local/bin/mysvc")
        descriptor = ServiceDescriptor(name=name, **kwargs)
        return RunComService(
            program, descriptor, script_dir=script_dir, rc_conf_local=rc_conf
        )

    return _make
