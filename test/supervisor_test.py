"""
ProcessSupervisor 테스트 (실제 프로세스 사용)

실행: python -m pytest test/supervisor_test.py -v
"""

import signal
import subprocess
import sys

import pytest

from boss.supervisor import TERMINATE_SIGNAL, ProcessSupervisor


@pytest.fixture
def sleeper():
    proc = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    yield proc
    if proc.poll() is None:
        proc.kill()
        proc.wait()


class TestProcessSupervisor:
    """종료/생존 확인 테스트"""

    def test_terminate_live_process(self, sleeper):
        supervisor = ProcessSupervisor()

        assert supervisor.is_alive(sleeper.pid) is True
        assert supervisor.terminate(sleeper.pid) is True

        assert sleeper.wait(timeout=5) == -TERMINATE_SIGNAL
        assert supervisor.is_alive(sleeper.pid) is False

    def test_terminate_exited_process(self, sleeper):
        """이미 종료된 프로세스는 에러 없이 False"""
        sleeper.kill()
        sleeper.wait()
        supervisor = ProcessSupervisor()

        assert supervisor.is_alive(sleeper.pid) is False
        assert supervisor.terminate(sleeper.pid) is False

    @pytest.mark.parametrize("pid", [None, 0, -1])
    def test_invalid_pid_never_signalled(self, pid, monkeypatch):
        sent = []
        monkeypatch.setattr("os.kill", lambda *args: sent.append(args))
        supervisor = ProcessSupervisor()

        assert supervisor.terminate(pid) is False
        assert supervisor.is_alive(pid) is False
        assert sent == []

    def test_terminate_signal_is_trappable(self):
        """SIGHUP은 employee가 트랩하여 스스로 정리할 수 있음"""
        proc = subprocess.Popen(
            [
                sys.executable, "-c",
                "import signal, sys, time\n"
                "signal.signal(signal.SIGHUP, lambda *a: sys.exit(7))\n"
                "print('ready', flush=True)\n"
                "time.sleep(30)\n",
            ],
            stdout=subprocess.PIPE,
            text=True,
        )
        try:
            assert proc.stdout.readline().strip() == "ready"
            assert ProcessSupervisor().terminate(proc.pid) is True
            assert proc.wait(timeout=5) == 7
        finally:
            if proc.poll() is None:
                proc.kill()
                proc.wait()
            proc.stdout.close()

    def test_default_signal(self):
        assert TERMINATE_SIGNAL == signal.SIGHUP
