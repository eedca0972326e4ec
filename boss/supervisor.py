"""
ProcessSupervisor: employee 프로세스 시그널 처리

terminate는 employee가 트랩할 수 있는 SIGHUP을 보냅니다 (SIGKILL 아님).
이미 종료된 프로세스는 성공으로 취급합니다.
"""

import logging
import os
import signal

logger = logging.getLogger(__name__)

TERMINATE_SIGNAL = signal.SIGHUP


class ProcessSupervisor:
    """OS 프로세스 종료/생존 확인"""

    def __init__(self, terminate_signal: int = TERMINATE_SIGNAL):
        self._terminate_signal = terminate_signal

    def terminate(self, pid: int | None) -> bool:
        """
        프로세스에 종료 시그널 전송

        Returns:
            True: 시그널 전송됨
            False: 프로세스가 없음 (성공으로 취급)
        """
        if not _valid_pid(pid):
            logger.warning(f"Refusing to signal invalid pid: {pid!r}")
            return False
        try:
            os.kill(pid, self._terminate_signal)
        except ProcessLookupError:
            logger.debug(f"Employee already gone: pid={pid}")
            return False
        logger.info(f"Sent {signal.Signals(self._terminate_signal).name} to employee: pid={pid}")
        return True

    def is_alive(self, pid: int | None) -> bool:
        """시그널 0으로 프로세스 존재 여부만 확인"""
        if not _valid_pid(pid):
            return False
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return False
        except PermissionError:
            # 다른 사용자 소유지만 존재함
            return True
        return True


def _valid_pid(pid: int | None) -> bool:
    # 0, 음수 pid는 프로세스 그룹 전체를 가리킴
    return isinstance(pid, int) and pid > 0
