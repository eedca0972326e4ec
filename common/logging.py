"""
로깅 설정

boss와 employee 프로세스가 같은 출력으로 로그를 남기므로 pid를 함께 기록합니다.
json_format=True면 ELK/Loki 등에서 수집 가능한 JSON 한 줄 포맷을 사용합니다.
"""

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

TEXT_FORMAT = '%(asctime)s - %(process)d - %(name)s - %(levelname)s - %(message)s'


class CustomJsonFormatter(JsonFormatter):
    """JSON 로그 포매터"""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = self.formatTime(record)
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['pid'] = record.process

        if 'message' not in log_record and record.getMessage():
            log_record['message'] = record.getMessage()


def setup_logging(
    level: str = "INFO",
    json_format: bool = False,
    log_file: str | None = None
) -> None:
    """
    로깅 설정

    Args:
        level: 로그 레벨 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: JSON 포맷 사용 여부
        log_file: 로그 파일 경로 (None이면 stdout만 사용)
    """
    if json_format:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True  # 기존 설정 덮어쓰기
    )

    # 외부 라이브러리 로그 레벨 조정
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('aiosqlite').setLevel(logging.WARNING)
