"""
jobboss 진입점

Boss 데몬을 실행합니다.

사용법:
    python main.py                      # config/boss.yaml
    python main.py path/to/boss.yaml    # 다른 설정 파일
"""

import sys
from pathlib import Path

from boss.bootstrap import main

if __name__ == "__main__":
    args = sys.argv[1:]
    if len(args) > 1:
        print("Usage: python main.py [config_path]")
        sys.exit(1)

    sys.exit(main(Path(args[0]) if args else None))
