"""jobboss - 단일 노드 잡 디스패치 데몬"""

__version__ = "0.1.0"
