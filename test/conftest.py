"""
공통 테스트 fixture

- 테스트마다 임시 SQLite 파일을 사용합니다.
- FakeLauncher / FakeSupervisor로 실제 프로세스 없이 스케줄러를 검증합니다.
"""

import logging
import sys
from pathlib import Path

import pytest
import pytest_asyncio
import yaml

# 프로젝트 루트 경로 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from boss.model import BossConfig, Job
from boss.queuer import Queuer
from boss.store import JobStore
from database import get_db
from database.registry import DatabaseRegistry
from worker.base import load_job_types

JOBS_DIR = PROJECT_ROOT / "worker" / "job"
TEST_ENVIRONMENT = "test"

logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


class FakeSupervisor:
    """프로세스 대신 alive pid 집합으로 동작하는 supervisor"""

    def __init__(self):
        self.alive: set[int] = set()
        self.terminated: list[int] = []

    def terminate(self, pid: int | None) -> bool:
        self.terminated.append(pid)
        was_alive = pid in self.alive
        self.alive.discard(pid)
        return was_alive

    def is_alive(self, pid: int | None) -> bool:
        return pid in self.alive


class FakeLauncher:
    """claim + 가짜 pid 기록만 하는 launcher"""

    def __init__(self, store: JobStore, supervisor: FakeSupervisor, first_pid: int = 40000):
        self._store = store
        self._supervisor = supervisor
        self._next_pid = first_pid
        self.dispatched: list[str] = []
        self.pids: dict[str, int] = {}

    async def dispatch(self, job: Job) -> int | None:
        if not await self._store.claim(job.path):
            return None
        pid = self._next_pid
        self._next_pid += 1
        await self._store.set_employee_pid(job.path, pid)
        self._supervisor.alive.add(pid)
        self.dispatched.append(job.path)
        self.pids[job.path] = pid
        return pid


@pytest.fixture
def db_file(tmp_path) -> Path:
    return tmp_path / "jobboss_test.db"


@pytest.fixture
def database_yaml(tmp_path, db_file) -> Path:
    """임시 DB를 가리키는 database.yaml"""
    path = tmp_path / "database.yaml"
    path.write_text(yaml.safe_dump({
        TEST_ENVIRONMENT: {
            "type": "sqlite",
            "path": str(db_file),
            "pool": {"pool_size": 3, "pool_timeout": 5.0},
        }
    }), encoding="utf-8")
    return path


@pytest_asyncio.fixture
async def database(db_file):
    """테스트용 Database 인스턴스 (DatabaseRegistry 사용)"""
    DatabaseRegistry.clear()
    await DatabaseRegistry.init_from_config(
        {TEST_ENVIRONMENT: {"type": "sqlite", "path": str(db_file), "pool": {"pool_size": 3, "pool_timeout": 5.0}}},
        [TEST_ENVIRONMENT],
    )
    yield get_db(TEST_ENVIRONMENT)
    await DatabaseRegistry.close_all()


@pytest_asyncio.fixture
async def store(database) -> JobStore:
    """jobs 테이블이 준비된 JobStore"""
    job_store = JobStore()
    await job_store.migrate()
    return job_store


@pytest.fixture
def job_types() -> list[str]:
    return load_job_types(JOBS_DIR)


@pytest_asyncio.fixture
async def queuer(store, job_types) -> Queuer:
    return Queuer(store)


@pytest.fixture
def supervisor() -> FakeSupervisor:
    return FakeSupervisor()


@pytest.fixture
def launcher(store, supervisor) -> FakeLauncher:
    return FakeLauncher(store, supervisor)


@pytest.fixture
def boss_config(tmp_path, database_yaml) -> BossConfig:
    return BossConfig(
        working_dir=tmp_path,
        sleep_interval=0.05,
        employee_limit=2,
        database_yaml_path=database_yaml,
        jobs_path=JOBS_DIR,
        environment=TEST_ENVIRONMENT,
    )
