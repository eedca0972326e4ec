"""
Employee / 잡 타입 테스트

테스트 항목:
1. @job_type 데코레이터 등록 테스트
2. get_job_type() 테스트 (성공/실패)
3. jobs_path 모듈 로드 테스트
4. Employee 성공/실패 기록 테스트
5. RUNNING이 아닌 잡은 실행하지 않음
6. SIGHUP 수신 시 상태를 기록하지 않고 종료

실행: python -m pytest test/worker_test.py -v
"""

import asyncio
import json
import logging
import os
import signal

import pytest

import worker.base as worker_base
from boss.model import JobStatus
from worker.base import (
    BaseJob,
    job_type,
    get_job_type,
    get_registered_job_types,
    load_job_types,
    register_job_type,
)
from worker.employee import (
    Employee,
    EXIT_FAILED,
    EXIT_NOT_RUNNING,
    EXIT_OK,
    EXIT_TERMINATED,
)
from worker.exception import InvalidJobTypeError, JobLoadError, JobTypeNotFoundError
from worker.model import JobParams, JobResult

logger = logging.getLogger(__name__)


@pytest.fixture
def isolated_registry(monkeypatch, job_types):
    """테스트에서 등록한 잡 타입이 다른 테스트에 남지 않도록 복사본 사용"""
    monkeypatch.setattr(worker_base, "_registry", dict(worker_base._registry))
    return worker_base._registry


async def _running_job(store, path, job_type_name, params=None):
    await store.insert(path, job_type_name, json.dumps(params) if params is not None else None)
    assert await store.claim(path)


# ============================================================
# 잡 타입 레지스트리
# ============================================================

class TestJobTypeRegistry:
    """잡 타입 레지스트리 테스트"""

    def test_builtin_job_types_loaded(self, job_types):
        """worker/job 모듈이 로드되어 등록됨"""
        assert "sample" in job_types
        assert "math.is_prime" in job_types
        assert job_types == sorted(job_types)
        assert get_job_type("sample").__name__ == "SampleJob"

    def test_get_job_type_raises_on_unknown(self, job_types):
        with pytest.raises(JobTypeNotFoundError) as exc_info:
            get_job_type("no.such.type")
        assert exc_info.value.name == "no.such.type"

    def test_custom_job_type_registration(self, isolated_registry):
        @job_type("test.echo")
        class EchoJob(BaseJob):
            async def run(self, params: JobParams) -> JobResult:
                return JobResult(data=params.model_dump())

        assert get_job_type("test.echo") is EchoJob
        assert "test.echo" in get_registered_job_types()
        logger.info("Custom job type registration test passed")

    def test_non_job_class_rejected(self, isolated_registry):
        class NotAJob:
            pass

        with pytest.raises(InvalidJobTypeError):
            register_job_type("test.invalid", NotAJob)
        assert "test.invalid" not in get_registered_job_types()

    def test_load_job_types_from_directory(self, tmp_path, isolated_registry):
        (tmp_path / "b_job.py").write_text(
            "from worker.base import BaseJob, job_type\n"
            "from worker.model import JobResult\n"
            "\n"
            "@job_type('test.dir_b')\n"
            "class DirBJob(BaseJob):\n"
            "    async def run(self, params):\n"
            "        return JobResult()\n",
            encoding="utf-8",
        )
        (tmp_path / "_helper.py").write_text("raise RuntimeError('should be skipped')\n", encoding="utf-8")

        names = load_job_types(tmp_path)

        assert "test.dir_b" in names
        assert get_job_type("test.dir_b").__module__ == "jobboss_jobs.b_job"

    def test_broken_module_raises_load_error(self, tmp_path, isolated_registry):
        (tmp_path / "broken.py").write_text("import no_such_module_anywhere\n", encoding="utf-8")

        with pytest.raises(JobLoadError) as exc_info:
            load_job_types(tmp_path)
        assert "broken.py" in exc_info.value.message


# ============================================================
# Employee
# ============================================================

class TestEmployee:
    """Employee 실행 테스트"""

    @pytest.mark.asyncio
    async def test_employee_success(self, store, job_types):
        """성공 시 completed + 결과 JSON 저장"""
        await _running_job(store, "sample/ok", "sample", {"message": "hi"})

        code = await Employee(store).work("sample/ok")

        assert code == EXIT_OK
        job = await store.find_by_path("sample/ok")
        assert job.status == JobStatus.COMPLETED
        assert job.finished_at is not None
        result = json.loads(job.result)
        assert result["success"] is True
        assert result["data"] == {"received": "hi"}
        logger.info("Employee success test passed")

    @pytest.mark.asyncio
    async def test_prime_job(self, store, job_types):
        await _running_job(store, "prime/97", "math.is_prime", {"number": 97})

        assert await Employee(store).work("prime/97") == EXIT_OK

        job = await store.find_by_path("prime/97")
        assert json.loads(job.result)["data"] == {"number": 97, "is_prime": True}

    @pytest.mark.asyncio
    async def test_employee_failure(self, store, job_types):
        """잡이 예외를 던지면 failed + 에러 메시지 저장"""
        await _running_job(store, "sample/fail", "sample", {"message": "boom", "should_fail": True})

        code = await Employee(store).work("sample/fail")

        assert code == EXIT_FAILED
        job = await store.find_by_path("sample/fail")
        assert job.status == JobStatus.FAILED
        assert "boom" in job.error_message
        logger.info("Employee failure test passed")

    @pytest.mark.asyncio
    async def test_unknown_job_type_fails(self, store, job_types):
        await _running_job(store, "ghost/1", "ghost")

        assert await Employee(store).work("ghost/1") == EXIT_FAILED

        job = await store.find_by_path("ghost/1")
        assert job.status == JobStatus.FAILED
        assert "ghost" in job.error_message

    @pytest.mark.asyncio
    async def test_invalid_params_fail(self, store, job_types):
        await _running_job(store, "prime/bad", "math.is_prime", {"number": "not-a-number"})

        assert await Employee(store).work("prime/bad") == EXIT_FAILED

        job = await store.find_by_path("prime/bad")
        assert job.status == JobStatus.FAILED
        assert job.error_message.startswith("Invalid params")

    @pytest.mark.asyncio
    async def test_not_running_job_is_skipped(self, store, job_types):
        """PENDING/취소된 잡은 실행하지 않고 상태도 바꾸지 않음"""
        await store.insert("sample/pending", "sample", None)

        assert await Employee(store).work("sample/pending") == EXIT_NOT_RUNNING
        assert await Employee(store).work("sample/missing") == EXIT_NOT_RUNNING
        assert (await store.find_by_path("sample/pending")).status == JobStatus.PENDING

    @pytest.mark.asyncio
    async def test_cancelled_while_running_is_not_completed(self, store, job_types, isolated_registry):
        """실행 중 취소된 잡은 완료로 덮어쓰지 않음"""
        @job_type("test.cancel_midway")
        class CancelMidwayJob(BaseJob):
            async def run(self, params):
                await store.cancel("test/cancel")
                return JobResult()

        await _running_job(store, "test/cancel", "test.cancel_midway")

        assert await Employee(store).work("test/cancel") == EXIT_OK
        assert (await store.find_by_path("test/cancel")).status == JobStatus.CANCELLED

    @pytest.mark.asyncio
    async def test_sighup_stops_job_without_recording(self, store, job_types, isolated_registry):
        """SIGHUP 수신 -> 잡 취소, 상태는 running 유지 (boss가 기록)"""
        started = asyncio.Event()

        @job_type("test.block")
        class BlockJob(BaseJob):
            async def run(self, params):
                started.set()
                await asyncio.sleep(30)
                return JobResult()

        await _running_job(store, "test/block", "test.block")

        task = asyncio.create_task(Employee(store).work("test/block"))
        await asyncio.wait_for(started.wait(), timeout=5)
        os.kill(os.getpid(), signal.SIGHUP)

        assert await asyncio.wait_for(task, timeout=5) == EXIT_TERMINATED
        job = await store.find_by_path("test/block")
        assert job.status == JobStatus.RUNNING
        assert job.finished_at is None
        logger.info("Employee SIGHUP test passed")
