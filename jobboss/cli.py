"""jobboss CLI"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from pydantic import ValidationError

from boss import bootstrap
from boss.exception import BossError, StartupError
from boss.model import BossConfig, JobStatus
from boss.queuer import Queuer
from boss.store import JobStore
from database.registry import DatabaseRegistry
from jobboss import __version__
from worker.exception import WorkerError


def _overrides(args: argparse.Namespace) -> dict:
    return {
        "environment": getattr(args, "environment", None),
        "employee_limit": getattr(args, "employee_limit", None),
        "sleep_interval": getattr(args, "sleep_interval", None),
    }


async def _with_store(config: BossConfig, action, load_job_types: bool = False):
    """DB 연결 후 action(Queuer) 실행"""
    await bootstrap.connect(config)
    try:
        if load_job_types:
            bootstrap.require_job_types(config)
        store = JobStore()
        await bootstrap.migrate(store)
        return await action(Queuer(store))
    finally:
        await DatabaseRegistry.close_all()


def _print_job(job) -> None:
    pid = job.employee_pid if job.employee_pid is not None else "-"
    print(f"{job.path}\t{job.job_type}\t{job.status.value}\tpid={pid}\tredo={job.redo_count}")


def cmd_start(args: argparse.Namespace) -> int:
    return bootstrap.main(args.config, _overrides(args))


def cmd_queue(args: argparse.Namespace, config: BossConfig) -> int:
    params = json.loads(args.params) if args.params else {}
    job = asyncio.run(_with_store(
        config, lambda q: q.enqueue(args.job_type, params, path=args.path), load_job_types=True
    ))
    _print_job(job)
    return 0


def cmd_cancel(args: argparse.Namespace, config: BossConfig) -> int:
    job = asyncio.run(_with_store(config, lambda q: q.cancel(args.path)))
    _print_job(job)
    return 0


def cmd_redo(args: argparse.Namespace, config: BossConfig) -> int:
    job = asyncio.run(_with_store(config, lambda q: q.redo(args.path)))
    _print_job(job)
    return 0


def cmd_list(args: argparse.Namespace, config: BossConfig) -> int:
    status = JobStatus(args.status) if args.status else None
    for job in asyncio.run(_with_store(config, lambda q: q.list_jobs(status))):
        _print_job(job)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jobboss",
        description="jobboss - 잡을 employee 프로세스로 디스패치하는 스케줄러"
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", type=Path, default=None, help="boss.yaml path (default: config/boss.yaml)")
    parser.add_argument("-e", "--environment", default=None, help="database.yaml environment block")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    start_parser = subparsers.add_parser("start", help="Run the boss daemon")
    start_parser.add_argument("--employee-limit", type=int, default=None)
    start_parser.add_argument("--sleep-interval", type=float, default=None)

    queue_parser = subparsers.add_parser("queue", help="Queue a job")
    queue_parser.add_argument("job_type", help="Registered job type name")
    queue_parser.add_argument("-p", "--params", default=None, help="Job params as JSON object")
    queue_parser.add_argument("--path", default=None, help="Job path (default: <job_type>/<uuid>)")

    cancel_parser = subparsers.add_parser("cancel", help="Cancel a pending or running job")
    cancel_parser.add_argument("path")

    redo_parser = subparsers.add_parser("redo", help="Requeue a failed or cancelled job")
    redo_parser.add_argument("path")

    list_parser = subparsers.add_parser("list", help="List jobs")
    list_parser.add_argument("-s", "--status", choices=[s.value for s in JobStatus], default=None)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "start":
        return cmd_start(args)

    commands = {"queue": cmd_queue, "cancel": cmd_cancel, "redo": cmd_redo, "list": cmd_list}
    if args.command not in commands:
        parser.print_help()
        return 1

    config_path = args.config
    if config_path is None and bootstrap.DEFAULT_CONFIG_PATH.is_file():
        config_path = bootstrap.DEFAULT_CONFIG_PATH

    try:
        config = bootstrap.load_config(config_path, _overrides(args))
        return commands[args.command](args, config)
    except StartupError as e:
        print(f"Error: {e.message}")
        return 1
    except (BossError, WorkerError) as e:
        print(f"Error: {e}")
        return 1
    except (json.JSONDecodeError, ValidationError) as e:
        print(f"Error: invalid params: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
