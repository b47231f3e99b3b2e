from __future__ import annotations

import asyncio
import os
import sys
from datetime import datetime
from typing import Optional

from dooray_mcp.config import create_client_from_env
from dooray_mcp.errors import DoorayClientError
from dooray_mcp.models import TaskUpdateInput
from dooray_mcp.tools.system import system_ping
from dooray_mcp.tools.tasks import get_task, update_task
from dooray_mcp.tools.wiki import get_wiki_list, get_wiki_page_list


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    return val if val else default


def _print_step(title: str) -> None:
    print(f"\n== {title}")


def _fail(msg: str) -> int:
    print(f"FAILED: {msg}")
    return 1


async def run_smoke_test() -> int:
    # --- Config ---
    try:
        client = create_client_from_env()
    except ValueError as exc:
        return _fail(str(exc))

    cfg_project_id = _env("TEST_PROJECT_ID")
    cfg_task_id = _env("TEST_TASK_ID")
    touch_task = _env("SMOKE_TEST_TOUCH_TASK", "0") == "1"

    print("Config:")
    print(f"  base_url: {client.base_url}")
    print(f"  project_id: {cfg_project_id}")
    print(f"  task_id: {cfg_task_id}")
    print(f"  touch_task: {touch_task}")

    async with client:
        # --- Ping ---
        _print_step("Ping")
        try:
            ping = await system_ping(client)
        except DoorayClientError as exc:
            return _fail(f"Ping failed: {exc}")
        print(f"Authenticated as {ping['member_name']} ({ping['latency_ms']} ms)")

        # --- Wikis ---
        _print_step("List wikis")
        wikis = (await get_wiki_list(client, size=5)).get("items", [])
        print(f"Found {len(wikis)} wiki(s) on first page")
        if wikis:
            wiki_id = str(wikis[0].get("id"))
            pages = await get_wiki_page_list(client, wiki_id)
            print(f"Wiki {wiki_id}: {len(pages or [])} root page(s)")

        # --- Task ---
        _print_step("Task")
        if not (cfg_project_id and cfg_task_id):
            print("Skipped (set TEST_PROJECT_ID and TEST_TASK_ID).")
        else:
            task = await get_task(client, cfg_project_id, cfg_task_id)
            print(f"Task {cfg_task_id}: {task.get('subject')!r}")
            if touch_task:
                subject = f"{task.get('subject')} [smoke {datetime.now():%H:%M:%S}]"
                updated = await update_task(
                    client,
                    TaskUpdateInput(
                        project_id=cfg_project_id,
                        task_id=cfg_task_id,
                        subject=subject,
                    ),
                )
                if updated.get("subject") != subject:
                    return _fail("Verification failed: subject was not updated")
                print("Subject update verified")

    print("\nPASSED smoke test.")
    return 0


def main() -> None:
    exit_code = asyncio.run(run_smoke_test())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
