"""CLI 入口模块 -- python -m taskboard.core <command>

支持的命令：
  init-db          在配置路径创建数据库 schema
  events [entity]  按追加顺序打印事件日志，可按聚合类型筛选
"""

import asyncio
import json
import sys

from .config import get_db_path


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m taskboard.core <command>")
        print("命令:")
        print("  init-db          创建数据库 schema")
        print("  events [entity]  打印事件日志")
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "events":
        entity_name = sys.argv[2] if len(sys.argv) > 2 else None
        asyncio.run(print_events(entity_name))
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db, events")
        sys.exit(1)


async def init_database() -> None:
    """创建 schema（已存在时不做任何改动）"""
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    await store_group.close()
    print("初始化完成")


async def print_events(entity_name: str | None = None) -> None:
    """每行输出一条事件（JSON）"""
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())

    try:
        async with store_group.read_scope("cli.events"):
            events = await store_group.event_store.list_events(entity_name)
        for event in events:
            print(json.dumps(event.model_dump(mode="json"), ensure_ascii=False))
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
