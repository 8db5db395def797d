"""CLI 入口模块 -- python -m voicedesk <command> [--log-level LEVEL] [--log-format dev|json]

支持的命令：
  serve  启动 echo gateway（uvicorn）
  chat   文本模式会话（连接 VOICEDESK_API_BASE_URL）
"""

import asyncio
import contextlib
import os
import sys

from .core.config import get_gateway_host, get_gateway_port

CHAT_HELP = "命令: /call 开始通话  /end 结束通话  /mic 切换麦克风  /approve 批准任务  /discard 丢弃任务  /quit 退出"

LOG_OPTIONS = {"--log-level": "level", "--log-format": "log_format"}


def parse_log_options(args: list[str]) -> dict[str, str]:
    """解析 --log-level / --log-format（支持 --opt value 与 --opt=value）

    Raises:
        ValueError: 未知参数或缺少取值
    """
    options: dict[str, str] = {}
    remaining = list(args)
    while remaining:
        arg = remaining.pop(0)
        name, sep, value = arg.partition("=")
        if name not in LOG_OPTIONS:
            raise ValueError(f"未知参数: {arg}")
        if not sep:
            if not remaining:
                raise ValueError(f"{name} 缺少取值")
            value = remaining.pop(0)
        options[LOG_OPTIONS[name]] = value
    return options


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m voicedesk <command> [--log-level LEVEL] [--log-format dev|json]")
        print("命令:")
        print("  serve  启动 echo gateway")
        print("  chat   文本模式会话")
        sys.exit(1)

    command = sys.argv[1]
    try:
        log_options = parse_log_options(sys.argv[2:])
    except ValueError as e:
        print(e)
        sys.exit(1)

    if command == "serve":
        serve(**log_options)
    elif command == "chat":
        with contextlib.suppress(KeyboardInterrupt):
            asyncio.run(run_chat(**log_options))
    else:
        print(f"未知命令: {command}")
        print("可用命令: serve, chat")
        sys.exit(1)


def serve(log_format: str | None = None, level: str | None = None) -> None:
    """启动 echo gateway

    uvicorn 以 factory 方式调用 create_app，命令行日志选项经环境变量传给其中的 setup_logging。
    """
    import uvicorn

    if log_format:
        os.environ["VOICEDESK_LOG_FORMAT"] = log_format
    if level:
        os.environ["VOICEDESK_LOG_LEVEL"] = level

    uvicorn.run(
        "voicedesk.gateway.main:create_app",
        factory=True,
        host=get_gateway_host(),
        port=get_gateway_port(),
        log_config=None,
    )


async def run_chat(log_format: str | None = None, level: str | None = None) -> None:
    """文本模式会话 REPL"""
    from .core.models import SessionEventType
    from .logging_config import setup_logging
    from .provider import load_session_config
    from .session import SessionHub, build_controller, negotiate_capabilities

    # 日志写 stderr，默认级别 WARNING
    setup_logging(log_format=log_format, level=level, default_level="WARNING")
    config = load_session_config()
    hub = SessionHub()
    controller = build_controller(config, negotiate_capabilities(), hub=hub)
    events = hub.subscribe()

    async def print_messages() -> None:
        while True:
            event = await events.get()
            if event.type == SessionEventType.MESSAGE_ADDED:
                message = event.payload["message"]
                print(f"[{message['role']}] {message['content']}")

    printer = asyncio.create_task(print_messages())
    print(f"后端地址: {config.api_base_url}")
    print(CHAT_HELP)

    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            command = line.strip()
            if command == "/quit":
                break
            elif command == "/call":
                controller.start_call()
            elif command == "/end":
                controller.end_call()
            elif command == "/mic":
                controller.toggle_listening()
            elif command == "/approve":
                await controller.approve_proposals()
            elif command == "/discard":
                controller.discard_proposals()
            else:
                await controller.submit_text(line)
            # 让订阅者先打印本轮消息
            await asyncio.sleep(0)
    finally:
        await controller.close()
        hub.unsubscribe(events)
        printer.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await printer


if __name__ == "__main__":
    main()
