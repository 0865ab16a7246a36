from __future__ import annotations

import argparse
import asyncio
import logging
import logging.handlers
import sys
from pathlib import Path

from slack_templates import commands
from slack_templates.notify import ConsoleNotifier, Notifier
from slack_templates.slack.client import EnvTokenProvider, SlackSession, StaticTokenProvider
from slack_templates.slack.variables import VARIABLES_HELP
from slack_templates.storage.store import TemplateStore


def _setup_logging(level: str = "INFO", log_dir: str | None = "logs") -> None:
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    root = logging.getLogger()
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # Console handler: warnings only, notices already cover the happy path
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(logging.WARNING)
    console.setFormatter(logging.Formatter(log_format))
    root.addHandler(console)

    if not log_dir:
        return

    # Rotating file handler, one file per day, keep 7 days
    log_path = Path(log_dir).expanduser()
    log_path.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.TimedRotatingFileHandler(
        log_path / "slack-templates.log",
        when="midnight",
        backupCount=7,
        encoding="utf-8",
    )
    file_handler.setFormatter(logging.Formatter(log_format))
    root.addHandler(file_handler)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="slack-templates",
        description="Compose, store and send templated Slack messages.",
        epilog=VARIABLES_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--config", default="config.yaml", help="Config file (default: config.yaml)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List stored templates")
    sub.add_parser("channels", help="List channels visible to the token")

    create = sub.add_parser("create", help="Create a template")
    create.add_argument("name")
    create.add_argument("--content", required=True)
    create.add_argument("--channel", required=True, help="Channel ID")
    create.add_argument("--thread", default=None, help="Thread timestamp or permalink id (p...)")

    edit = sub.add_parser("edit", help="Replace a stored template")
    edit.add_argument("original_name")
    edit.add_argument("--name", default=None, help="New name (default: keep)")
    edit.add_argument("--content", default=None)
    edit.add_argument("--channel", default=None, help="Channel ID")
    edit.add_argument("--thread", default=None)
    edit.add_argument("--clear-thread", action="store_true", help="Post to the channel, not a thread")

    delete = sub.add_parser("delete", help="Delete a template")
    delete.add_argument("name")

    send = sub.add_parser("send", help="Send a stored template")
    send.add_argument("name")

    imp = sub.add_parser("import", help="Import templates from a JSON file")
    imp.add_argument("path", nargs="?", default=None)
    imp.add_argument("--overwrite", action="store_true", help="Imported templates replace same-named ones")

    exp = sub.add_parser("export", help="Export templates to a JSON file")
    exp.add_argument("path", nargs="?", default=None)
    exp.add_argument("--overwrite", action="store_true", help="Replace the file if it exists")

    return parser


async def _edit(args, store: TemplateStore, session: SlackSession, notifier: Notifier) -> commands.CommandResult:
    found = await commands.get_template(store, notifier, args.original_name)
    if not found.ok:
        return found
    current = found.value
    thread_ts = None if args.clear_thread else (args.thread or current.thread_ts)
    return await commands.update_template(
        store, session, notifier, args.original_name,
        name=args.name or current.name,
        content=args.content or current.content,
        channel_id=args.channel or current.channel_id,
        thread_ts=thread_ts,
    )


async def _run(args, config: dict) -> int:
    from slack_templates.config import slack_token

    store = TemplateStore(config["storage"]["path"])
    token = slack_token(config)
    # Unresolved config token: read SLACK_TOKEN at call time instead
    session = SlackSession(StaticTokenProvider(token) if token else EnvTokenProvider())
    notifier = ConsoleNotifier()
    export_path = args.path if getattr(args, "path", None) else config["export"]["path"]

    if args.command == "list":
        result = await commands.list_templates(store, notifier)
        for t in result.value:
            thread = " (Thread)" if t.thread_ts else ""
            preview = t.content if len(t.content) <= 50 else t.content[:50] + "..."
            print(f"{t.name}\t#{t.channel_name}{thread}\t{preview}")
    elif args.command == "channels":
        result = await commands.list_channels(session, notifier)
        for ch in result.value or []:
            print(f"{ch.id}\t#{ch.name}")
    elif args.command == "create":
        result = await commands.create_template(
            store, session, notifier,
            name=args.name, content=args.content, channel_id=args.channel, thread_ts=args.thread,
        )
    elif args.command == "edit":
        result = await _edit(args, store, session, notifier)
    elif args.command == "delete":
        result = await commands.delete_template(store, notifier, args.name)
    elif args.command == "send":
        result = await commands.send_template(store, session, notifier, args.name)
    elif args.command == "import":
        result = await commands.import_templates(store, notifier, export_path, overwrite=args.overwrite)
    elif args.command == "export":
        result = await commands.export_templates(store, notifier, export_path, overwrite=args.overwrite)
    else:
        raise ValueError(f"Unknown command '{args.command}'")

    return 0 if result.ok else 1


def main(argv: list[str] | None = None) -> None:
    args = _build_parser().parse_args(argv)

    from slack_templates.config import load_config

    config_path = Path(args.config)
    try:
        config = load_config(config_path if config_path.exists() else None)
    except Exception as exc:
        print(f"Failed to load {config_path}: {exc}", file=sys.stderr)
        sys.exit(1)

    log_cfg = config.get("logging", {})
    _setup_logging(log_cfg.get("level", "INFO"), log_cfg.get("dir"))
    logger = logging.getLogger(__name__)
    logger.debug("Running '%s' with config %s", args.command, config_path)

    sys.exit(asyncio.run(_run(args, config)))


if __name__ == "__main__":
    main()
