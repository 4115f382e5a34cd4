"""CLI entry point for Peppermint."""

import argparse
import sys
from pathlib import Path

from .config import Config, load_config, get_default_config_toml, SURFACE_KINDS
from .core.dispatcher import Device, build_process_surface
from .errors import ConfigError, RenderError
from .inbox import InboxWatcher, drop_payload
from .payloads import build_chat_message_payload, build_photo_upload_payload, build_test_payload
from .renderers import LogRenderer, MemoryRenderer, NotificationOptions, Renderer, TwilioRenderer
from .utils.logging import setup_logging
from .utils.signals import install_signal_handlers


def build_renderer(config: Config, dry_run: bool = False) -> Renderer:
    """Pick the renderer for a surface process."""
    if config.sms.enabled and not dry_run:
        return TwilioRenderer(
            account_sid=config.sms.account_sid,
            auth_token=config.sms.auth_token,
            from_number=config.sms.from_number,
            to_number=config.sms.to_number,
            use_whatsapp=config.sms.use_whatsapp,
        )
    return LogRenderer()


def build_payload(kind: str, sender: str, text: str) -> dict:
    if kind == "chat":
        return build_chat_message_payload(sender, text)
    if kind == "photo":
        return build_photo_upload_payload(sender, text)
    return build_test_payload(body=text or None)


def run_surface(config: Config, args: argparse.Namespace) -> int:
    """Run one surface until SIGINT/SIGTERM, fed from the inbox."""
    shutdown_event = install_signal_handlers()
    renderer = build_renderer(config, dry_run=args.dry_run)

    overrides = {"kind": args.surface}
    if args.name:
        overrides["name"] = args.name
    if args.visible:
        overrides["visible"] = True
    if args.focused:
        overrides["focused"] = True

    surface = build_process_surface(config, renderer, **overrides)
    watcher = InboxWatcher(
        config.inbox.path,
        callback=surface.handle,
        shutdown_event=shutdown_event,
    )

    surface.start()
    try:
        watcher.run()
    finally:
        surface.stop()
    return 0


def run_simulation(config: Config) -> int:
    """Deliver one payload to a worker, a hidden page and a focused page, then click it."""
    renderer = MemoryRenderer()
    device = Device(config, renderer)
    device.add_worker("worker")
    device.add_page("background-tab", visible=False, focused=False)
    device.add_page("active-tab", visible=True, focused=True)

    payload = build_test_payload(body="Simulated delivery")
    outcomes = device.deliver(payload)
    shown_tags = [n.tag for n in renderer.get_notifications()]
    links = [device.click(tag) for tag in shown_tags]
    device.close()

    for name, outcome in outcomes.items():
        print(f"  {name:<16} {outcome.value}")
    print(f"Shown: {len(renderer.history)} notification(s)")
    for shown in renderer.history:
        print(f"  {shown.surface}: {shown}")
    for link in links:
        print(f"Clicked, opened {link}")
    return 0 if len(renderer.history) == 1 else 1


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="peppermint",
        description="Deliver Peppermint Tracker notifications once per device",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path.home() / ".config" / "peppermint" / "config.toml",
        help="Path to configuration file",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print notifications instead of sending them",
    )

    parser.add_argument(
        "--surface",
        choices=SURFACE_KINDS,
        help="Run a delivery surface fed from the inbox",
    )

    parser.add_argument("--name", help="Surface name (default: its kind)")
    parser.add_argument("--visible", action="store_true", help="Page surface is visible")
    parser.add_argument("--focused", action="store_true", help="Page surface has focus")

    parser.add_argument(
        "--send",
        choices=("chat", "photo", "test"),
        help="Drop a payload into the inbox and exit",
    )

    parser.add_argument("--from", dest="sender", default="", help="Sender or uploader name")
    parser.add_argument("--text", default="", help="Message text or photo caption")

    parser.add_argument(
        "--simulate",
        action="store_true",
        help="Deliver a test payload to in-process surfaces and exit",
    )

    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show default configuration and exit",
    )

    parser.add_argument(
        "--sms-test",
        action="store_true",
        help="Send a test SMS and exit (requires SMS config)",
    )

    args = parser.parse_args()

    if args.show_config:
        print(get_default_config_toml())
        return 0

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(
        verbose=args.verbose,
        log_file=config.log_file,
        surface=args.name or args.surface,
    )

    if args.sms_test:
        if not config.sms.enabled:
            print("SMS/WhatsApp is not enabled. Add [sms] section to config file.")
            print(f"Config path: {args.config}")
            return 1
        renderer = build_renderer(config)
        try:
            renderer.show(
                "Peppermint Tracker",
                NotificationOptions(body="SMS notifications are working!", tag="peppermint-test"),
            )
        except RenderError as e:
            print(f"Failed to send test message: {e}")
            return 1
        print("Test message sent successfully!")
        return 0

    if args.send:
        path = drop_payload(config.inbox.path, build_payload(args.send, args.sender, args.text))
        print(f"Queued {args.send} notification: {path}")
        return 0

    if args.simulate:
        return run_simulation(config)

    if args.surface:
        try:
            return run_surface(config, args)
        except ConfigError as e:
            print(f"Configuration error: {e}", file=sys.stderr)
            return 2

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
