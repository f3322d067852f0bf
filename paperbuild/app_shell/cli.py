import argparse
import logging
import sys
from pathlib import Path

from paperbuild.adapters.clock import FrozenClock, SystemClock
from paperbuild.app_shell.build import BuildContext, run_build
from paperbuild.app_shell.config import Settings
from paperbuild.components.postfilter import ClockPort, evaluate
from paperbuild.components.tzresolve import run_format, run_resolve
from paperbuild.components.tzresolve.models import FormatInput, ResolveInput
from paperbuild.rules.loader import load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def get_settings(args: argparse.Namespace) -> Settings:
    settings = Settings()
    if getattr(args, "rules", None):
        settings.rules_path = Path(args.rules)
    if getattr(args, "content", None):
        settings.content_dir = Path(args.content)
    if getattr(args, "out", None):
        settings.out_dir = Path(args.out)
    if getattr(args, "dev", False):
        settings.is_development_mode = True
    return settings


def get_clock(args: argparse.Namespace, timezone: str) -> ClockPort:
    """--now pins the build clock; it is read as wall-clock time in the site zone."""
    if not getattr(args, "now", None):
        return SystemClock()
    output = run_resolve(ResolveInput(local_datetime=args.now, timezone=timezone))
    if not output.success:
        logger.error(f"Cannot use --now {args.now!r}: {output.errors[0].message}")
        sys.exit(2)
    return FrozenClock(output.instant.utc_ms)


def get_context(args: argparse.Namespace) -> BuildContext:
    settings = get_settings(args)
    if not settings.rules_path.exists():
        logger.error(f"Rules file {settings.rules_path} not found.")
        sys.exit(1)

    rules = load_rules(settings.rules_path)
    return BuildContext.create(settings, get_clock(args, rules.timezone), rules=rules)


def handle_build(args: argparse.Namespace) -> int:
    ctx = get_context(args)
    settings = get_settings(args)
    report = run_build(ctx, settings.out_dir, version=settings.version)
    print(f"Published {report.published_count} posts into {settings.out_dir}.")
    for error in report.errors:
        print(f"  skipped {error.field}: {error.message}")
    return 0


def handle_resolve(args: argparse.Namespace) -> int:
    timezone = args.timezone
    if timezone is None:
        settings = get_settings(args)
        timezone = "UTC"
        if settings.rules_path.exists():
            timezone = load_rules(settings.rules_path).timezone

    output = run_resolve(ResolveInput(local_datetime=args.datetime, timezone=timezone))
    instant = output.instant
    print(f"{args.datetime} ({timezone}) -> {instant.utc_ms}")

    formatted = run_format(FormatInput(utc_ms=instant.utc_ms, timezone=timezone))
    if formatted.success and formatted.fields is not None:
        print(f"  local: {formatted.fields.isoformat()}")
    for error in output.errors:
        print(f"  degraded ({error.code}): {error.message}")
    print(f"  iterations: {instant.iterations}")
    return 0 if output.success else 1


def handle_check(args: argparse.Namespace) -> int:
    """Report unreadable posts, degraded dates and what is currently scheduled."""
    ctx = get_context(args)
    posts = ctx.source.list_posts()
    problems = 0

    for error in ctx.source.errors:
        problems += 1
        print(f"ERROR {error.code} {error.field}: {error.message}")

    for post in posts:
        decision = evaluate(post.data, ctx.env)
        output = run_resolve(
            ResolveInput(local_datetime=post.data.pub_datetime, timezone=ctx.rules.timezone)
        )
        if not output.success:
            problems += 1
            for error in output.errors:
                print(f"WARN  {error.code} {post.id}: {error.message}")
        if decision.reason == "scheduled":
            print(f"SCHED {post.id}: publishes at {decision.publish_utc_ms}")

    print(f"{len(posts)} posts checked, {problems} problems.")
    return 1 if problems else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="paperbuild static blog tools")
    parser.add_argument("--rules", help="Path to site.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # build
    build_parser_ = subparsers.add_parser("build", help="Write feeds, sitemap and post index")
    build_parser_.add_argument("--content", help="Content directory (locale sub-folders)")
    build_parser_.add_argument("--out", help="Output directory")
    build_parser_.add_argument("--now", help="Pin the build time (site-local wall clock)")
    build_parser_.add_argument(
        "--dev", action="store_true", help="Development mode: every non-draft post is listed"
    )

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Resolve a local datetime to UTC")
    resolve_parser.add_argument("datetime", help="YYYY-MM-DDTHH:MM[:SS]")
    resolve_parser.add_argument("--timezone", help="IANA zone (defaults to the site zone)")

    # check
    check_parser = subparsers.add_parser("check", help="Validate content and schedule")
    check_parser.add_argument("--content", help="Content directory (locale sub-folders)")
    check_parser.add_argument("--now", help="Pin the check time (site-local wall clock)")

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "build":
        return handle_build(args)
    elif args.command == "resolve":
        return handle_resolve(args)
    elif args.command == "check":
        return handle_check(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
