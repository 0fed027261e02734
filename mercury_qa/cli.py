import argparse
import sys

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from mercury_qa.browser.session import DriverManager
from mercury_qa.config import load_config
from mercury_qa.exceptions import ConfigurationError
from mercury_qa.inspector import ElementInspector
from mercury_qa.utils.get_log import GetLog


def check_playwright_browsers(kind: str = "chromium") -> bool:
    try:
        with sync_playwright() as p:
            browser = getattr(p, kind).launch(headless=True)
            browser.close()
        print(f"✅ Playwright {kind} available")
        return True
    except PlaywrightError as e:
        print(f"⚠️ Playwright {kind} unavailable: {e}")
        return False


def cmd_config(args) -> int:
    config = load_config(args.config)
    print(f"Config file: {config.source}")
    for key, value in sorted(config.as_dict().items()):
        print(f"{key}={value}")
    return 0


def cmd_check_browsers(args) -> int:
    results = [check_playwright_browsers(kind) for kind in args.engines]
    return 0 if all(results) else 1


def cmd_inspect(args) -> int:
    config = load_config(args.config, {"headless": "true" if args.headless else None})
    url = args.url or config.base_url
    if not url:
        print("[ERROR] No URL given and no base URL configured", file=sys.stderr)
        return 1
    with DriverManager(config.implicit_wait, config.page_load_timeout) as manager:
        session = manager.initialize(config.browser, config.headless)
        session.navigate_to(url)
        ElementInspector(session.page, args.limit).log_report()
    return 0


def cmd_run(args) -> int:
    import pytest

    pytest_args = ["--run-e2e"]
    if args.config:
        pytest_args += ["--config", args.config]
    pytest_args += args.pytest_args or ["tests/e2e"]
    return int(pytest.main(pytest_args))


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="mercury-qa", description="ClaimCenter test automation")
    parser.add_argument("--config", "-c", help="config.properties path (default: resources/config.properties)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    config_parser = subparsers.add_parser("config", help="Print the resolved configuration")
    config_parser.set_defaults(func=cmd_config)

    check_parser = subparsers.add_parser("check-browsers", help="Check that Playwright browsers launch")
    check_parser.add_argument("--engines", nargs="+", default=["chromium"], choices=["chromium", "firefox", "webkit"])
    check_parser.set_defaults(func=cmd_check_browsers)

    inspect_parser = subparsers.add_parser("inspect", help="Log page elements useful for writing locators")
    inspect_parser.add_argument("--url", help="Page to inspect (default: configured base URL)")
    inspect_parser.add_argument("--limit", type=int, default=10, help="Elements listed per group")
    inspect_parser.add_argument("--headless", action="store_true")
    inspect_parser.set_defaults(func=cmd_inspect)

    run_parser = subparsers.add_parser(
        "run", help="Run the end-to-end scenarios", description="Unrecognized arguments are passed on to pytest"
    )
    run_parser.set_defaults(func=cmd_run)

    args, extra = parser.parse_known_args(argv)
    if extra and args.command != "run":
        parser.error(f"unrecognized arguments: {' '.join(extra)}")
    args.pytest_args = extra
    return args


def main(argv=None):
    args = parse_args(argv)
    GetLog.get_log()
    try:
        exit_code = args.func(args)
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
