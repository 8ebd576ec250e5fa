# rmtop/cli/main.py
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

from rmtop import APP, VERSION
from rmtop.app.sinks import RECORDS_LOGGER
from rmtop.app.runner import start_run
from rmtop.cli.args import build_parser, config_from_args, parse_args
from rmtop.core.errors import RmTopError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
RECORDS_FORMAT = "%(message)s"


def configure_logging(level: str, log_file: Optional[Path] = None) -> None:
    """
    Install stderr (and optional file) handlers on the root logger (idempotent).
    """
    root = logging.getLogger()
    stderr_level = logging.getLevelName(level)
    root_level = min(stderr_level, logging.INFO) if log_file else stderr_level
    if root.level > root_level:
        root.setLevel(root_level)

    has_stderr = any(
        type(h) is logging.StreamHandler and getattr(h, "stream", None) is sys.stderr
        for h in root.handlers
    )
    if not has_stderr:
        sh = logging.StreamHandler(sys.stderr)
        sh.setLevel(stderr_level)
        # records have their own stdout handler
        sh.addFilter(lambda r: r.name != RECORDS_LOGGER)
        sh.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(sh)

    configure_records_output()

    if log_file is None:
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    target = str(log_file.resolve())
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(log_file, encoding="utf-8", delay=True)
    fh.setLevel(logging.INFO)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)


def configure_records_output() -> None:
    """
    Decoded records go to stdout at INFO whatever the diagnostic level is.
    Still propagated, so a --log-file captures them too.
    """
    records = logging.getLogger(RECORDS_LOGGER)
    records.setLevel(logging.INFO)

    for h in records.handlers:
        if type(h) is logging.StreamHandler and getattr(h, "stream", None) is sys.stdout:
            return

    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(logging.INFO)
    sh.setFormatter(logging.Formatter(RECORDS_FORMAT))
    records.addHandler(sh)


def print_error(message: str, hint: Optional[str] = None) -> None:
    print(f"ERROR: {message}", file=sys.stderr)
    if hint:
        print(f"Hint: {hint}", file=sys.stderr)


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)

    if args.help:
        build_parser().print_help()
        return 0

    if args.version:
        print(f"{APP} {VERSION}")
        return 0

    configure_logging(args.log_level, Path(args.log_file) if args.log_file else None)

    run = None
    try:
        cfg = config_from_args(args)
        run = start_run(cfg)
        run.start()
        run.run()
        return 0
    except RmTopError as e:
        print_error(e.message, e.hint)
        return 1
    except KeyboardInterrupt:
        return 0
    finally:
        if run is not None:
            run.close()


if __name__ == "__main__":
    sys.exit(main())
