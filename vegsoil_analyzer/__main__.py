"""Command line entry point for the Vegetation and Soil Analyzer."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from . import AnalysisMode, AnalysisSession, SettingsStore
from .models.base import UserInputError
from .models.modes import MODE_POLICIES
from .services.acquisition import AcquisitionEvent
from .services.state import RequestStatus


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Vegetation and Soil Analyzer")
    parser.add_argument(
        "--input",
        "-i",
        type=Path,
        help="Image file to submit in headless mode.",
    )
    parser.add_argument(
        "--mode",
        "-m",
        choices=[mode.value for mode in AnalysisMode],
        help="Override the configured analysis mode.",
    )
    parser.add_argument(
        "--base-url",
        help="Override the configured prediction backend address.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (defaults to no explicit timeout).",
    )
    parser.add_argument(
        "--list-modes",
        action="store_true",
        help="Print available analysis modes and exit.",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without launching the GUI.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_modes:
        payload = [
            {"mode": mode.value, "name": policy.display_name, "endpoint": policy.endpoint}
            for mode, policy in MODE_POLICIES.items()
        ]
        json.dump(payload, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    if not args.headless and args.input is None:
        from .gui import run_app

        run_app()
        return

    if args.input is None:
        parser.error("--input is required when running in headless mode.")

    store = SettingsStore()
    try:
        config = store.load()
    except ValueError as exc:
        parser.error(str(exc))

    overrides: dict[str, object] = {}
    if args.base_url:
        overrides["api_base_url"] = args.base_url
    if args.timeout is not None:
        overrides["request_timeout"] = args.timeout
    if args.mode:
        overrides["default_mode"] = args.mode
    if overrides:
        try:
            config = config.model_validate({**config.as_dict(), **overrides})
        except ValidationError as exc:
            parser.error(f"Invalid option: {exc}")

    session = AnalysisSession(config)
    try:
        try:
            image = session.acquire(AcquisitionEvent.from_picker([args.input]))
        except UserInputError as exc:
            parser.error(str(exc))
        session.submit()
        view = session.view()
    finally:
        session.close()

    output = {
        "image": str(args.input),
        "mode": view.mode.value,
        "size": image.size if image is not None else None,
        "status": view.status.value,
        "summary": view.summary_text,
        "has_output_image": view.output_image is not None,
        "error": view.failure_reason,
    }
    json.dump(output, sys.stdout, indent=2)
    sys.stdout.write("\n")

    if view.status is RequestStatus.FAILED:
        raise SystemExit(1)


if __name__ == "__main__":  # pragma: no cover
    main()
