#!/usr/bin/env python
"""
CLI demo for the medication NLU engine.

Runs a message through parsing, intent classification, conflict detection
and reply generation, and prints the result as JSON.

Usage:
    python -m medicare_nlu.scripts.parse_demo "I need to take Aspirin 325mg twice daily" \
        --medication "Warfarin:5mg:18:00" --medication "Metformin:500mg:08:00,20:00"
"""

from __future__ import annotations

import argparse
import json
import sys

from pydantic import ValidationError

from medicare_nlu.config import get_settings
from medicare_nlu.core.shared.logger import configure_logging, get_nlu_logger
from medicare_nlu.domains.medication.assistant import (
    ChatContext,
    MedicationChatAssistant,
    quick_suggestions,
)
from medicare_nlu.domains.medication.exceptions import MedicationNLUError
from medicare_nlu.domains.medication.nlu import Medication, MedicationNLUEngine

logger = get_nlu_logger("parse_demo")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_medication_arg(value: str, index: int) -> Medication:
    """Parse "name[:dosage[:time,time,...]]" into a Medication.

    Times keep their own colons, so only the first two separators split.
    """
    parts = value.split(":", 2)
    name = parts[0]
    dosage = parts[1] if len(parts) > 1 else ""
    times = [t.strip() for t in parts[2].split(",") if t.strip()] if len(parts) > 2 else []
    return Medication(id=str(index), name=name, dosage=dosage, times=times)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the medication NLU engine on a message")
    parser.add_argument("message", help="User message to analyze")
    parser.add_argument(
        "--medication",
        "-m",
        action="append",
        default=[],
        metavar="NAME[:DOSAGE[:TIMES]]",
        help="A current medication (repeatable), e.g. Metformin:500mg:08:00,20:00",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Override LOG_LEVEL",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    configure_logging(level=args.log_level or settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)

    try:
        medications = [parse_medication_arg(value, i) for i, value in enumerate(args.medication, 1)]
    except ValidationError as e:
        logger.error("Invalid --medication value: %s", e)
        return 2

    try:
        engine = MedicationNLUEngine.from_settings(settings)
    except MedicationNLUError as e:
        logger.error("Failed to load NLU data assets: %s", e)
        return 1

    assistant = MedicationChatAssistant(engine)
    response = assistant.respond(args.message, ChatContext(medications=medications))

    output = response.to_dict()
    output["suggestions"] = quick_suggestions(medications)
    json.dump(output, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
