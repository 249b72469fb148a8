"""
KickGuard command-line interface.

Usage:
    kickguard assess --kicks 10 --minutes 42
    kickguard assess --kicks 8 --minutes 120 --on-abdomen --rules
    kickguard chat "I felt 8 kicks in 2 hours"
    kickguard model-info --model-dir models/fetal_health_model
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from kickguard.config import FEATURES, PATHS
from kickguard.features import MalformedInputError, SensorMode
from kickguard.models import AssessmentModel
from kickguard.analysis import AnalysisMethod, FetalHealthService
from kickguard.chat import FetalHealthResponder

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Fetal movement assessment from kick counts"
    )
    parser.add_argument(
        "--model-dir",
        type=str,
        default=PATHS.DEFAULT_MODEL_DIR,
        help="Directory containing topology.json and weights.pt"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    assess = subparsers.add_parser("assess", help="Assess a kick count")
    assess.add_argument("--kicks", type=int, required=True, help="Kicks counted")
    assess.add_argument("--minutes", type=int, required=True, help="Session length in minutes")
    assess.add_argument("--week", type=int, default=FEATURES.DEFAULT_GESTATIONAL_WEEK, help="Gestational week")
    assess.add_argument(
        "--on-abdomen",
        action="store_true",
        help="Kicks were detected with the phone on the abdomen"
    )
    assess.add_argument(
        "--rules",
        action="store_true",
        help="Use the rule-based assessment instead of the model"
    )

    chat = subparsers.add_parser("chat", help="Answer a fetal health message")
    chat.add_argument("text", type=str, help="Message text")

    subparsers.add_parser("model-info", help="Show which weights are in use")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    model = AssessmentModel(args.model_dir)
    service = FetalHealthService(model)

    if args.command == "assess":
        try:
            result = service.assess(
                kick_count=args.kicks,
                duration_minutes=args.minutes,
                gestational_week=args.week,
                sensor_mode=SensorMode.ON_ABDOMEN if args.on_abdomen else SensorMode.MANUAL,
                method=AnalysisMethod.RULES if args.rules else AnalysisMethod.MODEL,
            )
        except MalformedInputError as e:
            logger.error(f"Invalid input: {e}")
            return 2
        print(json.dumps(result.to_dict(), indent=2))

    elif args.command == "chat":
        print(FetalHealthResponder(service).respond(args.text))

    elif args.command == "model-info":
        handle = model.load()
        print(json.dumps({
            "model_dir": str(model.model_dir),
            "weights_source": handle.weights_source,
            "architecture": list(handle.architecture),
            "load_error": handle.load_error,
        }, indent=2))

    return 0


if __name__ == "__main__":
    sys.exit(main())
