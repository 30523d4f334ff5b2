"""FeatureGate - generate the runtime features an application needs.

    Exits with 0 on success, 1 on unreadable input and 4 when the
    configured and recommended features conflict.
"""
import json
import logging
import os
import sys

from args import parse_args
from cli_config import apply_overrides
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from features.catalog import load_catalog
from features.models import FeatureGateError
from generate_runner import GenerateFeaturesRunner


def print_report(report, fmt):
    """Print the generation report to stdout.

    Args:
        report (GenerationReport): Result of the run.
        fmt (str): "text" or "json".
    """
    if fmt == "json":
        print(json.dumps(report.to_dict(), indent=2))
        return
    if report.skipped:
        print(Constants.NO_CLASSES_DIR_WARNING)
    elif report.message:
        print(report.message)
    elif report.generated:
        print("Generated features: " + ", ".join(sorted(report.generated)))
    else:
        print("No additional features are required.")


def main(argv=None):
    """Main function of the program."""
    logger = logging.getLogger(__name__)

    args = parse_args(argv)
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.ENV_LOG_LEVEL] = str(args.LOG_LEVEL).upper()
    configure_logging(getattr(args, "LOG_FILE", None))

    apply_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main")
        )

    try:
        catalog = load_catalog(Constants.CATALOG_PATH)
        runner = GenerateFeaturesRunner(catalog)
        report = runner.run(
            scan_result=args.SCAN_RESULT,
            pom=args.POM,
            server_xml=args.SERVER_XML,
            classes_dir=args.CLASSES_DIR,
            output_path=args.OUTPUT,
            dry_run=args.DRY_RUN,
        )
    except FileNotFoundError as e:
        logging.error("File not found: %s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    except FeatureGateError as e:
        logging.error("%s, aborting", e)
        sys.exit(ExitCodes.FILE_ERROR.value)

    print_report(report, args.OUTPUT_FORMAT)

    if report.has_conflict:
        sys.exit(ExitCodes.FEATURE_CONFLICT.value)
    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
