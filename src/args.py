"""Argument parsing functionality for FeatureGate."""

import argparse


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="featuregate",
        description=(
            "FeatureGate - generate the runtime features an application needs"
        ),
        add_help=True,
    )

    parser.add_argument("-s", "--scan-result",
                        dest="SCAN_RESULT",
                        help="Recommended features produced by the API scanner (JSON or YAML)",
                        action="store", type=str,
                        required=True)
    parser.add_argument("-p", "--pom",
                        dest="POM",
                        help="pom.xml used to detect the targeted Java EE/Jakarta EE and MicroProfile levels",
                        action="store",
                        type=str)
    parser.add_argument("-x", "--server-xml",
                        dest="SERVER_XML",
                        help="server.xml holding the configured features",
                        action="store",
                        type=str)
    parser.add_argument("--classes-dir",
                        dest="CLASSES_DIR",
                        help="Compiled classes directory; generation is skipped when it is empty",
                        action="store",
                        type=str)
    parser.add_argument("--catalog",
                        dest="CATALOG",
                        help="Feature catalog YAML (defaults to the built-in catalog)",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Generated features file (default: configDropins/overrides/generated-features.xml beside server.xml)",
                        action="store",
                        type=str)
    parser.add_argument("--dry-run",
                        dest="DRY_RUN",
                        help="Report the decision without writing or removing files.",
                        action="store_true")
    parser.add_argument("-f", "--format",
                        dest="OUTPUT_FORMAT",
                        help="Console report format (text or json)",
                        action="store",
                        type=str.lower,
                        choices=["text", "json"],
                        default="text")

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        default="INFO")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or YML)",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
