# ================================================================================
# Suite Runner
# ================================================================================
#
# Entry point for executing declared suites against a live server.
#
# Suite modules expose a single hook:
#
#     def register_suites(registry, config):
#         registry.register("users").add_test("list users", list_users)
#
# Usage:
#   ricochet examples/suites/example_api.py
#   ricochet my_project.suites --config config/config.yaml --suite users
#
# ================================================================================

import argparse
import importlib
import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import List, Optional

from loguru import logger

from .common import init_logger
from .framework import ConfigLoader, ConfigurationError, SuiteRegistry


HOOK_NAME = "register_suites"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_UNREACHABLE = 3


class SuiteRunner:
    """
    Loads suite modules into a fresh registry and runs them.

    This class handles:
    - Configuration loading
    - Suite module import and registration
    - Sequential execution and exit code
    """

    def __init__(
        self,
        modules: List[str],
        config_path: Optional[str] = None,
        suites: Optional[List[str]] = None,
        log_level: Optional[str] = None,
        log_file: Optional[str] = None,
    ):
        """
        Initialize suite runner.

        Args:
            modules: Dotted module names or paths to .py files declaring suites
            config_path: YAML configuration file
            suites: Names of suites to run (default: all registered)
            log_level: Log level override
            log_file: Optional log file
        """
        self.modules = modules
        self.config_path = config_path
        self.suites = suites or []
        self.log_level = log_level
        self.log_file = log_file

    def run(self) -> int:
        """
        Execute the run.

        Returns:
            Exit code (0 all passed, 1 a suite failed, 2 setup error,
            3 token endpoint unreachable)
        """
        try:
            config = ConfigLoader(self.config_path)
        except ConfigurationError as e:
            init_logger(level=self.log_level, log_file=self.log_file)
            logger.error(f"Configuration error: {e}")
            return EXIT_CONFIG_ERROR

        init_logger(
            level=self.log_level or config.get("logging.level"),
            log_file=self.log_file or config.get("logging.file"),
        )

        logger.info("=" * 60)
        logger.info("Starting Suite Execution")
        logger.info(f"Modules: {', '.join(self.modules)}")
        logger.info(f"Suites: {', '.join(self.suites) or 'All'}")
        logger.info("=" * 60)

        registry = SuiteRegistry(config)
        try:
            for module_ref in self.modules:
                self._register_module(module_ref, registry, config)
        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return EXIT_CONFIG_ERROR

        unknown = [name for name in self.suites if name not in registry]
        if unknown:
            logger.error(f"Unknown suite(s): {', '.join(unknown)}")
            return EXIT_CONFIG_ERROR

        selected = [registry.get(name) for name in self.suites] if self.suites else list(registry)
        unreachable = [suite for suite in selected if suite.bootstrap_error]
        if unreachable:
            for suite in unreachable:
                logger.error(f"Suite '{suite.name}' not authenticated: {suite.bootstrap_error}")
            self._print_summary(EXIT_UNREACHABLE)
            return EXIT_UNREACHABLE

        passed = registry.run_all(self.suites or None)

        exit_code = EXIT_OK if passed else EXIT_FAILED
        self._print_summary(exit_code)
        return exit_code

    def _register_module(self, module_ref: str, registry: SuiteRegistry, config: ConfigLoader) -> None:
        """Import a suite module and call its registration hook."""
        module = load_module(module_ref)
        hook = getattr(module, HOOK_NAME, None)
        if not callable(hook):
            raise ConfigurationError(f"{module_ref} does not define {HOOK_NAME}(registry, config)")

        before = len(registry)
        hook(registry, config)
        logger.debug(f"{module_ref}: {len(registry) - before} new suite(s) registered")

    def _print_summary(self, exit_code: int) -> None:
        logger.info("=" * 60)
        if exit_code == EXIT_OK:
            logger.info("✅ ALL SUITES PASSED")
        else:
            logger.error(f"❌ SUITE EXECUTION FAILED (exit code: {exit_code})")
        logger.info("=" * 60)


def load_module(module_ref: str) -> ModuleType:
    """
    Import a module by dotted name or by path to a .py file.

    Raises:
        ConfigurationError: If the module cannot be found
    """
    path = Path(module_ref)
    if path.suffix == ".py":
        if not path.is_file():
            raise ConfigurationError(f"Suite module not found: {module_ref}")
        spec = importlib.util.spec_from_file_location(path.stem, path)
        if spec is None or spec.loader is None:
            raise ConfigurationError(f"Cannot load suite module: {module_ref}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        return module

    try:
        return importlib.import_module(module_ref)
    except ModuleNotFoundError as e:
        raise ConfigurationError(f"Suite module not found: {module_ref}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ricochet",
        description="Run declared API test suites against a live server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run every suite declared in a file
  ricochet examples/suites/example_api.py

  # Run one suite with a specific configuration
  ricochet my_project.suites --config config/staging.yaml --suite users
        """
    )

    parser.add_argument(
        "modules",
        nargs="+",
        help="Suite modules (dotted names or .py paths) defining register_suites()"
    )

    parser.add_argument(
        "--config", "-c",
        default=None,
        help="YAML configuration file (default: config/config.yaml)"
    )

    parser.add_argument(
        "--suite", "-s",
        action="append",
        default=[],
        help="Suite to run, may be repeated (default: all)"
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: $LOG_LEVEL, logging.level or INFO)"
    )

    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write logs to this file"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    runner = SuiteRunner(
        modules=args.modules,
        config_path=args.config,
        suites=args.suite,
        log_level=args.log_level,
        log_file=args.log_file,
    )

    sys.exit(runner.run())


if __name__ == "__main__":
    main()
