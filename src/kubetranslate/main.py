"""
Command-line interface for translating an IR document into cluster artifacts.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import NoReturn

from kubetranslate.config import PipelineConfig, load_config
from kubetranslate.core.exceptions import (
    ConfigError,
    IRLoadError,
    KubeTranslateError,
    RuleSetApplyError,
    RuleSetLoadError,
    TransformerError,
)
from kubetranslate.core.pipeline import PipelineRunner
from kubetranslate.core.registry import TRANSFORMER_CLASSES, get_transformers
from kubetranslate.ir.loader import load_ir
from kubetranslate.k8sschema.cluster import get_builtin_cluster_names
from kubetranslate.scripting.answers import default_resolvers, write_answers

logger = logging.getLogger(__name__)

# Most specific first; matched against the whole exception chain
_EXIT_CODES: tuple[tuple[type[BaseException], int], ...] = (
    (ConfigError, 1),
    (IRLoadError, 2),
    (RuleSetLoadError, 3),
    (RuleSetApplyError, 4),
    (TransformerError, 5),
    (OSError, 8),
)


def show_available_transformers() -> NoReturn:
    """Show the built-in transformers in execution order and exit."""
    print("Available Transformers:")
    print("=" * 50)
    for cls in TRANSFORMER_CLASSES:
        description = (cls.__doc__ or "").strip().splitlines()[0]
        print(f"  {cls.name:<12} - {description}")
        print(f"               Output: {cls.output_dir}")
    print()
    print(f"Builtin clusters: {', '.join(get_builtin_cluster_names())}")
    sys.exit(0)


def configure_logging(debug: bool = False, verbose: bool = False) -> None:
    """Configure application logging.

    Args:
        debug: Enable debug-level logging if True.
        verbose: Enable verbose logging from the pipeline if True.
    """
    if debug:
        level = logging.DEBUG
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    elif verbose:
        level = logging.INFO
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    else:
        level = logging.WARNING
        format_str = "%(levelname)s: %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        stream=sys.stderr,
        force=True,
    )


def get_exit_code(error: BaseException) -> int:
    """Map an error to the process exit code, looking through its causes."""
    chain: list[BaseException] = []
    current: BaseException | None = error
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__
    for error_type, code in _EXIT_CODES:
        if any(isinstance(e, error_type) for e in chain):
            return code
    return 9


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="kubetranslate",
        description=(
            "Translate an application IR into Kubernetes manifests, build "
            "scripts and CI/CD resources"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Translate for a vanilla Kubernetes cluster
  kubetranslate app-ir.yaml out/

  # Target OpenShift and customize the result with two rule-sets
  kubetranslate app-ir.yaml out/ --cluster openshift -t labels.py -t prune.py

  # Reuse answers and never prompt
  kubetranslate app-ir.yaml out/ --qa-answers answers.yaml --qa-skip
        """,
    )
    parser.add_argument(
        "ir_file", nargs="?", type=Path, help="IR document (YAML or JSON)"
    )
    parser.add_argument(
        "output_dir", nargs="?", type=Path, help="Directory receiving the output"
    )
    parser.add_argument(
        "-t",
        "--transform",
        action="append",
        dest="transform_paths",
        type=Path,
        metavar="PATH",
        help="Rule-set file or directory applied to the resources (repeatable)",
    )
    parser.add_argument(
        "--cluster",
        metavar="NAME|PATH",
        help="Builtin cluster name or ClusterMetadata file of the target cluster",
    )
    parser.add_argument(
        "--ignore-unsupported-kinds",
        action="store_true",
        default=None,
        help="Drop objects the target cluster cannot host instead of failing them",
    )
    parser.add_argument("--registry-url", help="Registry the images are pushed to")
    parser.add_argument("--registry-namespace", help="Namespace in the registry")
    parser.add_argument(
        "--transformer",
        action="append",
        dest="transformers",
        metavar="NAME",
        help="Run only this transformer (repeatable)",
    )
    parser.add_argument(
        "--qa-answers", type=Path, help="YAML file with precomputed answers"
    )
    parser.add_argument(
        "--qa-skip",
        action="store_true",
        default=None,
        help="Never prompt, answer every question with its default",
    )
    parser.add_argument(
        "--qa-cache", type=Path, help="Write the answers of this run to a file"
    )
    parser.add_argument(
        "-c", "--config", type=Path, help="Pipeline configuration file (YAML)"
    )
    parser.add_argument(
        "--list-transformers",
        action="store_true",
        help="List the built-in transformers and exit",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging for detailed output"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging of the pipeline stages",
    )

    args = parser.parse_args(argv)

    if args.list_transformers:
        show_available_transformers()

    if args.ir_file is None:
        parser.error("IR_FILE is required")
    if args.output_dir is None and args.config is None:
        parser.error("OUTPUT_DIR is required unless set in --config")

    return args


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Merge the configuration file, if any, with the command line flags."""
    config = load_config(args.config) if args.config else PipelineConfig()
    config = config.with_overrides(
        output_dir=args.output_dir,
        transform_paths=args.transform_paths,
        cluster=args.cluster,
        ignore_unsupported_kinds=args.ignore_unsupported_kinds,
        registry_url=args.registry_url,
        registry_namespace=args.registry_namespace,
        transformers=args.transformers,
        qa_answers_file=args.qa_answers,
        qa_skip=args.qa_skip,
        qa_cache_file=args.qa_cache,
    )
    if config.output_dir is None:
        raise ConfigError("No output directory given", "output_dir")
    return config


def run_translation(args: argparse.Namespace) -> int:
    """Execute the translation and return the process exit code."""
    configure_logging(args.debug, args.verbose)
    quiet = not (args.verbose or args.debug)

    try:
        config = build_config(args)
        ir = config.apply_to_ir(load_ir(args.ir_file))
        resolvers = default_resolvers(config.qa_answers_file, config.qa_skip)
        try:
            transformers = get_transformers(resolvers, names=config.transformers)
        except ValueError as e:
            raise ConfigError(str(e), "transformers") from e

        if quiet:
            print(f"Processing '{ir.name}' into {config.output_dir}")
        PipelineRunner(transformers).execute(
            ir, config.output_dir, config.transform_paths
        )

        if config.qa_cache_file:
            write_answers(resolvers.cache, config.qa_cache_file)
            logger.info(f"Answers saved to: {config.qa_cache_file}")

        if quiet:
            print(f"Generated artifacts in: {config.output_dir}")
        else:
            logger.info(f"Output written to: {config.output_dir.resolve()}")
        return 0

    except KubeTranslateError as e:
        logger.error(f"Translation failed: {e}")
        if hasattr(e, "get_recovery_hint"):
            logger.error(f"Suggestion: {e.get_recovery_hint()}")
        return get_exit_code(e)
    except OSError as e:
        logger.error(f"File system error: {e}")
        return 8
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args.debug:
            logger.exception("Full traceback:")
        return 9


def main(argv: list[str] | None = None) -> NoReturn:
    args = parse_arguments(argv)
    sys.exit(run_translation(args))


if __name__ == "__main__":
    main()
