import argparse
import logging
import sys

from uvicorn.logging import DefaultFormatter

from .config import ProbeCfg, default_config_path, load_config
from .probe import InferenceProbe

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO) -> None:
    """Send results to stdout and warnings and failures to stderr."""
    formatter = DefaultFormatter(fmt="%(levelprefix)s %(message)s", use_colors=True)

    out = logging.StreamHandler(sys.stdout)
    out.setFormatter(formatter)
    out.addFilter(lambda record: record.levelno < logging.WARNING)

    err = logging.StreamHandler(sys.stderr)
    err.setFormatter(formatter)
    err.setLevel(logging.WARNING)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(out)
    root.addHandler(err)
    root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="inference-probe",
        description="Call a text-generation endpoint through two HTTP client paths.",
    )
    parser.add_argument("--config", help=f"YAML config file (default: {default_config_path()})")
    parser.add_argument("--target", help="model id or full URL for the typed client")
    parser.add_argument("--prompt", help="prompt text to send")
    return parser.parse_args(argv)


def _load(path: str | None) -> ProbeCfg:
    if path is not None:
        return load_config(path)

    default_path = default_config_path()
    try:
        return load_config(default_path)
    except FileNotFoundError:
        logger.info("No config at %s, using built-in defaults", default_path)
        return ProbeCfg()


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    setup_logging()

    cfg = _load(args.config)

    overrides = {k: v for k, v in (("target", args.target), ("prompt", args.prompt)) if v}
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    InferenceProbe(cfg).run()
