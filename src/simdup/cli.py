from __future__ import annotations

import argparse
import logging
import os
import sys

from tqdm import tqdm

from . import __version__
from .core.config import Config, load_config
from .core.io import read_texts, write_jsonl
from .core.log import get_logger
from .errors import SimdupError
from .features import FeatureType
from .grouping import group_texts
from .hashing import HashMethod
from .index import INDEX_KINDS

logger = logging.getLogger(__name__)


def _resolve_config(args: argparse.Namespace) -> Config:
    cfg = load_config(args.config)
    return cfg.merged(
        {
            "method": args.method,
            "features": args.features,
            "n": args.n,
            "max_diff": getattr(args, "max_diff", None),
            "index": getattr(args, "index", None),
        }
    )


def _cmd_version(_: argparse.Namespace) -> int:
    print(__version__)
    return 0


def _cmd_info(args: argparse.Namespace) -> int:
    cfg = _resolve_config(args)
    print(f"method={cfg.method.value}")
    print(f"features={cfg.feature_mode}")
    print(f"max_diff={cfg.max_diff}")
    print(f"index={cfg.index}")
    return 0


def _cmd_hash(args: argparse.Namespace) -> int:
    hasher = _resolve_config(args).hasher()
    for text in args.text:
        print(f"{hasher.hash(text)}\t{text}")
    return 0


def _cmd_features(args: argparse.Namespace) -> int:
    hasher = _resolve_config(args).hasher()
    for feature in hasher.features(args.text):
        print(feature.decode("utf-8", "backslashreplace"))
    return 0


def _cmd_group(args: argparse.Namespace) -> int:
    cfg = _resolve_config(args)
    texts = list(read_texts(args.input, field=args.field))
    groups = group_texts(
        texts,
        cfg.max_diff,
        cfg.hasher(),
        max_workers=args.workers,
        progress=args.progress,
    )
    write_jsonl(
        args.output,
        ({"group": i, "size": len(g), "texts": g} for i, g in enumerate(groups)),
    )
    logger.info("Grouped %d texts into %d groups", len(texts), len(groups))
    return 0


def _cmd_dedupe(args: argparse.Namespace) -> int:
    cfg = _resolve_config(args)
    table = cfg.simdict()
    total = 0
    for text in tqdm(read_texts(args.input, field=args.field), desc="dedupe", disable=not args.progress):
        total += 1
        table.insert(text, text)
    write_jsonl(
        args.output,
        (
            {"text": b.value, "simhash": str(b.fingerprint), "members": b.members}
            for b in table.buckets
        ),
    )
    logger.info("Kept %d of %d texts (max_diff=%d)", len(table), total, cfg.max_diff)
    return 0


def _add_hasher_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=os.getenv("SIMDUP_CONFIG"), help="YAML config file")
    p.add_argument("--method", choices=[m.value for m in HashMethod])
    p.add_argument("--features", choices=[f.value for f in FeatureType])
    p.add_argument("-n", type=int, help="Window size")


def _add_batch_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--max-diff", type=int, dest="max_diff")
    p.add_argument("--input", "-i", help="Text file (one per line) or .jsonl; stdin if omitted")
    p.add_argument("--output", "-o", help="Output JSONL path; stdout if omitted")
    p.add_argument("--field", default="text", help="JSONL field holding the text")
    p.add_argument("--progress", action="store_true")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="simdup")
    parser.add_argument(
        "--log-level",
        default=os.getenv("SIMDUP_LOG_LEVEL"),
        help="DEBUG, INFO, WARNING or ERROR (default INFO)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_ver = sub.add_parser("version", help="Print version")
    p_ver.set_defaults(func=_cmd_version)

    p_info = sub.add_parser("info", help="Print resolved configuration")
    _add_hasher_args(p_info)
    p_info.add_argument("--max-diff", type=int, dest="max_diff")
    p_info.add_argument("--index", choices=INDEX_KINDS)
    p_info.set_defaults(func=_cmd_info)

    p_hash = sub.add_parser("hash", help="Print simhash fingerprints")
    _add_hasher_args(p_hash)
    p_hash.add_argument("text", nargs="+")
    p_hash.set_defaults(func=_cmd_hash)

    p_feat = sub.add_parser("features", help="Print extracted features")
    _add_hasher_args(p_feat)
    p_feat.add_argument("text")
    p_feat.set_defaults(func=_cmd_features)

    p_group = sub.add_parser("group", help="Cluster texts into near-duplicate groups")
    _add_hasher_args(p_group)
    _add_batch_args(p_group)
    p_group.add_argument("--workers", type=int, default=None)
    p_group.set_defaults(func=_cmd_group)

    p_dedupe = sub.add_parser("dedupe", help="Keep the first text of each near-duplicate bucket")
    _add_hasher_args(p_dedupe)
    _add_batch_args(p_dedupe)
    p_dedupe.add_argument("--index", choices=INDEX_KINDS)
    p_dedupe.set_defaults(func=_cmd_dedupe)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        get_logger(level=args.log_level)
        result = args.func(args)
    except SimdupError as exc:
        print(f"simdup: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"simdup: {exc}", file=sys.stderr)
        return 1
    return 0 if result is None else int(result)


if __name__ == "__main__":
    raise SystemExit(main())
