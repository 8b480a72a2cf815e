#!/usr/bin/env python3
"""
figma-tokens CLI: Figma variables → W3C Design Tokens

  python -m figma_tokens.cli import                     # 從 Figma 抓取並輸出三層 token
  python -m figma_tokens.cli build --primitives p.json --semantic s.json --product e.json
  python -m figma_tokens.cli preview tokens/semantic.json
  python -m figma_tokens.cli watch --primitives p.json --semantic s.json --product e.json
"""

import argparse
import json
import os
import sys
import time
from typing import Dict, List

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from . import __version__
from .collection_filter import REASON_REMOTE
from .config import DEFAULT_CONFIG_PATH, load_config, resolve_token
from .errors import ConfigurationError, FigmaTokensError
from .figma_reader import FigmaAPIClient, fetch_tier_snapshots, load_snapshot
from .model import Graph
from .pipeline import TIER_PRODUCT, TIERS, TierResult, build_all
from .tree_builder import DuplicatePolicy, preview_token_tree
from .writer import write_snapshot, write_tier

DEFAULT_OUTPUT_DIR = "tokens"
DEFAULT_PRODUCT_NAME = "product"


def _build_options(args, config: dict) -> dict:
    """CLI 參數優先，其次 config，最後預設值."""
    build_cfg = config.get("build", {})
    output_cfg = config.get("output", {})
    policy = getattr(args, "on_duplicate", None) or build_cfg.get("onDuplicate") or DuplicatePolicy.OVERWRITE.value
    try:
        on_duplicate = DuplicatePolicy(policy)
    except ValueError:
        valid = ", ".join(p.value for p in DuplicatePolicy)
        raise ConfigurationError(f"Unknown duplicate policy '{policy}' (expected one of: {valid})")
    return {
        "on_duplicate": on_duplicate,
        "strict": bool(getattr(args, "strict", False) or build_cfg.get("strict", False)),
        "output_dir": getattr(args, "output", None) or output_cfg.get("dir") or DEFAULT_OUTPUT_DIR,
        "product_name": getattr(args, "product_name", None) or output_cfg.get("productName") or DEFAULT_PRODUCT_NAME,
    }


def print_tier_report(result: TierResult) -> None:
    report = result.filter_report
    remote = report.by_reason(REASON_REMOTE)
    if remote:
        names = ", ".join(f'"{n}"' for n in remote)
        print(f"  Skipping {len(remote)} remote collection(s): {names}")
    unpublishable = [s for s in report.skipped if s.reason != REASON_REMOTE]
    if unpublishable:
        print(f"  Skipping {len(unpublishable)} unpublishable collection(s):")
        for skipped in unpublishable:
            print(f'    "{skipped.name}": {skipped.reason}')

    build = result.build_report
    for path in build.duplicates:
        print(f"   ⚠️  Duplicate token path overwritten: {'.'.join(path)}")
    for problem in build.problems:
        print(f"   ⚠️  {problem}")
    print(f"   ✅ {build.token_count} tokens")


def build_and_write(graphs: Dict[str, Graph], options: dict) -> List[str]:
    """依序建出三層 token、印出報告並寫檔；strict 模式下有問題則不寫檔."""
    results = build_all(
        graphs["primitives"],
        graphs["semantic"],
        graphs["product"],
        on_duplicate=options["on_duplicate"],
    )
    problems = []
    unresolved = cycles = 0
    for result in results:
        print(f"\nBuilding {result.name}…")
        print_tier_report(result)
        problems.extend(result.build_report.problems)
        unresolved += len(result.build_report.unresolved)
        cycles += len(result.build_report.cycles)

    if options["strict"] and problems:
        print(f"\n❌ Strict mode: {unresolved} unresolved reference(s), {cycles} alias cycle(s), nothing written.")
        raise problems[0]

    names = {tier: tier for tier in TIERS}
    names[TIER_PRODUCT] = options["product_name"]
    paths = [write_tier(options["output_dir"], names[r.name], r.tokens) for r in results]
    print("\nWritten:")
    for path in paths:
        print(f"  {path}")
    return paths


def cmd_import(args, config: dict):
    """Import: Figma API → 三層 token JSON."""
    options = _build_options(args, config)
    client = FigmaAPIClient(resolve_token(config))

    configured = config.get("figma", {}).get("files", {}) or {}
    files = {tier: getattr(args, tier, None) or configured.get(tier) for tier in TIERS}
    missing = [tier for tier, key in files.items() if not key]
    if missing:
        raise ConfigurationError(
            f"Missing Figma file key for: {', '.join(missing)} (use --{missing[0]} or figma.files in config)"
        )

    print("📥 Fetching Figma variables…")
    snapshots = fetch_tier_snapshots(client, files)
    for tier in TIERS:
        print(f"  {tier + ':':<12}{len(snapshots[tier].get('variables', {}))} variables")

    if args.save_snapshots:
        for tier in TIERS:
            path = write_snapshot(args.save_snapshots, tier, snapshots[tier])
            print(f"   📄 Snapshot saved to {path}")

    graphs = {tier: Graph.from_api(snapshots[tier]) for tier in TIERS}
    build_and_write(graphs, options)
    print("\nDone.")


def _load_graphs(args) -> Dict[str, Graph]:
    return {tier: load_snapshot(getattr(args, tier)) for tier in TIERS}


def cmd_build(args, config: dict):
    """Build: 從已儲存的快照離線重建."""
    options = _build_options(args, config)
    build_and_write(_load_graphs(args), options)
    print("\nDone.")


def cmd_preview(args, config: dict):
    """預覽 token 樹."""
    with open(args.file, "r", encoding="utf-8") as f:
        tokens = json.load(f)
    print(f"👁️  Preview token tree: {args.file}")
    print(preview_token_tree(tokens))


_WATCHED_EXTENSIONS = (".json",)


class ChangeHandler(FileSystemEventHandler):
    """快照檔案變更事件處理器，帶 debounce 防抖。"""

    def __init__(self, callback, paths, debounce: float = 1.0):
        self.callback = callback
        self.paths = {os.path.abspath(p) for p in paths}
        self.last_trigger = 0.0
        self.debounce_seconds = debounce

    def on_modified(self, event):
        if event.is_directory:
            return
        if not event.src_path.endswith(_WATCHED_EXTENSIONS):
            return
        if os.path.abspath(event.src_path) not in self.paths:
            return
        current_time = time.time()
        if current_time - self.last_trigger < self.debounce_seconds:
            return
        self.last_trigger = current_time
        print(f"\n🔄 Snapshot changed: {event.src_path}")
        self.callback()


def cmd_watch(args, config: dict):
    """Watch: 監聽快照檔案變更並自動重建."""
    options = _build_options(args, config)
    paths = [getattr(args, tier) for tier in TIERS]

    def rebuild():
        try:
            build_and_write(_load_graphs(args), options)
        except (FigmaTokensError, OSError, ValueError) as e:
            print(f"   ❌ Rebuild failed: {e}")

    print("👀 Watching snapshots:")
    for path in paths:
        print(f"   {path}")
    print("   Press Ctrl+C to stop.")
    rebuild()

    handler = ChangeHandler(rebuild, paths)
    observer = Observer()
    for directory in sorted({os.path.dirname(os.path.abspath(p)) for p in paths}):
        observer.schedule(handler, path=directory, recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("\n👋 Stopping watch...")
        observer.stop()
    finally:
        observer.join()


def _add_build_flags(p) -> None:
    p.add_argument("--output", "-o", help=f"Output directory (default: {DEFAULT_OUTPUT_DIR})")
    p.add_argument("--product-name", help=f"File name for the product tier (default: {DEFAULT_PRODUCT_NAME})")
    p.add_argument("--on-duplicate", choices=[policy.value for policy in DuplicatePolicy],
                   help="What to do when two variables map to the same token path")
    p.add_argument("--strict", action="store_true", help="Fail on unresolved references or alias cycles")


def _add_snapshot_flags(p) -> None:
    for tier in TIERS:
        p.add_argument(f"--{tier}", required=True, help=f"{tier} variables JSON snapshot")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="figma-tokens",
        description="figma-tokens: Figma variables → W3C Design Tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config path")
    parser.add_argument("--version", "-v", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    import_p = sub.add_parser("import", help="Figma API → tokens",
        epilog="Examples:\n  FIGMA_ACCESS_TOKEN=... figma-tokens import\n  figma-tokens import --product-name etx --save-snapshots .snapshots",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    for tier in TIERS:
        import_p.add_argument(f"--{tier}", help=f"Figma file key of the {tier} file")
    import_p.add_argument("--save-snapshots", help="Also save the raw variables payloads to this directory")
    _add_build_flags(import_p)

    build_p = sub.add_parser("build", help="Snapshots → tokens (offline)",
        epilog="Examples:\n  figma-tokens build --primitives p.json --semantic s.json --product etx.json",
        formatter_class=argparse.RawDescriptionHelpFormatter)
    _add_snapshot_flags(build_p)
    _add_build_flags(build_p)

    preview_p = sub.add_parser("preview", help="Preview a token file as a tree")
    preview_p.add_argument("file", help="Token JSON file (e.g. tokens/semantic.json)")

    watch_p = sub.add_parser("watch", help="Rebuild when snapshots change")
    _add_snapshot_flags(watch_p)
    _add_build_flags(watch_p)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)

    commands = {
        "import": cmd_import,
        "build": cmd_build,
        "preview": cmd_preview,
        "watch": cmd_watch,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args, config)
    except FigmaTokensError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
