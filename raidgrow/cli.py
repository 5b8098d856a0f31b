#!/usr/bin/env python3
"""
cli.py
Command-line interface for raidgrow.
Parses arguments, loads defaults, builds the Configuration and invokes the engine.

Exit codes: 0 ok, 1 runtime failure, 2 configuration error, 130 interrupted.
"""
from __future__ import annotations
import argparse, os, sys
from .bundle import DEFAULT_CONFIG_PATH, prepend_bin_to_path
from .config import find_config, load_settings, build_configuration, split_partitions
from .engine import Engine
from .errors import ConfigurationError, TopologyError
from .mdstat import TopologyReader, array_names, print_topology
from .runner import CommandRunner
from .types import RunResult, Settings
from .util import dev_path, missing_tools, print_install_hint, utc_datestr, write_json

EXIT_OK = 0
EXIT_RUNTIME = 1
EXIT_CONFIG = 2

USAGE = """\
usage:
    raidgrow --create [--level RAIDLEVEL] [--chunk CHUNKKB] [--layout LAYOUT] --vg VOLGROUP --partitions PART1,PART2,PART3
    raidgrow --extend --vg VOLGROUP --raid RAIDDEV --partitions PART1
    raidgrow --remove --vg VOLGROUP --raid RAIDDEV
    raidgrow --show --raid RAIDDEV
"""


def check_root_access() -> bool:
    if os.geteuid() != 0:
        print("❌ Error: raidgrow needs root privileges to manage md arrays and LVM volumes.", file=sys.stderr)
        print(f"💡 Hint: Try: sudo {' '.join(sys.argv)} (or add --dry-run to preview the steps)", file=sys.stderr)
        return False
    return True


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="raidgrow",
        description="raidgrow: grow, create or retire an md RAID array backing an LVM volume group",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="\n" + USAGE,
    )
    mode = ap.add_mutually_exclusive_group()
    mode.add_argument("-c", "--create", dest="mode", action="store_const", const="create",
                      help="build a new array from partitions and add it to the volume group")
    mode.add_argument("-x", "--extend", dest="mode", action="store_const", const="extend",
                      help="rebuild an existing array with additional partitions")
    mode.add_argument("--remove", dest="mode", action="store_const", const="remove",
                      help="take an array out of the volume group and retire it")
    mode.add_argument("--show", dest="mode", action="store_const", const="show",
                      help="print the discovered topology of --raid and exit")
    ap.add_argument("-v", "--vg", dest="volume_group", help="LVM volume group")
    ap.add_argument("-r", "--raid", dest="raid", help="existing md device (e.g. md0 or /dev/md0)")
    ap.add_argument("-p", "--partitions", "--partition", dest="partitions",
                    help="comma-separated partitions (e.g. sdb1,/dev/sdc1)")
    ap.add_argument("-l", "--level", type=int, default=None, help="RAID level: 0, 1, 5 or 10")
    ap.add_argument("--chunk", type=int, default=None, help="chunk size in KiB (1-1024)")
    ap.add_argument("--layout", default=None,
                    help="raid5: left-symmetric etc.; raid10: near=2, far=2, offset=2")
    ap.add_argument("--dry-run", "--simulate", dest="dry_run", action="store_true",
                    help="show commands without executing")
    ap.add_argument(
        "--config",
        default=None,
        help=f"path to raidgrow.toml (default: {DEFAULT_CONFIG_PATH} then /etc/raidgrow.toml)",
    )
    return ap


def show_topology(raid: str | None, settings: Settings) -> int:
    if not raid:
        print("❌ Error: --show needs --raid", file=sys.stderr)
        return EXIT_CONFIG
    reader = TopologyReader()
    try:
        topo = reader.read_topology(dev_path(raid), settings.chunk_kb)
    except TopologyError as e:
        print(f"❌ Error: {e.message}", file=sys.stderr)
        try:
            names = array_names(reader.read_live_status())
        except OSError:
            names = []
        if names:
            print(f"💡 Hint: Active arrays: {', '.join(names)}", file=sys.stderr)
        return EXIT_RUNTIME
    print_topology(topo)
    return EXIT_OK


def write_summary(result: RunResult, settings: Settings) -> None:
    ts = utc_datestr("%Y%m%d-%H%M%S")
    path = settings.run_summary_dir / f"run-{ts}.json"
    try:
        write_json(path, result.as_dict())
        print(f"[info] run summary: {path}")
    except OSError as e:
        print(f"[warn] Could not write run summary: {e}", file=sys.stderr)


def report(result: RunResult) -> int:
    if result.ok:
        print(f"[ok] {result.mode} finished for {result.device}.")
        return EXIT_OK
    print(f"❌ Error: {result.error}", file=sys.stderr)
    if result.status == "config_error":
        return EXIT_CONFIG
    if result.status == "step_failed":
        print(
            "💡 Hint: Steps before the failing one were applied; check `cat /proc/mdstat` and `vgs` before retrying.",
            file=sys.stderr,
        )
    else:
        print("💡 Hint: Nothing was changed on the system.", file=sys.stderr)
    return EXIT_RUNTIME


def main(argv=None) -> int:
    try:
        ap = build_parser()
        args = ap.parse_args(argv)

        try:
            cfg_path = find_config(args.config)
            settings = load_settings(cfg_path)
        except FileNotFoundError as e:
            print(f"❌ Error: {e}", file=sys.stderr)
            return EXIT_CONFIG
        except Exception as e:
            print(f"❌ Error: Invalid configuration file {cfg_path}: {e}", file=sys.stderr)
            return EXIT_CONFIG

        if args.mode == "show":
            return show_topology(args.raid, settings)

        try:
            config = build_configuration(
                args.mode,
                args.volume_group,
                args.raid,
                split_partitions(args.partitions),
                settings,
                level=args.level,
                chunk_kb=args.chunk,
                layout=args.layout,
                simulate=args.dry_run,
            )
        except ConfigurationError as e:
            print(f"❌ Error: {e.message}", file=sys.stderr)
            print(USAGE, file=sys.stderr)
            return EXIT_CONFIG

        if not config.simulate and not check_root_access():
            return EXIT_CONFIG

        prepend_bin_to_path()
        missing = missing_tools()
        if missing:
            if not config.simulate:
                print_install_hint(missing)
                return EXIT_CONFIG
            print(f"[warn] Missing tools (dry run continues): {', '.join(missing)}", file=sys.stderr)

        runner = CommandRunner(simulate=config.simulate, verbose=settings.log_level == "DEBUG")
        result = Engine(config, runner=runner, reader=TopologyReader()).run()

        if not config.simulate and settings.write_summary:
            write_summary(result, settings)
        return report(result)

    except KeyboardInterrupt:
        print("\n⚡ Interrupted by user. The array may be in an intermediate state.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
