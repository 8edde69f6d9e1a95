#!/usr/bin/env python3
"""
makefile.py - Task runner for the filecabinet project.

Usage:
    python makefile.py <target>

Requires: Python 3.9+, colorama (installed with the package)
"""

import os
import shutil
import subprocess
import sys

from colorama import Fore, Style
from colorama import init as _colorama_init

_colorama_init(autoreset=True)


def print_header(title):
    bar = Fore.CYAN + Style.BRIGHT + "=" * 52 + Style.RESET_ALL
    label = Fore.CYAN + Style.BRIGHT + f"  {title}" + Style.RESET_ALL
    print(f"\n{bar}\n{label}\n{bar}")


def print_step(msg):
    print(f"{Fore.YELLOW}-->{Style.RESET_ALL} {msg}")


def print_success(msg):
    print(f"{Fore.GREEN}[OK]{Style.RESET_ALL} {msg}")


def print_warn(msg):
    print(f"{Fore.YELLOW}[WARN]{Style.RESET_ALL} {msg}")


def run_cmd(args, allow_failure=False):
    """
    Run a command as a subprocess, streaming output directly to the terminal.
    Exits with the subprocess exit code on failure unless allow_failure=True.
    """
    try:
        result = subprocess.run(args)
    except FileNotFoundError:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} Command not found: '{args[0]}'")
        print(f"        Ensure '{args[0]}' is installed and on your PATH.")
        if not allow_failure:
            sys.exit(127)
        return 127
    if result.returncode != 0 and not allow_failure:
        sys.exit(result.returncode)
    return result.returncode


def target_install():
    print_header("Installing filecabinet (editable, with test extras)")
    run_cmd([sys.executable, "-m", "pip", "install", "-e", ".[test]"])
    print_success("Installed")


def target_test():
    print_header("Running All Tests")
    run_cmd([sys.executable, "-m", "pytest", "tests", "-v"])


def target_test_storage():
    print_header("Running Storage Tests")
    run_cmd([sys.executable, "-m", "pytest", "tests/test_storage", "-v"])


def target_run():
    print_header("Running File Cabinet (memory mode)")
    run_cmd([sys.executable, "-m", "filecabinet.main"])


def target_run_file():
    print_header("Running File Cabinet (file mode, cache + stopwatch + logger)")
    run_cmd([sys.executable, "-m", "filecabinet.main", "--storage", "file",
             "--use-cache", "--use-stopwatch", "--use-logger"])


def target_generate():
    print_header("Generating Sample Records")
    os.makedirs("data", exist_ok=True)
    run_cmd([sys.executable, "-m", "filecabinet.generator", "--output-type", "csv",
             "--output", os.path.join("data", "records.csv"),
             "--records-amount", "100", "--start-id", "1"])
    run_cmd([sys.executable, "-m", "filecabinet.generator", "--output-type", "xml",
             "--output", os.path.join("data", "records.xml"),
             "--records-amount", "100", "--start-id", "101"])
    print_success("Sample files written to data/")


def target_clean():
    print_header("Cleaning Caches and Generated Files")
    for path in (".pytest_cache", "data", "build"):
        if os.path.exists(path):
            try:
                shutil.rmtree(path)
                print_step(f"Removed {path}")
            except OSError as exc:
                print_warn(f"Could not remove {path}: {exc}")
    for root, dirs, _ in os.walk("."):
        for name in dirs:
            if name == "__pycache__":
                shutil.rmtree(os.path.join(root, name), ignore_errors=True)
    print_success("Clean")


TARGETS = {
    "install": (target_install, "pip install -e .[test]", "Build"),
    "test": (target_test, "Run all tests", "Testing"),
    "test-storage": (target_test_storage, "Run storage engine tests only", "Testing"),
    "run": (target_run, "Run the console in memory mode", "Run"),
    "run-file": (target_run_file, "Run in file mode with every decorator", "Run"),
    "generate": (target_generate, "Write sample csv/xml files to data/", "Run"),
    "clean": (target_clean, "Remove caches and generated files", "Tools"),
    "help": (None, "Show this help message", "Meta"),
}


def target_help():
    from collections import defaultdict

    title = (
        Fore.CYAN
        + Style.BRIGHT
        + "File Cabinet - Available Commands"
        + Style.RESET_ALL
    )
    print(f"\n{title}\n")
    groups = defaultdict(list)
    for name, (_, desc, group) in TARGETS.items():
        groups[group].append((name, desc))
    group_order = ["Testing", "Build", "Run", "Tools", "Meta"]
    for group in group_order:
        if group not in groups:
            continue
        header = Fore.YELLOW + Style.BRIGHT + f"{group}:" + Style.RESET_ALL
        print(header)
        for name, desc in groups[group]:
            padded = name.ljust(24)
            print(f"  {Fore.GREEN}{padded}{Style.RESET_ALL}  {desc}")
        print()


TARGETS["help"] = (target_help, "Show this help message", "Meta")


def main():
    if len(sys.argv) < 2:
        target_help()
        sys.exit(0)

    name = sys.argv[1]

    if name not in TARGETS:
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} Unknown target: '{name}'")
        print("  Run:  python makefile.py help  to list all available targets.")
        sys.exit(1)

    func, _, _ = TARGETS[name]
    func()


if __name__ == "__main__":
    main()
