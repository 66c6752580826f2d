#!/usr/bin/env python
"""Installation script to create virtual environment and install package."""

import os
import sys
import subprocess
import platform
import shutil

def run_command(cmd, description):
    """Run a command and handle errors."""
    print(f"\n{'='*60}")
    print(f"[*] {description}")
    print(f"{'='*60}")
    try:
        result = subprocess.run(cmd, shell=True, check=True)
        if result.returncode == 0:
            print(f"[OK] {description} - Success!")
        return result.returncode
    except subprocess.CalledProcessError:
        print(f"[ERR] {description} - Failed!")
        sys.exit(1)

def main():
    print("\n" + "="*60)
    print("[SETUP] Manga Catalog - One-Time Setup")
    print("="*60)

    is_windows = platform.system() == "Windows"

    if os.path.exists(".venv"):
        print("\n[*] Removing existing virtual environment...")
        shutil.rmtree(".venv")

    print("\n[1/3] Creating virtual environment...")
    venv_cmd = "py -m venv .venv" if is_windows else "python3 -m venv .venv"
    run_command(venv_cmd, "Create virtual environment")

    print("\n[2/3] Installing package...")
    python = ".venv\\Scripts\\python.exe" if is_windows else "./.venv/bin/python"
    run_command(f"{python} -m pip install -e .", "Install package and dependencies")

    print("\n[3/3] Preparing data directory...")
    os.makedirs("data", exist_ok=True)
    if not os.path.exists(os.path.join("data", "config.yaml")) and os.path.exists("config.example.yaml"):
        shutil.copy("config.example.yaml", os.path.join("data", "config.yaml"))
        print("[OK] Created data/config.yaml from config.example.yaml")

    print("\n" + "="*60)
    print("[OK] Setup Complete!")
    print("="*60)
    print("\n[NEXT] What to do now:")
    print("\n1. Activate virtual environment:")
    if is_windows:
        print("   .venv\\Scripts\\activate")
    else:
        print("   source .venv/bin/activate")

    print("\n2. Run commands:")
    print("   manga-catalog add \"One Piece\" --rating EX")
    print("   manga-catalog list --sort rating")
    print("   manga-catalog stats")
    print("   manga-catalog web")

    print("\n" + "="*60 + "\n")

if __name__ == "__main__":
    main()
