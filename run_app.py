from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path


def main() -> int:
    """
    Description: Launch the Streamlit admin console locally.
    Layer: L0
    Input: optional --port N (default 8501)
    Output: exit code
    """
    root = Path(__file__).resolve().parent

    env = os.environ.copy()
    env["PYTHONPATH"] = str(root / "src") + (os.pathsep + env.get("PYTHONPATH", "") if env.get("PYTHONPATH") else "")

    port = "8501"
    if "--port" in sys.argv:
        port = sys.argv[sys.argv.index("--port") + 1]

    ui_cmd = [
        sys.executable, "-m", "streamlit",
        "run", "admin_console.py",
        "--server.port", port,
    ]

    print("\n== Manpower Admin Local Launcher ==")
    print(f"UI : http://localhost:{port}\n")
    print("Starting Streamlit:", " ".join(ui_cmd))
    ui = subprocess.Popen(ui_cmd, cwd=str(root), env=env)

    try:
        return ui.wait()
    except KeyboardInterrupt:
        print("Stopping…")
        ui.terminate()
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
