#!/usr/bin/env python3
"""
Run FormDesk with correct PYTHONPATH (works on Windows and Unix).
Usage: python scripts/run_app.py [args...]
Example: python scripts/run_app.py scans/ --report --review
         python scripts/run_app.py form1.jpg form2.pdf -o output/forms.csv
"""
import os
import subprocess
import sys

script_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(script_dir)
src = os.path.join(project_root, "src")
app_script = os.path.join(src, "formdesk.py")

env = os.environ.copy()
env["PYTHONPATH"] = src

sys.exit(
    subprocess.run(
        [sys.executable, app_script] + sys.argv[1:],
        cwd=project_root,
        env=env,
    ).returncode
)
