"""
Tests that the HTTP server can be imported without the CLI.
"""

import os
import subprocess
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parent.parent / "src"


def imported_modules_after(module_name: str) -> set[str]:
    """Import a module in a fresh interpreter and return every loaded module name."""
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(SRC_DIR), env.get("PYTHONPATH")]))
    code = f"import sys, {module_name}; print('\\n'.join(sorted(sys.modules)))"
    completed = subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        env=env,
        check=True,
    )
    return set(completed.stdout.split())


def test_http_server_does_not_import_cli():
    modules = imported_modules_after("ragent.http_server")

    cli_imports = [mod for mod in modules if mod.startswith("ragent.cli")]
    assert cli_imports == [], f"HTTP server should not import CLI modules: {cli_imports}"


def test_http_server_imports_from_services_container():
    modules = imported_modules_after("ragent.http_server")

    assert "ragent.services.container" in modules
