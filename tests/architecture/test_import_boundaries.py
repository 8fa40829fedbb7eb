"""
Import-boundary enforcement.

1. Engine purity      -- envelope_engines/** may not import the database,
                         ORM models, selectors, services or config layers.
2. Engine no-impure   -- envelope_engines/** may not read the wall clock or
                         the environment.
3. Kernel isolation   -- envelope_kernel/** may not import any higher layer.
4. Config direction   -- envelope_config/** may not import services or engines.

All scanning is done via AST -- these tests are read-only.
"""

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def _python_files(package: str) -> list[Path]:
    """Return all .py files under *package*, sorted for deterministic order."""
    return sorted((ROOT / package).rglob("*.py"))


def _extract_imports(filepath: Path) -> list[tuple[int, str]]:
    """Return (line_number, module_string) for every import in *filepath*."""
    tree = ast.parse(filepath.read_text(), filename=str(filepath))

    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                results.append((node.lineno, node.module))
    return results


def _matches_any(module: str, prefixes: tuple[str, ...]) -> bool:
    """True if *module* equals or is a child of any prefix."""
    return any(module == p or module.startswith(f"{p}.") for p in prefixes)


def _violations(package: str, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for filepath in _python_files(package):
        for lineno, module in _extract_imports(filepath):
            if _matches_any(module, forbidden):
                found.append(f"{filepath.relative_to(ROOT)}:{lineno} imports {module}")
    return found


class TestEnginePurity:

    FORBIDDEN = (
        "sqlalchemy",
        "envelope_kernel.db",
        "envelope_kernel.models",
        "envelope_kernel.selectors",
        "envelope_services",
        "envelope_config",
        "yaml",
    )

    def test_packages_exist(self):
        assert _python_files("envelope_engines")

    def test_engines_do_not_import_io_layers(self):
        assert _violations("envelope_engines", self.FORBIDDEN) == []

    def test_engines_do_not_read_clock_or_environment(self):
        impure = {
            "datetime.now", "datetime.utcnow", "date.today", "time.time",
            "os.environ", "os.getenv",
        }
        found = []
        for filepath in _python_files("envelope_engines"):
            tree = ast.parse(filepath.read_text(), filename=str(filepath))
            for node in ast.walk(tree):
                if isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
                    name = f"{node.value.id}.{node.attr}"
                    if name in impure:
                        found.append(f"{filepath.relative_to(ROOT)}:{node.lineno} {name}")
        assert found == []


class TestKernelIsolation:

    def test_kernel_does_not_import_higher_layers(self):
        forbidden = ("envelope_engines", "envelope_services", "envelope_config")

        assert _violations("envelope_kernel", forbidden) == []

    def test_domain_has_no_orm(self):
        forbidden = ("sqlalchemy", "envelope_kernel.db", "envelope_kernel.models")

        assert _violations("envelope_kernel/domain", forbidden) == []


class TestConfigDirection:

    def test_config_does_not_import_services_or_engines(self):
        forbidden = ("envelope_services", "envelope_engines")

        assert _violations("envelope_config", forbidden) == []
