import ast
import tomllib
from pathlib import Path

TESTS_ROOT = Path(__file__).resolve().parent
SOURCE_ROOT = TESTS_ROOT.parent / "devcamper"
PYPROJECT = TESTS_ROOT.parents[1] / "pyproject.toml"

# Session calls that belong in tests/helpers, never inline in a test body.
SESSION_CALLS_OUTSIDE_HELPERS = frozenset(
    {"add", "add_all", "commit", "delete", "execute", "flush", "get", "query", "refresh", "scalar"}
)
WEB_FRAMEWORK_PACKAGES = frozenset({"fastapi", "starlette"})
STORAGE_PACKAGES = frozenset({"sqlalchemy"})


def _parse(file_path: Path) -> ast.Module:
    return ast.parse(file_path.read_text(encoding="utf-8"))


def _test_modules() -> list[Path]:
    return sorted(
        path
        for path in TESTS_ROOT.rglob("test_*.py")
        if "helpers" not in path.parts and path != Path(__file__).resolve()
    )


def _session_calls(tree: ast.Module) -> list[tuple[str, int]]:
    found: list[tuple[str, int]] = []
    test_functions = (
        node for node in tree.body if isinstance(node, ast.FunctionDef) and node.name.startswith("test_")
    )
    for function in test_functions:
        for call in (node for node in ast.walk(function) if isinstance(node, ast.Call)):
            target = call.func
            if (
                isinstance(target, ast.Attribute)
                and isinstance(target.value, ast.Name)
                and target.value.id == "db_session"
                and target.attr in SESSION_CALLS_OUTSIDE_HELPERS
            ):
                found.append((function.name, call.lineno))
    return found


def _imports_from(tree: ast.Module, packages: frozenset[str]) -> list[int]:
    lines = []
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            modules = [node.module]
        elif isinstance(node, ast.Import):
            modules = [alias.name for alias in node.names]
        else:
            continue
        if any(module.split(".")[0] in packages for module in modules):
            lines.append(node.lineno)
    return lines


def test_no_direct_db_session_calls_inside_test_functions():
    """
    Validate test bodies go through helpers for persistence.

    1. Discover test modules outside tests/helpers.
    2. Parse each module and walk only test_* functions.
    3. Collect calls made directly on db_session.
    4. Validate none are found, listing file and line otherwise.
    """
    errors = [
        f"{path.relative_to(TESTS_ROOT)}:{line} in {name}"
        for path in _test_modules()
        for name, line in _session_calls(_parse(path))
    ]
    assert not errors, "Direct db_session calls found in test methods:\n" + "\n".join(errors)


def test_application_services_do_not_depend_on_the_web_framework():
    """
    Validate the service layer stays transport independent.

    1. Discover every module under application/.
    2. Parse each module.
    3. Collect fastapi or starlette imports.
    4. Validate none are found, listing file and line otherwise.
    """
    errors = [
        f"{path.relative_to(SOURCE_ROOT)}:{line}"
        for path in sorted((SOURCE_ROOT / "application").rglob("*.py"))
        for line in _imports_from(_parse(path), WEB_FRAMEWORK_PACKAGES)
    ]
    assert not errors, "Web framework imports found in application layer:\n" + "\n".join(errors)


def test_advanced_results_pipeline_is_storage_agnostic():
    """
    Validate the listing pipeline only talks to the Collection protocol.

    1. Locate the advanced results service module.
    2. Parse it.
    3. Collect sqlalchemy imports.
    4. Validate there are none.
    """
    pipeline = SOURCE_ROOT / "application" / "services" / "advanced_results_service.py"
    assert _imports_from(_parse(pipeline), STORAGE_PACKAGES) == []


def test_package_metadata_declares_no_working_documents():
    """
    Validate distribution metadata only points at shipped files.

    1. Load pyproject.toml.
    2. Read the project table.
    3. Validate no readme is declared from the working documents.
    """
    project = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))["project"]
    assert project.get("readme") not in {"SPEC_FULL.md", "spec.md", "DESIGN.md"}
