"""Unit tests for the import boundary checking script.

Tests verify that the hexagonal architecture import rules are enforced:
- domain/ imports NOTHING from other registrar_trust layers, and no
  third-party packages
- application/ and config/ import from domain/ only
- infrastructure/ imports from domain/ and application/
- bootstrap/ wires everything together
"""

import ast

# Import from scripts directory
import sys
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

from check_imports import (
    ALLOWED_IMPORTS,
    LAYER_HIERARCHY,
    check_file_imports,
    check_import_boundaries,
    format_violations,
    get_import_module,
)

PACKAGE_DIR = Path(__file__).parent.parent.parent / "registrar_trust"


class TestLayerHierarchy:
    """Test that the layer hierarchy is correctly defined."""

    def test_domain_is_innermost(self) -> None:
        """Domain should be the innermost layer (level 0)."""
        assert LAYER_HIERARCHY["domain"] == 0

    def test_application_and_config_are_level_1(self) -> None:
        """Application and config sit directly on the domain."""
        assert LAYER_HIERARCHY["application"] == 1
        assert LAYER_HIERARCHY["config"] == 1

    def test_infrastructure_is_level_2(self) -> None:
        """Infrastructure should be level 2."""
        assert LAYER_HIERARCHY["infrastructure"] == 2

    def test_bootstrap_is_outermost(self) -> None:
        """Bootstrap should be the outermost layer (level 3)."""
        assert LAYER_HIERARCHY["bootstrap"] == 3


class TestAllowedImports:
    """Test that the allowed imports are correctly defined."""

    def test_domain_imports_nothing(self) -> None:
        """Domain should not be allowed to import any package layers."""
        assert ALLOWED_IMPORTS["domain"] == set()

    def test_application_imports_domain_only(self) -> None:
        """Application can only import from domain."""
        assert ALLOWED_IMPORTS["application"] == {"domain"}

    def test_config_imports_domain_only(self) -> None:
        """Config can only import from domain."""
        assert ALLOWED_IMPORTS["config"] == {"domain"}

    def test_infrastructure_imports_domain_and_application(self) -> None:
        """Infrastructure can import from domain and application."""
        assert ALLOWED_IMPORTS["infrastructure"] == {"domain", "application"}

    def test_bootstrap_imports_everything(self) -> None:
        """Bootstrap wires every layer."""
        assert ALLOWED_IMPORTS["bootstrap"] == {
            "domain",
            "application",
            "config",
            "infrastructure",
        }


class TestGetImportModule:
    """Test the get_import_module helper function."""

    def test_import_from_statement(self) -> None:
        """Test extraction from 'from x import y' statement."""
        tree = ast.parse("from registrar_trust.domain.models import ObjectType")
        node = tree.body[0]
        assert isinstance(node, ast.ImportFrom)
        assert get_import_module(node) == "registrar_trust.domain.models"

    def test_import_statement(self) -> None:
        """Test extraction from 'import x' statement."""
        tree = ast.parse("import registrar_trust.domain.models")
        node = tree.body[0]
        assert isinstance(node, ast.Import)
        assert get_import_module(node) == "registrar_trust.domain.models"

    def test_none_for_relative_import(self) -> None:
        """Test that relative imports return None for module."""
        tree = ast.parse("from . import something")
        node = tree.body[0]
        assert isinstance(node, ast.ImportFrom)
        assert get_import_module(node) is None


class TestCheckFileImports:
    """Test the check_file_imports function with temporary files."""

    @pytest.fixture
    def temp_package_dir(self) -> Path:
        """Create a temporary registrar_trust directory structure."""
        with tempfile.TemporaryDirectory() as tmpdir:
            package_dir = Path(tmpdir) / "registrar_trust"
            package_dir.mkdir()

            for layer in LAYER_HIERARCHY:
                (package_dir / layer).mkdir()
                (package_dir / layer / "__init__.py").write_text("")

            yield package_dir

    def test_valid_import_domain_to_stdlib(self, temp_package_dir: Path) -> None:
        """Domain can import from standard library."""
        domain_file = temp_package_dir / "domain" / "module.py"
        domain_file.write_text("import os\nfrom dataclasses import dataclass")

        assert check_file_imports(domain_file, temp_package_dir) == []

    def test_valid_import_application_to_domain(self, temp_package_dir: Path) -> None:
        """Application can import from domain."""
        app_file = temp_package_dir / "application" / "service.py"
        app_file.write_text(
            "from registrar_trust.domain.errors import ObjectStoreError"
        )

        assert check_file_imports(app_file, temp_package_dir) == []

    def test_valid_import_application_to_pydantic(self, temp_package_dir: Path) -> None:
        """Application may use third-party libraries."""
        app_file = temp_package_dir / "application" / "dtos.py"
        app_file.write_text(
            "from pydantic import BaseModel\nfrom structlog import get_logger"
        )

        assert check_file_imports(app_file, temp_package_dir) == []

    def test_valid_import_infrastructure_to_application(
        self, temp_package_dir: Path
    ) -> None:
        """Infrastructure can import from application (for ports)."""
        infra_file = temp_package_dir / "infrastructure" / "adapter.py"
        infra_file.write_text(
            "from registrar_trust.application.ports import ObjectStoreProtocol"
        )

        assert check_file_imports(infra_file, temp_package_dir) == []

    def test_valid_bootstrap_imports(self, temp_package_dir: Path) -> None:
        """Bootstrap can import from every layer."""
        bootstrap_file = temp_package_dir / "bootstrap" / "wiring.py"
        bootstrap_file.write_text(
            "from registrar_trust.config.verifier_config import VerifierConfig\n"
            "from registrar_trust.infrastructure.stubs import InMemoryObjectStore\n"
        )

        assert check_file_imports(bootstrap_file, temp_package_dir) == []

    def test_package_root_not_checked(self, temp_package_dir: Path) -> None:
        """Modules at the package root (the CLI) are outside any layer."""
        cli_file = temp_package_dir / "cli.py"
        cli_file.write_text("from registrar_trust.bootstrap import create_object_store")

        assert check_file_imports(cli_file, temp_package_dir) == []

    def test_violation_domain_imports_infrastructure(
        self, temp_package_dir: Path
    ) -> None:
        """Domain importing infrastructure should be detected."""
        domain_file = temp_package_dir / "domain" / "bad_module.py"
        domain_file.write_text(
            "from registrar_trust.infrastructure.adapters "
            "import RegistrarAPIObjectStore"
        )

        violations = check_file_imports(domain_file, temp_package_dir)
        assert len(violations) == 1
        assert violations[0][0] == str(domain_file)
        assert violations[0][1] == 1  # Line number
        assert "domain layer cannot import from infrastructure" in violations[0][2]

    def test_violation_domain_imports_third_party(self, temp_package_dir: Path) -> None:
        """Domain importing pydantic should be detected."""
        domain_file = temp_package_dir / "domain" / "bad_module.py"
        domain_file.write_text("import os\nfrom pydantic import BaseModel")

        violations = check_file_imports(domain_file, temp_package_dir)
        assert len(violations) == 1
        assert violations[0][1] == 2
        assert "third-party package pydantic" in violations[0][2]

    def test_violation_domain_imports_signature_library(
        self, temp_package_dir: Path
    ) -> None:
        """Domain importing the OpenPGP library should be detected."""
        domain_file = temp_package_dir / "domain" / "bad_module.py"
        domain_file.write_text("from pgpy import PGPKey")

        violations = check_file_imports(domain_file, temp_package_dir)
        assert len(violations) == 1
        assert "third-party package pgpy" in violations[0][2]

    def test_violation_application_imports_infrastructure(
        self, temp_package_dir: Path
    ) -> None:
        """Application importing infrastructure should be detected."""
        app_file = temp_package_dir / "application" / "bad_service.py"
        app_file.write_text(
            "from registrar_trust.infrastructure.observability "
            "import configure_structlog"
        )

        violations = check_file_imports(app_file, temp_package_dir)
        assert len(violations) == 1
        assert "application layer cannot import from infrastructure" in violations[0][2]

    def test_violation_config_imports_application(self, temp_package_dir: Path) -> None:
        """Config importing application should be detected."""
        config_file = temp_package_dir / "config" / "bad_config.py"
        config_file.write_text(
            "from registrar_trust.application.dtos import DomainExport"
        )

        violations = check_file_imports(config_file, temp_package_dir)
        assert len(violations) == 1
        assert "config layer cannot import from application" in violations[0][2]

    def test_violation_infrastructure_imports_bootstrap(
        self, temp_package_dir: Path
    ) -> None:
        """Infrastructure importing bootstrap should be detected."""
        infra_file = temp_package_dir / "infrastructure" / "bad_adapter.py"
        infra_file.write_text(
            "from registrar_trust.bootstrap import create_object_store"
        )

        violations = check_file_imports(infra_file, temp_package_dir)
        assert len(violations) == 1
        assert "infrastructure layer cannot import from bootstrap" in violations[0][2]

    def test_multiple_violations_in_single_file(self, temp_package_dir: Path) -> None:
        """Multiple violations in one file should all be detected."""
        domain_file = temp_package_dir / "domain" / "very_bad_module.py"
        domain_file.write_text(
            "from registrar_trust.infrastructure.adapters import A\n"
            "from registrar_trust.application.services import B\n"
            "import structlog\n"
        )

        violations = check_file_imports(domain_file, temp_package_dir)
        assert len(violations) == 3


class TestCheckImportBoundaries:
    """Test the main check_import_boundaries function."""

    def test_empty_directory(self) -> None:
        """Should handle empty directory gracefully."""
        with tempfile.TemporaryDirectory() as tmpdir:
            package_dir = Path(tmpdir) / "registrar_trust"
            package_dir.mkdir()

            assert check_import_boundaries(package_dir) == []

    def test_nonexistent_directory(self) -> None:
        """Should handle nonexistent directory gracefully."""
        assert check_import_boundaries(Path("/nonexistent/path")) == []

    def test_scans_all_python_files(self) -> None:
        """Should scan all .py files recursively."""
        with tempfile.TemporaryDirectory() as tmpdir:
            package_dir = Path(tmpdir) / "registrar_trust"
            domain_dir = package_dir / "domain" / "subdir"
            domain_dir.mkdir(parents=True)

            nested_file = domain_dir / "nested.py"
            nested_file.write_text(
                "from registrar_trust.infrastructure import something"
            )

            violations = check_import_boundaries(package_dir)
            assert len(violations) == 1
            assert "nested.py" in violations[0][0]

    def test_format_violations(self) -> None:
        """Violations are reported one per line with a total."""
        report = format_violations([("a.py", 3, "domain layer cannot import from x")])
        assert "a.py:3: domain layer cannot import from x" in report
        assert "Total: 1 violation(s)" in report
        assert format_violations([]) == ""

    def test_project_has_no_violations(self) -> None:
        """The registrar_trust package itself respects the boundaries."""
        violations = check_import_boundaries(PACKAGE_DIR)
        assert violations == [], format_violations(violations)
