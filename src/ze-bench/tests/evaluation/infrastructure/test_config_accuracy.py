"""Tests for ConfigAccuracyEvaluator and its individual setup checks."""

import json
from pathlib import Path

import pytest

from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.core.run_context import RunContext
from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.infrastructure.config_accuracy import (
    ConfigAccuracyEvaluator,
    check_components_json,
    check_tailwind_setup,
    check_tsconfig,
    check_vite_config,
)

_VITE_CONFIG = """\
import path from "path"
import tailwindcss from "@tailwindcss/vite"
import react from "@vitejs/plugin-react"
import { defineConfig } from "vite"

export default defineConfig({
  plugins: [react(), tailwindcss()],
  resolve: { alias: { "@": path.resolve(__dirname, "./src") } },
})
"""

_COMPONENTS_JSON = {"style": "new-york", "tsx": True, "aliases": {"components": "@/components"}}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_project(root: Path) -> Path:
    """Write a fully configured Vite + Tailwind + shadcn project under *root*."""
    (root / "src").mkdir(parents=True)
    (root / "package.json").write_text("{}")
    (root / "vite.config.ts").write_text(_VITE_CONFIG)
    (root / "src" / "index.css").write_text('@import "tailwindcss";\n')
    (root / "tsconfig.json").write_text('{"compilerOptions": {"paths": {"@/*": ["./src/*"]}}}')
    (root / "tsconfig.app.json").write_text("{}")
    (root / "components.json").write_text(json.dumps(_COMPONENTS_JSON))
    return root


def _make_context(workspace: Path, reference: Path | None) -> EvaluationContext:
    return EvaluationContext(
        scenario=ScenarioConfig(id="shadcn-setup", reference_path=reference),
        workspace_dir=workspace,
        run=RunContext(),
    )


# ---------------------------------------------------------------------------
# Evaluator
# ---------------------------------------------------------------------------


class TestConfigAccuracyEvaluator:
    async def test_fully_configured_project(self, tmp_path: Path) -> None:
        reference = tmp_path / "reference"
        reference.mkdir()
        workspace = _make_project(tmp_path / "workspace")

        result = await ConfigAccuracyEvaluator().evaluate(_make_context(workspace, reference))

        assert result.name == "config_accuracy"
        assert result.score == pytest.approx(1.0)
        details = json.loads(result.details)
        assert [check["name"] for check in details["checks"]] == [
            "vite.config.ts",
            "tailwind-setup",
            "tsconfig",
            "components.json",
        ]

    async def test_project_in_subdirectory_skips_control(self, tmp_path: Path) -> None:
        reference = tmp_path / "reference"
        reference.mkdir()
        workspace = tmp_path / "workspace"
        (workspace / "control").mkdir(parents=True)
        (workspace / "control" / "package.json").write_text("{}")
        _make_project(workspace / "my-app")
        (workspace / "my-app" / "components.json").unlink()

        result = await ConfigAccuracyEvaluator().evaluate(_make_context(workspace, reference))

        assert result.score == pytest.approx(0.75)

    async def test_missing_reference(self, tmp_path: Path) -> None:
        workspace = _make_project(tmp_path / "workspace")

        result = await ConfigAccuracyEvaluator().evaluate(_make_context(workspace, tmp_path / "nowhere"))

        assert result.score == 0.0
        assert result.details == "Reference implementation not found"

    async def test_no_project_directory(self, tmp_path: Path) -> None:
        result = await ConfigAccuracyEvaluator().evaluate(_make_context(tmp_path, tmp_path))

        assert result.score == 0.0
        assert "project directory not found" in result.details


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


class TestChecks:
    def test_vite_config_missing_plugins(self, tmp_path: Path) -> None:
        (tmp_path / "vite.config.ts").write_text("import react from '@vitejs/plugin-react'\n")

        check = check_vite_config(tmp_path)

        assert check.score == pytest.approx(1 / 3, abs=1e-4)
        assert check.reason == "missing Tailwind plugin, missing path alias config"

    def test_vite_config_absent(self, tmp_path: Path) -> None:
        assert check_vite_config(tmp_path).reason == "File does not exist"

    @pytest.mark.parametrize("css", ['@import "tailwindcss";', "@tailwind base;\n@tailwind utilities;"])
    def test_tailwind_v3_and_v4_syntax(self, tmp_path: Path, css: str) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.css").write_text(css)

        assert check_tailwind_setup(tmp_path).score == 1.0

    def test_tailwind_without_imports(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "index.css").write_text("body { margin: 0; }")

        assert check_tailwind_setup(tmp_path).reason == "No Tailwind imports found"

    def test_tsconfig_without_app_config_or_paths(self, tmp_path: Path) -> None:
        (tmp_path / "tsconfig.json").write_text('{"compilerOptions": {"strict": true}}')

        check = check_tsconfig(tmp_path)

        assert check.score == 0.5
        assert check.reason == "tsconfig.json exists, missing tsconfig.app.json, missing path aliases"

    def test_components_json_invalid(self, tmp_path: Path) -> None:
        (tmp_path / "components.json").write_text("{not json")

        assert check_components_json(tmp_path).reason == "Invalid JSON"

    def test_components_json_paths_from_aliases(self, tmp_path: Path) -> None:
        (tmp_path / "components.json").write_text(json.dumps({"aliases": {"components": "@/components"}}))

        check = check_components_json(tmp_path)

        assert check.score == pytest.approx(2 / 3, abs=1e-4)
        assert check.reason == "missing style config"
