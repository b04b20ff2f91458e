"""
Integration tests for the command line
"""

from pathlib import Path

from typer.testing import CliRunner

from callchain.cli import app


runner = CliRunner()


class TestAnalyzeCommand:
    """callchain <workspace> <type> [action]"""

    def test_call_chain(self, shop_workspace: Path):
        result = runner.invoke(app, [str(shop_workspace), "Orders", "Create"])

        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "Analyzing call chain for Orders.Create..."
        assert lines[1] == f"Loading workspace: {shop_workspace}"
        assert lines[2] == "Call chain:"
        assert lines[3:] == [
            "→ OrdersController.create",
            "  → OrderService.place",
            "    → OrderRepository.save",
            "    [Creates Order]",
            "    → Order.__init__",
            "      [Uses dependency: Any]",
            "    [Uses dependency: OrderRepository]",
            "    → OrderRepository.save",
            "      (already analyzed - preventing cycle)",
            "  [Uses dependency: OrderService]",
            "  → OrderService.place",
            "    (already analyzed - preventing cycle)",
            "Analysis complete.",
        ]

    def test_discovery_lists_actions(self, shop_workspace: Path):
        result = runner.invoke(app, [str(shop_workspace), "OrdersController"])

        assert result.exit_code == 0
        assert result.stdout.splitlines()[2:] == [
            "Available actions in OrdersController:",
            "  - create",
            "  - show",
        ]
        assert "Call chain:" not in result.stdout

    def test_unknown_controller(self, shop_workspace: Path):
        result = runner.invoke(app, [str(shop_workspace), "Invoices", "Create"])

        assert result.exit_code == 1
        assert "Controller 'Invoices' not found." in result.stdout
        assert "Call chain:" not in result.stdout

    def test_unknown_action(self, shop_workspace: Path):
        result = runner.invoke(app, [str(shop_workspace), "Orders", "Cancel"])

        assert result.exit_code == 1
        assert "Action method 'Cancel' not found in controller 'Orders'." in result.stdout
        assert "→" not in result.stdout

    def test_missing_workspace(self, tmp_path: Path):
        result = runner.invoke(app, [str(tmp_path / "nowhere"), "Orders", "Create"])

        assert result.exit_code == 1
        assert "Workspace not found" in result.stdout

    def test_config_applies_depth_cap(self, shop_workspace: Path):
        (shop_workspace / "callchain.yaml").write_text("walker:\n  max_depth: 1\n")

        result = runner.invoke(app, [str(shop_workspace), "Orders", "Create"])

        assert result.exit_code == 0
        assert "    (maximum depth reached - not expanded)" in result.stdout.splitlines()
        assert "OrderRepository.save" not in result.stdout

    def test_missing_arguments(self):
        result = runner.invoke(app, [])

        assert result.exit_code != 0
