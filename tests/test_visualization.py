"""
Tests for state chart rendering
"""
import pytest

from erp_core.workflow_engine import MachineConfig, StateConfig, StateMachine, to_ascii, to_graph, to_mermaid
from erp_core.workflow_engine.workflows import create_machine


@pytest.fixture
def quotation():
    return create_machine("quotation", id=1, total_amount=100)


class TestRenderers:
    """Tests for Mermaid, ASCII and graph output."""

    def test_mermaid(self, quotation):
        diagram = to_mermaid(quotation.to_visualization())

        lines = diagram.splitlines()
        assert lines[0] == "stateDiagram-v2"
        assert "    [*] --> draft" in lines
        assert "    draft --> submitted : SUBMIT" in lines
        assert "    converted --> [*]" in lines
        assert lines[-1] == "    class draft current"

    def test_ascii_marks_current_and_final(self, quotation):
        text = to_ascii(quotation.to_visualization())

        assert text.startswith("State Machine: quotation")
        assert "  -> draft (Draft)" in text
        assert "  ( ) submitted (Submitted)" in text
        assert "  (x) converted (Converted)" in text
        assert "  approved --[CONVERT]--> converted" in text

    @pytest.mark.asyncio
    async def test_graph_tracks_current_state(self, quotation):
        await quotation.transition("SUBMIT")

        graph = to_graph(quotation.to_visualization())

        current = [node["id"] for node in graph["nodes"] if node["current"]]
        assert current == ["submitted"]
        assert {"from": "rejected", "to": "draft", "label": "REVISE"} in graph["edges"]
        assert len(graph["nodes"]) == len(quotation.config.states)

    def test_mermaid_starts_at_declared_initial(self):
        """Test the start arrow follows ``initial``, not declaration order."""
        config = MachineConfig(
            id="ticket",
            initial="open",
            context={},
            states={
                "closed": StateConfig(label="Closed", final=True),
                "open": StateConfig(label="Open", on={"CLOSE": "closed"}),
            },
        )
        viz = StateMachine(config).to_visualization()

        lines = to_mermaid(viz).splitlines()

        assert viz.initial == "open"
        assert viz.to_dict()["initial"] == "open"
        assert "    [*] --> open" in lines
        assert "    [*] --> closed" not in lines
