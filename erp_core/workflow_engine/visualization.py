"""
State Machine Visualization
===========================
Render a ``MachineVisualization`` as Mermaid, ASCII or a node/edge graph.
"""

from typing import Any, Dict, List

from .types import MachineVisualization


def to_mermaid(viz: MachineVisualization) -> str:
    """Mermaid ``stateDiagram-v2`` source with the current state highlighted."""
    lines = ["stateDiagram-v2"]

    for state in viz.states:
        lines.append(f"    {state.name} : {state.label}")

    lines.append(f"    [*] --> {viz.initial}")

    for t in viz.transitions:
        lines.append(f"    {t.source} --> {t.target} : {t.event}")

    for state in viz.states:
        if state.final:
            lines.append(f"    {state.name} --> [*]")

    lines.append("")
    lines.append("    classDef current fill:#f97316,color:#fff")
    lines.append(f"    class {viz.current_state} current")

    return "\n".join(lines)


def to_ascii(viz: MachineVisualization) -> str:
    """Plain-text listing for logs and terminals."""
    lines = [f"State Machine: {viz.id}", "=" * 40, "", "States:"]

    for state in viz.states:
        if state.name == viz.current_state:
            marker = "->"
        elif state.final:
            marker = "(x)"
        else:
            marker = "( )"
        lines.append(f"  {marker} {state.name} ({state.label})")

    lines.append("")
    lines.append("Transitions:")
    for t in viz.transitions:
        lines.append(f"  {t.source} --[{t.event}]--> {t.target}")

    return "\n".join(lines)


def to_graph(viz: MachineVisualization) -> Dict[str, List[Dict[str, Any]]]:
    """Nodes and edges for custom diagram renderers."""
    return {
        "nodes": [
            {
                "id": state.name,
                "label": state.label,
                "final": state.final,
                "current": state.name == viz.current_state,
            }
            for state in viz.states
        ],
        "edges": [
            {"from": t.source, "to": t.target, "label": t.event}
            for t in viz.transitions
        ],
    }
