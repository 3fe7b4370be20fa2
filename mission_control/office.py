"""
Office roster: the simulated AI team shown on the Office page.

Nothing here is persisted; every server start begins from the default roster.
"""
from enum import Enum
from dataclasses import dataclass
from typing import List, Dict, Any


class AgentStatus(Enum):
    WORKING = "working"
    CHATTING = "chatting"
    WALKING = "walking"
    IDLE = "idle"


@dataclass
class Agent:
    id: str
    name: str
    status: AgentStatus
    x: int
    y: int
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value,
            "x": self.x,
            "y": self.y,
            "color": self.color,
        }


def default_roster() -> List[Agent]:
    return [
        Agent("1", "Alex", AgentStatus.WORKING, 3, 4, "#FCD34D"),
        Agent("2", "Henry", AgentStatus.WORKING, 6, 2, "#60A5FA"),
        Agent("3", "Scout", AgentStatus.WORKING, 5, 5, "#9CA3AF"),
        Agent("4", "Quill", AgentStatus.CHATTING, 2, 5, "#C084FC"),
        Agent("5", "Echo", AgentStatus.WORKING, 4, 5, "#34D399"),
        Agent("6", "Codex", AgentStatus.WORKING, 6, 5, "#F87171"),
        Agent("7", "Pixel", AgentStatus.IDLE, 7, 6, "#FB923C"),
        Agent("8", "Benedict", AgentStatus.WORKING, 1, 6, "#8B5CF6"),
        Agent("9", "Boris", AgentStatus.WORKING, 2, 2, "#EF4444"),
        Agent("10", "Beane", AgentStatus.WORKING, 8, 4, "#10B981"),
    ]


class Office:
    """Holds the roster and the two team-wide actions."""

    # Top-left cell of the conference area, three seats per row
    CONFERENCE_ORIGIN = (4, 4)
    CONFERENCE_ROW = 3

    def __init__(self, agents: List[Agent] = None):
        self.agents = agents if agents is not None else default_roster()

    def all_working(self) -> None:
        for agent in self.agents:
            agent.status = AgentStatus.WORKING

    def gather(self) -> None:
        """Walk everyone to the conference area."""
        x0, y0 = self.CONFERENCE_ORIGIN
        for i, agent in enumerate(self.agents):
            agent.x = x0 + i % self.CONFERENCE_ROW
            agent.y = y0 + i // self.CONFERENCE_ROW
            agent.status = AgentStatus.WALKING

    def status_counts(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in AgentStatus}
        for agent in self.agents:
            counts[agent.status.value] += 1
        return counts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agents": [a.to_dict() for a in self.agents],
            "statusCounts": self.status_counts(),
        }
