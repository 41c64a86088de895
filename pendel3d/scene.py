"""
Plotly figures for the pendulum scene and the energy charts.

Only presentation happens here: the figures read the current angle and the
latest energy sample, nothing is written back.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import plotly.graph_objects as go

from pendel3d.energy import EnergyHistory, EnergySample
from pendel3d.physics import bob_position

SCALE_ANGLES = (math.pi / 2, math.pi / 4, 0.0, -math.pi / 4, -math.pi / 2)
SCALE_GROUP_ROTATION = -math.pi / 2

ENERGY_LABELS = ("Mechanical Energy", "Potential Energy", "Kinetic Energy")
ENERGY_COLORS = ("red", "green", "blue")


@dataclass(frozen=True)
class AngleLabel:
    text: str
    position: Tuple[float, float, float]
    rotation: float


def _label_rotation(angle: float) -> float:
    if angle < 0:
        return -angle
    if angle == 0:
        return math.pi / 2
    return angle


def angle_scale_labels(length: float, offset: float = 0.5) -> List[AngleLabel]:
    """Fixed labels of the angle scale, in world coordinates.

    The labels are laid out on a circle of radius ``length + offset`` inside a
    group that is itself turned by -90 degrees, so 0 degrees ends up below the
    pivot next to the resting bob.
    """
    radius = length + offset
    c = math.cos(SCALE_GROUP_ROTATION)
    s = math.sin(SCALE_GROUP_ROTATION)
    labels = []
    for angle in SCALE_ANGLES:
        lx = radius * math.cos(angle)
        ly = radius * math.sin(angle)
        position = (c * lx - s * ly, s * lx + c * ly, 0.0)
        labels.append(AngleLabel(
            text="{:.0f}°".format(math.degrees(angle)),
            position=position,
            rotation=_label_rotation(angle),
        ))
    return labels


def build_scene_figure(angle: float, length: float, labels: Sequence[AngleLabel]) -> go.Figure:
    bx, by, bz = bob_position(angle, length)
    extent = length * 1.5

    fig = go.Figure()

    # rod
    fig.add_trace(go.Scatter3d(
        x=[0.0, bx], y=[0.0, by], z=[0.0, bz],
        mode="lines", line=dict(color="#D1D5DB", width=8),
        hoverinfo="skip", showlegend=False,
    ))
    # bob
    fig.add_trace(go.Scatter3d(
        x=[bx], y=[by], z=[bz],
        mode="markers", marker=dict(size=14, color="#F3F4F6"),
        hoverinfo="skip", showlegend=False,
    ))
    # pivot
    fig.add_trace(go.Scatter3d(
        x=[0.0], y=[0.0], z=[0.0],
        mode="markers", marker=dict(size=4, color="#9CA3AF"),
        hoverinfo="skip", showlegend=False,
    ))
    # angle scale
    fig.add_trace(go.Scatter3d(
        x=[lb.position[0] for lb in labels],
        y=[lb.position[1] for lb in labels],
        z=[lb.position[2] for lb in labels],
        mode="text", text=[lb.text for lb in labels],
        textfont=dict(color="white", size=14),
        hoverinfo="skip", showlegend=False,
    ))

    axis = dict(range=[-extent, extent], visible=False)
    fig.update_layout(
        paper_bgcolor="black",
        margin=dict(l=0, r=0, t=0, b=0),
        scene=dict(
            xaxis=axis, yaxis=axis, zaxis=axis,
            aspectmode="cube",
            bgcolor="black",
            camera=dict(eye=dict(x=0.0, y=0.4, z=1.6), up=dict(x=0.0, y=1.0, z=0.0)),
        ),
        uirevision="pendulum",
    )
    return fig


def build_energy_pie(sample: EnergySample) -> go.Figure:
    values = [sample.mechanical_energy, sample.potential_energy, sample.kinetic_energy]
    fig = go.Figure(go.Pie(
        labels=list(ENERGY_LABELS),
        values=values,
        marker=dict(colors=list(ENERGY_COLORS), line=dict(color=list(ENERGY_COLORS), width=1)),
        sort=False,
    ))
    fig.update_layout(margin=dict(l=10, r=10, t=10, b=10), legend=dict(orientation="h"))
    return fig


def build_energy_timeline(history: EnergyHistory) -> go.Figure:
    series = history.as_series()
    fig = go.Figure()
    for key, label, color in zip(("mechanicalEnergy", "potentialEnergy", "kineticEnergy"), ENERGY_LABELS, ENERGY_COLORS):
        fig.add_trace(go.Scatter(x=series["time"], y=series[key], mode="lines", name=label, line=dict(color=color, width=2)))
    fig.update_layout(
        template="plotly_white",
        margin=dict(l=20, r=20, t=20, b=20),
        xaxis=dict(title="tick"),
        yaxis=dict(title="energy"),
    )
    return fig
