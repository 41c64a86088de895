from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from pendel3d.config import PendulumConfig, ViewConfig
from pendel3d.energy import EnergyHistory, EnergySample
from pendel3d.geometry import Camera, client_to_ndc, ndc_to_client, pointer_to_plane, angle_of_point, hit_test
from pendel3d.physics import PendulumState, PhysicsParams, bob_position, step

logger = logging.getLogger(__name__)


class InteractionMode(enum.Enum):
    IDLE = "idle"
    DRAGGING = "dragging"


def camera_from_view(view: ViewConfig) -> Camera:
    return Camera(
        position=view.camera_position,
        target=view.camera_target,
        fov_y_deg=view.fov_y_deg,
        aspect=view.width / float(view.height),
    )


@dataclass
class SimulationSession:
    """Holds the pendulum state, the energy history and the camera of one viewer."""

    config: PendulumConfig = field(default_factory=PendulumConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    state: PendulumState = field(default_factory=PendulumState)
    history: EnergyHistory = field(init=False)
    camera: Camera = field(init=False)

    def __post_init__(self) -> None:
        self.history = EnergyHistory(max_samples=self.config.max_samples)
        self.camera = camera_from_view(self.view)
        self._params = PhysicsParams.from_config(self.config)

    # ---------- frame loop ----------

    def tick(self, now_ms: Optional[float] = None) -> Optional[EnergySample]:
        """Advance one frame; returns the energy sample recorded, if any."""
        if now_ms is None:
            now_ms = time.time() * 1000.0
        self.state, energies = step(self.state, now_ms, self._params)
        if energies is None:
            return None
        return self.history.append_sample(*energies)

    def latest_energy(self) -> EnergySample:
        return self.history.latest()

    @property
    def rotation_z(self) -> float:
        """Rotation of the pivot group, consumed by the renderer."""
        return self.state.angle

    def bob_position(self) -> Tuple[float, float, float]:
        return bob_position(self.state.angle, self.config.length)

    def bob_client_position(self) -> Tuple[float, float]:
        """Where the bob currently appears on screen, in pixels."""
        nx, ny = self.camera.world_to_ndc(self.bob_position())
        return ndc_to_client(nx, ny, self.view.width, self.view.height)

    # ---------- pointer handling ----------

    @property
    def interaction_mode(self) -> InteractionMode:
        if self.state.is_dragging:
            return InteractionMode.DRAGGING
        return InteractionMode.IDLE

    def pointer_down(self, client_x: float, client_y: float) -> bool:
        nx, ny = client_to_ndc(client_x, client_y, self.view.width, self.view.height)
        return self.pointer_down_ndc(nx, ny)

    def pointer_down_ndc(self, nx: float, ny: float) -> bool:
        """Start a drag if the pointer lands on the bob. Returns True on grab."""
        point = pointer_to_plane(nx, ny, self.camera)
        if point is None:
            logger.debug("Pointer down ignored: ray parallel to the pendulum plane")
            return False
        if not hit_test(point, self.bob_position(), self.config.grab_radius):
            logger.debug("Pointer down missed the bob at (%.3f, %.3f)", point[0], point[1])
            return False
        angle = angle_of_point(point)
        if angle is None:
            logger.debug("Pointer down ignored: pointer on the pivot")
            return False

        self.state = replace(
            self.state,
            is_dragging=True,
            is_clicked_down=True,
            velocity=0.0,
            angle=angle,
            amplitude=abs(angle),
        )
        logger.info("Drag started at %.4f rad", angle)
        return True

    def grab_bob(self) -> Optional[Tuple[float, float]]:
        """Press the pointer where the bob is drawn right now.

        Returns the pressed pixel on a grab, None if the press missed.
        """
        x, y = self.bob_client_position()
        if not self.pointer_down(x, y):
            return None
        return x, y

    def pointer_move(self, client_x: float, client_y: float) -> bool:
        nx, ny = client_to_ndc(client_x, client_y, self.view.width, self.view.height)
        return self.pointer_move_ndc(nx, ny)

    def pointer_move_ndc(self, nx: float, ny: float) -> bool:
        """While dragging, pose the pendulum under the pointer. Returns True if applied."""
        if not (self.state.is_dragging and self.state.is_clicked_down):
            return False
        point = pointer_to_plane(nx, ny, self.camera)
        angle = angle_of_point(point) if point is not None else None
        if angle is None:
            logger.debug("Pointer move ignored: no angle for (%.3f, %.3f)", nx, ny)
            return False
        self.state = replace(self.state, angle=angle + self.config.drag_phase)
        return True

    def pointer_up(self) -> None:
        if self.state.is_dragging:
            logger.info("Drag released at %.4f rad", self.state.angle)
        self.state = replace(self.state, is_dragging=False, is_clicked_down=False)

    # ---------- controls ----------

    def toggle_swinging(self) -> bool:
        self.state = replace(self.state, is_swinging=not self.state.is_swinging)
        logger.info("Swinging %s", "on" if self.state.is_swinging else "off")
        return self.state.is_swinging

    def toggle_gravity(self) -> bool:
        self.state = replace(self.state, gravity_on=not self.state.gravity_on)
        logger.info("Gravity %s", "on" if self.state.gravity_on else "off")
        return self.state.gravity_on

    def reset(self) -> None:
        self.state = PendulumState()
        self.history.clear()
        logger.info("Simulation reset")

    def describe(self) -> dict:
        return {
            "angle_deg": math.degrees(self.state.angle),
            "velocity": self.state.velocity,
            "amplitude_deg": math.degrees(self.state.amplitude),
            "swinging": self.state.is_swinging,
            "gravity": self.state.gravity_on,
            "mode": self.interaction_mode.value,
            "samples": len(self.history),
        }
