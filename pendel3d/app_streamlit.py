from __future__ import annotations

import logging

import streamlit as st

from pendel3d.config import AppConfig, load_config
from pendel3d.logging_config import setup_logging
from pendel3d.scene import angle_scale_labels, build_energy_pie, build_energy_timeline, build_scene_figure
from pendel3d.sim_session import SimulationSession

logger = logging.getLogger(__name__)


def _ensure_session() -> SimulationSession:
    if "config" not in st.session_state:
        config = load_config()
        setup_logging(config.log_level, config.log_file)
        st.session_state.config = config
    if "sim" not in st.session_state:
        app_config: AppConfig = st.session_state.config
        st.session_state.sim = SimulationSession(config=app_config.pendulum, view=app_config.view)
        st.session_state.labels = angle_scale_labels(app_config.pendulum.length, app_config.pendulum.label_offset)
    return st.session_state.sim


def _set_pointer(sim: SimulationSession, x: float, y: float) -> None:
    st.session_state.pointer_x = int(min(max(x, 0), sim.view.width))
    st.session_state.pointer_y = int(min(max(y, 0), sim.view.height))


def _sync_pointer_to_bob(sim: SimulationSession) -> None:
    _set_pointer(sim, *sim.bob_client_position())


def _on_grab_bob() -> None:
    # locate and press in one callback, the frame loop keeps moving the bob
    sim: SimulationSession = st.session_state.sim
    pressed = sim.grab_bob()
    if pressed is None:
        st.session_state.pointer_message = "Missed the bob"
        return
    _set_pointer(sim, *pressed)
    st.session_state.pointer_message = ""


def _on_pointer_moved() -> None:
    sim: SimulationSession = st.session_state.sim
    sim.pointer_move(st.session_state.pointer_x, st.session_state.pointer_y)


def _on_pointer_down() -> None:
    sim: SimulationSession = st.session_state.sim
    if not sim.pointer_down(st.session_state.pointer_x, st.session_state.pointer_y):
        st.session_state.pointer_message = "Missed the bob"
    else:
        st.session_state.pointer_message = ""


def _on_pointer_up() -> None:
    st.session_state.sim.pointer_up()
    st.session_state.pointer_message = ""


def _on_reset() -> None:
    sim: SimulationSession = st.session_state.sim
    sim.reset()
    _sync_pointer_to_bob(sim)
    st.session_state.pointer_message = ""


def _pointer_controls(sim: SimulationSession) -> None:
    st.sidebar.header("Pointer")
    if "pointer_x" not in st.session_state:
        _sync_pointer_to_bob(sim)

    st.sidebar.slider("x (px)", min_value=0, max_value=sim.view.width, key="pointer_x", on_change=_on_pointer_moved)
    st.sidebar.slider("y (px)", min_value=0, max_value=sim.view.height, key="pointer_y", on_change=_on_pointer_moved)

    st.sidebar.button("Grab bob", type="primary", on_click=_on_grab_bob, disabled=sim.state.is_dragging)
    col_a, col_b = st.sidebar.columns(2)
    with col_a:
        st.button("Pointer down", on_click=_on_pointer_down, disabled=sim.state.is_dragging)
    with col_b:
        st.button("Pointer up", on_click=_on_pointer_up)
    st.sidebar.button("Pointer to bob", on_click=_sync_pointer_to_bob, args=(sim,), disabled=sim.state.is_dragging)
    if sim.state.is_swinging and not sim.state.is_dragging:
        st.sidebar.caption("The bob keeps moving while swinging: use Grab bob, or stop swinging before Pointer down.")

    message = st.session_state.get("pointer_message")
    if message:
        st.sidebar.caption(message)
    st.sidebar.caption(f"Interaction: {sim.interaction_mode.value}")


def _controls(sim: SimulationSession) -> None:
    col_a, col_b, col_c = st.columns([1, 1, 1])
    with col_a:
        label = "Stop Swinging" if sim.state.is_swinging else "Start Swinging"
        if st.button(label, type="primary"):
            sim.toggle_swinging()
            st.rerun()
    with col_b:
        label = "Turn Gravity Off" if sim.state.gravity_on else "Turn Gravity On"
        if st.button(label):
            sim.toggle_gravity()
            st.rerun()
    with col_c:
        st.button("Reset", on_click=_on_reset)


def _render(sim: SimulationSession) -> None:
    col_scene, col_energy = st.columns([3, 1])
    with col_scene:
        fig = build_scene_figure(sim.rotation_z, sim.config.length, st.session_state.labels)
        st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False})
    with col_energy:
        st.plotly_chart(build_energy_pie(sim.latest_energy()), use_container_width=True, config={"displayModeBar": False})
        latest = sim.latest_energy()
        st.metric("E_mech", f"{latest.mechanical_energy:.5f}")

    with st.expander("Energy over time", expanded=False):
        st.plotly_chart(build_energy_timeline(sim.history), use_container_width=True)

    with st.expander("Details (State)", expanded=False):
        st.write(sim.describe())


def main() -> None:
    st.set_page_config(page_title="3D Pendulum", layout="wide")
    sim = _ensure_session()

    st.title("3D Pendulum")
    st.caption("Drag the bob with the pointer controls, toggle gravity and watch the energy split")

    _pointer_controls(sim)
    _controls(sim)

    @st.fragment(run_every=sim.view.frame_interval)
    def frame() -> None:
        try:
            sim.tick()
        except Exception as exc:
            # pause to avoid a tight error loop
            logger.exception("Tick failed, pausing")
            if sim.state.is_swinging:
                sim.toggle_swinging()
            st.error(f"Simulation paused: {exc}")
        _render(sim)

    frame()


if __name__ == "__main__":
    main()
