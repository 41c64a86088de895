import math
import unittest

from pendel3d.physics import (
    PendulumState,
    PhysicsParams,
    bob_position,
    energies,
    free_angle,
    gravity_step,
    step,
    wrap_angle,
)

PARAMS = PhysicsParams()


def gravity_state(angle, velocity=0.0):
    return PendulumState(angle=angle, velocity=velocity, gravity_on=True, last_gravity_on=True)


class GravityStepTest(unittest.TestCase):
    def test_first_tick_from_horizontal(self):
        state, sample = step(gravity_state(math.pi / 2), 0.0, PARAMS)

        self.assertAlmostEqual(state.velocity, -0.000999, places=12)
        self.assertAlmostEqual(state.angle, math.pi / 2 - 0.000999, places=12)
        self.assertIsNotNone(sample)

    def test_rest_is_fixed_point(self):
        state = gravity_state(0.0)
        for _ in range(1000):
            state, _ = step(state, 0.0, PARAMS)
        self.assertEqual(state.angle, 0.0)
        self.assertEqual(state.velocity, 0.0)

    def test_mechanical_energy_trends_down(self):
        # kinetic term scales with length**2, potential with length, so the
        # sampled energy oscillates within a swing; compare per-swing peaks
        state = gravity_state(1.0)
        history = []
        for _ in range(1500):
            state, sample = step(state, 0.0, PARAMS)
            history.append(sample[2])
        window = 250  # longer than one swing period
        first_peak = max(history[:window])
        later_peak = max(history[1000:1000 + window])
        self.assertLess(later_peak, first_peak)
        self.assertLess(later_peak, 0.5 * first_peak)

    def test_amplitude_untouched_while_gravity_on(self):
        state = PendulumState(angle=0.8, amplitude=0.3, gravity_on=True, last_gravity_on=True)
        for _ in range(100):
            state, _ = step(state, 0.0, PARAMS)
        self.assertEqual(state.amplitude, 0.3)

    def test_gravity_step_is_semi_implicit(self):
        angle, velocity = gravity_step(0.5, 0.01, 0.001, 1.0)
        expected_velocity = 0.01 - 0.001 * math.sin(0.5)
        self.assertAlmostEqual(velocity, expected_velocity)
        self.assertAlmostEqual(angle, 0.5 + expected_velocity)

    def test_energy_uses_updated_state(self):
        state, sample = step(gravity_state(0.4, 0.002), 0.0, PARAMS)
        self.assertEqual(sample, energies(state.angle, state.velocity, PARAMS.length, PARAMS.gravity))

    def test_non_finite_tick_rejected(self):
        state = gravity_state(float("nan"))
        with self.assertLogs("pendel3d.physics", level="WARNING"):
            new_state, sample = step(state, 0.0, PARAMS)
        self.assertIsNone(sample)
        self.assertEqual(new_state.velocity, 0.0)


class GravityOffTest(unittest.TestCase):
    def test_oscillation_stays_within_amplitude(self):
        for amplitude in (0.0, 0.2, -0.7, math.pi / 2, 3.0):
            for t in range(0, 20000, 37):
                angle = free_angle(amplitude, float(t), PARAMS.free_frequency)
                self.assertLessEqual(abs(angle), abs(amplitude) + 1e-12)

    def test_transition_captures_angle(self):
        state = PendulumState(angle=0.37, velocity=0.01, amplitude=1.2, gravity_on=False, last_gravity_on=True)
        now_ms = 1234.0

        state, sample = step(state, now_ms, PARAMS)

        self.assertIsNone(sample)
        self.assertEqual(state.amplitude, 0.37)
        self.assertAlmostEqual(state.angle, 0.37 * math.sin(now_ms * 0.002))
        self.assertFalse(state.last_gravity_on)

    def test_velocity_not_updated(self):
        state = PendulumState(angle=0.2, velocity=0.05, amplitude=0.2, gravity_on=False, last_gravity_on=False)
        state, _ = step(state, 500.0, PARAMS)
        self.assertEqual(state.velocity, 0.05)

    def test_transition_detected_while_paused(self):
        state = PendulumState(angle=0.6, amplitude=1.0, is_swinging=False, gravity_on=False, last_gravity_on=True)
        state, _ = step(state, 0.0, PARAMS)
        self.assertEqual(state.amplitude, 0.6)
        self.assertEqual(state.angle, 0.6)

    def test_no_capture_on_off_to_on(self):
        state = PendulumState(angle=0.6, amplitude=1.0, gravity_on=True, last_gravity_on=False)
        state, _ = step(state, 0.0, PARAMS)
        self.assertEqual(state.amplitude, 1.0)
        self.assertTrue(state.last_gravity_on)


class GatingTest(unittest.TestCase):
    def test_paused_state_does_not_move(self):
        state = PendulumState(angle=1.0, gravity_on=True, last_gravity_on=True, is_swinging=False)
        new_state, sample = step(state, 0.0, PARAMS)
        self.assertEqual(new_state.angle, 1.0)
        self.assertIsNone(sample)

    def test_dragging_state_does_not_move(self):
        state = PendulumState(angle=1.0, gravity_on=True, last_gravity_on=True, is_dragging=True)
        new_state, sample = step(state, 0.0, PARAMS)
        self.assertEqual(new_state.angle, 1.0)
        self.assertIsNone(sample)


class HelpersTest(unittest.TestCase):
    def test_bob_hangs_below_pivot_at_rest(self):
        x, y, z = bob_position(0.0, 2.0)
        self.assertAlmostEqual(x, 0.0)
        self.assertAlmostEqual(y, -2.0)
        self.assertEqual(z, 0.0)

    def test_bob_horizontal_at_quarter_turn(self):
        x, y, _ = bob_position(math.pi / 2, 2.0)
        self.assertAlmostEqual(x, 2.0)
        self.assertAlmostEqual(y, 0.0)

    def test_potential_energy_non_negative(self):
        for i in range(-100, 101):
            _, potential, _ = energies(i * 0.05, 0.0, 2.0, 0.001)
            self.assertGreaterEqual(potential, 0.0)

    def test_wrap_angle(self):
        self.assertAlmostEqual(wrap_angle(3 * math.pi / 2), -math.pi / 2)
        self.assertAlmostEqual(wrap_angle(-3 * math.pi / 2), math.pi / 2)
        self.assertAlmostEqual(wrap_angle(0.3), 0.3)


if __name__ == "__main__":
    unittest.main()
