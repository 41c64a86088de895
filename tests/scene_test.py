import math
import unittest

from pendel3d.energy import EnergyHistory, EnergySample
from pendel3d.scene import angle_scale_labels, build_energy_pie, build_energy_timeline, build_scene_figure


class AngleScaleTest(unittest.TestCase):
    def test_label_texts(self):
        labels = angle_scale_labels(2.0)
        self.assertEqual([lb.text for lb in labels], ["90°", "45°", "0°", "-45°", "-90°"])

    def test_labels_on_radius(self):
        for lb in angle_scale_labels(2.0, offset=0.5):
            x, y, z = lb.position
            self.assertAlmostEqual(math.hypot(x, y), 2.5)
            self.assertEqual(z, 0.0)

    def test_zero_label_below_pivot(self):
        zero = angle_scale_labels(2.0)[2]
        self.assertAlmostEqual(zero.position[0], 0.0)
        self.assertAlmostEqual(zero.position[1], -2.5)

    def test_ninety_label_next_to_horizontal_bob(self):
        ninety = angle_scale_labels(2.0)[0]
        self.assertAlmostEqual(ninety.position[0], 2.5)
        self.assertAlmostEqual(ninety.position[1], 0.0)

    def test_label_rotations(self):
        rotations = [lb.rotation for lb in angle_scale_labels(2.0)]
        expected = [math.pi / 2, math.pi / 4, math.pi / 2, math.pi / 4, math.pi / 2]
        for got, want in zip(rotations, expected):
            self.assertAlmostEqual(got, want)


class FigureTest(unittest.TestCase):
    def test_scene_places_bob(self):
        fig = build_scene_figure(0.0, 2.0, angle_scale_labels(2.0))
        rod, bob = fig.data[0], fig.data[1]
        self.assertAlmostEqual(rod.y[1], -2.0)
        self.assertAlmostEqual(bob.x[0], 0.0)
        self.assertAlmostEqual(bob.y[0], -2.0)
        self.assertEqual(len(fig.data[3].text), 5)

    def test_pie_order_and_colors(self):
        fig = build_energy_pie(EnergySample(kinetic_energy=1.0, potential_energy=2.0, mechanical_energy=3.0, time=7))
        pie = fig.data[0]
        self.assertEqual(list(pie.values), [3.0, 2.0, 1.0])
        self.assertEqual(list(pie.marker.colors), ["red", "green", "blue"])
        self.assertEqual(list(pie.labels), ["Mechanical Energy", "Potential Energy", "Kinetic Energy"])

    def test_timeline_traces(self):
        history = EnergyHistory()
        history.append_sample(0.1, 0.2, 0.3)
        history.append_sample(0.2, 0.1, 0.3)
        fig = build_energy_timeline(history)
        self.assertEqual(len(fig.data), 3)
        self.assertEqual(list(fig.data[0].x), [0, 1])
        self.assertEqual(list(fig.data[2].y), [0.1, 0.2])


if __name__ == "__main__":
    unittest.main()
