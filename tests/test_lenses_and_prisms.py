import unittest
import numpy.testing as npt
import numpy as np

from holotools.errors import ShapeError
from holotools.tools.lenses_and_prisms import TargetBeam, beams_to_coefficients, lenses_and_prisms
from holotools.utils import grid


def wrapped_distance(a, b):
    """The distance between two patterns in waves, taking into account that 0 and 1 are equivalent."""
    diff = np.mod(np.asarray(a) - np.asarray(b), 1.0)
    return np.minimum(diff, 1.0 - diff)


class TestLensesAndPrisms(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(seed=0)

    def test_range(self):
        for shape in [(1, 1), (16, 20), (33, 17)]:
            for nb_beams in [0, 1, 5]:
                xyz = self.rng.uniform(-0.5, 0.5, size=(3, nb_beams)) * np.array([[1], [1], [0.01]])
                amplitude = self.rng.uniform(0.1, 1.0, size=nb_beams)
                pattern = lenses_and_prisms(shape, xyz, amplitude)
                npt.assert_array_equal(pattern.shape, shape)
                self.assertTrue(np.all(pattern >= 0.0), f'Negative values for shape {shape} and {nb_beams} beams.')
                self.assertTrue(np.all(pattern < 1.0), f'Values >= 1 for shape {shape} and {nb_beams} beams.')

    def test_linear_grating(self):
        shape = (8, 10)
        xx, yy, _ = grid(shape)
        for gradient_x, gradient_y in [(0.1, 0.05), (0.25, 0.0), (-0.3, 0.2), (0.0, 0.0)]:
            pattern = lenses_and_prisms(shape, [[gradient_x], [gradient_y], [0.0]])
            expected = np.mod(gradient_x * xx + gradient_y * yy + 0.5, 1.0)
            npt.assert_array_less(wrapped_distance(pattern, expected), 1e-9)

    def test_lens(self):
        shape = (9, 9)
        _, _, rr = grid(shape)
        pattern = lenses_and_prisms(shape, [0.0, 0.0, 0.01])
        expected = np.mod(0.01 * rr ** 2 + 0.5, 1.0)
        npt.assert_array_less(wrapped_distance(pattern, expected), 1e-9)

    def test_single_vector(self):
        npt.assert_array_equal(lenses_and_prisms((4, 5), [0.1, 0.2, 0.0]),
                               lenses_and_prisms((4, 5), [[0.1], [0.2], [0.0]]))

    def test_no_beams(self):
        npt.assert_array_equal(lenses_and_prisms((3, 4), np.zeros((3, 0))), 0.5)

    def test_cancellation(self):
        pattern = lenses_and_prisms((3, 4), [[0.1, 0.1], [0.0, 0.0], [0.0, 0.0]], amplitude=[1.0, -1.0])
        npt.assert_array_equal(pattern, 0.5)

    def test_custom_basis(self):
        shape = (3, 4)
        pattern = lenses_and_prisms(shape, [1.0, 0.0, 0.0], xgrad=np.full(shape, 0.25))
        npt.assert_array_almost_equal(pattern, 0.75)
        pattern = lenses_and_prisms(shape, [0.0, 0.0, 1.0], lens=np.full(shape, -0.25))
        npt.assert_array_almost_equal(pattern, 0.25)

    def test_complex_amplitude(self):
        pattern = lenses_and_prisms((2, 2), [0.0, 0.0, 0.0], amplitude=[1j])
        npt.assert_array_almost_equal(pattern, 0.75)

    def test_deterministic(self):
        xyz = self.rng.uniform(-0.5, 0.5, size=(3, 7)) * np.array([[1], [1], [0.01]])
        npt.assert_array_equal(lenses_and_prisms((12, 13), xyz), lenses_and_prisms((12, 13), xyz))

    def test_amplitude_count_mismatch(self):
        for nb_beams in range(1, 5):
            xyz = np.zeros((3, nb_beams))
            for nb_amplitudes in [nb_beams - 1, nb_beams + 1]:
                with self.assertRaises(ShapeError):
                    lenses_and_prisms((4, 4), xyz, amplitude=np.ones(nb_amplitudes))

    def test_xyz_shape(self):
        with self.assertRaisesRegex(ShapeError, '3xN'):
            lenses_and_prisms((4, 4), np.zeros((2, 3)))
        with self.assertRaises(ShapeError):
            lenses_and_prisms((4, 4), np.zeros(4))
        with self.assertRaises(ShapeError):
            lenses_and_prisms((4, 4), np.zeros((3, 2, 1)))

    def test_basis_shape(self):
        for name in ['lens', 'xgrad', 'ygrad']:
            with self.assertRaises(ShapeError):
                lenses_and_prisms((4, 5), [0.1, 0.0, 0.0], **{name: np.zeros((4, 4))})
            with self.assertRaises(ShapeError):
                lenses_and_prisms((4, 5), [0.1, 0.0, 0.0], **{name: [[0.0] * 4] * 4})

    def test_list_basis(self):
        shape = (3, 4)
        pattern = lenses_and_prisms(shape, [1.0, 0.0, 0.0], xgrad=[[0.25] * 4] * 3)
        npt.assert_array_almost_equal(pattern, 0.75)

    def test_superposition_of_two_gratings(self):
        shape = (6, 6)
        xx, _, _ = grid(shape)
        pattern = lenses_and_prisms(shape, [[0.25, -0.25], [0.0, 0.0], [0.0, 0.0]])
        field = np.exp(2j * np.pi * 0.25 * xx) + np.exp(-2j * np.pi * 0.25 * xx)
        nonzero = np.abs(field) > 1e-6
        expected = np.mod(np.angle(field) / (2 * np.pi) + 0.5, 1.0)
        npt.assert_array_less(wrapped_distance(pattern, expected)[nonzero], 1e-9)


class TestTargetBeam(unittest.TestCase):
    def test_defaults(self):
        beam = TargetBeam(0.1, 0.2)
        self.assertEqual(beam.lens_power, 0.0)
        self.assertEqual(beam.amplitude, 1.0)

    def test_beams_to_coefficients(self):
        xyz, amplitude = beams_to_coefficients([TargetBeam(0.1, 0.2, 0.01, 0.5), (0.3, 0.4)])
        npt.assert_array_equal(xyz, [[0.1, 0.3], [0.2, 0.4], [0.01, 0.0]])
        npt.assert_array_equal(amplitude, [0.5, 1.0])
        self.assertFalse(np.iscomplexobj(amplitude))

        _, amplitude = beams_to_coefficients([TargetBeam(amplitude=1j)])
        npt.assert_array_equal(amplitude, [1j])

    def test_round_trip_through_lenses_and_prisms(self):
        beams = [TargetBeam(0.1, -0.05, 0.0, 1.0), TargetBeam(-0.2, 0.1, 0.001, 0.5)]
        xyz, amplitude = beams_to_coefficients(beams)
        pattern = lenses_and_prisms((10, 12), xyz, amplitude)
        npt.assert_array_equal(pattern.shape, (10, 12))

    def test_empty(self):
        xyz, amplitude = beams_to_coefficients([])
        npt.assert_array_equal(xyz.shape, (3, 0))
        npt.assert_array_equal(amplitude.shape, (0, ))


if __name__ == '__main__':
    unittest.main()
