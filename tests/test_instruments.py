import unittest
import numpy.testing as npt
import numpy as np

from holotools.instruments import Showable, ShowableError, SimulatedSlm, SimulatedDmd
from holotools.tools import DeviceClass, lenses_and_prisms
from holotools.tools.finalize import rotation_pack_shape


class TestShowable(unittest.TestCase):
    def test_abstract(self):
        with self.assertRaises(TypeError):
            Showable('phase')


class TestSimulatedSlm(unittest.TestCase):
    def setUp(self):
        self.slm = SimulatedSlm(shape=(4, 6))

    def test_init(self):
        self.assertEqual(self.slm.shape, (4, 6))
        self.assertEqual(self.slm.size, (4, 6))
        self.assertIs(self.slm.device, DeviceClass.PHASE)
        self.assertEqual(self.slm.pattern_type, 'phase')
        npt.assert_array_almost_equal(self.slm.value_range, (-np.pi, np.pi))
        npt.assert_array_equal(self.slm.incident, np.ones((4, 6)))
        npt.assert_array_almost_equal(self.slm.pattern, -1.0)  # zero phase maps to -pi

    def test_show(self):
        self.slm.show(np.full((4, 6), 0.5))
        npt.assert_array_almost_equal(self.slm.pattern, 1.0)
        self.slm.show(np.full((4, 6), 0.75))
        npt.assert_array_almost_equal(self.slm.pattern, 1j)

    def test_show_hologram(self):
        phase = lenses_and_prisms(self.slm.shape, [0.25, 0.0, 0.0])
        self.slm.show(phase)
        npt.assert_array_almost_equal(np.abs(self.slm.pattern), 1.0)
        npt.assert_array_almost_equal(self.slm.pattern, np.exp(2j * np.pi * phase - 1j * np.pi))

    def test_incident(self):
        incident = np.full((4, 6), 0.5)
        slm = SimulatedSlm(shape=(4, 6), incident=incident)
        npt.assert_array_almost_equal(slm.pattern, -0.5)
        slm.incident = 2.0
        slm.show(np.full((4, 6), 0.5))
        npt.assert_array_almost_equal(slm.pattern, 2.0)
        with self.assertRaises(ShowableError):
            slm.incident = np.ones((6, 4))
        with self.assertRaises(ShowableError):
            slm.incident = np.ones(4)

    def test_show_raw_shape(self):
        with self.assertRaises(ShowableError):
            self.slm.show_raw(np.zeros((3, 3)))
        with self.assertRaises(ShowableError):
            self.slm.show(np.zeros((4, 6)), rpack='45deg')


class TestSimulatedDmd(unittest.TestCase):
    def test_init(self):
        dmd = SimulatedDmd(shape=(3, 4))
        self.assertEqual(dmd.shape, (3, 4))
        self.assertIs(dmd.device, DeviceClass.AMPLITUDE)
        self.assertEqual(dmd.pattern_type, 'amplitude')
        self.assertTrue(dmd.use_rpack)
        npt.assert_array_equal(dmd.value_range, (0.0, 1.0))
        npt.assert_array_equal(dmd.pattern.shape, rotation_pack_shape((3, 4)))
        self.assertTrue(np.iscomplexobj(dmd.pattern))
        npt.assert_equal(np.count_nonzero(dmd.pattern), 12)

    def test_show(self):
        dmd = SimulatedDmd(shape=(3, 4))
        pattern = np.zeros((3, 4))
        pattern[1, 2] = 1.0
        dmd.show(pattern)
        npt.assert_equal(np.count_nonzero(dmd.pattern), 1)
        npt.assert_equal(dmd.pattern.sum(), 1.0)

    def test_without_rpack(self):
        incident = np.full((3, 4), 0.5j)
        dmd = SimulatedDmd(shape=(3, 4), incident=incident, use_rpack=False)
        self.assertFalse(dmd.use_rpack)
        npt.assert_array_equal(dmd.pattern, incident)
        dmd.show(np.full((3, 4), 0.5))
        npt.assert_array_almost_equal(dmd.pattern, 0.25j)

    def test_amplitude_and_phase(self):
        dmd = SimulatedDmd(shape=(3, 4), use_rpack=False)
        dmd.show(np.full((3, 4), 0.5), amplitude=np.ones((3, 4)))
        npt.assert_array_almost_equal(dmd.pattern, 1.0)

    def test_errors(self):
        with self.assertRaises(ShowableError):
            SimulatedDmd(shape=(3, 4), use_rpack='yes')
        with self.assertRaises(ShowableError):
            SimulatedDmd(shape=(3, 4), incident=np.ones((4, 3)))
        dmd = SimulatedDmd(shape=(3, 4))
        with self.assertRaises(ShowableError):
            dmd.show_raw(np.ones((4, 5)))


if __name__ == '__main__':
    unittest.main()
